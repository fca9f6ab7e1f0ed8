# troop_manager/models/users.py
from enum import Enum
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Any, Dict, Optional

from .common import UUID_PATTERN


class UserRole(str, Enum):
    """Role a user holds within a troop"""
    SCOUTMASTER = "SCOUTMASTER"
    ASSISTANT_SCOUTMASTER = "ASSISTANT_SCOUTMASTER"
    COMMITTEE_CHAIR = "COMMITTEE_CHAIR"
    COMMITTEE_MEMBER = "COMMITTEE_MEMBER"
    PARENT = "PARENT"
    CHARTERED_ORG_REP = "CHARTERED_ORG_REP"
    YOUTH_LEADER = "YOUTH_LEADER"
    ADMIN = "ADMIN"


# Roles allowed to manage a troop's roster and settings
LEADER_ROLES = (
    UserRole.SCOUTMASTER,
    UserRole.ASSISTANT_SCOUTMASTER,
    UserRole.COMMITTEE_CHAIR,
    UserRole.ADMIN,
)


class AuthProvider(str, Enum):
    LOCAL = "local"
    GOOGLE = "google"
    FACEBOOK = "facebook"
    APPLE = "apple"


class BackgroundCheckStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    EXPIRED = "EXPIRED"


# bcrypt refuses longer input; the limit is on UTF-8 bytes, not characters
MAX_PASSWORD_BYTES = 72


def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    phone: Optional[str] = None
    address: Optional[Dict[str, Any]] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    refreshToken: Optional[str] = None


class OAuthLoginRequest(BaseModel):
    provider: AuthProvider
    providerId: str = Field(..., min_length=1)
    email: EmailStr
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)

    @field_validator("provider")
    @classmethod
    def provider_must_be_social(cls, value: AuthProvider) -> AuthProvider:
        if value == AuthProvider.LOCAL:
            raise ValueError("OAuth provider must be google, facebook or apple")
        return value


class ChangePasswordRequest(BaseModel):
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=8)

    @field_validator("newPassword")
    @classmethod
    def new_password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class UpdateProfileRequest(BaseModel):
    """Only these fields can change through the profile endpoint"""
    firstName: Optional[str] = Field(None, min_length=1)
    lastName: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    address: Optional[Dict[str, Any]] = None


class UserUpdateRequest(UpdateProfileRequest):
    """Admin update; password, provider and provider id are never accepted"""
    email: Optional[EmailStr] = None
    emailVerified: Optional[bool] = None


class BackgroundCheckUpdate(BaseModel):
    status: BackgroundCheckStatus
    date: Optional[str] = None


class YouthProtectionUpdate(BaseModel):
    date: str = Field(..., min_length=1)


class TroopMembershipRequest(BaseModel):
    userId: str = Field(..., pattern=UUID_PATTERN, description="Invalid user ID")
    troopId: str = Field(..., pattern=UUID_PATTERN, description="Invalid troop ID")
    role: UserRole


class JWTAccount(BaseModel):
    """Identity decoded from a verified access token"""
    user_id: str
    email: str
