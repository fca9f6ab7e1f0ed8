# troop_manager/models/__init__.py
from .common import Address, AddressUpdate, UUID_PATTERN
from .errors import ERROR_RESPONSES, ErrorResponse, FieldError, ValidationErrorResponse
from .users import (
    AuthProvider, BackgroundCheckStatus, BackgroundCheckUpdate, ChangePasswordRequest,
    JWTAccount, LEADER_ROLES, LoginRequest, OAuthLoginRequest, RefreshTokenRequest,
    RegisterRequest, TroopMembershipRequest, UpdateProfileRequest, UserRole,
    UserUpdateRequest, YouthProtectionUpdate,
)
from .troop import AddMemberRequest, TroopCreate, TroopStatus, TroopUpdate
from .scout import (
    Gender, MeritBadgeStart, RankAdvancementCreate, ScoutCreate, ScoutRank, ScoutUpdate,
)

__all__ = [
    # Shared models
    "Address", "AddressUpdate", "UUID_PATTERN",

    # Error models
    "ERROR_RESPONSES", "ErrorResponse", "FieldError", "ValidationErrorResponse",

    # User and auth models
    "AuthProvider", "BackgroundCheckStatus", "BackgroundCheckUpdate", "ChangePasswordRequest",
    "JWTAccount", "LEADER_ROLES", "LoginRequest", "OAuthLoginRequest", "RefreshTokenRequest",
    "RegisterRequest", "TroopMembershipRequest", "UpdateProfileRequest", "UserRole",
    "UserUpdateRequest", "YouthProtectionUpdate",

    # Troop models
    "AddMemberRequest", "TroopCreate", "TroopStatus", "TroopUpdate",

    # Scout models
    "Gender", "MeritBadgeStart", "RankAdvancementCreate", "ScoutCreate", "ScoutRank", "ScoutUpdate",
]
