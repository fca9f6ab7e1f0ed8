# troop_manager/models/troop.py
from enum import Enum
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from .common import Address, AddressUpdate, UUID_PATTERN
from .users import UserRole


class TroopStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


class TroopCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Troop name is required")
    description: Optional[str] = None
    address: Address
    charterOrganization: str = Field(..., min_length=1)
    meetingSchedule: str = Field(..., min_length=1)
    meetingLocation: str = Field(..., min_length=1)
    contactEmail: EmailStr
    contactPhone: str = Field(..., min_length=1)
    foundedDate: Optional[str] = None
    troopSizeLimit: Optional[int] = Field(None, gt=0)


class TroopUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    address: Optional[AddressUpdate] = None
    charterOrganization: Optional[str] = Field(None, min_length=1)
    meetingSchedule: Optional[str] = Field(None, min_length=1)
    meetingLocation: Optional[str] = Field(None, min_length=1)
    contactEmail: Optional[EmailStr] = None
    contactPhone: Optional[str] = Field(None, min_length=1)
    foundedDate: Optional[str] = None
    troopSizeLimit: Optional[int] = Field(None, gt=0)


class AddMemberRequest(BaseModel):
    userId: str = Field(..., pattern=UUID_PATTERN, description="Invalid user ID")
    role: UserRole
