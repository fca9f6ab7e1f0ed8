# troop_manager/models/scout.py
from enum import Enum
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

from .common import Address, AddressUpdate, UUID_PATTERN


class ScoutRank(str, Enum):
    SCOUT = "SCOUT"
    TENDERFOOT = "TENDERFOOT"
    SECOND_CLASS = "SECOND_CLASS"
    FIRST_CLASS = "FIRST_CLASS"
    STAR = "STAR"
    LIFE = "LIFE"
    EAGLE = "EAGLE"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class School(BaseModel):
    name: str = Field(..., min_length=1)
    grade: str = Field(..., min_length=1)


class EmergencyContact(BaseModel):
    name: str = Field(..., min_length=1)
    relationship: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None


class MedicalInfo(BaseModel):
    allergies: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)


class ScoutCreate(BaseModel):
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    dateOfBirth: str = Field(..., min_length=1)
    gender: Gender
    address: Address
    school: School
    emergencyContacts: List[EmergencyContact] = Field(default_factory=list)
    medicalInfo: Optional[MedicalInfo] = None
    photoConsent: bool = False
    photoUrl: Optional[str] = None
    currentRank: Optional[ScoutRank] = None
    troopId: str = Field(..., pattern=UUID_PATTERN, description="Invalid troop ID")
    parentId: Optional[str] = Field(None, pattern=UUID_PATTERN, description="Invalid parent ID")


class ScoutUpdate(BaseModel):
    firstName: Optional[str] = Field(None, min_length=1)
    lastName: Optional[str] = Field(None, min_length=1)
    dateOfBirth: Optional[str] = None
    gender: Optional[Gender] = None
    address: Optional[AddressUpdate] = None
    school: Optional[School] = None
    emergencyContacts: Optional[List[EmergencyContact]] = None
    medicalInfo: Optional[MedicalInfo] = None
    photoConsent: Optional[bool] = None
    photoUrl: Optional[str] = None
    currentRank: Optional[ScoutRank] = None


class RankAdvancementCreate(BaseModel):
    rank: ScoutRank
    awardedDate: Optional[str] = None
    boardDate: Optional[str] = None
    boardMembers: Optional[List[str]] = None


class MeritBadgeStart(BaseModel):
    badgeId: str = Field(..., pattern=UUID_PATTERN, description="Invalid badge ID")
    counselor: Optional[str] = None
