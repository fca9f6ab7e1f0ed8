# troop_manager/models/common.py
from pydantic import BaseModel, Field
from typing import Optional

# Record ids are UUID strings
UUID_PATTERN = r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$'


class Address(BaseModel):
    """Postal address, stored as-is (camelCase keys) on troops and scouts"""
    street: str = Field(..., min_length=1, description="Street is required")
    city: str = Field(..., min_length=1, description="City is required")
    state: str = Field(..., min_length=1, description="State is required")
    zipCode: str = Field(..., min_length=1, description="Zip code is required")


class AddressUpdate(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
