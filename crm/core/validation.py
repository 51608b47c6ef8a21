"""
Record validation for inventory items and project masters.
Other modules carry opaque payloads and are passed through unchanged.
"""

import re
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\d{10}$")
GOOGLE_MAPS_RE = re.compile(r"^https?://maps\.google\.com/.*$")


def _required(v, label: str):
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ValueError(f'{label} is required')
    return v.strip() if isinstance(v, str) else v


class InventoryItem(BaseModel):
    model_config = ConfigDict(extra='allow')

    type: Literal['corporate_building', 'coworking_space', 'warehouse', 'retail_mall', 'managed_office']
    name: str
    grade: Literal['A', 'B', 'C'] = 'A'
    developerOwnerName: str
    contactNo: str
    alternateContactNo: str = ''
    emailId: str
    city: str
    location: str
    googleLocation: str = ''
    floor: str
    specification: str
    status: Literal['Available', 'Occupied', 'Under Maintenance'] = 'Available'
    noOfSaleableSeats: Optional[int] = None
    rentPerSqft: Optional[float] = None
    costPerSeat: Optional[float] = None
    camPerSqft: Optional[float] = None
    setupFees: Optional[float] = None
    agreementPeriod: str
    lockInPeriod: str
    noOfCarParks: int

    @field_validator('name', 'developerOwnerName', 'contactNo', 'city', 'location', 'floor',
                     'specification', 'agreementPeriod', 'lockInPeriod')
    @classmethod
    def must_not_be_empty(cls, v, info):
        return _required(v, info.field_name)

    @field_validator('emailId')
    @classmethod
    def email_must_be_valid(cls, v):
        v = _required(v, 'emailId')
        if not EMAIL_RE.match(v):
            raise ValueError('Invalid email format')
        return v


class ProjectMaster(BaseModel):
    model_config = ConfigDict(extra='allow')

    type: Literal['corporate_building', 'coworking_space', 'warehouse', 'retail_mall']
    name: str
    grade: Literal['A', 'B', 'C'] = 'A'
    developerOwnerName: str
    contactNo: str
    alternateContactNo: str = ''
    emailId: str
    city: str
    location: str
    googleLocation: str = ''
    noOfFloors: Optional[int] = None
    noOfSeats: Optional[int] = None
    availabilityOfSeats: Optional[int] = None
    perOpenDeskCost: Optional[float] = None
    perDedicatedDeskCost: Optional[float] = None
    setupFees: Optional[float] = None
    noOfWarehouses: Optional[int] = None
    rentPerSqft: Optional[float] = None
    camPerSqft: Optional[float] = None
    amenities: str = ''
    remark: str = ''
    status: Literal['Active', 'Inactive', 'Under Construction'] = 'Active'

    @field_validator('name', 'developerOwnerName', 'city', 'location')
    @classmethod
    def must_not_be_empty(cls, v, info):
        return _required(v, info.field_name)

    @field_validator('contactNo')
    @classmethod
    def contact_must_be_ten_digits(cls, v):
        if not v or not PHONE_RE.match(v):
            raise ValueError('Valid 10-digit contact number is required')
        return v

    @field_validator('alternateContactNo')
    @classmethod
    def alternate_must_be_ten_digits(cls, v):
        if v and not PHONE_RE.match(v):
            raise ValueError('Valid 10-digit alternate contact number is required')
        return v

    @field_validator('emailId')
    @classmethod
    def email_must_be_valid(cls, v):
        if not v or not EMAIL_RE.match(v):
            raise ValueError('Valid email is required')
        return v

    @field_validator('googleLocation')
    @classmethod
    def google_location_must_be_maps_url(cls, v):
        if v and not GOOGLE_MAPS_RE.match(v):
            raise ValueError('Valid Google Maps URL is required')
        return v

    @model_validator(mode='after')
    def check_type_specific_fields(self):
        if self.type in ('corporate_building', 'warehouse', 'retail_mall'):
            if self.rentPerSqft is None:
                raise ValueError('Rent per Sq.ft is required')
            if self.camPerSqft is None:
                raise ValueError('CAM per Sq.ft is required')
        if self.noOfSeats is not None and self.availabilityOfSeats is not None:
            if self.availabilityOfSeats > self.noOfSeats:
                raise ValueError('Availability of Seats cannot exceed Number of Seats')
        return self


RECORD_MODELS = {
    'inventory': InventoryItem,
    'projects': ProjectMaster,
}


def validate_record(module: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a full record payload for its module.

    Raises pydantic.ValidationError on invalid inventory/project data.
    Returns the cleaned payload; modules without a model are returned as given.
    """
    model = RECORD_MODELS.get(module)
    if model is None:
        return dict(data)
    return model.model_validate(data).model_dump(exclude_none=True)
