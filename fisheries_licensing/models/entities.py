# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the fisheries licensing core.
"""

import re
from datetime import date
from typing import ClassVar, Optional
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from .base import BaseEntity
from .enums import (
    ProfileStatus,
    LicenseStatus,
    PermitStatus,
    ExperienceLevel
)


REGISTRATION_NUMBER_PATTERN = re.compile(r'^[A-Z]{2}-\d{4}-[A-Z]{2}$')
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


class License(BaseModel):
    """License embedded in a boat or fisher profile."""

    model_config = ConfigDict(validate_assignment=True)

    issued_on: date = Field(..., description="Issuance date")
    expires_on: date = Field(..., description="Expiry date")
    license_type: str = Field(default="Commercial Fisher", description="License category")

    @model_validator(mode='after')
    def validate_dates(self):
        """Expiry must fall strictly after issuance."""
        if self.expires_on <= self.issued_on:
            raise ValueError('License expiry must be after issuance date')
        return self


class ContactInfo(BaseModel):
    """Contact details captured on fisher registration."""

    email: str = Field(..., description="Email address")
    phone: str = Field(..., min_length=1, description="Phone number")
    address: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = Field(None, description="City")
    state: Optional[str] = Field(None, description="State code")
    zip_code: Optional[str] = Field(None, description="ZIP code")
    emergency_contact: Optional[str] = Field(None, description="Emergency contact name")
    emergency_phone: Optional[str] = Field(None, description="Emergency contact phone")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        if not EMAIL_PATTERN.match(v):
            raise ValueError('Invalid email format')
        return v.lower()


class Profile(BaseEntity):
    """Fisher identity record."""

    entity_type: ClassVar[str] = "profile"

    first_name: str = Field(..., min_length=1, max_length=100, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Family name")
    date_of_birth: date = Field(..., description="Date of birth")
    registration_date: date = Field(..., description="Date the registration was submitted")
    contact: ContactInfo = Field(..., description="Contact details")
    experience_level: Optional[ExperienceLevel] = Field(None, description="Fishing experience")
    specializations: Optional[str] = Field(None, max_length=1000, description="Fishing specializations")
    previous_licenses: Optional[str] = Field(None, max_length=1000, description="Previously held licenses")
    status: ProfileStatus = Field(default=ProfileStatus.PENDING, description="Profile status")
    fisher_id: Optional[str] = Field(None, description="Digital ID number assigned on approval")
    license: Optional[License] = Field(None, description="Personal fishing license")

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v):
        """Validate name parts."""
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()

    @model_validator(mode='after')
    def validate_birth_date(self):
        """Date of birth must precede registration."""
        if self.date_of_birth >= self.registration_date:
            raise ValueError('Date of birth must be before registration date')
        return self

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def stored_status(self) -> str:
        return self.status


class Boat(BaseEntity):
    """Registered fishing vessel with its embedded license."""

    entity_type: ClassVar[str] = "boat"

    name: str = Field(..., min_length=1, max_length=200, description="Vessel name")
    registration_number: str = Field(..., description="Registration number (natural key)")
    vessel_type: str = Field(..., min_length=1, description="Vessel category")
    length: int = Field(..., gt=0, description="Length in feet")
    home_port: str = Field(..., min_length=1, max_length=200, description="Home port")
    license: License = Field(..., description="Boat license")
    insurance_expiry: date = Field(..., description="Insurance expiry date")
    license_status: LicenseStatus = Field(default=LicenseStatus.PENDING, description="License status")
    application_date: date = Field(..., description="Date the application was admitted")
    owner_id: Optional[str] = Field(None, description="Owning fisher profile ID")

    @field_validator('registration_number')
    @classmethod
    def validate_registration_number(cls, v):
        """Validate registration number format (e.g. FL-9876-AB)."""
        v = v.strip().upper()
        if not REGISTRATION_NUMBER_PATTERN.match(v):
            raise ValueError('Registration number must look like FL-1234-AB')
        return v

    @field_validator('name', 'home_port')
    @classmethod
    def validate_text(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()

    @property
    def stored_status(self) -> str:
        return self.license_status

    @property
    def expiry_date(self) -> date:
        return self.license.expires_on


class Permit(BaseEntity):
    """Seasonal fishing permit with quota accounting."""

    entity_type: ClassVar[str] = "permit"

    season: str = Field(..., min_length=1, description="Season label")
    fish_type: str = Field(..., min_length=1, description="Target species")
    fishing_area: str = Field(..., min_length=1, description="Fishing area")
    start_date: date = Field(..., description="First day of validity")
    end_date: date = Field(..., description="Last day of validity")
    status: PermitStatus = Field(default=PermitStatus.PENDING, description="Permit status")
    application_date: date = Field(..., description="Date the application was admitted")
    quota_allowed: int = Field(..., ge=0, description="Allowed quota (lbs)")
    quota_used: int = Field(default=0, ge=0, description="Consumed quota (lbs)")
    denial_reason: Optional[str] = Field(None, description="Reason for denial")
    holder_id: Optional[str] = Field(None, description="Permit holder profile ID")

    @model_validator(mode='after')
    def validate_permit(self):
        """Validate date ordering and quota bounds."""
        if self.end_date <= self.start_date:
            raise ValueError('Permit end date must be after start date')

        if self.quota_used > self.quota_allowed:
            raise ValueError('Quota used cannot exceed quota allowed')

        if self.status == PermitStatus.DENIED and not self.denial_reason:
            raise ValueError('Denial reason is required when status is denied')

        return self

    @property
    def stored_status(self) -> str:
        return self.status

    @property
    def expiry_date(self) -> date:
        return self.end_date


ENTITY_TYPES = {
    Profile.entity_type: Profile,
    Boat.entity_type: Boat,
    Permit.entity_type: Permit,
}
