# SPDX-License-Identifier: Apache-2.0

"""
Application domain logic for boat, permit and fisher submissions.

This module contains pure functions validating raw field maps collected
by a presentation layer and turning accepted maps into entity fields with
their system-assigned values.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..config import LicensingSettings
from ..models.entities import REGISTRATION_NUMBER_PATTERN, EMAIL_PATTERN
from ..models.enums import ExperienceLevel, LicenseStatus, PermitStatus, ProfileStatus
from .errors import ValidationError
from .lifecycle import issue_license

ZIP_CODE_PATTERN = re.compile(r'^\d{5}(-\d{4})?$')
PHONE_PATTERN = re.compile(r'^\+?[\d\s().-]{7,20}$')


@dataclass
class FieldError:
    """A failed rule on a single input field."""
    field: str
    message: str


@dataclass
class ValidationResult:
    """Result of application validation; errors keep rule order."""
    errors: List[FieldError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add(self, field_name: str, message: str) -> None:
        self.errors.append(FieldError(field_name, message))

    def raise_first(self) -> None:
        """Raise the first failing rule as a field-qualified ValidationError."""
        if self.errors:
            first = self.errors[0]
            raise ValidationError(first.field, first.message)


def parse_date(value: Any) -> Optional[date]:
    """Parse a date from a date object or ISO string; None if malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def parse_positive_int(value: Any) -> Optional[int]:
    """Parse a positive integer from an int or digit string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
        return parsed if parsed > 0 else None
    return None


def _text(fields: Dict[str, Any], name: str) -> str:
    value = fields.get(name)
    return value.strip() if isinstance(value, str) else ""


def _require_text(
    result: ValidationResult,
    fields: Dict[str, Any],
    names: List[str]
) -> None:
    for name in names:
        if not _text(fields, name):
            result.add(name, "This field is required")


def age_on(date_of_birth: date, reference: date) -> int:
    """Age in whole years at the reference date."""
    had_birthday = (reference.month, reference.day) >= (date_of_birth.month, date_of_birth.day)
    return reference.year - date_of_birth.year - (0 if had_birthday else 1)


def validate_boat_application(
    fields: Dict[str, Any],
    settings: LicensingSettings,
    reference: date
) -> ValidationResult:
    """
    Validate a boat registration request.

    Args:
        fields: Raw field map
        settings: Configured vessel types
        reference: Application date

    Returns:
        ValidationResult with errors in rule order
    """
    result = ValidationResult()

    _require_text(result, fields, ['name'])

    registration = _text(fields, 'registration_number').upper()
    if not registration:
        result.add('registration_number', "This field is required")
    elif not REGISTRATION_NUMBER_PATTERN.match(registration):
        result.add('registration_number', "Registration number must look like FL-1234-AB")

    vessel_type = _text(fields, 'vessel_type')
    if not vessel_type:
        result.add('vessel_type', "This field is required")
    elif vessel_type not in settings.vessel_types:
        result.add('vessel_type', f"Unknown vessel type: {vessel_type}")

    if 'length' not in fields or fields['length'] in (None, ''):
        result.add('length', "This field is required")
    elif parse_positive_int(fields['length']) is None:
        result.add('length', "Length must be a positive whole number of feet")

    _require_text(result, fields, ['home_port'])

    insurance_expiry = parse_date(fields.get('insurance_expiry'))
    if insurance_expiry is None:
        result.add('insurance_expiry', "Insurance expiry must be a valid date")
    elif insurance_expiry <= reference:
        result.add('insurance_expiry', "Insurance has already expired")

    return result


def validate_permit_application(
    fields: Dict[str, Any],
    settings: LicensingSettings,
    reference: date
) -> ValidationResult:
    """
    Validate a seasonal permit request.

    A catalogued season_id supplies the season label and dates; otherwise
    season, start_date and end_date must all be given.
    """
    result = ValidationResult()

    season_id = _text(fields, 'season_id')
    if season_id:
        if settings.find_season(season_id) is None:
            result.add('season_id', f"Unknown season: {season_id}")
    else:
        _require_text(result, fields, ['season'])

        start_date = parse_date(fields.get('start_date'))
        end_date = parse_date(fields.get('end_date'))
        if start_date is None:
            result.add('start_date', "Start date must be a valid date")
        if end_date is None:
            result.add('end_date', "End date must be a valid date")
        elif start_date is not None and end_date <= start_date:
            result.add('end_date', "End date must be after start date")

    fish_type = _text(fields, 'fish_type')
    if fish_type not in settings.fish_types:
        result.add('fish_type', f"Fish type must be one of: {', '.join(settings.fish_types)}")

    fishing_area = _text(fields, 'fishing_area')
    if fishing_area not in settings.fishing_areas:
        result.add('fishing_area', f"Fishing area must be one of: {', '.join(settings.fishing_areas)}")

    if parse_positive_int(fields.get('quota_requested')) is None:
        result.add('quota_requested', "Quota requested must be a positive whole number")

    return result


def validate_fisher_registration(
    fields: Dict[str, Any],
    settings: LicensingSettings,
    reference: date
) -> ValidationResult:
    """Validate a fisher registration request."""
    result = ValidationResult()

    _require_text(result, fields, ['first_name', 'last_name'])

    date_of_birth = parse_date(fields.get('date_of_birth'))
    if date_of_birth is None:
        result.add('date_of_birth', "Date of birth must be a valid date")
    elif date_of_birth >= reference:
        result.add('date_of_birth', "Date of birth must be in the past")
    elif age_on(date_of_birth, reference) < settings.min_fisher_age:
        result.add('date_of_birth', f"Fishers must be at least {settings.min_fisher_age} years old")

    email = _text(fields, 'email')
    if not EMAIL_PATTERN.match(email):
        result.add('email', "Invalid email format")

    phone = _text(fields, 'phone')
    if not PHONE_PATTERN.match(phone):
        result.add('phone', "Invalid phone number")

    _require_text(result, fields, ['address', 'city', 'state'])

    if not ZIP_CODE_PATTERN.match(_text(fields, 'zip_code')):
        result.add('zip_code', "ZIP code must be 5 digits")

    _require_text(result, fields, ['emergency_contact'])
    if not PHONE_PATTERN.match(_text(fields, 'emergency_phone')):
        result.add('emergency_phone', "Invalid phone number")

    experience = _text(fields, 'experience_level')
    if experience and experience not in {level.value for level in ExperienceLevel}:
        result.add('experience_level', f"Unknown experience level: {experience}")

    return result


def build_boat_fields(
    fields: Dict[str, Any],
    settings: LicensingSettings,
    reference: date
) -> Dict[str, Any]:
    """Materialize boat fields from a validated application."""
    return {
        "name": _text(fields, 'name'),
        "registration_number": _text(fields, 'registration_number').upper(),
        "vessel_type": _text(fields, 'vessel_type'),
        "length": parse_positive_int(fields['length']),
        "home_port": _text(fields, 'home_port'),
        "license": issue_license(reference, settings.license_term_days, "Boat License"),
        "insurance_expiry": parse_date(fields['insurance_expiry']),
        "license_status": LicenseStatus.PENDING,
        "application_date": reference,
        "owner_id": fields.get('owner_id') or None,
    }


def build_permit_fields(
    fields: Dict[str, Any],
    settings: LicensingSettings,
    reference: date
) -> Dict[str, Any]:
    """Materialize permit fields from a validated application."""
    season_id = _text(fields, 'season_id')
    if season_id:
        season = settings.find_season(season_id)
        season_fields = {
            "season": season.name,
            "start_date": season.start_date,
            "end_date": season.end_date,
        }
    else:
        season_fields = {
            "season": _text(fields, 'season'),
            "start_date": parse_date(fields['start_date']),
            "end_date": parse_date(fields['end_date']),
        }

    return {
        **season_fields,
        "fish_type": _text(fields, 'fish_type'),
        "fishing_area": _text(fields, 'fishing_area'),
        "status": PermitStatus.PENDING,
        "application_date": reference,
        "quota_allowed": parse_positive_int(fields['quota_requested']),
        "quota_used": 0,
        "holder_id": fields.get('holder_id') or None,
    }


def build_profile_fields(fields: Dict[str, Any], reference: date) -> Dict[str, Any]:
    """Materialize profile fields from a validated registration."""
    contact = {
        name: _text(fields, name)
        for name in (
            'email', 'phone', 'address', 'city', 'state', 'zip_code',
            'emergency_contact', 'emergency_phone'
        )
    }

    return {
        "first_name": _text(fields, 'first_name'),
        "last_name": _text(fields, 'last_name'),
        "date_of_birth": parse_date(fields['date_of_birth']),
        "registration_date": reference,
        "contact": contact,
        "experience_level": _text(fields, 'experience_level') or None,
        "specializations": _text(fields, 'specializations') or None,
        "previous_licenses": _text(fields, 'previous_licenses') or None,
        "status": ProfileStatus.PENDING,
    }
