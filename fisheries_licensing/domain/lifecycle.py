# SPDX-License-Identifier: Apache-2.0

"""
Lifecycle domain logic for time-bound licensing records.

This module contains pure functions deriving the effective status of boats
and permits from their stored status, their expiry date and a reference
date supplied by the caller. Status logic lives here and nowhere else.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Optional, Set, Union

from ..models.entities import License
from ..models.enums import LicenseStatus, PermitStatus, ProfileStatus
from .errors import InvalidTransition

Reference = Union[date, datetime]

EXPIRED = "expired"
DENIED = "denied"

# Statuses no date logic may override
NON_TIME_TERMINAL = {PermitStatus.DENIED.value}

TRANSITIONS: Dict[str, Dict[str, Set[str]]] = {
    "boat": {
        LicenseStatus.PENDING.value: {LicenseStatus.ACTIVE.value, LicenseStatus.EXPIRED.value},
        LicenseStatus.ACTIVE.value: {LicenseStatus.EXPIRED.value},
        LicenseStatus.EXPIRED.value: set(),  # Terminal state
    },
    "permit": {
        PermitStatus.PENDING.value: {
            PermitStatus.ACTIVE.value, PermitStatus.DENIED.value, PermitStatus.EXPIRED.value
        },
        PermitStatus.ACTIVE.value: {PermitStatus.EXPIRED.value},
        PermitStatus.EXPIRED.value: set(),  # Terminal state
        PermitStatus.DENIED.value: set(),  # Terminal state
    },
    "profile": {
        ProfileStatus.PENDING.value: {ProfileStatus.ACTIVE.value},
        ProfileStatus.ACTIVE.value: {ProfileStatus.SUSPENDED.value},
        ProfileStatus.SUSPENDED.value: {ProfileStatus.ACTIVE.value},
    },
}


@dataclass(frozen=True)
class LifecycleStatus:
    """Derived status of a time-bound entity at a reference date."""
    entity_id: str
    entity_type: str
    stored_status: str
    effective_status: str
    expiry_date: date
    days_until_expiry: int
    expiry_warning: bool
    insurance_days_until_expiry: Optional[int] = None
    insurance_warning: bool = False

    @property
    def is_expired(self) -> bool:
        return self.effective_status == EXPIRED


def to_date(reference: Reference) -> date:
    """Calendar date of a reference date or datetime."""
    if isinstance(reference, datetime):
        return reference.date()
    return reference


def is_time_bound(entity) -> bool:
    """Whether the entity carries an expiry date the lifecycle applies to."""
    return hasattr(entity, "expiry_date") and hasattr(entity, "stored_status")


def days_until_expiry(expiry: date, reference: Reference) -> int:
    """
    Whole days until expiry, rounded up; negative once expired.

    Args:
        expiry: Expiry or end date
        reference: Reference date, or datetime for sub-day precision

    Returns:
        ceil((expiry - reference) / 1 day)
    """
    if isinstance(reference, datetime):
        expiry_start = datetime.combine(expiry, time.min, tzinfo=reference.tzinfo)
        seconds = (expiry_start - reference).total_seconds()
        return math.ceil(seconds / 86400)
    return (expiry - reference).days


def is_expiry_warning(days: int, warning_days: int = 30) -> bool:
    """Advisory flag for entities close to expiry."""
    return 0 <= days < warning_days


def insurance_days_until_expiry(entity, reference: Reference) -> Optional[int]:
    """Days until a boat's insurance lapses; None for records without insurance."""
    insurance_expiry = getattr(entity, "insurance_expiry", None)
    if insurance_expiry is None:
        return None
    return days_until_expiry(insurance_expiry, reference)


def effective_status(entity, reference: Reference) -> str:
    """
    Effective status of a boat or permit at the reference date.

    Denied records keep their status. Otherwise a reference date at or
    after the expiry date yields expired, whatever the stored status.
    """
    stored = entity.stored_status
    if stored in NON_TIME_TERMINAL:
        return stored

    if to_date(reference) >= entity.expiry_date:
        return EXPIRED

    return stored


def evaluate(entity, reference: Reference, warning_days: int = 30) -> LifecycleStatus:
    """
    Evaluate a time-bound entity at the reference date.

    Args:
        entity: Boat or Permit
        reference: Reference date
        warning_days: Expiry warning window

    Returns:
        LifecycleStatus with effective status, expiry advisory and, for
        boats, the insurance advisory
    """
    days = days_until_expiry(entity.expiry_date, reference)
    status = effective_status(entity, reference)
    insurance_days = insurance_days_until_expiry(entity, reference)

    return LifecycleStatus(
        entity_id=entity.id,
        entity_type=entity.entity_type,
        stored_status=entity.stored_status,
        effective_status=status,
        expiry_date=entity.expiry_date,
        days_until_expiry=days,
        expiry_warning=status != DENIED and is_expiry_warning(days, warning_days),
        insurance_days_until_expiry=insurance_days,
        insurance_warning=(
            insurance_days is not None
            and status != DENIED
            and is_expiry_warning(insurance_days, warning_days)
        )
    )


def needs_expiry(entity, reference: Reference) -> bool:
    """Whether stored state lags behind a time-driven expiry."""
    return (
        is_time_bound(entity)
        and entity.stored_status != EXPIRED
        and effective_status(entity, reference) == EXPIRED
    )


def can_transition(entity_type: str, current: str, new: str) -> bool:
    """Check a status change against the entity's state machine."""
    return new in TRANSITIONS.get(entity_type, {}).get(current, set())


def ensure_transition(entity_type: str, current: str, new: str) -> None:
    """Raise InvalidTransition unless the status change is allowed."""
    if not can_transition(entity_type, current, new):
        raise InvalidTransition(
            f"Invalid {entity_type} status transition from {current} to {new}"
        )


def issue_license(
    issued_on: date,
    term_days: int,
    license_type: Optional[str] = None
) -> License:
    """Issue a license valid for term_days from issued_on."""
    fields = {
        "issued_on": issued_on,
        "expires_on": issued_on + timedelta(days=term_days),
    }
    if license_type:
        fields["license_type"] = license_type
    return License(**fields)


def renew_license(license: License, reference: Reference, term_days: int) -> License:
    """
    Extend a license by one term.

    The new term starts at the later of the reference date and the current
    expiry so renewing early never shortens validity.
    """
    start = max(to_date(reference), license.expires_on)
    return License(
        issued_on=license.issued_on,
        expires_on=start + timedelta(days=term_days),
        license_type=license.license_type
    )
