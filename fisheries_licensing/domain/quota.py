# SPDX-License-Identifier: Apache-2.0

"""
Quota accounting for seasonal permits.

Pure functions over a permit's allowed and used quota. The near-limit flag
is derived on every call and never stored.
"""

from dataclasses import dataclass
from typing import Optional

from ..models.entities import Permit
from .errors import InvalidAmount, InvalidState, QuotaExceeded


@dataclass(frozen=True)
class QuotaReport:
    """Snapshot of a permit's quota position."""
    permit_id: str
    quota_allowed: int
    quota_used: int
    remaining: int
    usage_percentage: Optional[int]
    near_limit: bool


def remaining_quota(permit: Permit) -> int:
    """Quota left on the permit."""
    return permit.quota_allowed - permit.quota_used


def usage_percentage(permit: Permit) -> int:
    """
    Share of allowed quota already used, rounded half up to an integer.

    Raises:
        InvalidState: If the permit has no allowed quota
    """
    if permit.quota_allowed == 0:
        raise InvalidState(f"Permit {permit.id} has no allowed quota")

    # round(100 * used / allowed) with halves rounded up, in integers
    return (200 * permit.quota_used + permit.quota_allowed) // (2 * permit.quota_allowed)


def is_near_limit(permit: Permit, threshold: int = 80) -> bool:
    """Advisory flag once usage percentage exceeds the threshold."""
    if permit.quota_allowed == 0:
        return False
    return usage_percentage(permit) > threshold


def validate_amount(amount) -> int:
    """
    Validate a usage amount.

    Raises:
        InvalidAmount: Unless amount is a positive integer
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Usage amount must be a whole number, got {amount!r}")

    if amount <= 0:
        raise InvalidAmount(f"Usage amount must be positive, got {amount}")

    return amount


def apply_usage(permit: Permit, amount) -> int:
    """
    Compute the used quota after recording amount.

    All-or-nothing: nothing is clamped.

    Returns:
        New quota_used value

    Raises:
        InvalidAmount: If amount is not a positive integer
        QuotaExceeded: If the usage would exceed the allowed quota
    """
    amount = validate_amount(amount)
    new_used = permit.quota_used + amount

    if new_used > permit.quota_allowed:
        raise QuotaExceeded(permit.id, amount, remaining_quota(permit))

    return new_used


def crossed_threshold(before: Permit, after: Permit, threshold: int = 80) -> bool:
    """Whether a usage update moved the permit above the warning threshold."""
    return is_near_limit(after, threshold) and not is_near_limit(before, threshold)


def build_quota_report(permit: Permit, threshold: int = 80) -> QuotaReport:
    """Build a QuotaReport; percentage is None when nothing is allowed."""
    percentage = usage_percentage(permit) if permit.quota_allowed else None

    return QuotaReport(
        permit_id=permit.id,
        quota_allowed=permit.quota_allowed,
        quota_used=permit.quota_used,
        remaining=remaining_quota(permit),
        usage_percentage=percentage,
        near_limit=percentage is not None and percentage > threshold
    )
