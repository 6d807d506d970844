# SPDX-License-Identifier: Apache-2.0

"""
Dashboard summary derived from the current entity set.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from ..models.entities import Boat, Permit
from .lifecycle import Reference, evaluate
from .quota import is_near_limit


@dataclass
class DashboardSummary:
    """Counts shown on the licensing dashboard."""
    total_boats: int = 0
    active_boats: int = 0
    boats_expiring_soon: int = 0
    boats_insurance_expiring_soon: int = 0
    active_permits: int = 0
    pending_permits: int = 0
    total_quota_used: int = 0
    near_limit_permit_ids: List[str] = field(default_factory=list)


def summarize(
    entities: Iterable,
    reference: Reference,
    warning_days: int = 30,
    quota_threshold: int = 80
) -> DashboardSummary:
    """
    Summarize boats and permits at the reference date.

    Statuses are effective statuses, so a stored active permit past its end
    date counts as neither active nor pending.
    """
    summary = DashboardSummary()

    for entity in entities:
        if isinstance(entity, Boat):
            status = evaluate(entity, reference, warning_days)
            summary.total_boats += 1
            if status.effective_status == "active":
                summary.active_boats += 1
            if status.expiry_warning:
                summary.boats_expiring_soon += 1
            if status.insurance_warning:
                summary.boats_insurance_expiring_soon += 1

        elif isinstance(entity, Permit):
            status = evaluate(entity, reference, warning_days)
            if status.effective_status == "active":
                summary.active_permits += 1
            elif status.effective_status == "pending":
                summary.pending_permits += 1
            summary.total_quota_used += entity.quota_used
            if is_near_limit(entity, quota_threshold):
                summary.near_limit_permit_ids.append(entity.id)

    return summary
