# SPDX-License-Identifier: Apache-2.0

"""
Quota ledger recording catch against seasonal permits.
"""

import logging
from typing import Optional
from opentelemetry import trace

from ..config import LicensingSettings
from ..domain import quota
from ..domain.errors import QuotaExceeded
from ..models.entities import Permit
from ..models.enums import EventType
from .events import EventPublisher
from .store import EntityStore

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class QuotaLedger:
    """Tracks used versus allowed quota per permit."""

    def __init__(
        self,
        store: EntityStore,
        settings: Optional[LicensingSettings] = None,
        events: Optional[EventPublisher] = None
    ):
        self.store = store
        self.settings = settings or LicensingSettings()
        self.events = events or EventPublisher()

    @property
    def threshold(self) -> int:
        return self.settings.quota_warning_percent

    def _permit(self, permit_id: str) -> Permit:
        return self.store.get_typed(permit_id, Permit)

    def record_usage(self, permit_id: str, amount: int) -> int:
        """
        Record catch against a permit.

        The read-modify-write runs under the permit's lock and either
        applies the full amount or nothing.

        Args:
            permit_id: Permit to charge
            amount: Positive whole amount

        Returns:
            Remaining quota after the usage

        Raises:
            NotFound: If the permit does not exist
            InvalidAmount: If amount is not a positive integer
            QuotaExceeded: If the usage would exceed the allowed quota
        """
        with tracer.start_as_current_span("quota.record_usage") as span:
            span.set_attributes({
                "permit.id": permit_id,
                "quota.amount": amount if isinstance(amount, int) else -1
            })

            with self.store.lock(permit_id):
                permit = self._permit(permit_id)

                try:
                    new_used = quota.apply_usage(permit, amount)
                except QuotaExceeded:
                    logger.warning(
                        f"Quota exceeded on permit {permit_id}",
                        extra={
                            "permit_id": permit_id,
                            "requested": amount,
                            "remaining": quota.remaining_quota(permit)
                        }
                    )
                    raise

                updated = self.store.update(permit_id, {"quota_used": new_used})

            remaining = quota.remaining_quota(updated)
            span.set_attribute("quota.remaining", remaining)

            if quota.crossed_threshold(permit, updated, self.threshold):
                self.events.emit(EventType.QUOTA_WARNING_RAISED, updated, {
                    "usage_percentage": quota.usage_percentage(updated),
                    "quota_allowed": updated.quota_allowed,
                    "quota_used": updated.quota_used,
                    "threshold": self.threshold,
                })

            logger.info(
                f"Recorded {amount} against permit {permit_id}",
                extra={"permit_id": permit_id, "remaining": remaining}
            )
            return remaining

    def remaining_quota(self, permit_id: str) -> int:
        return quota.remaining_quota(self._permit(permit_id))

    def usage_percentage(self, permit_id: str) -> int:
        """Rounded usage percentage; InvalidState when nothing is allowed."""
        return quota.usage_percentage(self._permit(permit_id))

    def is_near_limit(self, permit_id: str) -> bool:
        return quota.is_near_limit(self._permit(permit_id), self.threshold)

    def quota_report(self, permit_id: str) -> quota.QuotaReport:
        return quota.build_quota_report(self._permit(permit_id), self.threshold)
