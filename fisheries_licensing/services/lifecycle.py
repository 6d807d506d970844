# SPDX-License-Identifier: Apache-2.0

"""
Lifecycle service: status derivation and reviewer actions.

Wraps the pure lifecycle functions with the entity store, the clock and
the event publisher. Effective status is recomputed on every call.
"""

import logging
from typing import List, Optional
from opentelemetry import trace

from ..config import LicensingSettings
from ..domain import lifecycle
from ..domain.errors import InvalidTransition, NotFound, ValidationError
from ..models.base import BaseEntity
from ..models.entities import Boat, Permit, Profile
from ..models.enums import EventType, LicenseStatus, PermitStatus, ProfileStatus
from .clock import SystemClock
from .events import EventPublisher
from .store import EntityStore

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class LifecycleService:
    """Effective status queries and explicit status transitions."""

    def __init__(
        self,
        store: EntityStore,
        settings: Optional[LicensingSettings] = None,
        clock=None,
        events: Optional[EventPublisher] = None
    ):
        self.store = store
        self.settings = settings or LicensingSettings()
        self.clock = clock or SystemClock()
        self.events = events or EventPublisher()

    def _time_bound(self, entity_id: str) -> BaseEntity:
        entity = self.store.get(entity_id)
        if not lifecycle.is_time_bound(entity):
            raise NotFound(entity_id, "boat or permit")
        return entity

    def status_of(self, entity_id: str) -> lifecycle.LifecycleStatus:
        """Effective status and expiry advisory of a boat or permit."""
        entity = self._time_bound(entity_id)
        return lifecycle.evaluate(entity, self.clock.today(), self.settings.expiry_warning_days)

    def effective_status(self, entity_id: str) -> str:
        return self.status_of(entity_id).effective_status

    def expiring_soon(self) -> List[lifecycle.LifecycleStatus]:
        """Boats and permits inside the expiry or insurance warning window."""
        today = self.clock.today()
        statuses = [
            lifecycle.evaluate(entity, today, self.settings.expiry_warning_days)
            for entity in self.store.list(lifecycle.is_time_bound)
        ]
        return [
            status for status in statuses
            if status.expiry_warning or status.insurance_warning
        ]

    def _ensure_not_expired(self, entity: BaseEntity) -> None:
        if lifecycle.effective_status(entity, self.clock.today()) == lifecycle.EXPIRED:
            raise InvalidTransition(
                f"{entity.entity_type.capitalize()} {entity.id} has expired"
            )

    def approve(self, entity_id: str) -> BaseEntity:
        """
        Approve a pending boat, permit or profile.

        Boats get a fresh license term starting today. Profiles get a
        fisher ID number.

        Raises:
            InvalidTransition: If the entity is not pending or already expired
        """
        with tracer.start_as_current_span("lifecycle.approve") as span:
            span.set_attribute("entity.id", entity_id)

            with self.store.lock(entity_id):
                entity = self.store.get(entity_id)
                today = self.clock.today()

                if isinstance(entity, Boat):
                    self._ensure_not_expired(entity)
                    lifecycle.ensure_transition("boat", entity.license_status, LicenseStatus.ACTIVE.value)
                    changes = {
                        "license_status": LicenseStatus.ACTIVE,
                        "license": lifecycle.issue_license(
                            today,
                            self.settings.license_term_days,
                            entity.license.license_type
                        ),
                    }
                elif isinstance(entity, Permit):
                    self._ensure_not_expired(entity)
                    lifecycle.ensure_transition("permit", entity.status, PermitStatus.ACTIVE.value)
                    changes = {"status": PermitStatus.ACTIVE}
                elif isinstance(entity, Profile):
                    if entity.status != ProfileStatus.PENDING:
                        raise InvalidTransition(
                            f"Profile {entity_id} cannot be approved (current status: {entity.status})"
                        )
                    changes = {
                        "status": ProfileStatus.ACTIVE,
                        "fisher_id": entity.fisher_id or self._next_fisher_id(today.year),
                    }
                else:
                    raise NotFound(entity_id)

                updated = self.store.update(entity_id, changes)

            logger.info(
                f"Approved {updated.entity_type} {entity_id}",
                extra={"entity_type": updated.entity_type, "entity_id": entity_id}
            )
            return updated

    def deny(self, permit_id: str, reason: str) -> Permit:
        """
        Deny a pending permit. Denial is terminal.

        Raises:
            ValidationError: If no reason is given
            InvalidTransition: If the permit is not pending or already expired
        """
        if not reason or not reason.strip():
            raise ValidationError("reason", "Denial reason is required")

        with tracer.start_as_current_span("lifecycle.deny") as span:
            span.set_attribute("entity.id", permit_id)

            with self.store.lock(permit_id):
                permit = self.store.get_typed(permit_id, Permit)
                self._ensure_not_expired(permit)
                updated = self.store.update(permit_id, {
                    "status": PermitStatus.DENIED,
                    "denial_reason": reason.strip(),
                })

            logger.info(f"Denied permit {permit_id}", extra={"entity_id": permit_id})
            return updated

    def suspend(self, profile_id: str) -> Profile:
        """Suspend an active fisher profile."""
        self.store.get_typed(profile_id, Profile)
        updated = self.store.update(profile_id, {"status": ProfileStatus.SUSPENDED})
        logger.info(f"Suspended profile {profile_id}", extra={"entity_id": profile_id})
        return updated

    def reinstate(self, profile_id: str) -> Profile:
        """Reactivate a suspended fisher profile."""
        profile = self.store.get_typed(profile_id, Profile)
        if profile.status != ProfileStatus.SUSPENDED:
            raise InvalidTransition(
                f"Profile {profile_id} is not suspended (current status: {profile.status})"
            )
        updated = self.store.update(profile_id, {"status": ProfileStatus.ACTIVE})
        logger.info(f"Reinstated profile {profile_id}", extra={"entity_id": profile_id})
        return updated

    def renew_license(self, boat_id: str) -> Boat:
        """
        Extend an active boat license by one term.

        Raises:
            InvalidTransition: If the license is pending or already expired
        """
        with self.store.lock(boat_id):
            boat = self.store.get_typed(boat_id, Boat)
            self._ensure_not_expired(boat)

            if boat.license_status != LicenseStatus.ACTIVE:
                raise InvalidTransition(
                    f"Only active licenses can be renewed (current status: {boat.license_status})"
                )

            renewed = lifecycle.renew_license(
                boat.license,
                self.clock.today(),
                self.settings.license_term_days
            )
            updated = self.store.update(boat_id, {"license": renewed})

        logger.info(
            f"Renewed license of boat {boat_id} until {renewed.expires_on.isoformat()}",
            extra={"entity_id": boat_id}
        )
        return updated

    def sweep_expired(self) -> List[str]:
        """
        Persist expired status where time has run out.

        Emits one entity_expired event per record changed.

        Returns:
            IDs of the expired entities
        """
        with tracer.start_as_current_span("lifecycle.sweep_expired") as span:
            today = self.clock.today()
            expired_ids = []

            for entity in self.store.list(lambda e: lifecycle.needs_expiry(e, today)):
                status_field = "license_status" if isinstance(entity, Boat) else "status"
                previous = entity.stored_status

                with self.store.lock(entity.id):
                    current = self.store.get(entity.id)
                    if not lifecycle.needs_expiry(current, today):
                        continue
                    self.store.update(entity.id, {status_field: lifecycle.EXPIRED})

                self.events.emit(EventType.ENTITY_EXPIRED, entity, {
                    "previous_status": previous,
                    "expiry_date": entity.expiry_date.isoformat(),
                })
                expired_ids.append(entity.id)

            span.set_attribute("lifecycle.expired_count", len(expired_ids))
            if expired_ids:
                logger.info(f"Expired {len(expired_ids)} entities", extra={"entity_ids": expired_ids})
            return expired_ids

    def _next_fisher_id(self, year: int) -> str:
        prefix = f"FID-{year}-"
        taken = [
            profile.fisher_id
            for profile in self.store.list(entity_type=Profile)
            if profile.fisher_id and profile.fisher_id.startswith(prefix)
        ]
        sequence = max((int(fid[len(prefix):]) for fid in taken), default=0) + 1
        return f"{prefix}{sequence:03d}"
