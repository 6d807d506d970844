# SPDX-License-Identifier: Apache-2.0

"""
Application processor admitting new boats, permits and fisher profiles.

Validation runs before anything touches the store; a rejected application
leaves no trace.
"""

import logging
from typing import Any, Callable, Dict, Optional
from opentelemetry import trace
from pydantic import ValidationError as PydanticValidationError

from ..config import LicensingSettings
from ..domain import applications, lifecycle
from ..domain.errors import ValidationError
from ..models.base import BaseEntity
from ..models.entities import Boat, Permit, Profile
from ..models.enums import EventType
from .clock import SystemClock
from .events import EventPublisher
from .store import EntityStore

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

EXPIRY_FIELDS = {"boat": "license", "permit": "end_date"}


class ApplicationProcessor:
    """Validates raw field maps and stores the resulting entities."""

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

    def submit_boat_application(self, fields: Dict[str, Any]) -> Boat:
        """
        Admit a boat registration as a pending license.

        Raises:
            ValidationError: On the first failing rule
            DuplicateKey: If the registration number is already registered
        """
        return self._admit(
            Boat,
            fields,
            applications.validate_boat_application,
            applications.build_boat_fields
        )

    def submit_permit_application(self, fields: Dict[str, Any]) -> Permit:
        """
        Admit a seasonal permit application as pending with zero usage.

        Raises:
            ValidationError: On the first failing rule
        """
        return self._admit(
            Permit,
            fields,
            applications.validate_permit_application,
            applications.build_permit_fields
        )

    def register_fisher(self, fields: Dict[str, Any]) -> Profile:
        """
        Admit a fisher registration as a pending profile.

        Raises:
            ValidationError: On the first failing rule
        """
        return self._admit(
            Profile,
            fields,
            applications.validate_fisher_registration,
            lambda data, settings, reference: applications.build_profile_fields(data, reference)
        )

    def _admit(
        self,
        model,
        fields: Dict[str, Any],
        validate: Callable,
        build: Callable
    ) -> BaseEntity:
        with tracer.start_as_current_span("applications.submit") as span:
            span.set_attribute("entity.type", model.entity_type)
            reference = self.clock.today()

            result = validate(fields, self.settings, reference)
            if not result.is_valid:
                span.set_attribute("applications.rejected_field", result.errors[0].field)
                logger.info(
                    f"Rejected {model.entity_type} application",
                    extra={"field": result.errors[0].field, "error_count": len(result.errors)}
                )
                result.raise_first()

            try:
                entity = model(**build(fields, self.settings, reference))
            except PydanticValidationError as e:
                detail = e.errors()[0]
                field = ".".join(str(part) for part in detail.get("loc", ())) or model.entity_type
                raise ValidationError(field, detail.get("msg", "invalid value")) from e

            if lifecycle.is_time_bound(entity) and lifecycle.effective_status(entity, reference) == lifecycle.EXPIRED:
                raise ValidationError(self._expiry_field(entity, fields), "Validity period has already ended")

            stored = self.store.create(entity)

            self.events.emit(EventType.APPLICATION_SUBMITTED, stored, {
                "application_date": reference.isoformat(),
                "status": stored.stored_status,
            })

            logger.info(
                f"Admitted {model.entity_type} application {stored.id}",
                extra={"entity_type": model.entity_type, "entity_id": stored.id}
            )
            return stored

    @staticmethod
    def _expiry_field(entity: BaseEntity, fields: Dict[str, Any]) -> str:
        """Field the caller sent that determined the entity's validity period."""
        season_id = fields.get('season_id')
        if isinstance(entity, Permit) and isinstance(season_id, str) and season_id.strip():
            return 'season_id'
        return EXPIRY_FIELDS[entity.entity_type]
