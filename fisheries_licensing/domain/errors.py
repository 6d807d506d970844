# SPDX-License-Identifier: Apache-2.0

"""
Error kinds raised by the licensing core.

Every error is recoverable and surfaced to the caller unchanged. The
problem payload mirrors RFC 7807 so a presentation layer can render it
without string parsing.
"""

from typing import Any, Dict, Optional


class LicensingError(Exception):
    """Base class for all licensing core errors."""

    error_type = "licensing-error"
    title = "Licensing Error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_problem(self) -> Dict[str, Any]:
        """Build a problem-details dictionary for display layers."""
        return {
            "type": self.error_type,
            "title": self.title,
            "detail": self.detail
        }


class ValidationError(LicensingError):
    """Input failed a validation rule; field-qualified."""

    error_type = "validation-error"
    title = "Validation Error"

    def __init__(self, field: str, detail: str):
        super().__init__(f"{field}: {detail}")
        self.field = field
        self.message = detail

    def to_problem(self) -> Dict[str, Any]:
        problem = super().to_problem()
        problem["errors"] = [{"field": self.field, "message": self.message}]
        return problem


class NotFound(LicensingError):
    """No entity with the requested identifier."""

    error_type = "resource-not-found"
    title = "Resource Not Found"

    def __init__(self, entity_id: str, entity_type: Optional[str] = None):
        kind = entity_type or "entity"
        super().__init__(f"No {kind} with id {entity_id}")
        self.entity_id = entity_id
        self.entity_type = entity_type


class DuplicateKey(LicensingError):
    """A natural key (or identifier) is already taken."""

    error_type = "resource-conflict"
    title = "Resource Conflict"

    def __init__(self, key: str, value: str):
        super().__init__(f"An entity with {key} {value} already exists")
        self.key = key
        self.value = value


class InvalidTransition(LicensingError):
    """A change would break an entity invariant or the status machine."""

    error_type = "invalid-transition"
    title = "Invalid Transition"


class InvalidAmount(LicensingError):
    """Quota usage amount is not a positive integer."""

    error_type = "invalid-amount"
    title = "Invalid Amount"


class QuotaExceeded(LicensingError):
    """Usage would take a permit over its allowed quota."""

    error_type = "quota-exceeded"
    title = "Quota Exceeded"

    def __init__(self, permit_id: str, requested: int, remaining: int):
        super().__init__(
            f"Permit {permit_id} has {remaining} remaining, cannot record {requested}"
        )
        self.permit_id = permit_id
        self.requested = requested
        self.remaining = remaining


class InvalidState(LicensingError):
    """Computation undefined for the entity's current state."""

    error_type = "invalid-state"
    title = "Invalid State"
