# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Entity store holding profiles, boats and permits keyed by id.

The store is the single owner of every entity. Engines borrow entities
from it on each call and never keep their own copies.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Type, Union
from opentelemetry import trace
from pydantic import ValidationError as PydanticValidationError

from ..domain.errors import DuplicateKey, InvalidTransition, NotFound
from ..domain.lifecycle import ensure_transition
from ..models.base import BaseEntity, generate_object_id, utcnow
from ..models.entities import Boat, Profile

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

STATUS_FIELDS = {
    "profile": "status",
    "boat": "license_status",
    "permit": "status",
}

READ_ONLY_FIELDS = {"id", "created_at", "updated_at"}


def _value(value: Any) -> Any:
    return getattr(value, "value", value)


def _first_error(error: PydanticValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    location = ".".join(str(part) for part in details[0].get("loc", ()))
    message = details[0].get("msg", "invalid value")
    return f"{location}: {message}" if location else message


class EntityStore:
    """
    In-memory entity store with optional write-through persistence.

    Mutations of one entity are serialized by a per-id lock; index
    maintenance is serialized by a store-wide lock.
    """

    def __init__(self, backend=None):
        """
        Initialize the store.

        Args:
            backend: Optional persistence backend offering get/put/delete
        """
        self.backend = backend
        self._entities: Dict[str, BaseEntity] = {}
        self._registration_index: Dict[str, str] = {}
        self._lock = threading.RLock()
        self._entity_locks: Dict[str, threading.RLock] = {}

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entities

    @contextmanager
    def lock(self, entity_id: str) -> Iterator[None]:
        """
        Hold the re-entrant lock of a single entity.

        Raises:
            NotFound: If no entity has this id
        """
        # Locks exist only for stored ids
        self.get(entity_id)
        with self._lock:
            entity_lock = self._entity_locks.setdefault(entity_id, threading.RLock())
        with entity_lock:
            yield

    def _index(self, entity: BaseEntity) -> None:
        if isinstance(entity, Boat):
            self._registration_index[entity.registration_number] = entity.id

    def _check_registration(self, entity: BaseEntity) -> None:
        if not isinstance(entity, Boat):
            return
        owner = self._registration_index.get(entity.registration_number)
        if owner is not None and owner != entity.id:
            raise DuplicateKey("registration number", entity.registration_number)

    def create(self, entity: BaseEntity) -> BaseEntity:
        """
        Store a new entity.

        Raises:
            DuplicateKey: If the id or a boat registration number is taken
        """
        with tracer.start_as_current_span("store.create") as span:
            span.set_attribute("entity.type", entity.entity_type)

            if not entity.id:
                entity = entity.model_copy(update={"id": generate_object_id()})

            with self._lock:
                if entity.id in self._entities:
                    raise DuplicateKey("id", entity.id)
                self._check_registration(entity)

                self._entities[entity.id] = entity
                self._index(entity)

            if self.backend is not None:
                try:
                    self.backend.put(entity)
                except Exception:
                    self._forget(entity)
                    raise

            span.set_attribute("entity.id", entity.id)
            logger.info(
                f"Created {entity.entity_type} {entity.id}",
                extra={"entity_type": entity.entity_type, "entity_id": entity.id}
            )
            return entity

    def get(self, entity_id: str) -> BaseEntity:
        """
        Fetch an entity by id.

        Raises:
            NotFound: If no entity has this id
        """
        entity = self._entities.get(entity_id)
        if entity is not None:
            return entity

        if self.backend is not None:
            entity = self.backend.get(entity_id)
            if entity is not None:
                with self._lock:
                    self._entities.setdefault(entity.id, entity)
                    self._index(entity)
                return self._entities[entity.id]

        raise NotFound(entity_id)

    def get_typed(self, entity_id: str, model: Type[BaseEntity]) -> BaseEntity:
        """Fetch an entity and require it to be of the given type."""
        entity = self.get(entity_id)
        if not isinstance(entity, model):
            raise NotFound(entity_id, model.entity_type)
        return entity

    def list(
        self,
        predicate: Optional[Callable[[BaseEntity], bool]] = None,
        entity_type: Union[str, Type[BaseEntity], None] = None
    ) -> List[BaseEntity]:
        """
        List stored entities.

        Args:
            predicate: Optional filter applied to each entity
            entity_type: Optional type name or model class

        Returns:
            Matching entities in insertion order
        """
        with self._lock:
            entities = list(self._entities.values())

        if entity_type is not None:
            type_name = entity_type if isinstance(entity_type, str) else entity_type.entity_type
            entities = [e for e in entities if e.entity_type == type_name]

        if predicate is not None:
            entities = [e for e in entities if predicate(e)]

        return entities

    def update(self, entity_id: str, changes: Dict[str, Any]) -> BaseEntity:
        """
        Apply a partial field change.

        The merged record is re-validated as a whole; status changes must
        follow the entity's state machine.

        Raises:
            NotFound: If no entity has this id
            InvalidTransition: If the change breaks an invariant
            DuplicateKey: If a boat registration number would collide
        """
        with tracer.start_as_current_span("store.update") as span:
            span.set_attribute("entity.id", entity_id)

            with self.lock(entity_id):
                current = self.get(entity_id)

                unknown = set(changes) - set(type(current).model_fields)
                if unknown:
                    raise InvalidTransition(
                        f"Unknown {current.entity_type} fields: {', '.join(sorted(unknown))}"
                    )

                read_only = READ_ONLY_FIELDS & set(changes)
                if read_only:
                    raise InvalidTransition(
                        f"Fields cannot be changed: {', '.join(sorted(read_only))}"
                    )

                status_field = STATUS_FIELDS.get(current.entity_type)
                if status_field in changes:
                    old_status = _value(getattr(current, status_field))
                    new_status = _value(changes[status_field])
                    if new_status != old_status:
                        ensure_transition(current.entity_type, old_status, new_status)

                data = current.model_dump()
                data.update(changes)
                data["updated_at"] = utcnow()

                try:
                    updated = type(current).model_validate(data)
                except PydanticValidationError as e:
                    raise InvalidTransition(
                        f"Update rejected for {current.entity_type} {entity_id}: {_first_error(e)}"
                    ) from e

                with self._lock:
                    self._check_registration(updated)

                    # Memory changes only after the backend accepted the write
                    if self.backend is not None:
                        self.backend.put(updated)

                    if isinstance(current, Boat):
                        self._registration_index.pop(current.registration_number, None)
                    self._entities[entity_id] = updated
                    self._index(updated)

                logger.info(
                    f"Updated {updated.entity_type} {entity_id}",
                    extra={"entity_id": entity_id, "fields": sorted(changes)}
                )
                return updated

    def remove(self, entity_id: str) -> BaseEntity:
        """
        Remove an entity. Dependent records are not touched.

        Raises:
            NotFound: If no entity has this id
            InvalidTransition: For profiles, which are only ever deactivated
        """
        with self.lock(entity_id):
            entity = self.get(entity_id)

            if isinstance(entity, Profile):
                raise InvalidTransition("Profiles cannot be removed, suspend them instead")

            self._forget(entity)

            if self.backend is not None:
                self.backend.delete(entity_id)

        with self._lock:
            self._entity_locks.pop(entity_id, None)

        logger.info(
            f"Removed {entity.entity_type} {entity_id}",
            extra={"entity_type": entity.entity_type, "entity_id": entity_id}
        )
        return entity

    def _forget(self, entity: BaseEntity) -> None:
        with self._lock:
            self._entities.pop(entity.id, None)
            if isinstance(entity, Boat):
                if self._registration_index.get(entity.registration_number) == entity.id:
                    del self._registration_index[entity.registration_number]
