# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Domain events handed to the notification collaborator.

Events are plain data. Rendering them as toasts or emails is up to the
subscriber.
"""

from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, Field, ConfigDict
from .base import generate_object_id, utcnow
from .enums import EventType


class DomainEvent(BaseModel):
    """Discrete event emitted by the licensing core."""
    
    model_config = ConfigDict(
        use_enum_values=True,
        frozen=True
    )
    
    id: str = Field(default_factory=generate_object_id, description="Event identifier")
    event_type: EventType = Field(..., description="Event kind")
    entity_id: str = Field(..., description="Subject entity ID")
    entity_type: str = Field(..., description="Subject entity type")
    occurred_at: datetime = Field(default_factory=utcnow, description="Emission timestamp")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event payload")
