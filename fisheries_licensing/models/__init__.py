# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas for the fisheries licensing core.
"""

# Base models
from .base import BaseEntity, generate_object_id

# Enumerations
from .enums import (
    ProfileStatus,
    LicenseStatus,
    PermitStatus,
    VesselType,
    ExperienceLevel,
    EventType
)

# Core entities
from .entities import (
    License,
    ContactInfo,
    Profile,
    Boat,
    Permit,
    ENTITY_TYPES
)

# Events
from .events import DomainEvent

__all__ = [
    # Base models
    "BaseEntity",
    "generate_object_id",
    
    # Enumerations
    "ProfileStatus",
    "LicenseStatus",
    "PermitStatus",
    "VesselType",
    "ExperienceLevel",
    "EventType",
    
    # Core entities
    "License",
    "ContactInfo",
    "Profile",
    "Boat",
    "Permit",
    "ENTITY_TYPES",
    
    # Events
    "DomainEvent"
]
