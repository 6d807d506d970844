# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the fisheries licensing core.
"""

from enum import Enum


class ProfileStatus(str, Enum):
    """Fisher profile status enumeration."""
    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"


class LicenseStatus(str, Enum):
    """Boat license status enumeration."""
    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"


class PermitStatus(str, Enum):
    """Seasonal permit status enumeration."""
    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"
    DENIED = "denied"


class VesselType(str, Enum):
    """Registered vessel categories."""
    COMMERCIAL = "commercial"
    CHARTER = "charter"
    RECREATIONAL = "recreational"
    SPORT = "sport"


class ExperienceLevel(str, Enum):
    """Self-declared fishing experience."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERIENCED = "experienced"
    EXPERT = "expert"


class EventType(str, Enum):
    """Events emitted to the notification collaborator."""
    APPLICATION_SUBMITTED = "application_submitted"
    QUOTA_WARNING_RAISED = "quota_warning_raised"
    ENTITY_EXPIRED = "entity_expired"
