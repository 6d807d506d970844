# SPDX-License-Identifier: Apache-2.0

"""
Services package - stateful collaborators wrapping the domain logic.
"""

from .store import EntityStore
from .lifecycle import LifecycleService
from .quota import QuotaLedger
from .applications import ApplicationProcessor
from .events import EventPublisher, EventRecorder

__all__ = [
    "EntityStore",
    "LifecycleService",
    "QuotaLedger",
    "ApplicationProcessor",
    "EventPublisher",
    "EventRecorder",
]
