# SPDX-License-Identifier: Apache-2.0

"""
Licensing core wiring.

Builds one EntityStore per session and hands it, with the shared clock,
settings and event publisher, to every service.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import LicensingSettings
from .domain.summary import DashboardSummary, summarize
from .services.applications import ApplicationProcessor
from .services.clock import SystemClock
from .services.events import EventPublisher
from .services.lifecycle import LifecycleService
from .services.persistence import create_backend
from .services.quota import QuotaLedger
from .services.store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class LicensingCore:
    """Services sharing one store, clock and event publisher."""
    settings: LicensingSettings
    clock: object
    store: EntityStore
    events: EventPublisher
    lifecycle: LifecycleService
    quota: QuotaLedger
    applications: ApplicationProcessor

    def dashboard(self) -> DashboardSummary:
        """Dashboard counts at today's date."""
        return summarize(
            self.store.list(),
            self.clock.today(),
            self.settings.expiry_warning_days,
            self.settings.quota_warning_percent
        )


def create_core(
    settings: Optional[LicensingSettings] = None,
    clock=None,
    backend=None,
    events: Optional[EventPublisher] = None
) -> LicensingCore:
    """
    Assemble the licensing core.

    Args:
        settings: Settings, read from the environment when omitted
        clock: Reference-date provider, system clock when omitted
        backend: Persistence backend, built from settings when omitted
        events: Event publisher shared by all services

    Returns:
        LicensingCore with wired services
    """
    settings = settings or LicensingSettings.from_env()
    clock = clock or SystemClock()
    events = events or EventPublisher()
    if backend is None:
        backend = create_backend(settings)

    store = EntityStore(backend)
    lifecycle = LifecycleService(store, settings, clock, events)

    core = LicensingCore(
        settings=settings,
        clock=clock,
        store=store,
        events=events,
        lifecycle=lifecycle,
        quota=QuotaLedger(store, settings, events),
        applications=ApplicationProcessor(store, settings, clock, events)
    )

    logger.info(
        "Licensing core initialized",
        extra={"environment": settings.environment, "persistent": backend is not None}
    )
    return core
