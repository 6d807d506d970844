# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from datetime import date

from fisheries_licensing.app import create_core
from fisheries_licensing.config import LicensingSettings
from fisheries_licensing.domain.lifecycle import issue_license
from fisheries_licensing.models.entities import Boat, Permit
from fisheries_licensing.services.clock import FixedClock
from fisheries_licensing.services.events import EventPublisher, EventRecorder
from fisheries_licensing.services.persistence import InMemoryBackend

# Set test environment
os.environ['ENVIRONMENT'] = 'test'


@pytest.fixture
def settings():
    """Default licensing settings."""
    return LicensingSettings(environment='test')


@pytest.fixture
def clock():
    """Clock pinned to the start of the 2025 spring season."""
    return FixedClock(date(2025, 1, 15))


@pytest.fixture
def recorder():
    """Recorder collecting published events."""
    return EventRecorder()


@pytest.fixture
def events(recorder):
    """Event publisher with the recorder subscribed."""
    publisher = EventPublisher()
    publisher.subscribe(recorder)
    return publisher


@pytest.fixture
def core(settings, clock, events):
    """Licensing core backed by an in-memory persistence backend."""
    return create_core(settings=settings, clock=clock, backend=InMemoryBackend(), events=events)


@pytest.fixture
def sample_boat_application():
    """Boat registration form as collected by the dashboard."""
    return {
        "name": "Sea Explorer",
        "registration_number": "FL-9876-AB",
        "vessel_type": "commercial",
        "length": "42",
        "home_port": "Miami Harbor",
        "insurance_expiry": "2025-11-15"
    }


@pytest.fixture
def sample_permit_application():
    """Seasonal permit application picking a catalogued season."""
    return {
        "season_id": "spring-2025",
        "fish_type": "Salmon",
        "fishing_area": "Coastal Zone A",
        "quota_requested": "500"
    }


@pytest.fixture
def sample_fisher_registration():
    """Fisher registration form."""
    return {
        "first_name": "John",
        "last_name": "Fisher",
        "date_of_birth": "1985-03-15",
        "email": "john.fisher@example.com",
        "phone": "(555) 123-4567",
        "address": "12 Harbor Road",
        "city": "Miami",
        "state": "fl",
        "zip_code": "33101",
        "emergency_contact": "Jane Fisher",
        "emergency_phone": "(555) 765-4321",
        "experience_level": "experienced"
    }


@pytest.fixture
def sample_permit_data():
    """Active Fall 2024 salmon permit with 187 of 500 used."""
    return {
        "season": "Fall 2024",
        "fish_type": "Salmon",
        "fishing_area": "Coastal Zone A",
        "start_date": date(2024, 9, 1),
        "end_date": date(2024, 11, 30),
        "status": "active",
        "application_date": date(2024, 8, 15),
        "quota_allowed": 500,
        "quota_used": 187
    }


@pytest.fixture
def sample_boat_data():
    """Active boat licensed through the end of 2024."""
    return {
        "name": "Sea Explorer",
        "registration_number": "FL-9876-AB",
        "vessel_type": "commercial",
        "length": 42,
        "home_port": "Miami Harbor",
        "license": issue_license(date(2024, 1, 1), 365),
        "insurance_expiry": date(2024, 11, 15),
        "license_status": "active",
        "application_date": date(2023, 12, 15)
    }


@pytest.fixture
def sample_permit(sample_permit_data):
    return Permit(**sample_permit_data)


@pytest.fixture
def sample_boat(sample_boat_data):
    return Boat(**sample_boat_data)
