# SPDX-License-Identifier: Apache-2.0

"""
Tests for settings and observability setup.
"""

import logging
import pytest
from datetime import date
from pydantic import ValidationError
from opentelemetry.sdk.trace import TracerProvider

from fisheries_licensing.config import LicensingSettings, Season
from fisheries_licensing.observability import setup_observability


class TestLicensingSettings:
    """Test settings defaults and environment loading."""

    def test_defaults(self):
        settings = LicensingSettings()

        assert settings.license_term_days == 365
        assert settings.expiry_warning_days == 30
        assert settings.quota_warning_percent == 80
        assert "Salmon" in settings.fish_types
        assert "Protected Waters" in settings.fishing_areas
        assert settings.vessel_types == ["commercial", "charter", "recreational", "sport"]
        assert settings.find_season("fall-2025").start_date == date(2025, 9, 1)
        assert settings.find_season("winter-1999") is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('LICENSE_TERM_DAYS', '730')
        monkeypatch.setenv('FISH_TYPES', 'Cod, Haddock ,')
        monkeypatch.setenv('OTEL_ENABLED', 'TRUE')
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        monkeypatch.delenv('MONGODB_URI', raising=False)

        settings = LicensingSettings.from_env()

        assert settings.license_term_days == 730
        assert settings.fish_types == ["Cod", "Haddock"]
        assert settings.otel_enabled is True
        assert settings.log_level == "DEBUG"
        assert settings.mongodb_uri is None

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            LicensingSettings(quota_warning_percent=120)

        with pytest.raises(ValidationError):
            LicensingSettings(log_level="chatty")

        with pytest.raises(ValidationError):
            Season(id="x", name="X", start_date=date(2025, 5, 1), end_date=date(2025, 4, 1))


class TestObservability:
    """Test logging and tracing setup."""

    def test_tracing_disabled(self):
        settings = LicensingSettings(environment='test', log_level='WARNING')

        assert setup_observability(settings) is None
        assert logging.getLogger('fisheries_licensing').level == logging.WARNING

    def test_tracing_enabled(self):
        settings = LicensingSettings(environment='staging', otel_enabled=True)

        provider = setup_observability(settings)

        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "fisheries-licensing-core"
        provider.shutdown()
