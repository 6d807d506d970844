# SPDX-License-Identifier: Apache-2.0

"""
Runtime configuration for the licensing core.

Settings are read from environment variables with defaults matching the
authority's current catalogue of species, areas and seasons.
"""

import os
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .models.enums import VesselType


DEFAULT_FISH_TYPES = [
    "Salmon", "Crab", "Lobster", "Tuna", "Cod", "Halibut", "Shrimp", "Mackerel"
]

DEFAULT_FISHING_AREAS = [
    "Coastal Zone A", "Coastal Zone B", "Deep Water Zone A", "Deep Water Zone B",
    "Offshore Zone C", "Protected Waters", "International Waters"
]

DEFAULT_VESSEL_TYPES = [vessel_type.value for vessel_type in VesselType]


class Season(BaseModel):
    """Fishing season offered to permit applicants."""

    id: str = Field(..., description="Season identifier, e.g. spring-2025")
    name: str = Field(..., description="Display label")
    start_date: date = Field(..., description="Season opening")
    end_date: date = Field(..., description="Season closing")

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError('Season end date must be after start date')
        return self


DEFAULT_SEASONS = [
    Season(id="spring-2025", name="Spring 2025",
           start_date=date(2025, 3, 1), end_date=date(2025, 5, 31)),
    Season(id="summer-2025", name="Summer 2025",
           start_date=date(2025, 6, 1), end_date=date(2025, 8, 31)),
    Season(id="fall-2025", name="Fall 2025",
           start_date=date(2025, 9, 1), end_date=date(2025, 11, 30)),
]


def _split_env(name: str, default: List[str]) -> List[str]:
    """Read a comma-separated list from the environment."""
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(',') if item.strip()]


class LicensingSettings(BaseModel):
    """Licensing core settings."""

    environment: str = Field(default="development", description="Deployment environment")
    license_term_days: int = Field(default=365, gt=0, description="Validity of an issued license")
    expiry_warning_days: int = Field(default=30, ge=0, description="Expiry warning window")
    quota_warning_percent: int = Field(default=80, ge=0, le=100, description="Near-limit threshold")
    min_fisher_age: int = Field(default=16, ge=0, description="Minimum age to register")
    fish_types: List[str] = Field(default_factory=lambda: list(DEFAULT_FISH_TYPES))
    fishing_areas: List[str] = Field(default_factory=lambda: list(DEFAULT_FISHING_AREAS))
    vessel_types: List[str] = Field(default_factory=lambda: list(DEFAULT_VESSEL_TYPES))
    seasons: List[Season] = Field(default_factory=lambda: list(DEFAULT_SEASONS))
    mongodb_uri: Optional[str] = Field(None, description="MongoDB URI for durable storage")
    mongodb_database: str = Field(default="fisheries_licensing", description="MongoDB database")
    mongodb_collection: str = Field(default="entities", description="MongoDB collection")
    otel_enabled: bool = Field(default=False, description="Enable OpenTelemetry tracing")
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @classmethod
    def from_env(cls) -> "LicensingSettings":
        """Build settings from environment variables."""
        return cls(
            environment=os.getenv('ENVIRONMENT', 'development'),
            license_term_days=int(os.getenv('LICENSE_TERM_DAYS', '365')),
            expiry_warning_days=int(os.getenv('EXPIRY_WARNING_DAYS', '30')),
            quota_warning_percent=int(os.getenv('QUOTA_WARNING_PERCENT', '80')),
            min_fisher_age=int(os.getenv('MIN_FISHER_AGE', '16')),
            fish_types=_split_env('FISH_TYPES', DEFAULT_FISH_TYPES),
            fishing_areas=_split_env('FISHING_AREAS', DEFAULT_FISHING_AREAS),
            vessel_types=_split_env('VESSEL_TYPES', DEFAULT_VESSEL_TYPES),
            mongodb_uri=os.getenv('MONGODB_URI') or None,
            mongodb_database=os.getenv('MONGODB_DATABASE', 'fisheries_licensing'),
            mongodb_collection=os.getenv('MONGODB_COLLECTION', 'entities'),
            otel_enabled=os.getenv('OTEL_ENABLED', 'false').lower() == 'true',
            log_level=os.getenv('LOG_LEVEL', 'INFO')
        )

    def find_season(self, season_id: str) -> Optional[Season]:
        """Look up a season by identifier."""
        for season in self.seasons:
            if season.id == season_id:
                return season
        return None
