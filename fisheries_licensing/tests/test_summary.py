# SPDX-License-Identifier: Apache-2.0

"""
Tests for the dashboard summary.
"""

from datetime import date

from fisheries_licensing.domain.summary import summarize
from fisheries_licensing.models.entities import Boat, Permit


class TestDashboardSummary:
    """Test dashboard counts use effective status."""

    def test_summarize(self, sample_boat_data, sample_permit_data):
        boats = [
            Boat(**sample_boat_data),
            Boat(**dict(sample_boat_data, registration_number="FL-5432-CD", license_status="pending")),
        ]
        permits = [
            Permit(**sample_permit_data),
            Permit(**dict(sample_permit_data, status="pending", quota_used=0,
                          start_date=date(2024, 12, 1), end_date=date(2025, 2, 28))),
            Permit(**dict(sample_permit_data, status="active", quota_used=856, quota_allowed=1000,
                          start_date=date(2024, 6, 1), end_date=date(2024, 8, 31))),
        ]

        summary = summarize(boats + permits, date(2024, 12, 10))

        assert summary.total_boats == 2
        assert summary.active_boats == 1
        assert summary.boats_expiring_soon == 2
        assert summary.active_permits == 0
        assert summary.pending_permits == 1
        assert summary.total_quota_used == 187 + 856
        assert summary.near_limit_permit_ids == [permits[2].id]

    def test_insurance_expiring_count(self, sample_boat_data):
        boats = [
            Boat(**sample_boat_data),
            Boat(**dict(sample_boat_data, registration_number="FL-5432-CD",
                        insurance_expiry=date(2025, 6, 30))),
        ]

        summary = summarize(boats, date(2024, 11, 1))

        assert summary.boats_insurance_expiring_soon == 1
        assert summary.boats_expiring_soon == 0

    def test_core_dashboard(self, core, sample_boat_application, sample_permit_application):
        core.applications.submit_boat_application(sample_boat_application)
        core.applications.submit_permit_application(sample_permit_application)

        summary = core.dashboard()

        assert summary.total_boats == 1
        assert summary.active_boats == 0
        assert summary.pending_permits == 1
