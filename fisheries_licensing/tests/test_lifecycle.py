# SPDX-License-Identifier: Apache-2.0

"""
Tests for lifecycle derivation and reviewer transitions.
"""

import pytest
from datetime import date, datetime

from fisheries_licensing.domain import lifecycle
from fisheries_licensing.domain.errors import InvalidTransition, NotFound, ValidationError
from fisheries_licensing.models.entities import Boat, Permit
from fisheries_licensing.models.enums import EventType


class TestEffectiveStatus:
    """Test effective status derivation."""

    def test_active_permit_past_end_date_is_expired(self, sample_permit):
        """Test stored active permit reads as expired after its end date."""
        assert lifecycle.effective_status(sample_permit, date(2024, 9, 15)) == "active"
        summer = sample_permit.model_copy(update={
            "start_date": date(2024, 6, 1),
            "end_date": date(2024, 8, 31)
        })
        assert lifecycle.effective_status(summer, date(2024, 9, 15)) == "expired"

    def test_expired_on_end_date(self, sample_permit):
        """Test reference date equal to end date counts as expired."""
        assert lifecycle.effective_status(sample_permit, date(2024, 11, 30)) == "expired"
        assert lifecycle.effective_status(sample_permit, date(2024, 11, 29)) == "active"

    def test_pending_expires_too(self, sample_permit_data):
        """Test pending records expire when approval never came."""
        sample_permit_data["status"] = "pending"
        permit = Permit(**sample_permit_data)
        assert lifecycle.effective_status(permit, date(2025, 1, 1)) == "expired"

    def test_denied_never_overridden(self, sample_permit_data):
        """Test denied is kept regardless of dates."""
        sample_permit_data.update(status="denied", denial_reason="Area closed")
        permit = Permit(**sample_permit_data)

        assert lifecycle.effective_status(permit, date(2030, 1, 1)) == "denied"
        status = lifecycle.evaluate(permit, date(2024, 11, 20))
        assert status.effective_status == "denied"
        assert status.expiry_warning is False

    def test_datetime_reference(self, sample_boat):
        """Test datetime references use their calendar date."""
        reference = datetime(2024, 12, 31, 8, 0)
        assert lifecycle.effective_status(sample_boat, reference) == "expired"


class TestDaysUntilExpiry:
    """Test expiry countdown and warning flag."""

    def test_days_until_expiry(self):
        assert lifecycle.days_until_expiry(date(2024, 12, 31), date(2024, 12, 1)) == 30
        assert lifecycle.days_until_expiry(date(2024, 12, 31), date(2025, 1, 10)) == -10

    def test_partial_day_rounds_up(self):
        """Test sub-day remainders round up."""
        reference = datetime(2024, 12, 30, 12, 0)
        assert lifecycle.days_until_expiry(date(2024, 12, 31), reference) == 1

    def test_warning_window(self):
        assert lifecycle.is_expiry_warning(29) is True
        assert lifecycle.is_expiry_warning(0) is True
        assert lifecycle.is_expiry_warning(30) is False
        assert lifecycle.is_expiry_warning(-1) is False

    def test_evaluate_reports_warning(self, sample_boat):
        """Test evaluate combines status and advisory."""
        status = lifecycle.evaluate(sample_boat, date(2024, 12, 10))

        assert status.entity_type == "boat"
        assert status.effective_status == "active"
        assert status.days_until_expiry == 21
        assert status.expiry_warning is True
        assert status.is_expired is False

    def test_insurance_advisory(self, sample_boat):
        """Test boats report insurance lapsing inside the warning window."""
        status = lifecycle.evaluate(sample_boat, date(2024, 11, 1))

        assert status.insurance_days_until_expiry == 14
        assert status.insurance_warning is True
        assert status.expiry_warning is False

        lapsed = lifecycle.evaluate(sample_boat, date(2024, 11, 20))
        assert lapsed.insurance_days_until_expiry == -5
        assert lapsed.insurance_warning is False

    def test_permits_carry_no_insurance_advisory(self, sample_permit):
        status = lifecycle.evaluate(sample_permit, date(2024, 11, 20))

        assert status.insurance_days_until_expiry is None
        assert status.insurance_warning is False

    def test_evaluate_does_not_mutate(self, sample_boat):
        """Test derivation leaves stored state untouched."""
        lifecycle.evaluate(sample_boat, date(2025, 6, 1))
        assert sample_boat.license_status == "active"


class TestStatusTransitions:
    """Test the status state machines."""

    @pytest.mark.parametrize("entity_type,current,new", [
        ("boat", "pending", "active"),
        ("boat", "active", "expired"),
        ("boat", "pending", "expired"),
        ("permit", "pending", "denied"),
        ("permit", "pending", "active"),
        ("profile", "active", "suspended"),
        ("profile", "suspended", "active"),
    ])
    def test_allowed(self, entity_type, current, new):
        assert lifecycle.can_transition(entity_type, current, new) is True

    @pytest.mark.parametrize("entity_type,current,new", [
        ("boat", "pending", "denied"),
        ("boat", "expired", "active"),
        ("permit", "denied", "active"),
        ("permit", "expired", "pending"),
        ("permit", "active", "denied"),
        ("profile", "pending", "suspended"),
    ])
    def test_rejected(self, entity_type, current, new):
        with pytest.raises(InvalidTransition):
            lifecycle.ensure_transition(entity_type, current, new)


class TestLicenseTerms:
    """Test license issuance and renewal."""

    def test_issue_license(self):
        license = lifecycle.issue_license(date(2025, 1, 15), 365, "Boat License")
        assert license.expires_on == date(2026, 1, 15)
        assert license.license_type == "Boat License"

    def test_renew_extends_from_current_expiry(self):
        license = lifecycle.issue_license(date(2024, 1, 1), 365)
        renewed = lifecycle.renew_license(license, date(2024, 12, 1), 365)

        assert renewed.issued_on == date(2024, 1, 1)
        assert renewed.expires_on == date(2025, 12, 31)


class TestLifecycleService:
    """Test reviewer actions through the lifecycle service."""

    def test_status_of_unknown_id(self, core):
        with pytest.raises(NotFound):
            core.lifecycle.status_of("missing")

    def test_status_of_profile_not_time_bound(self, core, sample_fisher_registration):
        profile = core.applications.register_fisher(sample_fisher_registration)

        with pytest.raises(NotFound):
            core.lifecycle.status_of(profile.id)

    def test_approve_boat_issues_fresh_term(self, core, clock, sample_boat_application):
        """Test approval activates the boat and restarts its license term."""
        boat = core.applications.submit_boat_application(sample_boat_application)
        clock.advance(10)

        approved = core.lifecycle.approve(boat.id)

        assert approved.license_status == "active"
        assert approved.license.issued_on == date(2025, 1, 25)
        assert approved.license.expires_on == date(2026, 1, 25)
        assert core.lifecycle.effective_status(boat.id) == "active"

    def test_approve_twice_rejected(self, core, sample_permit_application):
        permit = core.applications.submit_permit_application(sample_permit_application)
        core.lifecycle.approve(permit.id)

        with pytest.raises(InvalidTransition):
            core.lifecycle.approve(permit.id)

    def test_approve_expired_rejected(self, core, clock, sample_permit_application):
        """Test approval after the season ended fails."""
        permit = core.applications.submit_permit_application(sample_permit_application)
        clock.current = date(2025, 6, 1)

        with pytest.raises(InvalidTransition):
            core.lifecycle.approve(permit.id)

        assert core.store.get(permit.id).status == "pending"

    def test_deny_expired_rejected(self, core, clock, sample_permit_application):
        """Test an expired permit cannot be turned into a denied one."""
        permit = core.applications.submit_permit_application(sample_permit_application)
        clock.current = date(2025, 6, 15)
        assert core.lifecycle.effective_status(permit.id) == "expired"

        with pytest.raises(InvalidTransition):
            core.lifecycle.deny(permit.id, "Season closed")

        assert core.store.get(permit.id).status == "pending"
        assert core.lifecycle.effective_status(permit.id) == "expired"

    def test_deny_permit(self, core, sample_permit_application):
        permit = core.applications.submit_permit_application(sample_permit_application)

        denied = core.lifecycle.deny(permit.id, "Quota for the area exhausted")

        assert denied.status == "denied"
        assert denied.denial_reason == "Quota for the area exhausted"
        with pytest.raises(InvalidTransition):
            core.lifecycle.approve(permit.id)

    def test_deny_requires_reason(self, core, sample_permit_application):
        permit = core.applications.submit_permit_application(sample_permit_application)

        with pytest.raises(ValidationError) as exc_info:
            core.lifecycle.deny(permit.id, "  ")

        assert exc_info.value.field == "reason"

    def test_deny_active_permit_rejected(self, core, sample_permit_application):
        permit = core.applications.submit_permit_application(sample_permit_application)
        core.lifecycle.approve(permit.id)

        with pytest.raises(InvalidTransition):
            core.lifecycle.deny(permit.id, "Changed our mind")

    def test_deny_boat_not_found(self, core, sample_boat_application):
        boat = core.applications.submit_boat_application(sample_boat_application)

        with pytest.raises(NotFound):
            core.lifecycle.deny(boat.id, "Boats cannot be denied")

    def test_profile_approval_assigns_fisher_id(self, core, sample_fisher_registration):
        """Test approved profiles receive sequential digital ID numbers."""
        first = core.applications.register_fisher(sample_fisher_registration)
        second = core.applications.register_fisher(
            dict(sample_fisher_registration, email="second@example.com")
        )

        assert core.lifecycle.approve(first.id).fisher_id == "FID-2025-001"
        assert core.lifecycle.approve(second.id).fisher_id == "FID-2025-002"

    def test_suspend_and_reinstate_profile(self, core, sample_fisher_registration):
        profile = core.applications.register_fisher(sample_fisher_registration)

        with pytest.raises(InvalidTransition):
            core.lifecycle.suspend(profile.id)

        core.lifecycle.approve(profile.id)
        assert core.lifecycle.suspend(profile.id).status == "suspended"
        assert core.lifecycle.reinstate(profile.id).status == "active"

        with pytest.raises(InvalidTransition):
            core.lifecycle.reinstate(profile.id)

    def test_renew_license(self, core, clock, sample_boat_application):
        boat = core.applications.submit_boat_application(sample_boat_application)

        with pytest.raises(InvalidTransition):
            core.lifecycle.renew_license(boat.id)

        core.lifecycle.approve(boat.id)
        renewed = core.lifecycle.renew_license(boat.id)

        assert renewed.license.expires_on == date(2027, 1, 15)

    def test_renew_expired_rejected(self, core, clock, sample_boat_application):
        boat = core.applications.submit_boat_application(sample_boat_application)
        core.lifecycle.approve(boat.id)
        clock.current = date(2026, 2, 1)

        with pytest.raises(InvalidTransition):
            core.lifecycle.renew_license(boat.id)

    def test_expiring_soon(self, core, clock, sample_boat_application):
        boat = core.applications.submit_boat_application(sample_boat_application)
        core.lifecycle.approve(boat.id)
        assert core.lifecycle.expiring_soon() == []

        clock.current = date(2026, 1, 1)
        warnings = core.lifecycle.expiring_soon()

        assert [status.entity_id for status in warnings] == [boat.id]
        assert warnings[0].days_until_expiry == 14

    def test_expiring_soon_includes_insurance(self, core, clock, sample_boat_application):
        boat = core.applications.submit_boat_application(sample_boat_application)
        core.lifecycle.approve(boat.id)
        clock.current = date(2025, 10, 26)

        warnings = core.lifecycle.expiring_soon()

        assert [status.entity_id for status in warnings] == [boat.id]
        assert warnings[0].expiry_warning is False
        assert warnings[0].insurance_days_until_expiry == 20
        assert warnings[0].insurance_warning is True


class TestSweepExpired:
    """Test persisting time-driven expiry."""

    def test_sweep_persists_and_emits(self, core, clock, recorder, sample_permit_data):
        """Test stored active permits past their end are marked expired once."""
        permit = core.store.create(Permit(**sample_permit_data))
        clock.current = date(2024, 12, 5)

        assert core.lifecycle.sweep_expired() == [permit.id]
        assert core.store.get(permit.id).status == "expired"

        expired_events = recorder.of_type(EventType.ENTITY_EXPIRED)
        assert len(expired_events) == 1
        assert expired_events[0].entity_id == permit.id
        assert expired_events[0].data["previous_status"] == "active"

        assert core.lifecycle.sweep_expired() == []
        assert len(recorder.of_type(EventType.ENTITY_EXPIRED)) == 1

    def test_sweep_skips_denied_and_current(self, core, clock, sample_permit_data, sample_boat_data):
        denied = core.store.create(Permit(**dict(
            sample_permit_data, status="pending", denial_reason=None
        )))
        clock.current = date(2024, 10, 1)
        core.lifecycle.deny(denied.id, "Protected waters closed")
        boat = core.store.create(Boat(**sample_boat_data))

        assert core.lifecycle.sweep_expired() == []
        assert core.store.get(boat.id).license_status == "active"
