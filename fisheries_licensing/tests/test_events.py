# SPDX-License-Identifier: Apache-2.0

"""
Tests for event publishing.
"""

from fisheries_licensing.models.enums import EventType
from fisheries_licensing.services.events import EventPublisher, EventRecorder


class TestEventPublisher:
    """Test publisher delivery semantics."""

    def test_emit_builds_event(self, sample_permit):
        publisher = EventPublisher()
        recorder = EventRecorder()
        publisher.subscribe(recorder)

        result = publisher.emit(EventType.QUOTA_WARNING_RAISED, sample_permit, {"usage_percentage": 85})

        assert result.success
        assert result.delivered == 1
        event = recorder.events[0]
        assert event.event_type == "quota_warning_raised"
        assert event.entity_id == sample_permit.id
        assert event.entity_type == "permit"
        assert event.data == {"usage_percentage": 85}

    def test_failing_handler_does_not_block_others(self, sample_boat):
        publisher = EventPublisher()
        recorder = EventRecorder()

        def broken_handler(event):
            raise RuntimeError("mail server down")

        publisher.subscribe(broken_handler)
        publisher.subscribe(recorder)

        result = publisher.emit(EventType.ENTITY_EXPIRED, sample_boat)

        assert not result.success
        assert result.failed == ["broken_handler"]
        assert len(recorder.events) == 1

    def test_unsubscribe(self, sample_boat):
        publisher = EventPublisher()
        recorder = EventRecorder()
        publisher.subscribe(recorder)
        publisher.unsubscribe(recorder)

        assert publisher.emit(EventType.ENTITY_EXPIRED, sample_boat).delivered == 0
        assert recorder.events == []

    def test_recorder_filters_and_clears(self, sample_boat, sample_permit):
        publisher = EventPublisher()
        recorder = EventRecorder()
        publisher.subscribe(recorder)

        publisher.emit(EventType.APPLICATION_SUBMITTED, sample_boat)
        publisher.emit(EventType.ENTITY_EXPIRED, sample_permit)

        assert [e.entity_id for e in recorder.of_type(EventType.ENTITY_EXPIRED)] == [sample_permit.id]
        recorder.clear()
        assert recorder.events == []
