"""Unit tests for the event system.

Tests cover:
- FormEvent creation and serialization
- EventEmitter subscriptions, dispatch order and history
- Listener failure isolation
"""

import json
import logging
from datetime import datetime, timezone

from leadform.events import EventEmitter, FormEvent
from leadform.types import EventType, SubmissionPhase


def _event(event_type=EventType.FIELD_UPDATED, phase=None, payload=None) -> FormEvent:
    return FormEvent.create(event_type, phase, payload)


class TestFormEvent:
    """Test FormEvent creation and serialization."""

    def test_create_sets_id_and_timestamp(self):
        """Should stamp an evt_ id and a UTC timestamp."""
        event = _event()
        assert event.event_id.startswith("evt_")
        assert event.ts.tzinfo == timezone.utc

    def test_ids_are_unique(self):
        """Should generate distinct ids."""
        assert _event().event_id != _event().event_id

    def test_string_enums_normalized(self):
        """Should convert plain strings to enums."""
        event = FormEvent(
            event_id="evt_1",
            type="submission.started",
            ts=datetime.now(timezone.utc),
            phase="submitting",
        )
        assert event.type is EventType.SUBMISSION_STARTED
        assert event.phase is SubmissionPhase.SUBMITTING

    def test_to_dict_omits_empty_optionals(self):
        """Should leave out phase and payload when unset."""
        data = _event().to_dict()
        assert set(data) == {"eventId", "type", "ts"}

    def test_to_dict_full(self):
        """Should serialize every set attribute."""
        event = _event(EventType.SUBMISSION_FAILED, SubmissionPhase.IDLE, {"statusCode": 502})
        data = event.to_dict()
        assert data["type"] == "submission.failed"
        assert data["phase"] == "idle"
        assert data["payload"] == {"statusCode": 502}

    def test_to_jsonl_single_line(self):
        """Should produce compact single-line JSON."""
        line = _event(payload={"field": "outraFuncao"}).to_jsonl()
        assert "\n" not in line
        assert json.loads(line)["payload"] == {"field": "outraFuncao"}

    def test_from_dict_round_trip(self):
        """Should restore an event from its dict form."""
        event = _event(EventType.VALIDATION_FAILED, SubmissionPhase.IDLE, {"fields": ["telefone"]})
        assert FormEvent.from_dict(event.to_dict()) == event


class TestEventEmitter:
    """Test subscriptions and dispatch."""

    def test_typed_listener_receives_matching_events(self):
        """Should only call typed listeners for their type."""
        emitter = EventEmitter()
        seen = []
        emitter.on(EventType.FIELD_UPDATED, seen.append)
        emitter.emit(_event(EventType.FIELD_UPDATED))
        emitter.emit(_event(EventType.ROLE_TOGGLED))
        assert [e.type for e in seen] == [EventType.FIELD_UPDATED]

    def test_wildcard_listener_receives_all(self):
        """Should call wildcard listeners for every event."""
        emitter = EventEmitter()
        seen = []
        emitter.on_any(seen.append)
        emitter.emit(_event(EventType.FIELD_UPDATED))
        emitter.emit(_event(EventType.SUBMISSION_STARTED))
        assert len(seen) == 2

    def test_typed_before_wildcard(self):
        """Should call typed listeners before wildcard ones."""
        emitter = EventEmitter()
        order = []
        emitter.on_any(lambda e: order.append("any"))
        emitter.on(EventType.FIELD_UPDATED, lambda e: order.append("typed"))
        emitter.emit(_event())
        assert order == ["typed", "any"]

    def test_off_removes_listener(self):
        """Should stop calling removed listeners."""
        emitter = EventEmitter()
        seen = []
        emitter.on(EventType.FIELD_UPDATED, seen.append)
        emitter.on_any(seen.append)
        emitter.off(EventType.FIELD_UPDATED, seen.append)
        emitter.off_any(seen.append)
        emitter.emit(_event())
        assert seen == []
        assert emitter.listener_count() == 0

    def test_off_unknown_listener_ignored(self):
        """Should ignore removal of a listener that was never added."""
        emitter = EventEmitter()
        emitter.off(EventType.FIELD_UPDATED, print)
        emitter.off_any(print)

    def test_listener_count(self):
        """Should count typed and wildcard listeners."""
        emitter = EventEmitter()
        emitter.on(EventType.FIELD_UPDATED, print)
        emitter.on(EventType.ROLE_TOGGLED, print)
        emitter.on_any(print)
        assert emitter.listener_count(EventType.FIELD_UPDATED) == 1
        assert emitter.listener_count() == 3

    def test_history_and_filter(self):
        """Should record emitted events in order."""
        emitter = EventEmitter()
        emitter.emit(_event(EventType.FIELD_UPDATED))
        emitter.emit(_event(EventType.SUBMISSION_STARTED))
        assert [e.type for e in emitter.get_events()] == [
            EventType.FIELD_UPDATED,
            EventType.SUBMISSION_STARTED,
        ]
        assert len(emitter.get_events(EventType.SUBMISSION_STARTED)) == 1

    def test_history_keeps_latest_events(self):
        """Should drop the oldest events past the history limit."""
        emitter = EventEmitter(history_limit=3)
        events = [_event() for _ in range(5)]
        for event in events:
            emitter.emit(event)
        assert emitter.get_events() == events[2:]

    def test_history_disabled_still_dispatches(self):
        """Should record nothing with a zero limit but still call listeners."""
        emitter = EventEmitter(history_limit=0)
        seen = []
        emitter.on_any(seen.append)
        emitter.emit(_event())
        assert emitter.get_events() == []
        assert len(seen) == 1

    def test_clear(self):
        """Should drop listeners and history."""
        emitter = EventEmitter()
        emitter.on_any(print)
        emitter.emit(_event())
        emitter.clear()
        assert emitter.listener_count() == 0
        assert emitter.get_events() == []


class TestListenerFailures:
    """Test listener error isolation."""

    def test_failing_listener_is_logged_and_skipped(self, caplog):
        """Should log the failure and keep dispatching."""
        emitter = EventEmitter()
        seen = []

        def broken(event):
            raise RuntimeError("listener bug")

        emitter.on(EventType.FIELD_UPDATED, broken)
        emitter.on_any(seen.append)

        with caplog.at_level(logging.ERROR, logger="leadform.events"):
            emitter.emit(_event())

        assert len(seen) == 1
        assert "Event listener failed for field.updated" in caplog.text
