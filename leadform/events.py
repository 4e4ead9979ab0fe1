"""Event stream for the lead intake form.

The store and the orchestrator emit a typed FormEvent for every edit,
validation outcome and submission transition. Events are optional
observability: nothing in the form pipeline depends on a listener being
attached.

Payloads never carry field values, only field names and outcomes.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional
import json
import logging
import uuid

from .types import EventType, SubmissionPhase

logger = logging.getLogger(__name__)

# Events kept per emitter; the oldest are dropped first
DEFAULT_HISTORY_LIMIT = 1000


@dataclass(frozen=True)
class FormEvent:
    """A single event in the form lifecycle.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f2a...")
        type: Event type from EventType enum
        ts: UTC timestamp when the event occurred
        phase: Submission phase after this event, None for form edits
        payload: Optional event-specific data (field name, flagged fields...)

    Examples:
        >>> event = FormEvent.create(
        ...     EventType.FIELD_UPDATED,
        ...     SubmissionPhase.IDLE,
        ...     {"field": "telefone"},
        ... )
        >>> event.to_dict()["type"]
        'field.updated'
    """
    event_id: str
    type: EventType
    ts: datetime
    phase: Optional[SubmissionPhase] = None
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Normalize string enums."""
        if isinstance(self.type, str) and not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))
        if isinstance(self.phase, str) and not isinstance(self.phase, SubmissionPhase):
            object.__setattr__(self, "phase", SubmissionPhase(self.phase))

    @classmethod
    def create(
        cls,
        type: EventType,
        phase: Optional[SubmissionPhase] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> "FormEvent":
        """Build an event stamped with a fresh id and the current UTC time."""
        return cls(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=type,
            ts=datetime.now(timezone.utc),
            phase=phase,
            payload=payload,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "ts": self.ts.isoformat(),
        }
        if self.phase is not None:
            result["phase"] = self.phase.value
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to a single-line JSON string."""
        return json.dumps(self.to_dict(), separators=(',', ':'), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormEvent":
        """Create FormEvent from dictionary (camelCase keys)."""
        ts = datetime.fromisoformat(data["ts"].replace('Z', '+00:00'))
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            ts=ts,
            phase=data.get("phase"),
            payload=data.get("payload"),
        )


EventListener = Callable[[FormEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously when events are emitted.
"""


class EventEmitter:
    """Dispatches FormEvents to typed and wildcard listeners.

    Listeners run in registration order, type-specific ones first. A listener
    that raises is logged and skipped; the remaining listeners still run.

    Only the last ``history_limit`` events are kept for ``get_events``; pass
    0 to disable recording.

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.FIELD_UPDATED, seen.append)
        >>> emitter.emit(FormEvent.create(EventType.FIELD_UPDATED, SubmissionPhase.IDLE))
        >>> len(seen)
        1
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []
        self._history: Deque[FormEvent] = deque(maxlen=history_limit)

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type; unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe a wildcard listener; unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Record ``event`` and dispatch it to every matching listener."""
        self._history.append(event)
        for listener in self._listeners.get(event.type, []) + self._any_listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed for %s", event.type.value)

    def get_events(self, event_type: Optional[EventType] = None) -> List[FormEvent]:
        """Emitted events in order, optionally filtered by type."""
        if event_type is None:
            return list(self._history)
        return [event for event in self._history if event.type == event_type]

    def clear(self) -> None:
        """Remove all listeners and recorded events."""
        self._listeners.clear()
        self._any_listeners.clear()
        self._history.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count listeners for ``event_type``, or all listeners when None."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(l) for l in self._listeners.values())


__all__ = [
    "FormEvent",
    "EventListener",
    "EventEmitter",
    "DEFAULT_HISTORY_LIMIT",
]
