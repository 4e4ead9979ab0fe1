"""Submission orchestrator for the lead intake form.

This module provides the SubmissionOrchestrator that drives the submit action:
it validates the store's snapshot, writes errors back when the form is
incomplete, and otherwise sends the snapshot to the webhook and hands off to
the results view.

Usage:
    >>> import asyncio
    >>> store = FormStateStore()
    >>> orchestrator = SubmissionOrchestrator(
    ...     store,
    ...     WebhookClient("https://example.com/hook"),
    ...     advance_to_results=lambda: None,
    ... )
    >>> result = asyncio.run(orchestrator.submit())
    >>> result.submitted, orchestrator.phase
    (False, <SubmissionPhase.IDLE: 'idle'>)
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import httpx

from leadform.config import LeadFormSettings, get_settings
from leadform.errors import (
    SubmissionError,
    SubmissionInProgressError,
    SubmissionTransportError,
)
from leadform.events import EventEmitter, FormEvent
from leadform.state_machine import SubmissionStateMachine
from leadform.store import FormStateStore
from leadform.types import EventType, FailurePolicy, SubmissionPhase
from leadform.validation import ErrorSet, ValidationEngine, payload_errors
from leadform.webhook import WebhookClient

logger = logging.getLogger(__name__)

AdvanceToResults = Callable[[], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one submit attempt.

    Attributes:
        phase: Orchestrator phase after the attempt
        errors: Validation flags computed for the attempt
        submitted: Whether the webhook accepted the payload
        payload: The body that was sent, if validation passed
        error: Transport failure surfaced to the UI, if any
    """
    phase: SubmissionPhase
    errors: ErrorSet
    submitted: bool = False
    payload: Optional[Dict[str, Any]] = None
    error: Optional[SubmissionError] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "phase": self.phase.value,
            "submitted": self.submitted,
            "errors": self.errors.to_dict(),
        }
        if self.payload is not None:
            result["payload"] = self.payload
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


class SubmissionOrchestrator:
    """State machine behind the form's submit button.

    Only one submission can be in flight: submit is accepted from ``idle``
    only. The payload is built from the snapshot taken when submit starts, so
    edits made while the request is pending do not change what is sent.

    Attributes:
        store: The form state store being submitted
        client: Webhook client performing the outbound call
        failure_policy: Phase to land in after a failed call

    Examples:
        >>> orchestrator = SubmissionOrchestrator(
        ...     FormStateStore(),
        ...     WebhookClient("https://example.com/hook"),
        ...     advance_to_results=lambda: None,
        ... )
        >>> orchestrator.can_submit
        True
    """

    def __init__(
        self,
        store: FormStateStore,
        client: WebhookClient,
        advance_to_results: AdvanceToResults,
        *,
        engine: Optional[ValidationEngine] = None,
        failure_policy: FailurePolicy = FailurePolicy.RETURN_TO_IDLE,
        emitter: Optional[EventEmitter] = None,
    ):
        self.store = store
        self.client = client
        self.failure_policy = failure_policy
        self._advance_to_results = advance_to_results
        self._engine = engine or ValidationEngine()
        self._emitter = emitter
        self._state_machine = SubmissionStateMachine()
        self._submission_error: Optional[SubmissionError] = None

    @classmethod
    def from_settings(
        cls,
        store: FormStateStore,
        advance_to_results: AdvanceToResults,
        settings: Optional[LeadFormSettings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        emitter: Optional[EventEmitter] = None,
    ) -> "SubmissionOrchestrator":
        """Build an orchestrator wired from LeadFormSettings."""
        settings = settings or get_settings()
        client = WebhookClient(
            settings.webhook_url,
            timeout=settings.timeout_seconds,
            http_client=http_client,
        )
        return cls(
            store,
            client,
            advance_to_results,
            engine=ValidationEngine(settings.flag_cost_other_without_selection),
            failure_policy=settings.failure_policy,
            emitter=emitter,
        )

    @property
    def phase(self) -> SubmissionPhase:
        return self._state_machine.phase

    @property
    def submission_error(self) -> Optional[SubmissionError]:
        """Last transport failure, until the next submit attempt."""
        return self._submission_error

    @property
    def can_submit(self) -> bool:
        """Whether the submit trigger should be enabled."""
        return self.phase == SubmissionPhase.IDLE

    async def submit(self) -> SubmitResult:
        """Validate the form and, if it is complete, send it.

        Returns:
            SubmitResult describing the attempt

        Raises:
            SubmissionInProgressError: If called outside the idle phase
        """
        if not self.can_submit:
            raise SubmissionInProgressError(self.phase)

        self._submission_error = None
        snapshot = self.store.snapshot()
        errors = self._engine.validate(snapshot, self.store.show_other_role_input)
        if errors.has_errors:
            return self._reject(errors)

        # Values pasted past the key guard (e.g. "1e5") only show up here
        payload = snapshot.to_payload()
        errors = payload_errors(payload)
        if errors.has_errors:
            return self._reject(errors)

        self.store.set_errors(errors)
        self._emit(EventType.VALIDATION_PASSED)

        self._state_machine.transition_to(SubmissionPhase.SUBMITTING)
        self._emit(EventType.SUBMISSION_STARTED)

        try:
            await self.client.post_json(payload)
        except SubmissionTransportError as exc:
            logger.error("Form submission failed: %s", exc, exc_info=True)
            error = SubmissionError.from_exception(exc)
            self._fail(error)
            return SubmitResult(phase=self.phase, errors=errors, payload=payload, error=error)
        except Exception as exc:
            self._fail(SubmissionError(message=f"Unexpected error: {type(exc).__name__}"))
            raise

        self._state_machine.transition_to(SubmissionPhase.SUCCESS)
        self._emit(EventType.SUBMISSION_SUCCEEDED)
        outcome = self._advance_to_results()
        if inspect.isawaitable(outcome):
            await outcome
        return SubmitResult(phase=self.phase, errors=errors, submitted=True, payload=payload)

    def reset(self) -> None:
        """Leave the held ``failed`` phase so the user can submit again."""
        self._state_machine.transition_to(SubmissionPhase.IDLE)
        self._submission_error = None
        self._emit(EventType.SUBMISSION_RESET)

    async def aclose(self) -> None:
        """Close the webhook client (a no-op for an injected HTTP client)."""
        await self.client.aclose()

    async def __aenter__(self) -> "SubmissionOrchestrator":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _reject(self, errors: ErrorSet) -> SubmitResult:
        flagged = [field.value for field in errors.invalid_fields]
        logger.warning("Form has invalid fields: %s", ", ".join(flagged))
        self.store.set_errors(errors)
        self._emit(EventType.VALIDATION_FAILED, {"fields": flagged})
        return SubmitResult(phase=self.phase, errors=errors)

    def _fail(self, error: SubmissionError) -> None:
        if self.failure_policy == FailurePolicy.HOLD_FAILED:
            target = SubmissionPhase.FAILED
        else:
            target = SubmissionPhase.IDLE
        self._state_machine.transition_to(target)
        self._submission_error = error
        self._emit(EventType.SUBMISSION_FAILED, error.to_dict())

    def _emit(self, event_type: EventType, payload: Optional[Dict[str, Any]] = None) -> None:
        if self._emitter is not None:
            self._emitter.emit(FormEvent.create(event_type, self.phase, payload))


__all__ = [
    "SubmitResult",
    "SubmissionOrchestrator",
]
