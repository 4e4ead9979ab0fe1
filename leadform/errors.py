"""Error types for the lead intake form.

Field validation problems are not exceptions: they live in the ErrorSet
computed by ``leadform.validation``. This module covers the rest:

- LeadFormError: base class for everything raised by this package
- UnknownFieldError: an update targeted a field the store does not edit that way
- SubmissionInProgressError: submit was triggered while it is disabled
- InvalidPayloadError: a serialized snapshot broke the outbound payload schema
- SubmissionTransportError: the outbound webhook call failed
- SubmissionError: the record of a failed call surfaced to the UI
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from leadform.types import SubmissionPhase


class LeadFormError(Exception):
    """Base class for leadform errors."""


class UnknownFieldError(LeadFormError, KeyError):
    """Raised when an update names a field that cannot be set as a value."""

    def __init__(self, field: Any):
        self.field = field
        super().__init__(f"Unknown or non-scalar form field: {field!r}")

    def __str__(self) -> str:
        return self.args[0]


class SubmissionInProgressError(LeadFormError):
    """Raised when submit is called outside the idle phase.

    Attributes:
        phase: The phase the orchestrator was in
    """

    def __init__(self, phase: SubmissionPhase):
        self.phase = phase
        super().__init__(
            f"Cannot submit while the form is '{phase.value}'; "
            f"submit is only accepted from 'idle'"
        )


class InvalidPayloadError(LeadFormError):
    """Raised when a serialized snapshot does not match the payload schema.

    Attributes:
        path: Dot-notation path of the offending key ("" for the root)
    """

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class SubmissionTransportError(LeadFormError):
    """Raised by the webhook client when the submission call does not succeed.

    Attributes:
        status_code: HTTP status of the response, if one was received
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class WebhookStatusError(SubmissionTransportError):
    """The webhook answered with a non-2xx status."""


class WebhookTransportError(SubmissionTransportError):
    """The request never got a response (connection, DNS, timeout...)."""


@dataclass(frozen=True)
class SubmissionError:
    """User-facing record of a failed submission.

    Attributes:
        message: Short description of what went wrong
        status_code: HTTP status, when the webhook answered

    Examples:
        >>> SubmissionError(message="Webhook returned 502", status_code=502).to_dict()
        {'message': 'Webhook returned 502', 'statusCode': 502}
    """
    message: str
    status_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"message": self.message}
        if self.status_code is not None:
            result["statusCode"] = self.status_code
        return result

    @classmethod
    def from_exception(cls, exc: SubmissionTransportError) -> "SubmissionError":
        return cls(message=str(exc), status_code=exc.status_code)


__all__ = [
    "LeadFormError",
    "UnknownFieldError",
    "SubmissionInProgressError",
    "InvalidPayloadError",
    "SubmissionTransportError",
    "WebhookStatusError",
    "WebhookTransportError",
    "SubmissionError",
]
