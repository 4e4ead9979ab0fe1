"""Lead intake form pipeline.

leadform is the data pipeline behind a lead-qualification intake form:
- Field formatters that mask raw keystrokes (BRL currency, phone, free text)
- A validation engine deriving per-field error flags from a form snapshot
- A form state store with optimistic clear-on-edit
- A submission orchestrator that validates, posts the snapshot to a webhook
  and hands off to the results view

Basic usage:
    >>> from leadform import FormStateStore, FormField
    >>> store = FormStateStore()
    >>> store.update(FormField.AVERAGE_TICKET, "5000")
    >>> store.snapshot().average_ticket
    'R$ 50,00'
"""

__version__ = "0.1.0"
__author__ = "Leadform Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from leadform.orchestrator import SubmissionOrchestrator, SubmitResult
from leadform.snapshot import FormSnapshot
from leadform.store import FormStateStore
from leadform.types import FailurePolicy, FormField, SubmissionPhase
from leadform.validation import ErrorSet, ValidationEngine, validate

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "ErrorSet",
    "FailurePolicy",
    "FormField",
    "FormSnapshot",
    "FormStateStore",
    "SubmissionOrchestrator",
    "SubmissionPhase",
    "SubmitResult",
    "ValidationEngine",
    "validate",
]
