"""Core type definitions for the lead intake form.

This module defines the fundamental types used throughout the leadform package:
- SubmissionPhase: Lifecycle phases of the submit action
- FailurePolicy: What the orchestrator does after a failed webhook call
- EventType: Audit event types for the event stream
- FormField: Form fields and their wire (payload) keys
- Option catalogs: the fixed choices offered by the form

The option values are the exact strings shown to the user and sent to the
webhook, so they are kept in the form's language (pt-BR).
"""

from enum import Enum
from typing import Tuple


class SubmissionPhase(str, Enum):
    """Phases of the submission state machine.

    Terminal phase: success. ``failed`` is only reached under
    ``FailurePolicy.HOLD_FAILED`` and is left through an explicit reset.
    """
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class FailurePolicy(str, Enum):
    """Behavior after the outbound submission call fails.

    RETURN_TO_IDLE lets the user submit again immediately. HOLD_FAILED keeps
    the orchestrator in ``failed`` (submit disabled) until ``reset()``.
    """
    RETURN_TO_IDLE = "return_to_idle"
    HOLD_FAILED = "hold_failed"


class EventType(str, Enum):
    """Audit event types emitted by the store and the orchestrator."""
    FIELD_UPDATED = "field.updated"
    ROLE_TOGGLED = "role.toggled"
    VALIDATION_PASSED = "validation.passed"
    VALIDATION_FAILED = "validation.failed"
    SUBMISSION_STARTED = "submission.started"
    SUBMISSION_SUCCEEDED = "submission.succeeded"
    SUBMISSION_FAILED = "submission.failed"
    SUBMISSION_RESET = "submission.reset"


class FormField(str, Enum):
    """Form fields, valued by their wire key in the outbound payload.

    COST_OTHER is both a field and a distinct error flag, separate from
    COST_SELECTION.
    """
    EMPLOYEE_COUNT = "funcionarios"
    COST_SELECTION = "custo"
    COST_OTHER = "custoOutro"
    ROLES = "funcoes"
    OTHER_ROLE_TEXT = "outraFuncao"
    REPETITIVE_TIME_BAND = "tempo"
    AVERAGE_TICKET = "ticketMedio"
    PHONE = "telefone"

    @property
    def attribute(self) -> str:
        """Name of the matching FormSnapshot / ErrorSet attribute."""
        return FIELD_ATTRIBUTES[self]


FIELD_ATTRIBUTES = {
    FormField.EMPLOYEE_COUNT: "employee_count",
    FormField.COST_SELECTION: "cost_selection",
    FormField.COST_OTHER: "cost_other",
    FormField.ROLES: "roles",
    FormField.OTHER_ROLE_TEXT: "other_role_text",
    FormField.REPETITIVE_TIME_BAND: "repetitive_time_band",
    FormField.AVERAGE_TICKET: "average_ticket",
    FormField.PHONE: "phone",
}

# Canonical rendering of an empty or zero currency input
ZERO_CURRENCY = "R$ 0,00"

COST_PRESETS: Tuple[str, ...] = ("R$ 2.222,62", "R$ 3.460,80", "R$ 4.377,60")
COST_OTHER = "Outro"
COST_OPTIONS: Tuple[str, ...] = COST_PRESETS + (COST_OTHER,)

ROLE_TAGS: Tuple[str, ...] = (
    "Atendimento ao cliente",
    "Prospecção de leads",
    "Agendamento / Suporte",
    "Pós-venda / Follow-up",
    "Operações (financeiro, administrativo)",
)
# Sentinel role: selecting it reveals the free-text role input
OTHER_ROLE = "outra"
ROLE_OPTIONS: Tuple[str, ...] = ROLE_TAGS + (OTHER_ROLE,)

TIME_BANDS: Tuple[str, ...] = (
    "Quase nada",
    "Entre 30% e 50%",
    "Entre 50% e 80%",
    "Quase tudo (>80%)",
)

PHONE_DIGITS = 11


__all__ = [
    "SubmissionPhase",
    "FailurePolicy",
    "EventType",
    "FormField",
    "FIELD_ATTRIBUTES",
    "ZERO_CURRENCY",
    "COST_PRESETS",
    "COST_OTHER",
    "COST_OPTIONS",
    "ROLE_TAGS",
    "OTHER_ROLE",
    "ROLE_OPTIONS",
    "TIME_BANDS",
    "PHONE_DIGITS",
]
