"""Form state store for the lead intake form.

FormStateStore holds the current FormSnapshot, the current ErrorSet and the
``show_other_role_input`` UI flag. Every edit goes through a formatter, then
replaces the snapshot and hides the edited field's error right away
(optimistic clear-on-edit); re-validation only happens on the next submit.

Usage:
    >>> store = FormStateStore()
    >>> store.update(FormField.PHONE, "11999998888")
    >>> store.snapshot().phone
    '(11) 99999-8888'
    >>> store.toggle_role("outra", True)
    >>> store.show_other_role_input
    True
"""

import logging
from typing import Callable, Dict, Optional, Union

from leadform.errors import UnknownFieldError
from leadform.events import EventEmitter, FormEvent
from leadform.formatting import (
    filter_free_text,
    format_currency,
    format_phone,
    reject_numeric_control_key,
)
from leadform.snapshot import FormSnapshot
from leadform.types import OTHER_ROLE, EventType, FormField
from leadform.validation import ErrorSet

logger = logging.getLogger(__name__)

Formatter = Callable[[str, str], str]


def _verbatim(raw: str, previous: str) -> str:
    return raw


# Maps each scalar field to formatter(raw, previous) -> stored value
FIELD_FORMATTERS: Dict[FormField, Formatter] = {
    FormField.EMPLOYEE_COUNT: _verbatim,
    FormField.COST_SELECTION: _verbatim,
    FormField.COST_OTHER: lambda raw, previous: format_currency(raw),
    FormField.OTHER_ROLE_TEXT: filter_free_text,
    FormField.REPETITIVE_TIME_BAND: _verbatim,
    FormField.AVERAGE_TICKET: lambda raw, previous: format_currency(raw),
    FormField.PHONE: lambda raw, previous: format_phone(raw),
}

# Fields typed into digits-only inputs
NUMERIC_FIELDS = frozenset({FormField.EMPLOYEE_COUNT})


class FormStateStore:
    """Explicit container for the form snapshot, its errors and UI flags.

    The store is mutated only from the UI event loop. Snapshots handed out by
    ``snapshot()`` are immutable, so readers never observe a later edit.

    Attributes:
        emitter: Optional event emitter receiving field.updated and
            role.toggled events
    """

    def __init__(
        self,
        initial: Optional[FormSnapshot] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        self._snapshot = initial or FormSnapshot()
        self._errors = ErrorSet()
        self._show_other_role_input = self._snapshot.has_other_role
        self.emitter = emitter

    def snapshot(self) -> FormSnapshot:
        """Current form values (immutable)."""
        return self._snapshot

    def errors(self) -> ErrorSet:
        """Current error flags (immutable)."""
        return self._errors

    @property
    def show_other_role_input(self) -> bool:
        return self._show_other_role_input

    @property
    def show_cost_other_input(self) -> bool:
        """Whether the free cost input is displayed; derived from the snapshot."""
        return self._snapshot.cost_other_relevant

    def update(self, field: Union[FormField, str], raw: str) -> None:
        """Format ``raw`` for ``field``, store it and clear that field's error.

        Args:
            field: A scalar form field, as FormField or wire key
            raw: The raw input value

        Raises:
            UnknownFieldError: If ``field`` is unknown or is the role set
        """
        form_field = self._resolve(field)
        formatter = FIELD_FORMATTERS.get(form_field)
        if formatter is None:
            raise UnknownFieldError(field)

        previous = self._snapshot.get(form_field)
        value = formatter(raw, previous)
        if value != raw:
            logger.debug("Normalized input for %s", form_field.value)
        self._snapshot = self._snapshot.with_value(form_field, value)
        self._errors = self._errors.cleared(form_field)
        self._emit(EventType.FIELD_UPDATED, {"field": form_field.value})

    def toggle_role(self, tag: str, included: bool) -> None:
        """Add or remove a role tag.

        Toggling the ``"outra"`` sentinel also shows or hides the free role
        input. Selection order is kept and a tag is never stored twice.
        """
        roles = self._snapshot.roles
        if included and tag not in roles:
            roles = roles + (tag,)
        elif not included:
            roles = tuple(role for role in roles if role != tag)

        if tag == OTHER_ROLE:
            self._show_other_role_input = included
        self._snapshot = self._snapshot.with_value(FormField.ROLES, roles)
        self._errors = self._errors.cleared(FormField.ROLES)
        self._emit(EventType.ROLE_TOGGLED, {"role": tag, "included": included})

    def accepts_key(self, field: Union[FormField, str], key: str) -> bool:
        """Whether a keystroke may reach ``field``'s value.

        Exponent and sign keys are blocked in digits-only inputs.
        """
        form_field = self._resolve(field)
        if form_field in NUMERIC_FIELDS:
            return not reject_numeric_control_key(key)
        return True

    def set_errors(self, errors: ErrorSet) -> None:
        """Replace the whole error set (after a submit attempt)."""
        self._errors = errors

    @staticmethod
    def _resolve(field: Union[FormField, str]) -> FormField:
        if isinstance(field, FormField):
            return field
        try:
            return FormField(field)
        except ValueError:
            raise UnknownFieldError(field) from None

    def _emit(self, event_type: EventType, payload: dict) -> None:
        if self.emitter is not None:
            self.emitter.emit(FormEvent.create(event_type, payload=payload))


__all__ = [
    "FIELD_FORMATTERS",
    "NUMERIC_FIELDS",
    "FormStateStore",
]
