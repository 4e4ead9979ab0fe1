"""Validation engine for the lead intake form.

This module derives a per-field ErrorSet from a FormSnapshot plus the
``show_other_role_input`` UI flag, and checks the outbound payload shape
against a JSON Schema before it is sent.

Validation is total: it never raises on a snapshot and always returns a flag
for every field. Rules:

1. employee count is required
2. the effective cost (the free value when "Outro" is chosen) must be set and non-zero
3. the free cost value is flagged separately when no cost is chosen, or when
   "Outro" is chosen and the free value is empty or zero
4. at least one role is selected
5. the free role text is required while its input is shown
6. a repetitive-time band is selected
7. the average ticket is set
8. the phone has exactly 11 digits
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List

from jsonschema import Draft7Validator

from leadform.errors import InvalidPayloadError
from leadform.snapshot import FormSnapshot
from leadform.types import FIELD_ATTRIBUTES, PHONE_DIGITS, ZERO_CURRENCY, FormField


@dataclass(frozen=True)
class ErrorSet:
    """Per-field invalid flags (True = invalid).

    ``cost_other`` is its own flag, computed independently from
    ``cost_selection``.

    Examples:
        >>> errors = ErrorSet(phone=True)
        >>> errors.has_errors
        True
        >>> errors.invalid_fields
        [<FormField.PHONE: 'telefone'>]
        >>> errors.cleared(FormField.PHONE).has_errors
        False
    """
    employee_count: bool = False
    cost_selection: bool = False
    cost_other: bool = False
    roles: bool = False
    other_role_text: bool = False
    repetitive_time_band: bool = False
    average_ticket: bool = False
    phone: bool = False

    @property
    def has_errors(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    @property
    def invalid_fields(self) -> List[FormField]:
        """Flagged fields, in form order."""
        return [field for field in FormField if self.is_invalid(field)]

    def is_invalid(self, field: FormField) -> bool:
        return getattr(self, field.attribute)

    def cleared(self, field: FormField) -> "ErrorSet":
        """Return a copy with ``field`` marked valid."""
        return replace(self, **{field.attribute: False})

    def to_dict(self) -> Dict[str, bool]:
        """Convert to dict keyed by wire name."""
        return {field.value: self.is_invalid(field) for field in FormField}

    @classmethod
    def from_dict(cls, data: Dict[str, bool]) -> "ErrorSet":
        """Create ErrorSet from a dict keyed by wire name; missing keys are valid."""
        return cls(**{
            FIELD_ATTRIBUTES[FormField(key)]: bool(value)
            for key, value in data.items()
        })


def _is_blank_currency(value: str) -> bool:
    return not value or value == ZERO_CURRENCY


class ValidationEngine:
    """Rule set producing an ErrorSet from a form snapshot.

    Attributes:
        flag_cost_other_without_selection: When True (the observed form
            behavior), rule 3 also flags the free cost value when no cost
            option is selected at all, even though its input is hidden.

    Examples:
        >>> engine = ValidationEngine()
        >>> errors = engine.validate(FormSnapshot(), show_other_role_input=False)
        >>> errors.other_role_text, errors.phone
        (False, True)
    """

    def __init__(self, flag_cost_other_without_selection: bool = True) -> None:
        self.flag_cost_other_without_selection = flag_cost_other_without_selection

    def validate(self, snapshot: FormSnapshot, show_other_role_input: bool) -> ErrorSet:
        """Compute the full ErrorSet for ``snapshot``.

        Args:
            snapshot: The form values to check
            show_other_role_input: Whether the free role input is displayed;
                rule 5 reads this flag rather than the role selection

        Returns:
            ErrorSet with every flag set
        """
        cost_other_invalid = (
            snapshot.cost_other_relevant and _is_blank_currency(snapshot.cost_other)
        )
        if self.flag_cost_other_without_selection and not snapshot.cost_selection:
            cost_other_invalid = True

        return ErrorSet(
            employee_count=not snapshot.employee_count,
            cost_selection=_is_blank_currency(snapshot.effective_cost),
            cost_other=cost_other_invalid,
            roles=len(snapshot.roles) == 0,
            other_role_text=show_other_role_input and not snapshot.other_role_text,
            repetitive_time_band=not snapshot.repetitive_time_band,
            average_ticket=not snapshot.average_ticket,
            phone=len(snapshot.phone_digits) != PHONE_DIGITS,
        )


def validate(snapshot: FormSnapshot, show_other_role_input: bool) -> ErrorSet:
    """Validate with the default rule set."""
    return ValidationEngine().validate(snapshot, show_other_role_input)


# Shape of the webhook body. Values stay strings as displayed.
PAYLOAD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        FormField.EMPLOYEE_COUNT.value: {"type": "string", "pattern": r"\A[0-9]*\Z"},
        FormField.COST_SELECTION.value: {"type": "string", "minLength": 1},
        FormField.COST_OTHER.value: {"type": "string"},
        FormField.ROLES.value: {
            "type": "array",
            "items": {"type": "string"},
            "uniqueItems": True,
        },
        FormField.OTHER_ROLE_TEXT.value: {"type": "string"},
        FormField.REPETITIVE_TIME_BAND.value: {"type": "string"},
        FormField.AVERAGE_TICKET.value: {"type": "string"},
        FormField.PHONE.value: {"type": "string"},
    },
    "required": [field.value for field in FormField],
    "additionalProperties": False,
}

_payload_validator = Draft7Validator(PAYLOAD_SCHEMA)


def payload_errors(payload: Dict[str, Any]) -> ErrorSet:
    """Flag every field whose serialized value breaks PAYLOAD_SCHEMA.

    Raises:
        InvalidPayloadError: For a violation that is not tied to one field
            (missing or extra keys)
    """
    flags: Dict[str, bool] = {}
    for error in _payload_validator.iter_errors(payload):
        key = str(error.path[0]) if error.path else ""
        try:
            field = FormField(key)
        except ValueError:
            raise InvalidPayloadError(
                path=key, message=f"Invalid payload structure: {error.message}"
            ) from None
        flags[field.attribute] = True
    return ErrorSet(**flags)


__all__ = [
    "ErrorSet",
    "ValidationEngine",
    "validate",
    "PAYLOAD_SCHEMA",
    "payload_errors",
]
