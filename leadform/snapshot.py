"""Immutable form snapshot for the lead intake form.

A FormSnapshot is the full set of field values at one point in time. The store
replaces it on every edit instead of mutating it, so a snapshot captured at
submit time cannot drift while the webhook call is in flight.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple

from leadform.formatting import digits_only
from leadform.types import COST_OTHER, OTHER_ROLE, FormField


@dataclass(frozen=True)
class FormSnapshot:
    """Canonical form values.

    Attributes:
        employee_count: Digits-only employee count
        cost_selection: One of the cost presets or ``"Outro"``
        cost_other: Formatted currency, meaningful only for ``"Outro"``
        roles: Selected role tags in selection order, may include ``"outra"``
        other_role_text: Free-text role, meaningful only when ``"outra"`` is selected
        repetitive_time_band: One of the time bands
        average_ticket: Formatted currency
        phone: Masked phone display string

    Examples:
        >>> snap = FormSnapshot(cost_selection="Outro", cost_other="R$ 10,00")
        >>> snap.effective_cost
        'R$ 10,00'
    """
    employee_count: str = ""
    cost_selection: str = ""
    cost_other: str = ""
    roles: Tuple[str, ...] = ()
    other_role_text: str = ""
    repetitive_time_band: str = ""
    average_ticket: str = ""
    phone: str = ""

    @property
    def cost_other_relevant(self) -> bool:
        """Whether the free cost input is in play."""
        return self.cost_selection == COST_OTHER

    @property
    def effective_cost(self) -> str:
        """Cost value with the ``"Outro"`` branch collapsed into it."""
        if self.cost_other_relevant:
            return self.cost_other
        return self.cost_selection

    @property
    def has_other_role(self) -> bool:
        return OTHER_ROLE in self.roles

    @property
    def phone_digits(self) -> str:
        """Canonical digits-only phone."""
        return digits_only(self.phone)

    def get(self, field: FormField) -> Any:
        return getattr(self, field.attribute)

    def with_value(self, field: FormField, value: Any) -> "FormSnapshot":
        """Return a copy with one field replaced."""
        return replace(self, **{field.attribute: value})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict keyed by wire name, values as entered."""
        result: Dict[str, Any] = {}
        for field in FormField:
            value = self.get(field)
            result[field.value] = list(value) if field is FormField.ROLES else value
        return result

    def to_payload(self) -> Dict[str, Any]:
        """Build the outbound submission body.

        Same keys as ``to_dict`` but ``custo`` carries the effective cost.
        ``custoOutro`` is still echoed as entered.
        """
        payload = self.to_dict()
        payload[FormField.COST_SELECTION.value] = self.effective_cost
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormSnapshot":
        """Create FormSnapshot from a dict keyed by wire name."""
        values: Dict[str, Any] = {}
        for field in FormField:
            if field.value not in data:
                continue
            value = data[field.value]
            values[field.attribute] = tuple(value) if field is FormField.ROLES else value
        return cls(**values)


__all__ = [
    "FormSnapshot",
]
