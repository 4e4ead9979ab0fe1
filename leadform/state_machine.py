"""Submission state machine for the lead intake form.

This module enforces the phase transitions of the submit action:

    idle -> submitting -> success
                       -> idle     (failed call, RETURN_TO_IDLE policy)
                       -> failed   (failed call, HOLD_FAILED policy)
    failed -> idle                 (explicit reset)

Usage:
    >>> from leadform.state_machine import SubmissionStateMachine
    >>> sm = SubmissionStateMachine()
    >>> sm.transition_to(SubmissionPhase.SUBMITTING)
    >>> sm.phase
    <SubmissionPhase.SUBMITTING: 'submitting'>
"""

from dataclasses import dataclass
from typing import Any, Dict, Set
import logging

from leadform.errors import LeadFormError
from leadform.types import SubmissionPhase

logger = logging.getLogger(__name__)


class InvalidStateTransitionError(LeadFormError):
    """Raised when attempting a transition the table does not allow.

    Attributes:
        current_phase: The phase before the attempted transition
        target_phase: The phase that was attempted
    """

    def __init__(self, current_phase: SubmissionPhase, target_phase: SubmissionPhase, message: str):
        self.current_phase = current_phase
        self.target_phase = target_phase
        super().__init__(message)


# Maps each phase to the set of phases it can transition to
VALID_TRANSITIONS: Dict[SubmissionPhase, Set[SubmissionPhase]] = {
    SubmissionPhase.IDLE: {
        SubmissionPhase.SUBMITTING,
    },
    SubmissionPhase.SUBMITTING: {
        SubmissionPhase.SUCCESS,
        SubmissionPhase.IDLE,
        SubmissionPhase.FAILED,
    },
    SubmissionPhase.FAILED: {
        SubmissionPhase.IDLE,
    },
    # Terminal: the form hands off to the results view
    SubmissionPhase.SUCCESS: set(),
}


@dataclass
class SubmissionStateMachine:
    """Current submission phase with guarded transitions.

    Attributes:
        phase: Current phase, idle when the form is mounted

    Examples:
        >>> sm = SubmissionStateMachine()
        >>> sm.can_transition_to(SubmissionPhase.SUCCESS)
        False
        >>> sm.transition_to(SubmissionPhase.SUBMITTING)
        >>> sm.can_transition_to(SubmissionPhase.SUCCESS)
        True
    """

    phase: SubmissionPhase = SubmissionPhase.IDLE

    def can_transition_to(self, target_phase: SubmissionPhase) -> bool:
        """Check if transition to ``target_phase`` is valid."""
        return target_phase in VALID_TRANSITIONS.get(self.phase, set())

    def transition_to(self, target_phase: SubmissionPhase) -> None:
        """Move to ``target_phase``.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_phase):
            raise InvalidStateTransitionError(
                current_phase=self.phase,
                target_phase=target_phase,
                message=(
                    f"Invalid phase transition: cannot transition from "
                    f"'{self.phase.value}' to '{target_phase.value}'. "
                    f"Valid transitions from '{self.phase.value}' are: "
                    f"{', '.join(sorted(p.value for p in VALID_TRANSITIONS[self.phase]))}"
                    if VALID_TRANSITIONS[self.phase]
                    else f"Invalid phase transition: '{self.phase.value}' is a terminal phase, "
                    f"no transitions are allowed."
                ),
            )

        logger.debug("Submission phase %s -> %s", self.phase.value, target_phase.value)
        self.phase = target_phase

    def is_terminal(self) -> bool:
        """True once the form has been submitted successfully."""
        return len(VALID_TRANSITIONS[self.phase]) == 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the state machine to a dictionary.

        Examples:
            >>> SubmissionStateMachine(phase=SubmissionPhase.FAILED).to_dict()
            {'phase': 'failed'}
        """
        return {"phase": self.phase.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubmissionStateMachine":
        """Deserialize a state machine from a dictionary."""
        return cls(phase=SubmissionPhase(data["phase"]))


__all__ = [
    "SubmissionStateMachine",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
]
