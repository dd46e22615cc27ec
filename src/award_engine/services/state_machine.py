"""Bonus approval state machine with transition validation."""

from __future__ import annotations

from award_engine.calculators.errors import InvalidTransitionError
from award_engine.calculators.types import ApprovalStatus


class BonusApprovalStateMachine:
    """State machine for bonus payment approval.

    Allowed transitions:
    - pending → approved
    - pending → cancelled
    - approved → paid
    - approved → cancelled
    """

    # Define valid transitions: {from_status: [allowed_to_statuses]}
    VALID_TRANSITIONS: dict[str, list[str]] = {
        ApprovalStatus.PENDING: [ApprovalStatus.APPROVED, ApprovalStatus.CANCELLED],
        ApprovalStatus.APPROVED: [ApprovalStatus.PAID, ApprovalStatus.CANCELLED],
        ApprovalStatus.PAID: [],  # Terminal state
        ApprovalStatus.CANCELLED: [],  # Terminal state
    }

    # Statuses where amounts can still be recalculated
    AMOUNTS_MUTABLE = {ApprovalStatus.PENDING}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(ApprovalStatus(from_status), [])
        return ApprovalStatus(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def can_modify_amounts(cls, status: str) -> bool:
        """Check if gross/tax/net may still change."""
        return ApprovalStatus(status) in cls.AMOUNTS_MUTABLE

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(ApprovalStatus(status))

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return [s.value for s in cls.VALID_TRANSITIONS.get(ApprovalStatus(current_status), [])]
