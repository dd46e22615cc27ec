"""Error taxonomy for interpretation and statutory calculations.

Every error carries a stable ``code`` so per-record failures can be reported
over the wire without leaking exception class names.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class AwardEngineError(Exception):
    """Base class for all engine errors."""

    code = "AwardEngineError"

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InvalidTimeRangeError(AwardEngineError):
    """Raised when a clock or break interval does not move forward in time."""

    code = "InvalidTimeRange"


class OverlappingBreakError(AwardEngineError):
    """Raised when breaks overlap each other or fall outside the shift."""

    code = "OverlappingBreak"


class IncompleteShiftError(AwardEngineError):
    """Raised when an open shift (no clock-out) reaches pricing."""

    code = "IncompleteShift"

    def __init__(self, employee_id: str | None, work_date: date):
        self.employee_id = employee_id
        self.work_date = work_date
        super().__init__(
            f"Shift for employee {employee_id} on {work_date} has no clock-out "
            "and is pending completion",
            employee_id=employee_id,
            work_date=work_date.isoformat(),
        )


class AmbiguousRuleConfigurationError(AwardEngineError):
    """Raised when more than one effective-dated row applies to the same scope."""

    code = "AmbiguousRuleConfiguration"

    def __init__(self, scope: str, on: date | None, ids: list[str]):
        self.scope = scope
        self.on = on
        self.ids = ids
        where = f" on {on}" if on is not None else ""
        super().__init__(
            f"Overlapping effective ranges for '{scope}'{where}: {', '.join(ids)}",
            scope=scope,
            on=on.isoformat() if on is not None else None,
            ids=ids,
        )


class NotFoundError(AwardEngineError):
    """Raised when no rule, rate or record applies."""

    code = "NotFound"


class RuleNotFoundError(NotFoundError):
    """Raised when no award rule covers a classification on a date."""

    def __init__(self, classification: str, on: date):
        self.classification = classification
        self.on = on
        super().__init__(
            f"No active award rule for classification '{classification}' on {on}",
            classification=classification,
            on=on.isoformat(),
        )


class RateNotFoundError(NotFoundError):
    """Raised when no statutory rate of a type is effective on a date."""

    def __init__(self, rate_type: str, on: date):
        self.rate_type = rate_type
        self.on = on
        super().__init__(
            f"No active statutory rate of type '{rate_type}' on {on}",
            rate_type=rate_type,
            on=on.isoformat(),
        )


class InvalidRateConfigurationError(AwardEngineError):
    """Raised when a rate, rule or hourly rate has an invalid shape or value."""

    code = "InvalidRateConfiguration"


class InsufficientHistoryError(AwardEngineError):
    """Raised when average-rate withholding lacks trailing earnings history."""

    code = "InsufficientHistory"


class InvalidBonusRequestError(AwardEngineError):
    """Raised when a bonus request is missing required inputs."""

    code = "InvalidBonusRequest"


class InvalidTransitionError(AwardEngineError):
    """Raised when an invalid approval state transition is attempted."""

    code = "InvalidTransition"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, from_status=from_status, to_status=to_status)
