# app/services/donation_rules.py
"""Side-effect free precondition checks shared by the single- and multi-cause
donation paths. The same condition always raises the same error class."""
from datetime import datetime
import math
from typing import Iterable, List, Optional, Sequence

from core.config import settings
from core.exceptions import (
    InvalidRequest, BelowMinimum, CauseNotAcceptingDonations, CauseEnded,
    AllocationMismatch, join_names,
)
from models.cause import Cause, CauseStatus


def ensure_positive_amount(amount: Optional[float], message: str = "Donation amount must be greater than 0"):
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise InvalidRequest(message)


def ensure_minimum_donation(amount: float, config) -> None:
    """`config` is anything exposing minimum_donation_enabled / minimum_donation_amount."""
    if config is None or not config.minimum_donation_enabled:
        return
    if amount < config.minimum_donation_amount:
        raise BelowMinimum(
            f"Minimum donation amount is {config.minimum_donation_amount}"
        )


def is_ended(cause: Cause, now: Optional[datetime] = None) -> bool:
    now = now or datetime.utcnow()
    return cause.end_date is not None and cause.end_date < now


def ensure_causes_accepting(causes: Sequence[Cause], now: Optional[datetime] = None) -> None:
    """Status is checked before end date, for every cause in the batch."""
    now = now or datetime.utcnow()

    inactive = [c for c in causes if c.status != CauseStatus.ACTIVE]
    if inactive:
        if len(causes) == 1:
            cause = inactive[0]
            raise CauseNotAcceptingDonations(
                f"Cause '{cause.name}' is currently {_status_value(cause.status)} "
                f"and not accepting donations"
            )
        raise CauseNotAcceptingDonations(
            "Some causes are not accepting donations: "
            + join_names(f"{c.name} ({_status_value(c.status)})" for c in inactive)
        )

    ended = [c for c in causes if is_ended(c, now)]
    if ended:
        if len(causes) == 1:
            raise CauseEnded(
                f"Cause '{ended[0].name}' has ended and is no longer accepting donations"
            )
        raise CauseEnded("Some causes have ended: " + join_names(c.name for c in ended))


def ensure_allocations_present(allocations: Optional[List]) -> None:
    if not allocations:
        raise InvalidRequest("At least one cause must be selected")


def reconcile_allocations(total_amount: float, allocations: Iterable, tolerance: float = None) -> float:
    """Return the allocated sum; reject when it drifts from the total by more than the tolerance."""
    if tolerance is None:
        tolerance = settings.ALLOCATION_TOLERANCE

    allocated = sum(a.amount or 0 for a in allocations)
    if abs(allocated - total_amount) > tolerance:
        raise AllocationMismatch(
            f"Allocated amounts ({allocated}) must equal total amount ({total_amount})"
        )
    return allocated


def ensure_valid_allocation(allocation) -> None:
    if allocation.cause_id is None or allocation.amount is None:
        raise InvalidRequest("Each cause must have a valid ID and amount")
    if not math.isfinite(allocation.amount) or allocation.amount <= 0:
        raise InvalidRequest("Each cause allocation must be greater than 0")


def _status_value(status) -> str:
    return getattr(status, "value", status)
