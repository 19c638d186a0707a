from datetime import datetime, timedelta

import pytest

from core.exceptions import (
    InvalidRequest, BelowMinimum, CauseNotAcceptingDonations, CauseEnded, AllocationMismatch,
)
from models.cause import Cause, CauseStatus
from models.platform_config import PlatformConfig
from schemas.donation import CauseAllocation
from services import donation_rules


def make_cause(name="Clean Water", status=CauseStatus.ACTIVE, end_date=None):
    return Cause(name=name, description="d", target_amount=100, current_amount=0, status=status, end_date=end_date)


def make_config(amount=5.0, enabled=True):
    return PlatformConfig(minimum_donation_amount=amount, minimum_donation_enabled=enabled)


# ---------- amounts ----------

@pytest.mark.parametrize("amount", [None, 0, -10, float("inf"), float("-inf"), float("nan")])
def test_non_positive_amount_rejected(amount):
    with pytest.raises(InvalidRequest) as exc:
        donation_rules.ensure_positive_amount(amount)
    assert exc.value.detail == "Donation amount must be greater than 0"
    assert exc.value.status_code == 400


def test_positive_amount_passes():
    donation_rules.ensure_positive_amount(0.5)


def test_minimum_donation_enforced():
    with pytest.raises(BelowMinimum) as exc:
        donation_rules.ensure_minimum_donation(4.99, make_config(5.0))
    assert exc.value.detail == "Minimum donation amount is 5.0"


def test_minimum_donation_ignored_when_disabled():
    donation_rules.ensure_minimum_donation(0.01, make_config(5.0, enabled=False))


def test_minimum_donation_boundary_is_inclusive():
    donation_rules.ensure_minimum_donation(5.0, make_config(5.0))


# ---------- acceptability ----------

def test_paused_single_cause_message():
    with pytest.raises(CauseNotAcceptingDonations) as exc:
        donation_rules.ensure_causes_accepting([make_cause(status=CauseStatus.PAUSED)])
    assert exc.value.detail == "Cause 'Clean Water' is currently paused and not accepting donations"


def test_ended_single_cause_message():
    cause = make_cause(end_date=datetime.utcnow() - timedelta(days=1))
    with pytest.raises(CauseEnded) as exc:
        donation_rules.ensure_causes_accepting([cause])
    assert exc.value.detail == "Cause 'Clean Water' has ended and is no longer accepting donations"


def test_status_checked_before_end_date():
    cause = make_cause(status=CauseStatus.COMPLETED, end_date=datetime.utcnow() - timedelta(days=1))
    with pytest.raises(CauseNotAcceptingDonations):
        donation_rules.ensure_causes_accepting([cause])


def test_future_end_date_accepted():
    donation_rules.ensure_causes_accepting([make_cause(end_date=datetime.utcnow() + timedelta(days=3))])


def test_batch_messages_name_every_offender():
    causes = [
        make_cause("A", status=CauseStatus.PAUSED),
        make_cause("B"),
        make_cause("C", status=CauseStatus.CANCELLED),
    ]
    with pytest.raises(CauseNotAcceptingDonations) as exc:
        donation_rules.ensure_causes_accepting(causes)
    assert exc.value.detail == "Some causes are not accepting donations: A (paused), C (cancelled)"

    past = datetime.utcnow() - timedelta(hours=1)
    with pytest.raises(CauseEnded) as exc:
        donation_rules.ensure_causes_accepting([make_cause("A", end_date=past), make_cause("B")])
    assert exc.value.detail == "Some causes have ended: A"


# ---------- allocations ----------

def test_empty_allocations_rejected():
    with pytest.raises(InvalidRequest) as exc:
        donation_rules.ensure_allocations_present([])
    assert exc.value.detail == "At least one cause must be selected"


def test_allocation_within_tolerance_passes():
    allocations = [CauseAllocation(cause_id=1, amount=33.33), CauseAllocation(cause_id=2, amount=66.66)]
    assert donation_rules.reconcile_allocations(100, allocations) == pytest.approx(99.99)


def test_allocation_mismatch_rejected():
    allocations = [CauseAllocation(cause_id=1, amount=60), CauseAllocation(cause_id=2, amount=30)]
    with pytest.raises(AllocationMismatch) as exc:
        donation_rules.reconcile_allocations(100, allocations)
    assert exc.value.detail == "Allocated amounts (90.0) must equal total amount (100)"


@pytest.mark.parametrize("allocation", [
    CauseAllocation(cause_id=None, amount=10),
    CauseAllocation(cause_id=1, amount=None),
    CauseAllocation(cause_id=1, amount=0),
    CauseAllocation(cause_id=1, amount=-5),
    CauseAllocation(cause_id=1, amount=float("inf")),
    CauseAllocation(cause_id=1, amount=float("nan")),
])
def test_invalid_allocation_rejected(allocation):
    with pytest.raises(InvalidRequest):
        donation_rules.ensure_valid_allocation(allocation)


# ---------- display rounding ----------

@pytest.mark.parametrize("current, expected", [(125, 13), (625, 63), (124, 12), (1000, 100)])
def test_percentage_rounds_half_up(current, expected):
    cause = Cause(name="Clean Water", description="d", target_amount=1000, current_amount=current)
    assert cause.percentage_achieved == expected
