# app/services/donation_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from datetime import datetime
from typing import List, Optional, Dict, Any, Callable, Awaitable
import logging
import math
import uuid

from core.config import settings
from core.exceptions import InvalidRequest, NotFound, TransactionFailed, join_names
from models.cause import Cause, CauseStatus, CauseCategory
from models.user import User, DonationEntry, DonationEntryStatus
from schemas.donation import CauseAllocation
from services import donation_rules
from services.audit_service import AuditService
from services.config_service import ConfigService

logger = logging.getLogger(__name__)

# Test-only fault injection: awaited after all writes are flushed and before
# commit. Production wiring always passes None.
FaultHook = Callable[[], Awaitable[None]]

TRANSACTION_FAILED_MESSAGE = "Failed to process donation. No charges were made. Please try again."
MULTI_TRANSACTION_FAILED_MESSAGE = (
    "Failed to process multi-cause donation. No charges were made. Please try again."
)


class DonationUnitOfWork:
    """All-or-nothing write scope over the cause aggregates and the donor ledger.

    Everything staged between entering the block and ``commit()`` is rolled back
    if the block raises, including the fault hook firing.
    """

    def __init__(self, db: AsyncSession, fault_hook: Optional[FaultHook] = None):
        self.db = db
        self.fault_hook = fault_hook
        self.committed = False

    async def __aenter__(self) -> "DonationUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None or not self.committed:
            await self.db.rollback()
        return False

    async def increment_cause(self, cause_id: int, amount: float) -> Cause:
        """Add to the raised amount and event count, then apply the one-way completion rule."""
        result = await self.db.execute(
            update(Cause)
            .where(Cause.id == cause_id)
            .values(
                current_amount=Cause.current_amount + amount,
                donation_event_count=Cause.donation_event_count + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise LookupError(f"Cause {cause_id} disappeared before it could be updated")

        await self.db.execute(
            update(Cause)
            .where(
                Cause.id == cause_id,
                Cause.status == CauseStatus.ACTIVE,
                Cause.current_amount >= Cause.target_amount,
            )
            .values(status=CauseStatus.COMPLETED)
            .execution_options(synchronize_session=False)
        )

        return await self.db.get(Cause, cause_id, populate_existing=True)

    def append_entries(self, entries: List[DonationEntry]) -> None:
        self.db.add_all(entries)

    async def commit(self) -> None:
        await self.db.flush()
        if self.fault_hook is not None:
            await self.fault_hook()
        await self.db.commit()
        self.committed = True


class DonationService:
    def __init__(self, db: AsyncSession, audit: Optional[AuditService] = None):
        self.db = db
        self.audit = audit or AuditService(db)

    # ---------- single cause ----------
    async def donate(
            self,
            donor: User,
            cause_id: Optional[int],
            amount: Optional[float],
            payment_id: Optional[str] = None,
            payment_method: Optional[str] = None,
            fault_hook: Optional[FaultHook] = None,
    ) -> Dict[str, Any]:
        """Record a donation to one cause atomically."""
        if cause_id is None or amount is None:
            raise InvalidRequest("Cause ID and amount are required")
        donation_rules.ensure_positive_amount(amount)

        config = await ConfigService(self.db).get_config()
        donation_rules.ensure_minimum_donation(amount, config)

        cause = await self.db.get(Cause, cause_id, populate_existing=True)
        if not cause:
            raise NotFound("Cause not found")
        donation_rules.ensure_causes_accepting([cause])

        payment_id = payment_id or self._generate_payment_id()
        payment_method = payment_method or settings.DEFAULT_PAYMENT_METHOD
        logger.info(f"[Payment Stub] Payment ID: {payment_id}, Amount: {amount}, Method: {payment_method}")

        # a rollback expires every loaded instance, so keep plain values
        donor_id, donor_email = donor.id, donor.email
        cause_name = cause.name
        donated_at = datetime.utcnow()

        try:
            async with DonationUnitOfWork(self.db, fault_hook) as uow:
                updated_cause = await uow.increment_cause(cause_id, amount)
                uow.append_entries([
                    DonationEntry(
                        user_id=donor_id,
                        cause_id=cause_id,
                        amount=amount,
                        cause=cause_name,
                        payment_id=payment_id,
                        payment_method=payment_method,
                        status=DonationEntryStatus.COMPLETED,
                        is_multi_cause=False,
                        date=donated_at,
                    )
                ])
                await uow.commit()
        except Exception as e:
            logger.error(
                f"[Transaction Rollback] Donation failed for user {donor_email}, cause {cause_name}: {e} "
                f"(payment {payment_id}, amount {amount})"
            )
            await self.audit.log_donation_failed(
                donor_id, donor_email, amount, cause_id, cause_name, reason=str(e)
            )
            raise TransactionFailed(TRANSACTION_FAILED_MESSAGE, internal_error=str(e)) from e

        logger.info(
            f"[Transaction Success] Donation recorded: {payment_id}, user {donor_email}, "
            f"cause {cause_name}, amount {amount}"
        )
        await self.audit.log_donation_created(
            donor_id, donor_email, amount, cause_id, cause_name, payment_id, payment_method
        )

        return {
            "donation": {
                "amount": amount,
                "cause": cause_name,
                "causeId": cause_id,
                "paymentId": payment_id,
                "paymentMethod": payment_method,
                "date": donated_at,
            },
            "causeStatus": self._cause_status(updated_cause),
        }

    # ---------- multiple causes ----------
    async def donate_multi(
            self,
            donor: User,
            total_amount: Optional[float],
            allocations: List[CauseAllocation],
            payment_method: Optional[str] = None,
            payment_id: Optional[str] = None,
            fault_hook: Optional[FaultHook] = None,
    ) -> Dict[str, Any]:
        """Split one payment across several causes; all causes and the donor ledger change together."""
        donation_rules.ensure_allocations_present(allocations)
        donation_rules.ensure_positive_amount(total_amount, "Total donation amount must be greater than 0")
        for allocation in allocations:
            donation_rules.ensure_valid_allocation(allocation)
        donation_rules.reconcile_allocations(total_amount, allocations)

        config = await ConfigService(self.db).get_config()
        donation_rules.ensure_minimum_donation(total_amount, config)

        # one batch read for existence and acceptability
        cause_ids = [a.cause_id for a in allocations]
        result = await self.db.execute(
            select(Cause)
            .where(Cause.id.in_(list(set(cause_ids))))
            .execution_options(populate_existing=True)
        )
        causes_by_id = {c.id: c for c in result.scalars().all()}

        missing = [cid for cid in dict.fromkeys(cause_ids) if cid not in causes_by_id]
        if missing:
            raise NotFound(f"One or more causes not found: {join_names(missing)}")
        donation_rules.ensure_causes_accepting(list(causes_by_id.values()))

        payment_id = payment_id or self._generate_payment_id()
        payment_method = payment_method or settings.DEFAULT_PAYMENT_METHOD
        logger.info(
            f"[Multi-Cause Payment Stub] Payment ID: {payment_id}, Total: {total_amount}, "
            f"Causes: {len(allocations)}"
        )

        donor_id, donor_email = donor.id, donor.email
        names = {cid: c.name for cid, c in causes_by_id.items()}
        donated_at = datetime.utcnow()

        updated_views = []
        try:
            async with DonationUnitOfWork(self.db, fault_hook) as uow:
                entries = []
                for allocation in allocations:
                    updated_cause = await uow.increment_cause(allocation.cause_id, allocation.amount)
                    updated_views.append({
                        "causeId": updated_cause.id,
                        "name": updated_cause.name,
                        **self._cause_status(updated_cause),
                    })
                    entries.append(
                        DonationEntry(
                            user_id=donor_id,
                            cause_id=allocation.cause_id,
                            amount=allocation.amount,
                            cause=names[allocation.cause_id],
                            payment_id=payment_id,
                            payment_method=payment_method,
                            status=DonationEntryStatus.COMPLETED,
                            is_multi_cause=True,
                            date=donated_at,
                        )
                    )
                uow.append_entries(entries)
                await uow.commit()
        except Exception as e:
            logger.error(
                f"[Multi-Cause Transaction Rollback] user {donor_email}, payment {payment_id}: {e}"
            )
            await self.audit.log_donation_failed(
                donor_id, donor_email, total_amount,
                [a.cause_id for a in allocations], join_names(names.values()), reason=str(e),
            )
            raise TransactionFailed(MULTI_TRANSACTION_FAILED_MESSAGE, internal_error=str(e)) from e

        logger.info(
            f"[Multi-Cause Transaction Success] Payment: {payment_id}, user {donor_email}, total {total_amount}"
        )
        for allocation in allocations:
            await self.audit.log_donation_created(
                donor_id, donor_email, allocation.amount, allocation.cause_id,
                names[allocation.cause_id], payment_id, payment_method,
            )

        return {
            "totalAmount": total_amount,
            "paymentId": payment_id,
            "paymentMethod": payment_method,
            "causesCount": len(allocations),
            "donations": [
                {
                    "cause": names[allocation.cause_id],
                    "amount": allocation.amount,
                    "causeStatus": view,
                }
                for allocation, view in zip(allocations, updated_views)
            ],
            "date": donated_at,
        }

    # ---------- donor views ----------
    async def get_history(self, donor: User) -> Dict[str, Any]:
        """Donor's ledger, newest first, with totals."""
        entries = await self._entries_for(donor.id)
        entries.sort(key=lambda e: (e.date, e.id), reverse=True)

        return {
            "donations": [self._entry(e) for e in entries],
            "summary": {
                "totalDonated": sum(e.amount for e in entries),
                "donationCount": len(entries),
            },
        }

    async def get_stats(self, donor: User) -> Dict[str, Any]:
        entries = await self._entries_for(donor.id)

        total = sum(e.amount for e in entries)
        count = len(entries)

        by_cause: Dict[str, Dict[str, Any]] = {}
        for e in entries:
            bucket = by_cause.setdefault(e.cause, {"cause": e.cause, "totalAmount": 0.0, "count": 0})
            bucket["totalAmount"] += e.amount
            bucket["count"] += 1

        ranked = sorted(by_cause.values(), key=lambda c: c["totalAmount"], reverse=True)

        return {
            "totalDonated": total,
            "donationCount": count,
            "averageDonation": math.floor(total / count * 100 + 0.5) / 100 if count else 0,
            "mostSupportedCause": ranked[0] if ranked else None,
            "donationsByCause": ranked,
        }

    async def list_causes(self, status: Optional[str] = None, category: Optional[str] = None) -> List[Cause]:
        """Causes visible to donors; active ones unless another status is asked for."""
        query = select(Cause).where(Cause.status == self._parse_status(status or CauseStatus.ACTIVE.value))
        if category and category != "all":
            query = query.where(Cause.category == self._parse_category(category))
        result = await self.db.execute(query.order_by(Cause.created_at.desc(), Cause.id.desc()))
        return list(result.scalars().all())

    async def list_categories(self) -> List[str]:
        result = await self.db.execute(select(Cause.category).distinct())
        return sorted(c.value for c in result.scalars().all())

    # ---------- Helper Methods ----------
    async def _entries_for(self, user_id: int) -> List[DonationEntry]:
        result = await self.db.execute(
            select(DonationEntry).where(DonationEntry.user_id == user_id).order_by(DonationEntry.id)
        )
        return list(result.scalars().all())

    @staticmethod
    def _entry(e: DonationEntry) -> Dict[str, Any]:
        return {
            "amount": e.amount,
            "cause": e.cause,
            "causeId": e.cause_id,
            "paymentId": e.payment_id,
            "paymentMethod": e.payment_method,
            "status": e.status,
            "isMultiCause": e.is_multi_cause,
            "date": e.date,
        }

    @staticmethod
    def _cause_status(cause: Cause) -> Dict[str, Any]:
        return {
            "currentAmount": cause.current_amount,
            "targetAmount": cause.target_amount,
            "percentageAchieved": cause.percentage_achieved,
            "status": cause.status,
        }

    @staticmethod
    def _parse_status(status: str) -> CauseStatus:
        try:
            return CauseStatus(status)
        except ValueError:
            raise InvalidRequest(f"Unknown cause status: {status}")

    @staticmethod
    def _parse_category(category: str):
        try:
            return CauseCategory(category.lower())
        except ValueError:
            raise InvalidRequest(f"Unknown cause category: {category}")

    @staticmethod
    def _generate_payment_id() -> str:
        return str(uuid.uuid4())
