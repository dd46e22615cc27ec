"""Bonus payment service - calculation, persistence and approval."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from award_engine.calculators.bonus_calculator import BonusCalculator
from award_engine.calculators.errors import InvalidTransitionError, NotFoundError
from award_engine.calculators.types import ApprovalStatus, BonusRequest, BonusResult
from award_engine.models import BonusPaymentRecord
from award_engine.services.state_machine import BonusApprovalStateMachine
from award_engine.services.statutory_rate_service import StatutoryRateService

logger = logging.getLogger(__name__)


class BonusService:
    """Service for the bonus payment lifecycle.

    Operations:
    - calculate: withholding preview, nothing stored
    - submit: calculate and store as pending
    - recalculate: replace amounts while still pending
    - approve / mark_paid / cancel: approval transitions
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.rate_service = StatutoryRateService(session)

    async def calculate(self, request: BonusRequest) -> BonusResult:
        resolver = await self.rate_service.load_resolver()
        return BonusCalculator(resolver).calculate(request)

    async def submit(self, request: BonusRequest) -> BonusPaymentRecord:
        """Calculate a bonus and store it pending approval."""
        result = await self.calculate(request)
        record = BonusPaymentRecord(
            employee_id=request.employee_id,
            bonus_type=request.bonus_type.value,
            payment_date=request.payment_date,
            super_included=request.super_included,
            approval_status=ApprovalStatus.PENDING.value,
        )
        self._apply_result(record, result)
        self.session.add(record)
        await self.session.flush()
        logger.info(
            "Submitted bonus %s for employee %s: gross %s",
            record.id,
            record.employee_id,
            record.gross_amount,
        )
        return record

    async def get(self, bonus_id: str) -> BonusPaymentRecord:
        record = await self.session.get(BonusPaymentRecord, bonus_id)
        if record is None:
            raise NotFoundError(f"Bonus payment {bonus_id} not found", id=bonus_id)
        return record

    async def list_for_employee(self, employee_id: str) -> list[BonusPaymentRecord]:
        result = await self.session.execute(
            select(BonusPaymentRecord)
            .where(BonusPaymentRecord.employee_id == employee_id)
            .order_by(BonusPaymentRecord.payment_date.desc())
        )
        return list(result.scalars().all())

    async def recalculate(self, bonus_id: str, request: BonusRequest) -> BonusPaymentRecord:
        """Replace the amounts of a pending bonus."""
        record = await self.get(bonus_id)
        if not BonusApprovalStateMachine.can_modify_amounts(record.approval_status):
            raise InvalidTransitionError(
                record.approval_status,
                ApprovalStatus.PENDING.value,
                reason="amounts are immutable once a bonus leaves pending",
            )
        result = await self.calculate(request)
        record.bonus_type = request.bonus_type.value
        record.payment_date = request.payment_date
        record.super_included = request.super_included
        self._apply_result(record, result)
        await self.session.flush()
        return record

    async def approve(self, bonus_id: str, approver_id: str) -> BonusPaymentRecord:
        record = await self._transition(bonus_id, ApprovalStatus.APPROVED)
        record.approved_by = approver_id
        record.approved_at = datetime.now(timezone.utc)
        await self.session.flush()
        return record

    async def mark_paid(self, bonus_id: str) -> BonusPaymentRecord:
        record = await self._transition(bonus_id, ApprovalStatus.PAID)
        record.paid_at = datetime.now(timezone.utc)
        await self.session.flush()
        return record

    async def cancel(self, bonus_id: str) -> BonusPaymentRecord:
        record = await self._transition(bonus_id, ApprovalStatus.CANCELLED)
        await self.session.flush()
        return record

    async def _transition(self, bonus_id: str, to_status: ApprovalStatus) -> BonusPaymentRecord:
        record = await self.get(bonus_id)
        BonusApprovalStateMachine.validate_transition(record.approval_status, to_status.value)
        logger.info(
            "Bonus %s: %s -> %s", bonus_id, record.approval_status, to_status.value
        )
        record.approval_status = to_status.value
        return record

    @staticmethod
    def _apply_result(record: BonusPaymentRecord, result: BonusResult) -> None:
        record.gross_amount = result.gross_amount
        record.tax_withheld = result.tax_withheld
        record.net_amount = result.net_amount
        record.super_contribution = result.super_contribution
        record.tax_method = result.tax_method.value
        record.calculation_details = {
            **result.details,
            "withholding_rate": str(result.withholding_rate),
            "medicare_levy": str(result.medicare_levy),
        }
