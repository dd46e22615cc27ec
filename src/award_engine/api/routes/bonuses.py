"""Bonus payment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from award_engine.api.dependencies import DbSession
from award_engine.api.schemas import (
    BonusApprovalRequest,
    BonusCalculationRequest,
    BonusCalculationResponse,
    BonusPaymentResponse,
    ErrorResponse,
)
from award_engine.models import BonusPaymentRecord
from award_engine.services.bonus_service import BonusService

router = APIRouter(prefix="/bonuses", tags=["bonuses"])


async def _respond(db: AsyncSession, record: BonusPaymentRecord) -> BonusPaymentResponse:
    await db.commit()
    await db.refresh(record)
    return BonusPaymentResponse.model_validate(record)


# ============================================================================
# Calculation
# ============================================================================


@router.post(
    "/calculate",
    response_model=BonusCalculationResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def calculate_bonus(
    db: DbSession,
    payload: BonusCalculationRequest,
) -> BonusCalculationResponse:
    """Preview withholding, net and super for a bonus. Nothing is stored."""
    result = await BonusService(db).calculate(payload.to_domain())
    return BonusCalculationResponse.from_result(result)


# ============================================================================
# Bonus payments
# ============================================================================


@router.post(
    "",
    response_model=BonusPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def submit_bonus(
    db: DbSession,
    payload: BonusCalculationRequest,
) -> BonusPaymentResponse:
    """Calculate a bonus and store it pending approval."""
    record = await BonusService(db).submit(payload.to_domain())
    return await _respond(db, record)


@router.get("", response_model=list[BonusPaymentResponse])
async def list_bonuses(
    db: DbSession,
    employee_id: str,
) -> list[BonusPaymentResponse]:
    """List an employee's bonus payments, newest payment date first."""
    records = await BonusService(db).list_for_employee(employee_id)
    return [BonusPaymentResponse.model_validate(r) for r in records]


@router.get(
    "/{bonus_id}",
    response_model=BonusPaymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_bonus(
    db: DbSession,
    bonus_id: Annotated[str, Path()],
) -> BonusPaymentResponse:
    """Get a specific bonus payment by ID."""
    record = await BonusService(db).get(bonus_id)
    return BonusPaymentResponse.model_validate(record)


@router.put(
    "/{bonus_id}",
    response_model=BonusPaymentResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def recalculate_bonus(
    db: DbSession,
    bonus_id: Annotated[str, Path()],
    payload: BonusCalculationRequest,
) -> BonusPaymentResponse:
    """Recalculate a pending bonus. Approved bonuses cannot change."""
    record = await BonusService(db).recalculate(bonus_id, payload.to_domain())
    return await _respond(db, record)


# ============================================================================
# Approval lifecycle
# ============================================================================


@router.post(
    "/{bonus_id}/approve",
    response_model=BonusPaymentResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def approve_bonus(
    db: DbSession,
    bonus_id: Annotated[str, Path()],
    payload: BonusApprovalRequest,
) -> BonusPaymentResponse:
    """Approve a pending bonus. Amounts are locked from here on."""
    record = await BonusService(db).approve(bonus_id, payload.approver_id)
    return await _respond(db, record)


@router.post(
    "/{bonus_id}/pay",
    response_model=BonusPaymentResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def pay_bonus(
    db: DbSession,
    bonus_id: Annotated[str, Path()],
) -> BonusPaymentResponse:
    """Mark an approved bonus as paid."""
    record = await BonusService(db).mark_paid(bonus_id)
    return await _respond(db, record)


@router.post(
    "/{bonus_id}/cancel",
    response_model=BonusPaymentResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def cancel_bonus(
    db: DbSession,
    bonus_id: Annotated[str, Path()],
) -> BonusPaymentResponse:
    """Cancel a pending or approved bonus."""
    record = await BonusService(db).cancel(bonus_id)
    return await _respond(db, record)
