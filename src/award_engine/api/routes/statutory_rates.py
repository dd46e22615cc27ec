"""Statutory rate configuration endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Body, Path, Query, status

from award_engine.api.dependencies import DbSession
from award_engine.api.schemas import (
    ErrorResponse,
    FlatRateCreate,
    PaygRateCreate,
    StatutoryRateResponse,
)
from award_engine.calculators.types import RateType
from award_engine.services.statutory_rate_service import StatutoryRateService

router = APIRouter(prefix="/statutory-rates", tags=["statutory-rates"])

StatutoryRatePayload = Annotated[
    PaygRateCreate | FlatRateCreate,
    Body(discriminator="rate_type"),
]


@router.get("", response_model=list[StatutoryRateResponse])
async def list_statutory_rates(
    db: DbSession,
    rate_type: RateType | None = None,
    active_only: Annotated[bool, Query()] = False,
) -> list[StatutoryRateResponse]:
    """List statutory rates ordered by type and effective date."""
    scope = rate_type.value if rate_type else None
    rates = await StatutoryRateService(db).list(scope, active_only=active_only)
    return [StatutoryRateResponse.model_validate(rate) for rate in rates]


@router.get(
    "/resolve",
    response_model=StatutoryRateResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def resolve_statutory_rate(
    db: DbSession,
    rate_type: RateType,
    on: date,
) -> StatutoryRateResponse:
    """Resolve the single rate of a type in effect on a date."""
    rate = await StatutoryRateService(db).resolve(rate_type, on)
    return StatutoryRateResponse.model_validate(rate)


@router.get(
    "/{rate_id}",
    response_model=StatutoryRateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_statutory_rate(
    db: DbSession,
    rate_id: Annotated[str, Path()],
) -> StatutoryRateResponse:
    """Get a specific statutory rate by ID."""
    rate = await StatutoryRateService(db).get(rate_id)
    return StatutoryRateResponse.model_validate(rate)


@router.post(
    "",
    response_model=StatutoryRateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_statutory_rate(
    db: DbSession,
    payload: StatutoryRatePayload,
) -> StatutoryRateResponse:
    """Create a statutory rate. Overlapping effective ranges are rejected."""
    rate = await StatutoryRateService(db).create(payload.to_domain())
    await db.commit()
    return StatutoryRateResponse.model_validate(rate)


@router.put(
    "/{rate_id}",
    response_model=StatutoryRateResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def replace_statutory_rate(
    db: DbSession,
    rate_id: Annotated[str, Path()],
    payload: StatutoryRatePayload,
) -> StatutoryRateResponse:
    """Replace a statutory rate, revalidating its effective range."""
    rate = await StatutoryRateService(db).update(payload.to_domain(rate_id))
    await db.commit()
    return StatutoryRateResponse.model_validate(rate)


@router.delete(
    "/{rate_id}",
    response_model=StatutoryRateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def deactivate_statutory_rate(
    db: DbSession,
    rate_id: Annotated[str, Path()],
) -> StatutoryRateResponse:
    """Deactivate a statutory rate. Its history is kept."""
    rate = await StatutoryRateService(db).deactivate(rate_id)
    await db.commit()
    return StatutoryRateResponse.model_validate(rate)
