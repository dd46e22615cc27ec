"""Award interpretation endpoint."""

from fastapi import APIRouter, status

from award_engine.api.dependencies import DbSession
from award_engine.api.schemas import (
    AwardInterpretationRequest,
    AwardRecordResponse,
    ErrorResponse,
)
from award_engine.services.interpretation_service import InterpretationService

router = APIRouter(prefix="/award", tags=["award"])


@router.post(
    "",
    response_model=list[AwardRecordResponse],
    status_code=status.HTTP_200_OK,
    responses={409: {"model": ErrorResponse}},
)
async def interpret_award(
    db: DbSession,
    payload: AwardInterpretationRequest,
) -> list[AwardRecordResponse]:
    """Price a batch of attendance records.

    Records that fail keep their position with no components and an error.
    """
    records = [r.to_domain(employee_id=payload.employee_id) for r in payload.records]
    batch = await InterpretationService(db).interpret(
        records,
        payload.hourly_rate,
        classification=payload.classification,
        public_holidays=payload.public_holidays,
    )
    return [AwardRecordResponse.from_result(result) for result in batch.results]
