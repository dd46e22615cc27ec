"""Award rule configuration endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from award_engine.api.dependencies import DbSession
from award_engine.api.schemas import AwardRuleCreate, AwardRuleResponse, ErrorResponse
from award_engine.services.rule_service import AwardRuleService

router = APIRouter(prefix="/award-rules", tags=["award-rules"])


@router.get("", response_model=list[AwardRuleResponse])
async def list_award_rules(
    db: DbSession,
    classification: str | None = None,
    active_only: Annotated[bool, Query()] = False,
) -> list[AwardRuleResponse]:
    """List award rules ordered by classification and effective date."""
    rules = await AwardRuleService(db).list(classification, active_only=active_only)
    return [AwardRuleResponse.model_validate(rule) for rule in rules]


@router.get(
    "/{rule_id}",
    response_model=AwardRuleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_award_rule(
    db: DbSession,
    rule_id: Annotated[str, Path()],
) -> AwardRuleResponse:
    """Get a specific award rule by ID."""
    rule = await AwardRuleService(db).get(rule_id)
    return AwardRuleResponse.model_validate(rule)


@router.post(
    "",
    response_model=AwardRuleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_award_rule(
    db: DbSession,
    payload: AwardRuleCreate,
) -> AwardRuleResponse:
    """Create an award rule. Overlapping effective ranges are rejected."""
    rule = await AwardRuleService(db).create(payload.to_domain())
    await db.commit()
    return AwardRuleResponse.model_validate(rule)


@router.put(
    "/{rule_id}",
    response_model=AwardRuleResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def replace_award_rule(
    db: DbSession,
    rule_id: Annotated[str, Path()],
    payload: AwardRuleCreate,
) -> AwardRuleResponse:
    """Replace an award rule, revalidating its effective range."""
    rule = await AwardRuleService(db).update(payload.to_domain(rule_id))
    await db.commit()
    return AwardRuleResponse.model_validate(rule)


@router.delete(
    "/{rule_id}",
    response_model=AwardRuleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def deactivate_award_rule(
    db: DbSession,
    rule_id: Annotated[str, Path()],
) -> AwardRuleResponse:
    """Deactivate an award rule. Its history is kept."""
    rule = await AwardRuleService(db).deactivate(rule_id)
    await db.commit()
    return AwardRuleResponse.model_validate(rule)
