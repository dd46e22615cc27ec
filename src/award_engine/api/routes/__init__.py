"""API routes."""

from award_engine.api.routes.award import router as award_router
from award_engine.api.routes.award_rules import router as award_rules_router
from award_engine.api.routes.bonuses import router as bonuses_router
from award_engine.api.routes.health import router as health_router
from award_engine.api.routes.statutory_rates import router as statutory_rates_router

__all__ = [
    "award_router",
    "award_rules_router",
    "bonuses_router",
    "health_router",
    "statutory_rates_router",
]
