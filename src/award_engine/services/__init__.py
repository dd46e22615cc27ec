"""Award engine services."""

from award_engine.services.bonus_service import BonusService
from award_engine.services.interpretation_service import InterpretationService
from award_engine.services.rule_service import AwardRuleService
from award_engine.services.state_machine import BonusApprovalStateMachine
from award_engine.services.statutory_rate_service import StatutoryRateService

__all__ = [
    "AwardRuleService",
    "BonusApprovalStateMachine",
    "BonusService",
    "InterpretationService",
    "StatutoryRateService",
]
