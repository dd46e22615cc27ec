"""Award rule configuration service."""

from __future__ import annotations

from award_engine.calculators.rule_table import RuleTable
from award_engine.calculators.types import AwardRule
from award_engine.models import AwardRuleRecord
from award_engine.services.config_service import ConfigService


class AwardRuleService(ConfigService[AwardRule, RuleTable]):
    """Reads and validated writes for award rules, scoped by classification."""

    record_class = AwardRuleRecord
    table_class = RuleTable
    scope_column = "classification"
    entity_name = "Award rule"

    async def load_rule_table(self) -> RuleTable:
        """Snapshot of every rule for one interpretation batch."""
        return await self.snapshot()
