"""Award rule table with effective-dated resolution per classification."""

from __future__ import annotations

import logging
from datetime import date

from award_engine.calculators.effective_dating import EffectiveDatedTable
from award_engine.calculators.errors import RuleNotFoundError
from award_engine.calculators.types import AwardRule

logger = logging.getLogger(__name__)


class RuleTable(EffectiveDatedTable[AwardRule]):
    """Holds award rules and resolves the active rule for a classification.

    Resolution picks the rule whose ``[effective_from, effective_to)`` window
    contains the date. Overlapping windows within one classification are
    rejected by ``add``/``replace``; if a stored snapshot still contains one,
    ``get_active_rule`` raises AmbiguousRuleConfigurationError instead of
    picking a rule.
    """

    def get_active_rule(self, classification: str, on: date) -> AwardRule:
        """Resolve the rule in force for a classification on a date.

        Raises:
            RuleNotFoundError: If no active rule covers the date
            AmbiguousRuleConfigurationError: If more than one rule covers it
        """
        rule = self.lookup(classification, on)
        if rule is None:
            raise RuleNotFoundError(classification, on)
        return rule

    def add(self, candidate: AwardRule) -> AwardRule:
        rule = super().add(candidate)
        logger.info(
            "Added award rule %s for classification '%s' effective %s to %s",
            rule.id,
            rule.classification,
            rule.effective_from,
            rule.effective_to or "open",
        )
        return rule
