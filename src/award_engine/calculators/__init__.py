"""Award interpretation and statutory calculators."""

from award_engine.calculators.bonus_calculator import BonusCalculator
from award_engine.calculators.engine import AwardInterpretationEngine, BatchInterpretation
from award_engine.calculators.normalizer import TimeSegmentNormalizer
from award_engine.calculators.rate_resolver import StatutoryRateResolver
from award_engine.calculators.rule_table import RuleTable
from award_engine.calculators.tax_calculator import TaxCalculator

__all__ = [
    "AwardInterpretationEngine",
    "BatchInterpretation",
    "BonusCalculator",
    "RuleTable",
    "StatutoryRateResolver",
    "TaxCalculator",
    "TimeSegmentNormalizer",
]
