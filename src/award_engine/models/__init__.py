"""ORM models for configuration and bonus records."""

from award_engine.models.award import AwardRuleRecord
from award_engine.models.base import Base, IdMixin, TimestampMixin, new_id
from award_engine.models.bonus import BonusPaymentRecord
from award_engine.models.statutory import StatutoryRateRecord

__all__ = [
    "AwardRuleRecord",
    "Base",
    "BonusPaymentRecord",
    "IdMixin",
    "StatutoryRateRecord",
    "TimestampMixin",
    "new_id",
]
