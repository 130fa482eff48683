"""Tunables threaded through the pure engine by the service layer"""

from dataclasses import dataclass
from decimal import Decimal

from smart_ledger.domain.money import to_decimal

FIXED_30 = "fixed30"
CALENDAR = "calendar"
ALL_TIME = "all_time"
CYCLE = "cycle"


@dataclass(frozen=True)
class EngineOptions:
    reminder_window_days: int = 7
    forecast_periods: int = 8
    forecast_period_days: int = 7
    safety_margin_rate: Decimal = Decimal("0.10")
    calendar_mode: str = FIXED_30
    card_balance_scope: str = ALL_TIME
    debt_payment_category: str = "Debt"

    @classmethod
    def from_settings(cls, settings) -> "EngineOptions":
        return cls(
            reminder_window_days=settings.reminder_window_days,
            forecast_periods=settings.forecast_periods,
            forecast_period_days=settings.forecast_period_days,
            safety_margin_rate=to_decimal(settings.safety_margin_rate),
            calendar_mode=settings.calendar_mode,
            card_balance_scope=settings.card_balance_scope,
            debt_payment_category=settings.debt_payment_category,
        )
