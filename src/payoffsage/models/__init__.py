"""Model exports."""

from .liability import DebtInstrument, periodic_interest
from .summary import (
    Allocation,
    InstrumentOutcome,
    PayoffStrategy,
    PayoffSummary,
    PeriodRecord,
    StrategyComparison,
    Termination,
)

__all__ = [
    "Allocation",
    "DebtInstrument",
    "InstrumentOutcome",
    "PayoffStrategy",
    "PayoffSummary",
    "PeriodRecord",
    "StrategyComparison",
    "Termination",
    "periodic_interest",
]
