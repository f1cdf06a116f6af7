"""PayoffSage debt payoff simulation package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .errors import InvalidInputError, PayoffSageError
from .models import DebtInstrument, PayoffStrategy, PayoffSummary, Termination
from .services.debts import compare_strategies, run, simulate
from .services.strategies import select_priority_order

__all__ = [
    "BaseConfig",
    "DebtInstrument",
    "DevConfig",
    "InvalidInputError",
    "PayoffSageError",
    "PayoffStrategy",
    "PayoffSummary",
    "Termination",
    "compare_strategies",
    "run",
    "select_priority_order",
    "simulate",
]
