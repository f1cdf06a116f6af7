"""Priority ordering for repayment strategies."""

from __future__ import annotations

from typing import Iterable

from ..errors import InvalidInputError
from ..logging_config import get_logger
from ..models.liability import DebtInstrument
from ..models.summary import PayoffStrategy

logger = get_logger(__name__)


def coerce_strategy(strategy: PayoffStrategy | str) -> PayoffStrategy:
    """Resolve a strategy name (case-insensitive) or enum member."""

    if isinstance(strategy, PayoffStrategy):
        return strategy
    try:
        return PayoffStrategy(str(strategy).strip().lower())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid debt payoff strategy: {strategy!r}") from exc


def select_priority_order(
    strategy: PayoffStrategy | str, instruments: Iterable[DebtInstrument]
) -> list[DebtInstrument]:
    """Return a new list of instrument copies in repayment priority order.

    Snowball sorts ascending by balance, avalanche descending by rate. Python's
    sort is stable, so ties keep their input order. Hybrid has no distinct
    ordering yet and returns the avalanche order.
    """

    resolved = coerce_strategy(strategy)
    working: list[DebtInstrument] = []
    for item in instruments:
        if not isinstance(item, DebtInstrument):
            raise InvalidInputError(f"expected DebtInstrument, got {type(item).__name__}")
        # Copies so the caller's snapshot is never shared with a run.
        working.append(item.with_balance(item.principal_balance))

    if resolved is PayoffStrategy.SNOWBALL:
        return sorted(working, key=lambda d: d.principal_balance)
    if resolved is PayoffStrategy.HYBRID:
        logger.debug("Hybrid strategy has no distinct ordering; using avalanche order")
    return sorted(working, key=lambda d: d.annual_rate_bps, reverse=True)


def snowball_order(instruments: Iterable[DebtInstrument]) -> list[DebtInstrument]:
    """Smallest balance first."""
    return select_priority_order(PayoffStrategy.SNOWBALL, instruments)


def avalanche_order(instruments: Iterable[DebtInstrument]) -> list[DebtInstrument]:
    """Highest rate first."""
    return select_priority_order(PayoffStrategy.AVALANCHE, instruments)


__all__ = ["avalanche_order", "coerce_strategy", "select_priority_order", "snowball_order"]
