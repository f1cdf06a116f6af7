"""Result records produced by payoff simulations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .liability import DebtInstrument


class PayoffStrategy(str, Enum):
    """Repayment orderings understood by the strategy selector."""

    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"
    # Placeholder: currently allocates exactly like AVALANCHE.
    HYBRID = "hybrid"


class Termination(str, Enum):
    """How a simulation run ended."""

    CONVERGED = "converged"
    NON_CONVERGENT = "non_convergent"


@dataclass(frozen=True, slots=True)
class Allocation:
    """One instrument's activity within a single period."""

    instrument_id: str
    interest: float
    payment: float
    ending_balance: float


@dataclass(frozen=True, slots=True)
class PeriodRecord:
    """Portfolio totals for one simulated month.

    ``balance_before + interest - payments - written_off == balance_after``
    holds for every record up to floating point noise.
    """

    period: int
    target_id: Optional[str]
    balance_before: float
    interest: float
    payments: float
    written_off: float
    balance_after: float
    allocations: tuple[Allocation, ...]


@dataclass(frozen=True, slots=True)
class InstrumentOutcome:
    """Per-instrument totals across a whole run."""

    instrument_id: str
    payoff_period: Optional[int]
    interest_accrued: float
    payments_applied: float

    @property
    def settled(self) -> bool:
        return self.payoff_period is not None


@dataclass(frozen=True, slots=True)
class PayoffSummary:
    """Immutable result of one simulation run."""

    strategy_name: PayoffStrategy
    periods_elapsed: int
    total_interest_accrued: float
    total_payments_applied: float
    instruments_settled: int
    final_instrument_states: tuple[DebtInstrument, ...]
    termination: Termination
    schedule: tuple[PeriodRecord, ...] = ()
    instrument_outcomes: tuple[InstrumentOutcome, ...] = ()
    # Dust balances (at or below epsilon) cleared before period 1.
    initial_written_off: float = 0.0

    @property
    def converged(self) -> bool:
        return self.termination is Termination.CONVERGED

    @property
    def remaining_balance(self) -> float:
        return sum(item.principal_balance for item in self.final_instrument_states)

    @property
    def total_written_off(self) -> float:
        """Residuals cleared by clamping, before and during the run."""
        return self.initial_written_off + sum(record.written_off for record in self.schedule)

    def outcome_for(self, instrument_id: str) -> InstrumentOutcome:
        for outcome in self.instrument_outcomes:
            if outcome.instrument_id == instrument_id:
                return outcome
        raise KeyError(instrument_id)


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    """Side-by-side runs of several strategies over one portfolio."""

    summaries: tuple[PayoffSummary, ...]
    best: Optional[PayoffSummary]
    interest_savings: float

    def summary_for(self, strategy: PayoffStrategy | str) -> PayoffSummary:
        wanted = PayoffStrategy(strategy)
        for summary in self.summaries:
            if summary.strategy_name is wanted:
                return summary
        raise KeyError(wanted.value)
