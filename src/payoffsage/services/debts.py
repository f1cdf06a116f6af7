"""Debt payoff simulation engine.

One loop iteration is one calendar month:

1. interest accrues on every unpaid instrument;
2. the capital pool is the sum of *all* original minimum payments plus the
   extra budget, so minimums freed by settled debts stay in the pool;
3. every unpaid instrument except the current target pays its minimum;
4. the target receives whatever is left in the pool;
5. if the target settles, the leftover cascades down the priority order
   within the same month.

Balances at or below the settlement epsilon are clamped to zero and the
clamped residual is reported as ``written_off`` so every period reconciles.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional, Protocol, Sequence

from ..errors import InvalidInputError
from ..logging_config import get_logger
from ..models.liability import DebtInstrument, periodic_interest, validate_amount
from ..models.summary import (
    Allocation,
    InstrumentOutcome,
    PayoffStrategy,
    PayoffSummary,
    PeriodRecord,
    StrategyComparison,
    Termination,
)
from .strategies import coerce_strategy, select_priority_order

logger = get_logger(__name__)

DEFAULT_MAX_PERIODS = 12_000  # 1,000 years
SETTLEMENT_EPSILON = 0.01


class ScheduleWriter(Protocol):
    """Receives per-instrument schedule rows from a projection."""

    def write_schedule(
        self, *, instrument_id: str, rows: list[dict]
    ) -> None:  # pragma: no cover - interface
        ...


def _validate_run_inputs(
    instruments: Iterable[DebtInstrument],
    extra_monthly_payment: float,
    max_periods: int,
    epsilon: float,
) -> tuple[list[DebtInstrument], float]:
    items = list(instruments)
    if not items:
        raise InvalidInputError("At least one debt instrument is required.")
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, DebtInstrument):
            raise InvalidInputError(f"expected DebtInstrument, got {type(item).__name__}")
        if item.id in seen:
            raise InvalidInputError(f"duplicate instrument id: {item.id!r}")
        seen.add(item.id)
    extra = validate_amount("extra_monthly_payment", extra_monthly_payment)
    if isinstance(max_periods, bool) or not isinstance(max_periods, int) or max_periods <= 0:
        raise InvalidInputError(f"max_periods must be a positive integer, got {max_periods!r}")
    if not math.isfinite(epsilon) or epsilon < 0:
        raise InvalidInputError(f"epsilon must be finite and >= 0, got {epsilon!r}")
    return items, extra


def capital_covers_interest(
    instruments: Iterable[DebtInstrument], extra_monthly_payment: float
) -> bool:
    """Return True when the monthly pool exceeds first-month interest.

    Advisory only: the engine still relies on its period ceiling to stop.
    """

    items = list(instruments)
    pool = sum(item.minimum_payment for item in items) + extra_monthly_payment
    interest = sum(item.monthly_interest for item in items)
    return pool > interest


def _next_unpaid(balances: Sequence[float], start: int, epsilon: float) -> Optional[int]:
    for index in range(start, len(balances)):
        if balances[index] > epsilon:
            return index
    return None


def run(
    instruments: Iterable[DebtInstrument],
    extra_monthly_payment: float,
    *,
    strategy: PayoffStrategy | str = PayoffStrategy.AVALANCHE,
    max_periods: int = DEFAULT_MAX_PERIODS,
    epsilon: float = SETTLEMENT_EPSILON,
) -> PayoffSummary:
    """Simulate payoff of ``instruments`` in the order given.

    The list order *is* the repayment priority; use :func:`simulate` to have a
    strategy order it first. ``strategy`` only tags the resulting summary.
    Reaching ``max_periods`` with debt outstanding returns a summary with
    ``Termination.NON_CONVERGENT`` rather than raising.
    """

    ordered, extra = _validate_run_inputs(instruments, extra_monthly_payment, max_periods, epsilon)
    resolved = coerce_strategy(strategy)
    count = len(ordered)

    balances = [item.principal_balance for item in ordered]
    minimums = [item.minimum_payment for item in ordered]
    rates = [item.annual_rate_bps for item in ordered]
    pool_per_period = sum(minimums) + extra

    interest_by = [0.0] * count
    paid_by = [0.0] * count
    payoff_period: list[Optional[int]] = [None] * count
    initial_written_off = 0.0
    for index, balance in enumerate(balances):
        if balance <= epsilon:
            initial_written_off += balance
            balances[index] = 0.0
            payoff_period[index] = 0

    if not capital_covers_interest(ordered, extra):
        logger.warning(
            "Monthly capital does not cover first-month interest; payoff may not converge",
            extra={"pool": pool_per_period, "strategy": resolved.value},
        )
    logger.debug(
        "Starting payoff simulation",
        extra={
            "strategy": resolved.value,
            "instruments": count,
            "pool": pool_per_period,
            "max_periods": max_periods,
        },
    )

    schedule: list[PeriodRecord] = []
    period = 0
    while period < max_periods and any(balance > epsilon for balance in balances):
        period += 1
        active = [index for index in range(count) if balances[index] > epsilon]
        balance_before = sum(balances)
        interest_now = [0.0] * count
        payment_now = [0.0] * count

        for index in active:
            accrued = periodic_interest(balances[index], rates[index])
            balances[index] += accrued
            interest_now[index] = accrued

        pool = pool_per_period
        target = active[0]

        # Everyone but the target pays its contractual minimum.
        for index in active[1:]:
            payment = min(minimums[index], balances[index])
            balances[index] -= payment
            payment_now[index] += payment
            pool -= payment
        pool = max(pool, 0.0)

        # Target takes the rest; leftovers cascade once it settles.
        recipient: Optional[int] = target
        while recipient is not None and pool > 0:
            payment = min(pool, balances[recipient])
            balances[recipient] -= payment
            payment_now[recipient] += payment
            pool -= payment
            if balances[recipient] > epsilon:
                break
            recipient = _next_unpaid(balances, recipient + 1, epsilon)

        written_off = 0.0
        for index in active:
            if balances[index] <= epsilon:
                written_off += balances[index]
                balances[index] = 0.0
                payoff_period[index] = period
            interest_by[index] += interest_now[index]
            paid_by[index] += payment_now[index]

        schedule.append(
            PeriodRecord(
                period=period,
                target_id=ordered[target].id,
                balance_before=balance_before,
                interest=sum(interest_now),
                payments=sum(payment_now),
                written_off=written_off,
                balance_after=sum(balances),
                allocations=tuple(
                    Allocation(
                        instrument_id=ordered[index].id,
                        interest=interest_now[index],
                        payment=payment_now[index],
                        ending_balance=balances[index],
                    )
                    for index in active
                ),
            )
        )

    converged = all(balance <= epsilon for balance in balances)
    summary = PayoffSummary(
        strategy_name=resolved,
        periods_elapsed=period,
        total_interest_accrued=sum(interest_by),
        total_payments_applied=sum(paid_by),
        instruments_settled=sum(1 for value in payoff_period if value is not None),
        final_instrument_states=tuple(
            item.with_balance(balances[index]) for index, item in enumerate(ordered)
        ),
        termination=Termination.CONVERGED if converged else Termination.NON_CONVERGENT,
        schedule=tuple(schedule),
        instrument_outcomes=tuple(
            InstrumentOutcome(
                instrument_id=item.id,
                payoff_period=payoff_period[index],
                interest_accrued=interest_by[index],
                payments_applied=paid_by[index],
            )
            for index, item in enumerate(ordered)
        ),
        initial_written_off=initial_written_off,
    )

    if converged:
        logger.info(
            "Payoff simulation converged",
            extra={
                "strategy": resolved.value,
                "periods": summary.periods_elapsed,
                "total_interest": round(summary.total_interest_accrued, 2),
            },
        )
    else:
        logger.warning(
            "Payoff simulation hit the period ceiling without converging",
            extra={
                "strategy": resolved.value,
                "periods": summary.periods_elapsed,
                "remaining_balance": round(summary.remaining_balance, 2),
            },
        )
    return summary


def simulate(
    strategy: PayoffStrategy | str,
    instruments: Iterable[DebtInstrument],
    extra_monthly_payment: float,
    **engine_options: Any,
) -> PayoffSummary:
    """Order ``instruments`` by ``strategy`` and run the engine."""

    resolved = coerce_strategy(strategy)
    ordered = select_priority_order(resolved, instruments)
    return run(ordered, extra_monthly_payment, strategy=resolved, **engine_options)


def snowball_summary(
    *, debts: Iterable[DebtInstrument], surplus: float, **engine_options: Any
) -> PayoffSummary:
    """Return payoff summary prioritizing smallest balances first."""
    return simulate(PayoffStrategy.SNOWBALL, debts, surplus, **engine_options)


def avalanche_summary(
    *, debts: Iterable[DebtInstrument], surplus: float, **engine_options: Any
) -> PayoffSummary:
    """Return payoff summary prioritizing highest rates first."""
    return simulate(PayoffStrategy.AVALANCHE, debts, surplus, **engine_options)


def compare_strategies(
    instruments: Iterable[DebtInstrument],
    extra_monthly_payment: float,
    strategies: Sequence[PayoffStrategy | str] = (PayoffStrategy.SNOWBALL, PayoffStrategy.AVALANCHE),
    **engine_options: Any,
) -> StrategyComparison:
    """Run each strategy independently over the same portfolio.

    ``best`` is the converged run with the least interest, then the fewest
    periods; earlier strategies win exact ties. ``interest_savings`` is the
    gap between the most and least expensive converged runs.
    """

    if not strategies:
        raise InvalidInputError("At least one strategy is required for a comparison.")
    items = list(instruments)
    summaries = tuple(
        simulate(strategy, items, extra_monthly_payment, **engine_options)
        for strategy in strategies
    )
    converged = [summary for summary in summaries if summary.converged]
    if not converged:
        return StrategyComparison(summaries=summaries, best=None, interest_savings=0.0)

    best = min(converged, key=lambda s: (s.total_interest_accrued, s.periods_elapsed))
    worst_interest = max(summary.total_interest_accrued for summary in converged)
    return StrategyComparison(
        summaries=summaries,
        best=best,
        interest_savings=worst_interest - best.total_interest_accrued,
    )


def schedule_summary(summary: PayoffSummary) -> tuple[int, float, bool]:
    """Return (months, total_interest, converged)."""

    return summary.periods_elapsed, summary.total_interest_accrued, summary.converged


def schedule_rows(summary: PayoffSummary, instrument_id: str | None = None) -> list[dict]:
    """Flatten a summary's schedule into one dict per period and instrument."""

    rows: list[dict] = []
    for record in summary.schedule:
        for allocation in record.allocations:
            if instrument_id is not None and allocation.instrument_id != instrument_id:
                continue
            rows.append(
                {
                    "period": record.period,
                    "instrument_id": allocation.instrument_id,
                    "is_target": allocation.instrument_id == record.target_id,
                    "interest": allocation.interest,
                    "payment": allocation.payment,
                    "ending_balance": allocation.ending_balance,
                }
            )
    return rows


def persist_projection(
    *,
    writer: ScheduleWriter,
    debts: Iterable[DebtInstrument],
    strategy: PayoffStrategy | str,
    surplus: float,
    **engine_options: Any,
) -> PayoffSummary:
    """Compute the projection for ``strategy`` and hand rows to ``writer``."""

    summary = simulate(strategy, debts, surplus, **engine_options)
    for state in summary.final_instrument_states:
        writer.write_schedule(instrument_id=state.id, rows=schedule_rows(summary, state.id))
    return summary


__all__ = [
    "DEFAULT_MAX_PERIODS",
    "SETTLEMENT_EPSILON",
    "ScheduleWriter",
    "avalanche_summary",
    "capital_covers_interest",
    "compare_strategies",
    "persist_projection",
    "run",
    "schedule_rows",
    "schedule_summary",
    "simulate",
    "snowball_summary",
]
