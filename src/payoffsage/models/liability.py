"""Debt and liability entities."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional

from ..errors import InvalidInputError

BASIS_POINTS_PER_UNIT = 10_000
MONTHS_PER_YEAR = 12


def periodic_interest(balance: float, annual_rate_bps: int) -> float:
    """Return one month of simple interest on ``balance``.

    Multiplication happens before the divisions so whole-cent balances with
    round rates (e.g. 1200 at 1000 bps) produce exact results.
    """

    return balance * annual_rate_bps / BASIS_POINTS_PER_UNIT / MONTHS_PER_YEAR


def validate_amount(field_name: str, value: object) -> float:
    """Return ``value`` as a finite, non-negative float or raise InvalidInputError."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{field_name} must be a number, got {value!r}")
    amount = float(value)
    if not math.isfinite(amount):
        raise InvalidInputError(f"{field_name} must be finite, got {value!r}")
    if amount < 0:
        raise InvalidInputError(f"{field_name} must be >= 0, got {value!r}")
    return amount


@dataclass(frozen=True, slots=True)
class DebtInstrument:
    """Installment or revolving debt supplied to a payoff projection.

    Instances are immutable snapshots; the engine derives its own working
    balances and reports post-run state through :meth:`with_balance` copies.
    ``priority_index`` is an advisory hint only and never drives allocation.
    """

    id: str
    name: str
    principal_balance: float
    annual_rate_bps: int
    minimum_payment: float
    priority_index: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise InvalidInputError(f"instrument id must be a non-empty string, got {self.id!r}")
        if isinstance(self.annual_rate_bps, bool) or not isinstance(self.annual_rate_bps, int):
            raise InvalidInputError(
                f"annual_rate_bps must be an integer, got {self.annual_rate_bps!r} ({self.id})"
            )
        if self.annual_rate_bps < 0:
            raise InvalidInputError(
                f"annual_rate_bps must be >= 0, got {self.annual_rate_bps} ({self.id})"
            )
        # Frozen dataclass: normalise ints to floats through object.__setattr__.
        object.__setattr__(
            self, "principal_balance", validate_amount("principal_balance", self.principal_balance)
        )
        object.__setattr__(
            self, "minimum_payment", validate_amount("minimum_payment", self.minimum_payment)
        )

    @property
    def monthly_interest(self) -> float:
        """Interest one period would add at the current balance."""
        return periodic_interest(self.principal_balance, self.annual_rate_bps)

    @property
    def annual_rate_percent(self) -> float:
        return self.annual_rate_bps / 100

    def with_balance(self, balance: float) -> "DebtInstrument":
        """Return a copy carrying ``balance``; the receiver is left untouched."""
        return replace(self, principal_balance=balance)


__all__ = [
    "BASIS_POINTS_PER_UNIT",
    "DebtInstrument",
    "MONTHS_PER_YEAR",
    "periodic_interest",
    "validate_amount",
]
