"""Tests for the DebtInstrument ledger model and periodic interest."""

from __future__ import annotations

import math
from dataclasses import FrozenInstanceError

import pytest

from payoffsage.errors import InvalidInputError, PayoffSageError
from payoffsage.models import DebtInstrument, periodic_interest
from tests.conftest import assert_float_equal


class TestPeriodicInterest:
    """Monthly interest derived from basis-point rates."""

    def test_twelve_percent_is_one_percent_monthly(self):
        assert_float_equal(periodic_interest(1000.00, 1200), 10.00, tolerance=1e-9)

    def test_round_inputs_are_exact(self):
        """Multiplying before dividing keeps whole-cent cases exact."""
        assert periodic_interest(1200.00, 1000) == 10.0
        assert periodic_interest(500.00, 1800) == 7.5

    def test_zero_rate_accrues_nothing(self):
        assert periodic_interest(2500.00, 0) == 0.0

    def test_zero_balance_accrues_nothing(self):
        assert periodic_interest(0.0, 2400) == 0.0

    def test_instrument_monthly_interest_property(self, instrument_factory):
        debt = instrument_factory(balance=1000.00, rate_bps=2400)
        assert_float_equal(debt.monthly_interest, 20.00, tolerance=1e-9)
        assert debt.annual_rate_percent == 24.0


class TestDebtInstrumentValidation:
    """Construction fails fast instead of clamping."""

    def test_valid_instrument_normalises_amounts_to_float(self):
        debt = DebtInstrument(
            id="card", name="Card", principal_balance=1000, annual_rate_bps=1999, minimum_payment=35
        )
        assert isinstance(debt.principal_balance, float)
        assert isinstance(debt.minimum_payment, float)
        assert debt.priority_index is None

    def test_zero_values_are_allowed(self):
        debt = DebtInstrument(
            id="zero", name="Zero", principal_balance=0.0, annual_rate_bps=0, minimum_payment=0.0
        )
        assert debt.principal_balance == 0.0

    @pytest.mark.parametrize(
        "field, value",
        [
            ("principal_balance", -0.01),
            ("minimum_payment", -5.0),
            ("annual_rate_bps", -1),
        ],
    )
    def test_negative_values_rejected(self, field, value):
        kwargs = dict(
            id="bad", name="Bad", principal_balance=100.0, annual_rate_bps=500, minimum_payment=10.0
        )
        kwargs[field] = value
        with pytest.raises(InvalidInputError, match=">= 0"):
            DebtInstrument(**kwargs)

    @pytest.mark.parametrize("value", [math.inf, math.nan])
    def test_non_finite_balance_rejected(self, value):
        with pytest.raises(InvalidInputError, match="finite"):
            DebtInstrument(
                id="x", name="X", principal_balance=value, annual_rate_bps=0, minimum_payment=0.0
            )

    @pytest.mark.parametrize("rate", [12.5, True, "1200"])
    def test_rate_must_be_integer_basis_points(self, rate):
        with pytest.raises(InvalidInputError, match="integer"):
            DebtInstrument(
                id="x", name="X", principal_balance=10.0, annual_rate_bps=rate, minimum_payment=1.0
            )

    @pytest.mark.parametrize("identifier", ["", "   ", None])
    def test_id_must_be_non_empty(self, identifier):
        with pytest.raises(InvalidInputError, match="id"):
            DebtInstrument(
                id=identifier, name="X", principal_balance=10.0, annual_rate_bps=0, minimum_payment=1.0
            )

    def test_non_numeric_balance_rejected(self):
        with pytest.raises(InvalidInputError, match="number"):
            DebtInstrument(
                id="x", name="X", principal_balance="100", annual_rate_bps=0, minimum_payment=1.0
            )

    def test_invalid_input_error_is_a_value_error(self):
        """Callers catching ValueError keep working."""
        assert issubclass(InvalidInputError, ValueError)
        assert issubclass(InvalidInputError, PayoffSageError)


class TestDebtInstrumentImmutability:
    """Snapshots are never mutated in place."""

    def test_instrument_is_frozen(self, instrument_factory):
        debt = instrument_factory()
        with pytest.raises(FrozenInstanceError):
            debt.principal_balance = 0.0  # type: ignore[misc]

    def test_with_balance_returns_copy(self, instrument_factory):
        debt = instrument_factory(id="card", balance=1000.00, priority_index=3)
        copy = debt.with_balance(250.00)

        assert copy is not debt
        assert copy.principal_balance == 250.00
        assert debt.principal_balance == 1000.00
        assert (copy.id, copy.name, copy.annual_rate_bps, copy.minimum_payment, copy.priority_index) == (
            debt.id,
            debt.name,
            debt.annual_rate_bps,
            debt.minimum_payment,
            debt.priority_index,
        )
