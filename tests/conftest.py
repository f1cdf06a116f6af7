"""Pytest configuration and shared fixtures for PayoffSage tests.

This module provides instrument factories, environment isolation, and helper
utilities for testing the ledger model, strategy selector, and simulation
engine without touching a real data directory.
"""

from __future__ import annotations

import logging

import pytest

from payoffsage.models import DebtInstrument

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Point PAYOFFSAGE_DATA_DIR at a per-test temporary directory.

    Also clears any env overrides a developer may have exported locally so
    configuration defaults are predictable.
    """
    for name in (
        "PAYOFFSAGE_DEV_MODE",
        "PAYOFFSAGE_MAX_PERIODS",
        "PAYOFFSAGE_SETTLEMENT_EPSILON",
        "PAYOFFSAGE_DEFAULT_STRATEGY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PAYOFFSAGE_DATA_DIR", str(tmp_path / "instance"))
    return tmp_path / "instance"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Detach handlers added by setup_logging so they don't leak across tests."""
    yield
    logger = logging.getLogger("payoffsage")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def instrument_factory():
    """Factory for creating test debt instruments.

    Returns:
        Callable: Function that builds DebtInstrument instances
    """

    def _create_instrument(
        id: str = "debt",
        balance: float = 1000.00,
        rate_bps: int = 1800,
        minimum_payment: float = 25.00,
        name: str | None = None,
        priority_index: int | None = None,
    ) -> DebtInstrument:
        """Create a test instrument with sensible defaults.

        Args:
            id: Stable identifier
            balance: Starting principal balance
            rate_bps: Annual rate in basis points (1800 == 18%)
            minimum_payment: Minimum monthly payment
            name: Display label (defaults to the id)

        Returns:
            DebtInstrument: Validated instrument
        """
        return DebtInstrument(
            id=id,
            name=name or id.title(),
            principal_balance=balance,
            annual_rate_bps=rate_bps,
            minimum_payment=minimum_payment,
            priority_index=priority_index,
        )

    return _create_instrument


@pytest.fixture
def example_portfolio(instrument_factory):
    """Two-instrument portfolio where B is both smaller and pricier."""
    return [
        instrument_factory(id="A", balance=1000.00, rate_bps=1200, minimum_payment=50.00),
        instrument_factory(id="B", balance=500.00, rate_bps=1800, minimum_payment=30.00),
    ]


@pytest.fixture
def divergent_portfolio(instrument_factory):
    """Portfolio where snowball and avalanche pick different first targets."""
    return [
        instrument_factory(id="small", balance=500.00, rate_bps=1000, minimum_payment=25.00),
        instrument_factory(id="large", balance=5000.00, rate_bps=2000, minimum_payment=100.00),
    ]


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
