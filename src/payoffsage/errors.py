"""Domain-specific exceptions."""


class PayoffSageError(Exception):
    """Base exception for the payoff engine."""

    pass


class InvalidInputError(PayoffSageError, ValueError):
    """Portfolio, instrument, or budget input is malformed.

    Raised before any simulation period runs; callers never receive a
    partial result alongside this error.
    """

    pass
