"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .models.summary import PayoffStrategy

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default: float, cast=float):
    """Read a numeric environment variable, rejecting unparsable values."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return cast(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "PayoffSage"
    LOG_FILENAME = "payoffsage.log"
    # 1,000 simulated years.
    DEFAULT_MAX_PERIODS = 12_000
    DEFAULT_SETTLEMENT_EPSILON = 0.01

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("PAYOFFSAGE_DEV_MODE", default=True)
        self.MAX_PERIODS = _env_number(
            "PAYOFFSAGE_MAX_PERIODS", self.DEFAULT_MAX_PERIODS, cast=int
        )
        self.SETTLEMENT_EPSILON = _env_number(
            "PAYOFFSAGE_SETTLEMENT_EPSILON", self.DEFAULT_SETTLEMENT_EPSILON
        )
        self.DEFAULT_STRATEGY = os.getenv("PAYOFFSAGE_DEFAULT_STRATEGY", "avalanche").strip().lower()
        if self.DEFAULT_STRATEGY not in {strategy.value for strategy in PayoffStrategy}:
            choices = ", ".join(strategy.value for strategy in PayoffStrategy)
            raise ValueError(f"PAYOFFSAGE_DEFAULT_STRATEGY must be one of {choices}.")
        if self.MAX_PERIODS <= 0:
            raise ValueError("PAYOFFSAGE_MAX_PERIODS must be a positive integer.")
        if self.SETTLEMENT_EPSILON < 0:
            raise ValueError("PAYOFFSAGE_SETTLEMENT_EPSILON must be >= 0.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where logs and exports live."""

        data_root = os.getenv("PAYOFFSAGE_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def engine_options(self) -> dict[str, Any]:
        """Expose keyword arguments for the simulation engine to consume."""

        return {"max_periods": self.MAX_PERIODS, "epsilon": self.SETTLEMENT_EPSILON}


class DevConfig(BaseConfig):
    """Development configuration."""

    DEBUG = True
    TESTING = False
