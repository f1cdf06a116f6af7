"""JSON file logging and console output for payoff runs.

Simulation context passed through ``extra=`` (strategy, period count, pool,
interest and remaining balance) is grouped under a ``simulation`` key in the
JSON log and appended as ``key=value`` pairs on the console.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from .config import BaseConfig

# Engine fields rendered as a group rather than as loose extras
SIMULATION_FIELDS = (
    "strategy",
    "periods",
    "max_periods",
    "instruments",
    "pool",
    "total_interest",
    "remaining_balance",
)

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "getMessage", "stack_trace", "taskName", "asctime",
}


def split_extras(record: logging.LogRecord) -> tuple[dict, dict]:
    """Return ``(simulation, other)`` dicts of the record's extra fields."""

    fields = record.__dict__
    simulation = {key: fields[key] for key in SIMULATION_FIELDS if key in fields}
    other = {
        key: value
        for key, value in fields.items()
        if key not in _STANDARD_ATTRS and key not in simulation
    }
    return simulation, other


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        simulation, other = split_extras(record)
        if simulation:
            log_data["simulation"] = simulation
        if other:
            log_data["extra"] = other

        return json.dumps(log_data, default=str)


class SimulationConsoleFormatter(logging.Formatter):
    """Plain console format with simulation context appended."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        simulation, _ = split_extras(record)
        if simulation:
            pairs = " ".join(f"{key}={value}" for key, value in simulation.items())
            line = f"{line} ({pairs})"
        return line


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Attach console and rotating JSON file handlers to the package logger.

    The log file lives at ``DATA_DIR/logs/LOG_FILENAME``. Calling this again
    replaces the previous handlers.
    """
    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger("payoffsage")
    root_logger.setLevel(logging.INFO)

    # Remove existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)

    if config.DEV_MODE:
        console_format = "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"
    else:
        console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    console_handler.setFormatter(
        SimulationConsoleFormatter(
            fmt=console_format,
            datefmt="%H:%M:%S" if config.DEV_MODE else "%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(console_handler)

    log_file = logs_dir / config.LOG_FILENAME
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(file_handler)

    root_logger.info(
        "Logging initialized",
        extra={
            "dev_mode": config.DEV_MODE,
            "log_file": str(log_file),
            "data_dir": str(config.DATA_DIR),
        },
    )

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance under the ``payoffsage`` namespace
    """
    if name == "payoffsage" or name.startswith("payoffsage."):
        return logging.getLogger(name)
    return logging.getLogger(f"payoffsage.{name}")
