"""CSV export helpers for payoff schedules."""

from __future__ import annotations

import csv
from pathlib import Path

from ..models.summary import PayoffSummary
from .debts import schedule_rows

SCHEDULE_HEADERS = ["period", "instrument_id", "is_target", "interest", "payment", "ending_balance"]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _write_rows(rows: list[dict], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=SCHEDULE_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for row in rows:
            writer.writerow({key: _serialize_value(row.get(key)) for key in SCHEDULE_HEADERS})
    return output_path


def export_schedule_csv(*, summary: PayoffSummary, output_path: Path) -> Path:
    """Write a summary's month-by-month allocations to CSV at `output_path`.

    One row per (period, instrument) with deterministic columns; amounts are
    rounded to cents for display only. Returns the path written.
    """

    return _write_rows(schedule_rows(summary), Path(output_path))


class CsvScheduleWriter:
    """`ScheduleWriter` that stores one CSV per instrument under a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.written: list[Path] = []

    def write_schedule(self, *, instrument_id: str, rows: list[dict]) -> None:
        safe_name = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in instrument_id)
        path = _write_rows(rows, self.directory / f"{safe_name}.csv")
        self.written.append(path)


__all__ = ["CsvScheduleWriter", "SCHEDULE_HEADERS", "export_schedule_csv"]
