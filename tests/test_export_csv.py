"""Tests for CSV export helpers."""

from __future__ import annotations

import csv
from pathlib import Path

from payoffsage.services import export_csv
from payoffsage.services.debts import persist_projection, run


def _read(path: Path) -> list[dict]:
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


def test_export_schedule_csv_creates_file(tmp_path, instrument_factory):
    """Exporting a summary writes a CSV with header and one row per allocation."""
    small = instrument_factory(id="small", balance=100.00, rate_bps=0, minimum_payment=30.00)
    large = instrument_factory(id="large", balance=1000.00, rate_bps=0, minimum_payment=50.00)
    summary = run([small, large], 100.00)

    output_path = tmp_path / "exports" / "schedule.csv"
    written = export_csv.export_schedule_csv(summary=summary, output_path=output_path)

    assert written == output_path
    assert output_path.exists(), "schedule export should create a CSV file"

    rows = _read(output_path)
    assert len(rows) == sum(len(r.allocations) for r in summary.schedule)
    assert list(rows[0].keys()) == export_csv.SCHEDULE_HEADERS
    assert rows[0] == {
        "period": "1",
        "instrument_id": "small",
        "is_target": "1",
        "interest": "0.00",
        "payment": "100.00",
        "ending_balance": "0.00",
    }
    assert rows[1]["instrument_id"] == "large"
    assert rows[1]["is_target"] == "0"
    assert rows[1]["payment"] == "80.00"


def test_csv_schedule_writer_writes_one_file_per_instrument(tmp_path, instrument_factory):
    debts = [
        instrument_factory(id="visa/1", balance=300.00, rate_bps=1200, minimum_payment=40.00),
        instrument_factory(id="store", balance=200.00, rate_bps=2400, minimum_payment=25.00),
    ]
    writer = export_csv.CsvScheduleWriter(tmp_path / "per-debt")

    summary = persist_projection(writer=writer, debts=debts, strategy="avalanche", surplus=50.00)

    names = sorted(path.name for path in writer.written)
    assert names == ["store.csv", "visa_1.csv"]
    store_rows = _read(tmp_path / "per-debt" / "store.csv")
    assert {row["instrument_id"] for row in store_rows} == {"store"}
    assert int(store_rows[-1]["period"]) == summary.outcome_for("store").payoff_period
    assert store_rows[-1]["ending_balance"] == "0.00"
