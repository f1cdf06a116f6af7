"""CSV ingestion of debt portfolios."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..errors import InvalidInputError
from ..models.liability import DebtInstrument


@dataclass(slots=True)
class ColumnMapping:
    """Maps instrument fields to (lower-cased) CSV headers.

    ``rate_bps`` wins over ``apr`` when both columns are present; ``apr`` is
    a percentage (``18.5`` means 18.5%).
    """

    id: str = "id"
    name: str = "name"
    balance: str = "balance"
    rate_bps: str = "rate_bps"
    apr: str = "apr"
    minimum_payment: str = "minimum_payment"
    priority: str | None = "priority"


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing.

    Unreadable files (empty, malformed, wrong encoding) and repeated headers
    raise :class:`InvalidInputError`.
    """

    try:
        # pandas renames repeated headers ("balance.1"), so check the raw row
        header = pd.read_csv(
            file_path, encoding=encoding, header=None, nrows=1, dtype=str, keep_default_na=False
        )
        frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise InvalidInputError(f"{file_path.name}: unreadable CSV ({exc})") from exc

    columns = [str(c).strip().lower() for c in header.iloc[0]]
    repeated = sorted({c for c in columns if columns.count(c) > 1})
    if repeated:
        raise InvalidInputError(
            f"{file_path.name}: duplicate column headers: {', '.join(repeated)}"
        )
    frame.columns = columns
    return frame


def _cell(row: Mapping, column: Optional[str]) -> str:
    if not column:
        return ""
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def _parse_rate_bps(row: Mapping, mapping: ColumnMapping, line: int) -> int:
    raw_bps = _cell(row, mapping.rate_bps)
    if raw_bps:
        try:
            value = float(raw_bps)
        except ValueError as exc:
            raise InvalidInputError(f"row {line}: rate_bps {raw_bps!r} is not numeric") from exc
        if not value.is_integer():
            raise InvalidInputError(f"row {line}: rate_bps must be a whole number, got {raw_bps!r}")
        return int(value)

    raw_apr = _cell(row, mapping.apr)
    if not raw_apr:
        raise InvalidInputError(f"row {line}: either rate_bps or apr is required")
    try:
        # 1% == 100 bps
        return int(round(float(raw_apr.rstrip("%")) * 100))
    except ValueError as exc:
        raise InvalidInputError(f"row {line}: apr {raw_apr!r} is not numeric") from exc


def _parse_amount(row: Mapping, column: str, line: int) -> float:
    raw = _cell(row, column)
    if not raw:
        raise InvalidInputError(f"row {line}: {column} is required")
    try:
        return float(raw.replace(",", "").lstrip("$"))
    except ValueError as exc:
        raise InvalidInputError(f"row {line}: {column} {raw!r} is not numeric") from exc


def instruments_from_rows(
    *, rows: Iterable[Mapping], mapping: ColumnMapping | None = None
) -> list[DebtInstrument]:
    """Convert dict-like rows into validated instruments.

    Row numbers in error messages are 1-based data rows (header excluded).
    Rows without an ``id`` fall back to their row number.
    """

    mapping = mapping or ColumnMapping()
    instruments: list[DebtInstrument] = []
    for line, row in enumerate(rows, start=1):
        if not any(str(value).strip() for value in row.values()):
            continue
        priority_raw = _cell(row, mapping.priority)
        try:
            priority = int(priority_raw) if priority_raw else None
        except ValueError as exc:
            raise InvalidInputError(f"row {line}: priority {priority_raw!r} is not an integer") from exc

        identifier = _cell(row, mapping.id) or str(line)
        try:
            instrument = DebtInstrument(
                id=identifier,
                name=_cell(row, mapping.name) or identifier,
                principal_balance=_parse_amount(row, mapping.balance, line),
                annual_rate_bps=_parse_rate_bps(row, mapping, line),
                minimum_payment=_parse_amount(row, mapping.minimum_payment, line),
                priority_index=priority,
            )
        except InvalidInputError as exc:
            if str(exc).startswith("row "):
                raise
            raise InvalidInputError(f"row {line}: {exc}") from exc
        instruments.append(instrument)
    return instruments


def load_instruments(
    csv_path: Path, *, mapping: ColumnMapping | None = None, encoding: str = "utf-8"
) -> list[DebtInstrument]:
    """Parse ``csv_path`` into a list of instruments in file order."""

    frame = normalize_frame(file_path=Path(csv_path), encoding=encoding)
    rows = [{c: r[c] for c in frame.columns} for _, r in frame.iterrows()]
    return instruments_from_rows(rows=rows, mapping=mapping)


__all__ = ["ColumnMapping", "instruments_from_rows", "load_instruments", "normalize_frame"]
