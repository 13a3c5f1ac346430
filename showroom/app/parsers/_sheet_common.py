"""Shared helpers for reading manufacturer stock spreadsheets."""

from __future__ import annotations

import io
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Tuple

import pandas as pd

SheetRows = List[List[Any]]

EXCEL_EPOCH = date(1899, 12, 30)
DOTTED_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
EXCEL_SERIAL_RE = re.compile(r"^\d{5}(?:\.\d+)?$")
LEADING_INT_RE = re.compile(r"^[+-]?\d+")

DIESEL_RE = re.compile(r"\d{2,3}d\b")
PLUG_IN_RE = re.compile(r"\d{2,3}e\b|edrive")
PETROL_RE = re.compile(r"\d{2,3}i\b|\bm[56]0\b")


def load_sheet_rows(filename: str, content: bytes) -> SheetRows:
    """Read the first sheet of an xlsx/csv upload as a raw grid of cells."""
    buffer = io.BytesIO(content)
    try:
        if filename.lower().endswith(".csv"):
            df = pd.read_csv(buffer, header=None, dtype=object, skip_blank_lines=False)
        else:
            df = pd.read_excel(buffer, header=None)
    except Exception as exc:
        raise ValueError(f"Unable to read spreadsheet: {exc}") from exc

    return [
        [None if is_null(value) else value for value in row]
        for row in df.itertuples(index=False, name=None)
    ]


def is_null(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell(row: List[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    value = row[index]
    return None if is_null(value) else value


def stringify(value: Any) -> str:
    if value is None or is_null(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return None
        return int(value)
    match = LEADING_INT_RE.match(str(value).strip())
    if not match:
        return None
    return int(match.group(0))


def normalize_date(value: Any) -> Optional[str]:
    """Render a production-date cell as ``YYYY-MM-DD`` where it can be read.

    Handles Excel serial numbers (numeric cells or five-digit text from csv),
    ``DD.MM.YYYY`` strings and date objects; other text is passed through
    trimmed.
    """
    if value is None or is_null(value):
        return None
    if isinstance(value, (pd.Timestamp, datetime)):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (EXCEL_EPOCH + timedelta(days=int(value))).isoformat()

    text = str(value).strip()
    if not text:
        return None
    dotted = DOTTED_DATE_RE.match(text)
    if dotted:
        day, month, year = dotted.groups()
        return f"{year}-{int(month):02d}-{int(day):02d}"
    if EXCEL_SERIAL_RE.match(text):
        return (EXCEL_EPOCH + timedelta(days=int(float(text)))).isoformat()
    if ISO_DATE_RE.match(text):
        return text[:10]
    return text


def infer_powertrain(model_name: str) -> Tuple[Optional[str], Optional[str]]:
    """Guess (fuel_type, drivetrain) from a model description like ``"X5 xDrive30d"``."""
    desc = (model_name or "").strip().lower()
    if not desc:
        return None, None

    drivetrain = None
    if "xdrive" in desc:
        drivetrain = "xDrive"
    elif "sdrive" in desc:
        drivetrain = "sDrive"

    fuel_type = None
    if DIESEL_RE.search(desc):
        fuel_type = "Diesel"
    elif PLUG_IN_RE.search(desc):
        fuel_type = "Electric" if desc.startswith("i") else "Hybrid"
    elif desc.startswith("i"):
        fuel_type = "Electric"
    elif PETROL_RE.search(desc):
        fuel_type = "Gasoline"

    return fuel_type, drivetrain
