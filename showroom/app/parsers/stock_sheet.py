"""Normalizer for the standard manufacturer stock export.

The export has no fixed layout: a few banner rows may precede the header and
columns move between exports, so the header row is discovered and every
logical field is mapped to a column index by label before any data row is
read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from showroom.app.core.settings import settings
from showroom.app.domain.stock import INTERNAL, PUBLIC, ImportResult, Vehicle
from showroom.app.parsers._sheet_common import (
    SheetRows,
    cell,
    infer_powertrain,
    normalize_date,
    parse_int,
    stringify,
)
from showroom.app.parsers.option_codes import flatten_option_codes, parse_option_string

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 20
MIN_SELLABLE_STATUS = 150
VIN_LENGTH = 17

VISIBILITY_BY_TYPE = {"SH": PUBLIC, "ST": PUBLIC, "DE": INTERNAL}

# Ordered aliases per field; alias sets are kept disjoint.
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "vin": ("VIN",),
    "status_code": ("Order Status",),
    "order_status_text": ("Order Status Desc",),
    "model_code": ("Model Code",),
    "model_name": ("Model Description",),
    "body_group": ("Body Group",),
    "color_code": ("Color Code",),
    "upholstery_code": ("Upholstery Code",),
    "options_string": ("Options String",),
    "processing_type": ("Processing Type",),
    "production_date": ("Actual Production Date",),
    "sales_status": ("Status Sprzedaży", "Sales Status"),
    "reservation": ("Rezerwacja", "Reservation"),
}


@dataclass(frozen=True)
class StockRow:
    vin: Any = None
    status_code: Any = None
    order_status_text: Any = None
    model_code: Any = None
    model_name: Any = None
    body_group: Any = None
    color_code: Any = None
    upholstery_code: Any = None
    options_string: Any = None
    processing_type: Any = None
    production_date: Any = None
    sales_status: Any = None
    reservation: Any = None

    @classmethod
    def from_cells(cls, row: List[Any], columns: Dict[str, int]) -> "StockRow":
        return cls(**{name: cell(row, index) for name, index in columns.items()})


def _row_signature(row: List[Any]) -> str:
    return " ".join(stringify(value) for value in row).lower()


def find_header_row(rows: SheetRows) -> Tuple[int, bool]:
    """Return ``(index, used_fallback)`` for the header row."""
    for idx, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        signature = _row_signature(row)
        if "vin" in signature and ("status" in signature or "model" in signature):
            return idx, False
    return 0, True


def map_columns(header: List[Any]) -> Tuple[Dict[str, int], List[str]]:
    """Map each logical field to the index of the first header cell matching one of its aliases.

    An exact label match beats a substring match, so ``Order Status`` is not
    claimed by ``Order Status Desc`` when both columns are present.
    """
    labels = [stringify(value).lower() if isinstance(value, str) else "" for value in header]
    columns: Dict[str, int] = {}

    for field_name, aliases in COLUMN_ALIASES.items():
        wanted = [alias.lower() for alias in aliases]
        exact = next((idx for idx, label in enumerate(labels) if label and label in wanted), None)
        if exact is not None:
            columns[field_name] = exact
            continue
        partial = next(
            (idx for idx, label in enumerate(labels) if label and any(alias in label for alias in wanted)),
            None,
        )
        if partial is not None:
            columns[field_name] = partial

    warnings: List[str] = []
    claimed: Dict[int, List[str]] = {}
    for field_name, index in columns.items():
        claimed.setdefault(index, []).append(field_name)
    for index, field_names in claimed.items():
        if len(field_names) > 1:
            message = f"Column {index} ({stringify(header[index])}) matches several fields: {', '.join(field_names)}"
            logger.warning(message)
            warnings.append(message)

    return columns, warnings


def _build_vehicle(row: StockRow, vin: str, status: int, processing_type: str, visibility: str, currency: str) -> Vehicle:
    model_name = stringify(row.model_name)
    option_codes = parse_option_string(stringify(row.options_string))
    fuel_type, drivetrain = infer_powertrain(model_name)
    order_status = stringify(row.sales_status) or stringify(row.order_status_text) or str(status)

    return Vehicle(
        vin=vin,
        status_code=status,
        model_code=stringify(row.model_code),
        model_name=model_name,
        body_group=stringify(row.body_group) or None,
        color_code=stringify(row.color_code),
        upholstery_code=stringify(row.upholstery_code),
        option_codes=option_codes,
        all_option_codes=flatten_option_codes(option_codes),
        production_date=normalize_date(row.production_date),
        visibility=visibility,
        processing_type=processing_type,
        order_status=order_status,
        reservation_details=stringify(row.reservation),
        fuel_type=fuel_type,
        drivetrain=drivetrain,
        currency=currency,
    )


def _process_row(row: StockRow, result: ImportResult, currency: str) -> None:
    vin = stringify(row.vin).upper()
    if not vin:
        return
    if len(vin) != VIN_LENGTH:
        raise ValueError(f"VIN {vin!r} must be {VIN_LENGTH} characters, got {len(vin)}")

    status = parse_int(row.status_code) or 0
    if status < MIN_SELLABLE_STATUS:
        result.skipped_by_status += 1
        return

    processing_type = stringify(row.processing_type).upper()
    visibility = VISIBILITY_BY_TYPE.get(processing_type)
    if visibility is None:
        result.skipped_by_type += 1
        return

    vehicle = _build_vehicle(row, vin, status, processing_type, visibility, currency)
    if visibility == INTERNAL:
        result.hidden_internal += 1
    result.accept(vehicle)


def normalize_stock_sheet(rows: SheetRows, currency: Optional[str] = None) -> ImportResult:
    currency = currency or settings.stock_currency
    result = ImportResult()
    header_index, fallback = find_header_row(rows)
    result.header_row = header_index
    result.header_fallback = fallback
    header = rows[header_index] if rows else []
    if fallback:
        logger.warning("No header row found in the first %s rows; using row 0", HEADER_SCAN_ROWS)

    columns, warnings = map_columns(header)
    result.warnings.extend(warnings)
    if "vin" not in columns:
        result.errors.append("CRITICAL: Missing Headers: VIN")
        result.errors.append(f"Detected Header Row Index: {header_index}")
        result.errors.append(f"Found Headers in Row: {', '.join(stringify(value) for value in header)}")
        logger.error("Stock sheet has no VIN column (header row %s)", header_index)
        return result

    logger.info("Stock sheet header at row %s, mapped fields: %s", header_index, sorted(columns))

    for idx in range(header_index + 1, len(rows)):
        row_number = idx + 1
        try:
            _process_row(StockRow.from_cells(rows[idx], columns), result, currency)
        except Exception as exc:
            logger.warning("Row %s rejected: %s", row_number, exc)
            result.errors.append(f"Row {row_number}: {exc}")

    logger.info(
        "Stock sheet normalized: processed=%s skipped_status=%s skipped_type=%s hidden_de=%s errors=%s",
        result.processed,
        result.skipped_by_status,
        result.skipped_by_type,
        result.hidden_internal,
        len(result.errors),
    )
    return result
