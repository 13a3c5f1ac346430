"""BMW PL dealer-network stock list.

Fixed column layout, first row is a header:
A order status, C VIN, E model description, G model code,
H production date, I color, J upholstery, K options string,
N dealer name, O sales status (TAK / NIE / PRZEJĘTE).
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from showroom.app.core.settings import settings
from showroom.app.domain.stock import PUBLIC, ImportResult, Vehicle
from showroom.app.parsers._sheet_common import SheetRows, cell, normalize_date, parse_int, stringify
from showroom.app.parsers.option_codes import flatten_option_codes, parse_option_string
from showroom.app.parsers.stock_sheet import MIN_SELLABLE_STATUS

logger = logging.getLogger(__name__)

COL_STATUS = 0
COL_VIN = 2
COL_MODEL_NAME = 4
COL_MODEL_CODE = 6
COL_PRODUCTION_DATE = 7
COL_COLOR = 8
COL_UPHOLSTERY = 9
COL_OPTIONS = 10
COL_DEALER = 13
COL_SALES_STATUS = 14

DEALER_MARKER = "BMW PL"
SOLD_MARKERS = ("TAK", "PRZEJĘTE", "PRZEJETE")
SOLD_STATUS = 500
MIN_VIN_LENGTH = 10


def _process_row(row: List[Any], result: ImportResult, currency: str) -> None:
    vin = stringify(cell(row, COL_VIN)).upper()
    if len(vin) < MIN_VIN_LENGTH:
        return

    if DEALER_MARKER not in stringify(cell(row, COL_DEALER)).upper():
        return

    status = parse_int(cell(row, COL_STATUS)) or 0
    sales_status = stringify(cell(row, COL_SALES_STATUS)).upper()
    order_status = sales_status
    if any(marker in sales_status for marker in SOLD_MARKERS):
        status = SOLD_STATUS
        order_status = "Sprzedany"
    elif "NIE" in sales_status:
        order_status = "Dostępny"

    if status < MIN_SELLABLE_STATUS and status != SOLD_STATUS:
        result.skipped_by_status += 1
        return

    model_name = stringify(cell(row, COL_MODEL_NAME))
    option_codes = parse_option_string(stringify(cell(row, COL_OPTIONS)))
    vehicle = Vehicle(
        vin=vin,
        status_code=status,
        model_code=stringify(cell(row, COL_MODEL_CODE)),
        model_name=model_name,
        body_group=model_name[:3] or None,
        color_code=stringify(cell(row, COL_COLOR)),
        upholstery_code=stringify(cell(row, COL_UPHOLSTERY)),
        option_codes=option_codes,
        all_option_codes=flatten_option_codes(option_codes),
        production_date=normalize_date(cell(row, COL_PRODUCTION_DATE)),
        visibility=PUBLIC,
        processing_type="SH",
        order_status=order_status,
        currency=currency,
    )
    result.accept(vehicle)


def normalize_bmw_pl_sheet(rows: SheetRows, currency: Optional[str] = None) -> ImportResult:
    currency = currency or settings.stock_currency
    result = ImportResult(header_row=0)

    for idx in range(1, len(rows)):
        row_number = idx + 1
        try:
            _process_row(rows[idx], result, currency)
        except Exception as exc:
            logger.warning("BMW PL row %s rejected: %s", row_number, exc)
            result.errors.append(f"Row {row_number}: {exc}")

    logger.info(
        "BMW PL sheet normalized: processed=%s skipped_status=%s errors=%s",
        result.processed,
        result.skipped_by_status,
        len(result.errors),
    )
    return result
