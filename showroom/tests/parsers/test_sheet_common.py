import io
from datetime import date

import pandas as pd
import pytest

from showroom.app.parsers._sheet_common import (
    infer_powertrain,
    load_sheet_rows,
    normalize_date,
    parse_int,
    stringify,
)
from showroom.app.parsers.stock_sheet import normalize_stock_sheet


def _xlsx_bytes(rows: list[list[object]]) -> bytes:
    df = pd.DataFrame(rows)
    buffer = io.BytesIO()
    df.to_excel(buffer, index=False, header=False)
    return buffer.getvalue()


def test_load_xlsx_keeps_grid_and_blanks_become_none():
    content = _xlsx_bytes(
        [
            ["VIN", "Order Status", "Options String"],
            ["WBA11FJ0X0R123456", 150, None],
        ]
    )
    rows = load_sheet_rows("stock.xlsx", content)

    assert rows[0] == ["VIN", "Order Status", "Options String"]
    assert rows[1][0] == "WBA11FJ0X0R123456"
    assert parse_int(rows[1][1]) == 150
    assert rows[1][2] is None


def test_load_csv():
    rows = load_sheet_rows("stock.CSV", b"VIN,Order Status\nWBA11FJ0X0R123456,150\n")

    assert rows == [["VIN", "Order Status"], ["WBA11FJ0X0R123456", "150"]]


def test_csv_blank_lines_keep_file_row_numbers():
    content = (
        b"VIN,Order Status,Processing Type,Options String\n"
        b"WBA11FJ0X0R000001,150,SH,5AC\n"
        b"\n"
        b"WBA11FJ0X0R000002,150,SH,337 ( 1G6\n"
    )
    rows = load_sheet_rows("stock.csv", content)

    assert len(rows) == 4
    assert rows[2] == [None, None, None, None]

    result = normalize_stock_sheet(rows)
    assert result.processed == 1
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Row 4: ")


def test_unreadable_file_raises_value_error():
    with pytest.raises(ValueError, match="Unable to read spreadsheet"):
        load_sheet_rows("stock.xlsx", b"definitely not a workbook")


def test_parse_int_reads_leading_digits():
    assert parse_int("193") == 193
    assert parse_int(" 150.0 ") == 150
    assert parse_int(112.0) == 112
    assert parse_int("abc") is None
    assert parse_int(None) is None
    assert parse_int(True) is None


def test_stringify_drops_float_suffix():
    assert stringify(475.0) == "475"
    assert stringify("  G60 ") == "G60"
    assert stringify(None) == ""
    assert stringify(float("nan")) == ""


def test_normalize_date_variants():
    assert normalize_date("05.03.2024") == "2024-03-05"
    assert normalize_date("2024-03-05T00:00:00") == "2024-03-05"
    assert normalize_date(pd.Timestamp("2023-11-02")) == "2023-11-02"
    assert normalize_date(date(2022, 1, 9)) == "2022-01-09"
    assert normalize_date(45292) == "2024-01-01"
    assert normalize_date("45292") == "2024-01-01"
    assert normalize_date("45292.0") == "2024-01-01"
    assert normalize_date("2024") == "2024"
    assert normalize_date("KW 12/2024") == "KW 12/2024"
    assert normalize_date("  ") is None
    assert normalize_date(None) is None


@pytest.mark.parametrize(
    "model_name, expected",
    [
        ("X5 xDrive30d", ("Diesel", "xDrive")),
        ("M340d xDrive", ("Diesel", "xDrive")),
        ("530e", ("Hybrid", None)),
        ("i5 eDrive40", ("Electric", None)),
        ("iX1 xDrive30", ("Electric", "xDrive")),
        ("X1 sDrive18i", ("Gasoline", "sDrive")),
        ("X3 M50 xDrive", ("Gasoline", "xDrive")),
        ("", (None, None)),
    ],
)
def test_infer_powertrain(model_name, expected):
    assert infer_powertrain(model_name) == expected
