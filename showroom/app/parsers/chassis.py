"""Static model-code to chassis (body group) lookup.

Used when a stock unit arrives without a body group so that body-group
targeted discounts can still reach it.
"""

from __future__ import annotations

from typing import Dict

CHASSIS_MAPPING: Dict[str, str] = {
    # X1 / iX1
    "11EF": "U11",
    "21EF": "U11",
    "31EF": "U11",
    "41EF": "U11",
    "51EF": "U11",
    "61EF": "U11",
    # X2 / iX2
    "11GM": "U10",
    "21GM": "U10",
    "31GM": "U10",
    "41GM": "U10",
    "51GM": "U10",
    "61GM": "U10",
    # 5 Series / i5
    "11FJ": "G60",
    "21FJ": "G60",
    "31FJ": "G60",
    "41FJ": "G60",
    "51FJ": "G60",
    "61FJ": "G60",
    "71FJ": "G60",
    # 5 Series Touring
    "11GK": "G61",
    "21GK": "G61",
    "31GK": "G61",
    "41GK": "G61",
    # 7 Series / i7
    "11EJ": "G70",
    "21EJ": "G70",
    "31EJ": "G70",
    "41EJ": "G70",
    "51EJ": "G70",
    "61EJ": "G70",
    # X5
    "11EU": "G05",
    "21EU": "G05",
    "31EU": "G05",
    "41EU": "G05",
    "51EU": "G05",
    # X6
    "11EY": "G06",
    "21EY": "G06",
    "31EY": "G06",
    "41EY": "G06",
    # X4
    "31CA": "G02",
    "81CA": "G02",
    # X7
    "21EN": "G07",
    "31EN": "G07",
    "41EN": "G07",
    # XM
    "21CS": "G09",
    "31CS": "G09",
    # 3 Series
    "11FY": "G20",
    "21FY": "G20",
    "31FY": "G20",
    "41FY": "G20",
    "51FY": "G20",
    "61FY": "G20",
    "71FY": "G20",
    "81FY": "G20",
    "91FY": "G20",
    "18FF": "G20",
    # 4 Series
    "11AR": "G22",
    "21AR": "G22",
    "31AR": "G22",
    "11AT": "G23",
    "11AW": "G26",
    "41AW": "G26",
    "51AW": "G26",
    "61AW": "G26",
    "71AW": "G26",
    # X3
    "11GR": "G45",
    "21GR": "G45",
    "31GR": "G45",
    "41GR": "G45",
}


def get_chassis_code(model_code: str, fallback: str = "") -> str:
    return CHASSIS_MAPPING.get((model_code or "").strip().upper(), fallback)
