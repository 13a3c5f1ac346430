"""Discount bulletins and the rules they carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Tuple


def _as_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid discount value {value!r}") from exc


def _as_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _as_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Rule:
    model_codes: Tuple[str, ...] = ()
    body_groups: Tuple[str, ...] = ()
    year_min: Optional[int] = None
    year_max: Optional[int] = None
    discount_percent: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.discount_percent <= Decimal("100"):
            raise ValueError(f"discount_percent must be within 0-100, got {self.discount_percent}")
        if self.discount_amount < 0:
            raise ValueError(f"discount_amount must not be negative, got {self.discount_amount}")

    @property
    def is_usable(self) -> bool:
        return self.discount_percent > 0 or self.discount_amount > 0

    @property
    def has_year_window(self) -> bool:
        return self.year_min is not None or self.year_max is not None

    @property
    def is_global(self) -> bool:
        return not self.model_codes and not self.body_groups and not self.has_year_window

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        return cls(
            model_codes=tuple(str(code) for code in data.get("model_codes") or ()),
            body_groups=tuple(str(group) for group in data.get("body_groups") or ()),
            year_min=_as_optional_int(data.get("production_year_min")),
            year_max=_as_optional_int(data.get("production_year_max")),
            discount_percent=_as_decimal(data.get("discount_percent")),
            discount_amount=_as_decimal(data.get("discount_amount")),
        )


@dataclass
class Bulletin:
    id: str
    name: str
    rules: List[Rule] = field(default_factory=list)
    is_active: bool = True
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None
    description: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Bulletin":
        """Build a bulletin from a stored row.

        Rows written before bulletins carried a ``rules`` array hold a single
        flat discount on the row itself; those become one rule when the
        discount is non-zero.
        """
        raw_rules = record.get("rules")
        if isinstance(raw_rules, list) and raw_rules:
            rules = [Rule.from_dict(item) for item in raw_rules]
        else:
            legacy = Rule.from_dict(record)
            rules = [legacy] if legacy.is_usable else []

        return cls(
            id=str(record["id"]),
            name=str(record.get("name") or ""),
            rules=rules,
            is_active=bool(record.get("is_active")),
            valid_from=_as_date(record.get("valid_from")),
            valid_until=_as_date(record.get("valid_until")),
            description=record.get("description"),
        )


@dataclass(frozen=True)
class MatchResult:
    bulletin_id: str
    bulletin_name: str
    rule_index: int
    rule: Rule
    effective_discount: Decimal
    specificity: int
