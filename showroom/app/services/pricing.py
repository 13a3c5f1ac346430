"""Final displayed price for a stock unit."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from typing import Any, Dict, Iterable, Optional

from showroom.app.domain.bulletins import Bulletin, MatchResult, Rule
from showroom.app.domain.stock import Vehicle
from showroom.app.services.discounts import HUNDRED, best_rule

PRICE_STEP = Decimal("1000")

SOURCE_SPECIAL = "special"
SOURCE_BULLETIN = "bulletin"
SOURCE_LIST = "list"


@dataclass(frozen=True)
class PriceQuote:
    price: Decimal
    list_price: Decimal
    source: str
    bulletin_id: Optional[str] = None
    rule_index: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "price": float(self.price),
            "list_price": float(self.list_price),
            "source": self.source,
            "bulletin_id": self.bulletin_id,
            "rule_index": self.rule_index,
        }


def round_up_to_step(value: Decimal, step: Decimal = PRICE_STEP) -> Decimal:
    """Round up to the next multiple of ``step``: 233234 -> 234000, 234000 stays."""
    return (Decimal(value) / step).to_integral_value(rounding=ROUND_CEILING) * step


def compute_discounted_price(list_price: Decimal, rule: Rule) -> Decimal:
    discounted = Decimal(list_price) * (1 - rule.discount_percent / HUNDRED) - rule.discount_amount
    if discounted < 0:
        discounted = Decimal("0")
    return round_up_to_step(discounted)


def has_manual_override(vehicle: Vehicle) -> bool:
    special = vehicle.special_price
    return special is not None and 0 < special < vehicle.list_price


def display_price(vehicle: Vehicle, match: Optional[MatchResult]) -> Decimal:
    if has_manual_override(vehicle):
        return vehicle.special_price
    if match is not None:
        return compute_discounted_price(vehicle.list_price, match.rule)
    return vehicle.list_price


def quote_vehicle(vehicle: Vehicle, active_bulletins: Iterable[Bulletin]) -> PriceQuote:
    if has_manual_override(vehicle):
        return PriceQuote(price=vehicle.special_price, list_price=vehicle.list_price, source=SOURCE_SPECIAL)

    match = best_rule(vehicle, active_bulletins)
    if match is None:
        return PriceQuote(price=vehicle.list_price, list_price=vehicle.list_price, source=SOURCE_LIST)

    return PriceQuote(
        price=display_price(vehicle, match),
        list_price=vehicle.list_price,
        source=SOURCE_BULLETIN,
        bulletin_id=match.bulletin_id,
        rule_index=match.rule_index,
    )
