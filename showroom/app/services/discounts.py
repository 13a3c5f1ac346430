"""Pick the single best discount rule for a vehicle across active bulletins."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from showroom.app.domain.bulletins import Bulletin, MatchResult, Rule
from showroom.app.domain.stock import Vehicle
from showroom.app.parsers.chassis import get_chassis_code

MODEL_CODE_SCORE = 10
BODY_GROUP_SCORE = 5
YEAR_WINDOW_SCORE = 2
GLOBAL_SCORE = 1

HUNDRED = Decimal("100")


def rule_specificity(vehicle: Vehicle, rule: Rule) -> int:
    """Score how narrowly ``rule`` targets ``vehicle``; 0 means no match."""
    if rule.is_global:
        return GLOBAL_SCORE

    specificity = 0
    if rule.model_codes:
        if vehicle.model_code not in rule.model_codes:
            return 0
        specificity += MODEL_CODE_SCORE

    if rule.body_groups:
        body_group = vehicle.body_group or get_chassis_code(vehicle.model_code)
        if not body_group or body_group not in rule.body_groups:
            return 0
        specificity += BODY_GROUP_SCORE

    if rule.has_year_window:
        year = vehicle.production_year
        if year is None:
            return 0
        if rule.year_min is not None and year < rule.year_min:
            return 0
        if rule.year_max is not None and year > rule.year_max:
            return 0
        specificity += YEAR_WINDOW_SCORE

    return specificity


def effective_discount(list_price: Decimal, rule: Rule) -> Decimal:
    return Decimal(list_price) * rule.discount_percent / HUNDRED + rule.discount_amount


def best_rule(vehicle: Vehicle, bulletins: Iterable[Bulletin]) -> Optional[MatchResult]:
    """Return the matching rule with the largest discount, preferring the more specific on ties.

    ``bulletins`` must already be filtered to the ones active today. When two
    candidates tie on both discount and specificity the earlier one (bulletin
    order, then rule order) is kept.
    """
    best: Optional[MatchResult] = None

    for bulletin in bulletins:
        for rule_index, rule in enumerate(bulletin.rules):
            if not rule.is_usable:
                continue
            specificity = rule_specificity(vehicle, rule)
            if specificity == 0:
                continue

            discount = effective_discount(vehicle.list_price, rule)
            if (
                best is None
                or discount > best.effective_discount
                or (discount == best.effective_discount and specificity > best.specificity)
            ):
                best = MatchResult(
                    bulletin_id=bulletin.id,
                    bulletin_name=bulletin.name,
                    rule_index=rule_index,
                    rule=rule,
                    effective_discount=discount,
                    specificity=specificity,
                )

    return best
