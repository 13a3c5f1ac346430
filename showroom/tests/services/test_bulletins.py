from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import delete

from showroom.app.db import models
from showroom.app.db.session import session_scope
from showroom.app.domain.bulletins import Bulletin, Rule
from showroom.app.services.bulletins import filter_active_bulletins, is_bulletin_active, load_active_bulletins

TODAY = date(2025, 6, 15)


def _reset_bulletins() -> None:
    with session_scope() as session:
        session.execute(delete(models.Bulletin))


def _bulletin(bulletin_id="b1", is_active=True, valid_from=None, valid_until=None) -> Bulletin:
    return Bulletin(
        id=bulletin_id,
        name=bulletin_id,
        rules=[Rule(discount_amount=Decimal("1000"))],
        is_active=is_active,
        valid_from=valid_from,
        valid_until=valid_until,
    )


def test_rule_from_dict_reads_stored_json():
    rule = Rule.from_dict(
        {
            "model_codes": ["21FJ", "31FJ"],
            "body_groups": [],
            "production_year_min": 2024,
            "production_year_max": None,
            "discount_amount": 5000,
            "discount_percent": "2.5",
        }
    )

    assert rule.model_codes == ("21FJ", "31FJ")
    assert rule.body_groups == ()
    assert rule.year_min == 2024
    assert rule.year_max is None
    assert rule.discount_amount == Decimal("5000")
    assert rule.discount_percent == Decimal("2.5")
    assert rule.is_usable
    assert not rule.is_global


def test_rule_rejects_out_of_range_discounts():
    with pytest.raises(ValueError):
        Rule(discount_percent=Decimal("120"))
    with pytest.raises(ValueError):
        Rule(discount_amount=Decimal("-1"))
    with pytest.raises(ValueError):
        Rule.from_dict({"discount_amount": "a lot"})


def test_legacy_flat_bulletin_becomes_single_rule():
    bulletin = Bulletin.from_record(
        {
            "id": 7,
            "name": "Legacy",
            "rules": [],
            "is_active": True,
            "model_codes": ["11EF"],
            "discount_percent": 3,
            "discount_amount": 0,
            "valid_from": "2025-01-01",
        }
    )

    assert bulletin.id == "7"
    assert bulletin.valid_from == date(2025, 1, 1)
    assert len(bulletin.rules) == 1
    assert bulletin.rules[0].model_codes == ("11EF",)
    assert bulletin.rules[0].discount_percent == Decimal("3")


def test_legacy_bulletin_without_discount_has_no_rules():
    bulletin = Bulletin.from_record({"id": "x", "name": "Empty", "is_active": True})

    assert bulletin.rules == []


def test_activation_window_is_inclusive():
    assert is_bulletin_active(_bulletin(valid_from=TODAY, valid_until=TODAY), TODAY)
    assert is_bulletin_active(_bulletin(valid_from=date(2025, 1, 1)), TODAY)
    assert is_bulletin_active(_bulletin(valid_until=date(2025, 12, 31)), TODAY)
    assert is_bulletin_active(_bulletin(), TODAY)

    assert not is_bulletin_active(_bulletin(valid_from=date(2025, 6, 16)), TODAY)
    assert not is_bulletin_active(_bulletin(valid_until=date(2025, 6, 14)), TODAY)
    assert not is_bulletin_active(_bulletin(is_active=False), TODAY)


def test_filter_keeps_input_order():
    bulletins = [
        _bulletin("a"),
        _bulletin("b", is_active=False),
        _bulletin("c", valid_until=date(2024, 1, 1)),
        _bulletin("d", valid_from=TODAY),
    ]

    assert [bulletin.id for bulletin in filter_active_bulletins(bulletins, TODAY)] == ["a", "d"]


def test_load_active_bulletins_from_store():
    _reset_bulletins()
    with session_scope() as session:
        session.add_all(
            [
                models.Bulletin(
                    id="spring",
                    name="Spring",
                    rules=[{"body_groups": ["G60"], "discount_percent": 5, "discount_amount": 0}],
                    is_active=True,
                    valid_from=date(2025, 3, 1),
                    valid_until=date(2025, 6, 30),
                ),
                models.Bulletin(
                    id="legacy",
                    name="Legacy",
                    rules=None,
                    is_active=True,
                    model_codes=["21FJ"],
                    discount_amount=Decimal("2000"),
                ),
                models.Bulletin(id="expired", name="Expired", rules=[{"discount_amount": 100}], is_active=True, valid_until=date(2025, 1, 1)),
                models.Bulletin(id="off", name="Off", rules=[{"discount_amount": 100}], is_active=False),
                models.Bulletin(id="broken", name="Broken", rules=[{"discount_percent": 150}], is_active=True),
            ]
        )

    with session_scope() as session:
        bulletins = load_active_bulletins(session, today=TODAY)

    assert [bulletin.id for bulletin in bulletins] == ["legacy", "spring"]
    legacy = bulletins[0]
    assert legacy.rules[0].model_codes == ("21FJ",)
    assert legacy.rules[0].discount_amount == Decimal("2000")
    assert bulletins[1].rules[0].body_groups == ("G60",)
