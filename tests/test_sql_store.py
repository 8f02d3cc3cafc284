"""
SQL rule store tests — stair_* tables read through SqlRuleStore.

Tests:
1-6. Rule lookups against the seeded catalog, bad rate rows
7-8. Inactive rows
9-10. Special parts
11.  Database failure surfaces as StoreUnavailable
"""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from stairquote import models
from stairquote.pricing.domain import BoardType, PartPricing
from stairquote.pricing.errors import AmbiguousPricingRule, RuleNotFound, StoreUnavailable, UnknownSpecialPart
from stairquote.pricing.sql_store import SqlRuleStore


# ============================================================
# Rule lookups
# ============================================================

def test_tread_bracket_by_width(seeded_db):
    store = SqlRuleStore(seeded_db)
    narrow = store.get_rule(BoardType.TREAD, 7, Decimal("42"))
    wide = store.get_rule(BoardType.TREAD, 7, Decimal("48"))
    assert narrow.base_price == Decimal("35")
    assert wide.base_price == Decimal("45")
    assert wide.width_min == Decimal("48")


def test_material_multiplier_joined_in(seeded_db):
    store = SqlRuleStore(seeded_db)
    assert store.get_rule(BoardType.RISER, 5, Decimal("36")).material_multiplier == Decimal("1.35")
    assert store.get_rule(BoardType.RISER, 4, Decimal("36")).material_multiplier == Decimal("0.85")


def test_unknown_material(seeded_db):
    store = SqlRuleStore(seeded_db)
    with pytest.raises(RuleNotFound) as exc:
        store.get_rule(BoardType.STRINGER, 99, Decimal("9.25"))
    assert exc.value.material_id == 99


def test_duplicate_catch_all_rows_are_ambiguous(seeded_db):
    seeded_db.add(models.StairPriceRule(
        board_type="riser", material_id=7, base_price=Decimal("14.00"),
        length_charge_rate=Decimal("0.30"), width_charge_rate=Decimal("0.40"),
    ))
    seeded_db.commit()
    with pytest.raises(AmbiguousPricingRule):
        SqlRuleStore(seeded_db).get_rule(BoardType.RISER, 7, Decimal("36"))


def test_negative_rate_row_is_rule_error(seeded_db):
    """A bad rate row is a configuration error, not a crash."""
    row = seeded_db.query(models.StairPriceRule).filter(
        models.StairPriceRule.board_type == "riser",
        models.StairPriceRule.material_id == 4,
    ).first()
    row.length_charge_rate = Decimal("-1")
    seeded_db.commit()
    with pytest.raises(RuleNotFound) as exc:
        SqlRuleStore(seeded_db).get_rule(BoardType.RISER, 4, Decimal("42"))
    assert f"Pricing rule {row.id} is invalid" in str(exc.value)
    assert isinstance(exc.value.__cause__, ValueError)


def test_negative_multiplier_is_rule_error(seeded_db):
    material = seeded_db.get(models.StairMaterial, 7)
    material.multiplier = Decimal("-0.5")
    seeded_db.commit()
    with pytest.raises(RuleNotFound):
        SqlRuleStore(seeded_db).get_rule(BoardType.STRINGER, 7, Decimal("9.25"))


# ============================================================
# Inactive rows
# ============================================================

def test_inactive_material_has_no_rules(seeded_db):
    material = seeded_db.get(models.StairMaterial, 20)
    material.is_active = False
    seeded_db.commit()
    with pytest.raises(RuleNotFound) as exc:
        SqlRuleStore(seeded_db).get_rule(BoardType.TREAD, 20, Decimal("36"))
    assert "not an active stair material" in str(exc.value)


def test_inactive_rule_ignored(db):
    db.add(models.StairMaterial(id=1, name="Maple", multiplier=Decimal("1.10")))
    db.add(models.StairPriceRule(board_type="tread", material_id=1, base_price=Decimal("10"),
                                 is_active=False))
    db.add(models.StairPriceRule(board_type="tread", material_id=1, base_price=Decimal("20")))
    db.commit()
    rule = SqlRuleStore(db).get_rule(BoardType.TREAD, 1, Decimal("36"))
    assert rule.base_price == Decimal("20")
    assert rule.material_multiplier == Decimal("1.10")


# ============================================================
# Special parts
# ============================================================

def test_special_part_lookup(seeded_db):
    store = SqlRuleStore(seeded_db)
    skirt = store.get_special_part("skirt_board", 7)
    assert skirt.pricing == PartPricing.PER_RISER
    assert skirt.unit_cost + skirt.labor_cost == Decimal("8.00")

    with pytest.raises(UnknownSpecialPart):
        store.get_special_part("gooseneck", 7)


def test_material_specific_special_part(seeded_db):
    seeded_db.add(models.StairSpecialPart(
        part_id="volute", description="Red oak volute", material_id=20,
        unit_cost=Decimal("220.00"), labor_cost=Decimal("30.00"),
    ))
    seeded_db.commit()
    store = SqlRuleStore(seeded_db)
    assert store.get_special_part("volute", 20).description == "Red oak volute"
    assert store.get_special_part("volute", 7).unit_cost == Decimal("180")


# ============================================================
# Database failure
# ============================================================

def test_database_error_is_store_unavailable():
    """A database with no stair tables cannot answer. No fallback pricing."""
    empty_engine = create_engine("sqlite://")
    session = sessionmaker(bind=empty_engine)()
    try:
        store = SqlRuleStore(session)
        with pytest.raises(StoreUnavailable):
            store.get_rule(BoardType.TREAD, 7, Decimal("42"))
        session.rollback()
        with pytest.raises(StoreUnavailable):
            store.get_special_part("volute", 7)
    finally:
        session.close()
