"""
Relational rule store — reads the stair_* tables through a SQLAlchemy session.

Candidate rows are fetched per (board type, material); the material's
multiplier is joined in. Bracket selection is shared with every other store
(rule_store.select_rule). Database failures surface as StoreUnavailable.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from .domain import BoardType, PricingRule, SpecialPartDefinition, to_decimal
from .errors import RuleNotFound, StoreUnavailable
from .rule_store import RuleStore, select_rule, select_special_part

logger = logging.getLogger(__name__)


def _dec(value):
    return None if value is None else to_decimal(value)


class SqlRuleStore(RuleStore):

    def __init__(self, db: Session):
        self.db = db

    def get_rule(self, board_type: BoardType, material_id: int, width) -> PricingRule:
        board_type = BoardType(board_type)
        try:
            material = self.db.query(models.StairMaterial).filter(
                models.StairMaterial.id == material_id,
                models.StairMaterial.is_active == True,  # noqa: E712
            ).first()
            rows = self.db.query(models.StairPriceRule).filter(
                models.StairPriceRule.board_type == board_type.value,
                models.StairPriceRule.material_id == material_id,
                models.StairPriceRule.is_active == True,  # noqa: E712
            ).order_by(models.StairPriceRule.id).all()
        except SQLAlchemyError as e:
            logger.error("Rule store query failed for %s/%s: %s", board_type.value, material_id, e)
            raise StoreUnavailable(f"Pricing rule store unavailable: {e}") from e

        if material is None:
            raise RuleNotFound(
                board_type.value, material_id, width,
                message=f"Material {material_id} is not an active stair material",
            )

        candidates = []
        for row in rows:
            try:
                candidates.append(PricingRule(
                    base_price=_dec(row.base_price),
                    length_charge_rate=_dec(row.length_charge_rate),
                    width_charge_rate=_dec(row.width_charge_rate),
                    mitre_charge=_dec(row.mitre_charge),
                    material_multiplier=_dec(material.multiplier),
                    board_type=board_type,
                    material_id=material_id,
                    width_min=_dec(row.width_min),
                    width_max=_dec(row.width_max),
                ))
            except (ValueError, TypeError, ArithmeticError) as e:
                logger.error("Stair price rule %s is invalid: %s", row.id, e)
                raise RuleNotFound(
                    board_type.value, material_id, width,
                    message=f"Pricing rule {row.id} is invalid: {e}",
                ) from e
        return select_rule(candidates, board_type, material_id, width)

    def get_special_part(self, part_id: str, material_id: Optional[int]) -> SpecialPartDefinition:
        try:
            rows = self.db.query(models.StairSpecialPart).filter(
                models.StairSpecialPart.part_id == part_id,
                models.StairSpecialPart.is_active == True,  # noqa: E712
            ).order_by(models.StairSpecialPart.id).all()
        except SQLAlchemyError as e:
            logger.error("Special part query failed for %s: %s", part_id, e)
            raise StoreUnavailable(f"Special part catalog unavailable: {e}") from e

        definitions = [
            SpecialPartDefinition(
                part_id=row.part_id,
                description=row.description,
                unit_cost=_dec(row.unit_cost),
                labor_cost=_dec(row.labor_cost) or to_decimal(0),
                pricing=row.pricing or "flat",
                material_id=row.material_id,
            )
            for row in rows
        ]
        return select_special_part(definitions, part_id, material_id)
