"""
Stair pricing endpoints.

POST /api/stairs/calculate-price — price a stair configuration
GET  /api/stairs/materials       — active materials and multipliers
GET  /api/stairs/price-rules     — active rate rows (filter by board_type / material_id)
GET  /api/stairs/special-parts   — active special-part catalog
GET  /api/stairs/seed            — seed the default catalog (skips existing rows)
"""

import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import settings
from ..database import get_db
from ..pricing.calculator import calculate_stair_price
from ..pricing.errors import InvalidOrder, RuleNotFound, StoreUnavailable, UnknownSpecialPart
from ..pricing.sql_store import SqlRuleStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stairs", tags=["stairs"])

# Default catalog: shop rates for 2025, per inch unless noted.
# Material ids match the ids the configurator already sends (7 = Poplar default).
DEFAULT_MATERIALS = {
    4: {"name": "Pine", "multiplier": Decimal("0.85"), "display_order": 1},
    7: {"name": "Poplar", "multiplier": Decimal("1.00"), "display_order": 2},
    20: {"name": "Red Oak", "multiplier": Decimal("1.20"), "display_order": 3},
    5: {"name": "White Oak", "multiplier": Decimal("1.35"), "display_order": 4},
}

# Same rate card for every material; the material multiplier does the rest.
DEFAULT_BOARD_RATES = {
    "tread": [
        {"width_max": Decimal("48"), "base_price": Decimal("35.00"),
         "length_charge_rate": Decimal("0.50"), "width_charge_rate": Decimal("1.25"),
         "mitre_charge": Decimal("25.00"), "notes": "Standard treads under 48\""},
        {"width_min": Decimal("48"), "base_price": Decimal("45.00"),
         "length_charge_rate": Decimal("0.65"), "width_charge_rate": Decimal("1.50"),
         "mitre_charge": Decimal("30.00"), "notes": "Wide treads 48\" and over"},
    ],
    "riser": [
        {"base_price": Decimal("12.00"), "length_charge_rate": Decimal("0.30"),
         "width_charge_rate": Decimal("0.40"), "mitre_charge": Decimal("0"),
         "notes": "All riser widths"},
    ],
    "stringer": [
        {"base_price": Decimal("40.00"), "length_charge_rate": Decimal("0.35"),
         "width_charge_rate": Decimal("2.00"), "mitre_charge": Decimal("0"),
         "notes": "Housed stringer, any width"},
    ],
}

DEFAULT_SPECIAL_PARTS = [
    {"part_id": "bullnose_starting_step", "description": "Bullnose starting step",
     "unit_cost": Decimal("285.00"), "labor_cost": Decimal("45.00"), "pricing": "flat"},
    {"part_id": "volute", "description": "Volute handrail fitting",
     "unit_cost": Decimal("180.00"), "labor_cost": Decimal("30.00"), "pricing": "flat"},
    {"part_id": "skirt_board", "description": "Skirt board (priced per riser)",
     "unit_cost": Decimal("6.50"), "labor_cost": Decimal("1.50"), "pricing": "per_riser"},
]


def seed_default_catalog(db: Session) -> dict:
    """Insert default materials, rules and special parts. Safe to run repeatedly."""
    seeded = {"materials": 0, "price_rules": 0, "special_parts": 0}

    for material_id, data in DEFAULT_MATERIALS.items():
        if db.get(models.StairMaterial, material_id) is None:
            db.add(models.StairMaterial(id=material_id, **data))
            seeded["materials"] += 1
    db.flush()

    for material_id in DEFAULT_MATERIALS:
        for board_type, rules in DEFAULT_BOARD_RATES.items():
            existing = db.query(models.StairPriceRule).filter(
                models.StairPriceRule.board_type == board_type,
                models.StairPriceRule.material_id == material_id,
            ).first()
            if existing:
                continue
            for rule in rules:
                db.add(models.StairPriceRule(board_type=board_type, material_id=material_id, **rule))
                seeded["price_rules"] += 1

    for part in DEFAULT_SPECIAL_PARTS:
        existing = db.query(models.StairSpecialPart).filter(
            models.StairSpecialPart.part_id == part["part_id"]
        ).first()
        if not existing:
            db.add(models.StairSpecialPart(**part))
            seeded["special_parts"] += 1

    db.commit()
    return seeded


@router.post("/calculate-price")
def calculate_price(payload: dict = Body(...), db: Session = Depends(get_db)):
    """
    Price a stair configuration. Any failure rejects the whole order.
    A partially priced stair is never returned.
    """
    try:
        order = schemas.parse_stair_order(payload)
        breakdown = calculate_stair_price(
            order, SqlRuleStore(db),
            landing_tread_width=Decimal(str(settings.LANDING_TREAD_WIDTH)),
        )
    except InvalidOrder as e:
        logger.warning("Rejected stair order: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except (RuleNotFound, UnknownSpecialPart) as e:
        logger.warning("Invalid stair configuration: %s", e)
        raise HTTPException(status_code=422, detail=f"Invalid configuration: {e}")
    except StoreUnavailable as e:
        logger.error("Stair pricing unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Pricing rules are temporarily unavailable")

    result = breakdown.to_dict()
    result["configuration"] = {
        "floorToFloor": str(order.floor_to_floor),
        "numRisers": order.num_risers,
        "riserHeight": f"{order.riser_height:.3f}",
        "fullMitre": order.full_mitre,
        "jobId": order.job_id,
    }
    return result


@router.get("/materials", response_model=List[schemas.StairMaterial])
def list_materials(db: Session = Depends(get_db)):
    return db.query(models.StairMaterial).filter(
        models.StairMaterial.is_active == True  # noqa: E712
    ).order_by(models.StairMaterial.display_order, models.StairMaterial.name).all()


@router.get("/price-rules", response_model=List[schemas.StairPriceRule])
def list_price_rules(board_type: Optional[str] = None, material_id: Optional[int] = None,
                     db: Session = Depends(get_db)):
    query = db.query(models.StairPriceRule).filter(
        models.StairPriceRule.is_active == True  # noqa: E712
    )
    if board_type:
        query = query.filter(models.StairPriceRule.board_type == board_type)
    if material_id is not None:
        query = query.filter(models.StairPriceRule.material_id == material_id)
    return query.order_by(
        models.StairPriceRule.board_type,
        models.StairPriceRule.material_id,
        models.StairPriceRule.width_min,
    ).all()


@router.get("/special-parts", response_model=List[schemas.StairSpecialPart])
def list_special_parts(db: Session = Depends(get_db)):
    return db.query(models.StairSpecialPart).filter(
        models.StairSpecialPart.is_active == True  # noqa: E712
    ).order_by(models.StairSpecialPart.description).all()


@router.get("/seed")
def seed_catalog(db: Session = Depends(get_db)):
    """Seed the default stair catalog. Safe to run multiple times, skips existing."""
    seeded = seed_default_catalog(db)
    return {"ok": True, "seeded": seeded}
