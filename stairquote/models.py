from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base

# DECISION: board_type and part pricing are stored as VARCHAR (values from
# pricing.domain.BoardType / PartPricing) so adding a board type needs no
# schema change. Money and dimensions are Numeric so they come back as Decimal.


class StairMaterial(Base):
    """Wood species / grade with its cost multiplier."""
    __tablename__ = "stair_materials"

    id = Column(Integer, primary_key=True, index=True)  # material id used by orders
    name = Column(String, nullable=False)
    multiplier = Column(Numeric(6, 4), nullable=False, default=1)
    display_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    price_rules = relationship("StairPriceRule", back_populates="material")
    special_parts = relationship("StairSpecialPart", back_populates="material")


class StairPriceRule(Base):
    """
    Rate row for one (board type, material), optionally limited to a width
    bracket [width_min, width_max). NULL bounds are open-ended.
    """
    __tablename__ = "stair_price_rules"

    id = Column(Integer, primary_key=True, index=True)
    board_type = Column(String, nullable=False, index=True)  # 'tread' | 'riser' | 'stringer'
    material_id = Column(Integer, ForeignKey("stair_materials.id"), nullable=False, index=True)
    width_min = Column(Numeric(8, 3), nullable=True)
    width_max = Column(Numeric(8, 3), nullable=True)
    base_price = Column(Numeric(10, 4), nullable=False, default=0)
    length_charge_rate = Column(Numeric(10, 4), nullable=False, default=0)  # per inch of length
    width_charge_rate = Column(Numeric(10, 4), nullable=False, default=0)   # per inch of width
    mitre_charge = Column(Numeric(10, 4), nullable=False, default=0)
    is_active = Column(Boolean, default=True)
    notes = Column(Text)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    material = relationship("StairMaterial", back_populates="price_rules")


class StairSpecialPart(Base):
    """Catalog part with its own price (brackets, volutes, starting steps...)."""
    __tablename__ = "stair_special_parts"

    id = Column(Integer, primary_key=True, index=True)
    part_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    material_id = Column(Integer, ForeignKey("stair_materials.id"), nullable=True)  # NULL = any material
    unit_cost = Column(Numeric(10, 4), nullable=False, default=0)
    labor_cost = Column(Numeric(10, 4), nullable=False, default=0)
    pricing = Column(String, default="flat")  # 'flat' | 'per_riser'
    is_active = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    material = relationship("StairMaterial", back_populates="special_parts")
