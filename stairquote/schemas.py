from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Optional, List
from datetime import datetime

from .config import settings
from .pricing.domain import (
    PerSideStringers,
    SpecialPartRequest,
    StairOrderRequest,
    StringerSide,
    TreadSpec,
    TreadType,
    UniformStringers,
)
from .pricing.errors import InvalidOrder


# --- Calculate-price request (camelCase JSON, as the configurator sends it) ---

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TreadIn(_CamelModel):
    riser_number: int = Field(alias="riserNumber")
    type: TreadType
    stair_width: Decimal = Field(alias="stairWidth")


class StringerSideIn(_CamelModel):
    width: Decimal
    thickness: Decimal
    material_id: int = Field(alias="materialId")


class IndividualStringersIn(_CamelModel):
    left: Optional[StringerSideIn] = None
    right: Optional[StringerSideIn] = None
    center: Optional[StringerSideIn] = None


class SpecialPartIn(_CamelModel):
    part_id: str = Field(alias="partId")
    quantity: int = 1
    material_id: Optional[int] = Field(None, alias="materialId")
    unit_price: Optional[Decimal] = Field(None, alias="unitPrice")
    description: Optional[str] = None


class StairPriceRequest(_CamelModel):
    floor_to_floor: Decimal = Field(alias="floorToFloor")
    num_risers: int = Field(alias="numRisers")
    treads: List[TreadIn] = []
    tread_material_id: int = Field(alias="treadMaterialId")
    riser_material_id: int = Field(alias="riserMaterialId")
    rough_cut_width: Decimal = Field(alias="roughCutWidth")
    nose_size: Optional[Decimal] = Field(None, alias="noseSize")
    stringer_type: Optional[str] = Field(None, alias="stringerType")
    stringer_material_id: Optional[int] = Field(None, alias="stringerMaterialId")
    individual_stringers: Optional[IndividualStringersIn] = Field(None, alias="individualStringers")
    include_landing_tread: bool = Field(False, alias="includeLandingTread")
    full_mitre: bool = Field(False, alias="fullMitre")
    special_parts: List[SpecialPartIn] = Field([], alias="specialParts")
    job_id: Optional[int] = Field(None, alias="jobId")

    def to_order(self) -> StairOrderRequest:
        """Convert to the pricing core's order, choosing the stringer mode explicitly."""
        if self.individual_stringers is not None:
            sides = {
                name: StringerSide(side.width, side.thickness, side.material_id)
                for name, side in (
                    ("left", self.individual_stringers.left),
                    ("right", self.individual_stringers.right),
                    ("center", self.individual_stringers.center),
                )
                if side is not None
            }
            stringers = PerSideStringers(**sides)
        elif self.stringer_type and self.stringer_material_id is not None:
            stringers = UniformStringers(self.stringer_type, self.stringer_material_id)
        else:
            raise InvalidOrder(
                "Either individualStringers or stringerType + stringerMaterialId is required",
                field="stringerType",
            )

        nose_size = self.nose_size
        if nose_size is None:
            nose_size = Decimal(str(settings.DEFAULT_NOSE_SIZE))

        return StairOrderRequest(
            floor_to_floor=self.floor_to_floor,
            num_risers=self.num_risers,
            treads=tuple(
                TreadSpec(t.riser_number, t.type, t.stair_width) for t in self.treads
            ),
            tread_material_id=self.tread_material_id,
            riser_material_id=self.riser_material_id,
            rough_cut_width=self.rough_cut_width,
            nose_size=nose_size,
            stringers=stringers,
            include_landing_tread=self.include_landing_tread,
            full_mitre=self.full_mitre,
            special_parts=tuple(
                SpecialPartRequest(
                    part_id=p.part_id,
                    quantity=p.quantity,
                    material_id=p.material_id,
                    unit_price=p.unit_price,
                    description=p.description,
                )
                for p in self.special_parts
            ),
            job_id=self.job_id,
        )


def parse_stair_order(payload: dict) -> StairOrderRequest:
    """Validate a raw JSON payload into a StairOrderRequest, raising InvalidOrder."""
    try:
        request = StairPriceRequest.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise InvalidOrder(f"{field}: {first['msg']}", field=field) from e
    return request.to_order()


# --- Catalog rows ---

class StairMaterialBase(BaseModel):
    name: str
    multiplier: Decimal = Decimal("1.0")
    display_order: int = 0
    is_active: bool = True


class StairMaterial(StairMaterialBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class StairPriceRuleBase(BaseModel):
    board_type: str
    material_id: int
    width_min: Optional[Decimal] = None
    width_max: Optional[Decimal] = None
    base_price: Decimal = Decimal("0")
    length_charge_rate: Decimal = Decimal("0")
    width_charge_rate: Decimal = Decimal("0")
    mitre_charge: Decimal = Decimal("0")
    is_active: bool = True
    notes: Optional[str] = None


class StairPriceRule(StairPriceRuleBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class StairSpecialPartBase(BaseModel):
    part_id: str
    description: str
    material_id: Optional[int] = None
    unit_cost: Decimal = Decimal("0")
    labor_cost: Decimal = Decimal("0")
    pricing: str = "flat"
    is_active: bool = True


class StairSpecialPart(StairSpecialPartBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True
