"""
Request-scoped value types for stair pricing.

Everything here is built fresh per calculation and never mutated.
Dimensions are inches, money is Decimal.
"""

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple, Union


def to_decimal(value) -> Decimal:
    """Convert a number to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric dimension")
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _optional_decimal(value) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def _coerce(obj, *names):
    # frozen dataclasses need object.__setattr__
    for name in names:
        object.__setattr__(obj, name, to_decimal(getattr(obj, name)))


# --- Enums ---

class BoardType(str, enum.Enum):
    TREAD = "tread"
    RISER = "riser"
    STRINGER = "stringer"


class TreadType(str, enum.Enum):
    BOX = "box"
    OPEN_LEFT = "open_left"
    OPEN_RIGHT = "open_right"
    DOUBLE_OPEN = "double_open"


class RiserKind(str, enum.Enum):
    STANDARD = "standard"
    OPEN = "open"
    DOUBLE_OPEN = "double_open"


class Component(str, enum.Enum):
    TREAD = "tread"
    RISER = "riser"
    STRINGER_LEFT = "stringer_left"
    STRINGER_RIGHT = "stringer_right"
    STRINGER_CENTER = "stringer_center"
    LANDING_TREAD = "landing_tread"
    SPECIAL_PART = "special_part"


class PartPricing(str, enum.Enum):
    FLAT = "flat"            # (unit cost + labor) per part
    PER_RISER = "per_riser"  # (unit cost + labor) x risers per part


# --- Per-type tread policy ---

@dataclass(frozen=True)
class TreadPolicy:
    open_ends: int
    riser_kind: Optional[RiserKind]  # None means the tread type carries no riser

    @property
    def mitre_eligible(self) -> bool:
        return self.open_ends > 0


# Every tread type must appear here; nothing is inferred from the type name.
TREAD_POLICIES = {
    TreadType.BOX: TreadPolicy(open_ends=0, riser_kind=RiserKind.STANDARD),
    TreadType.OPEN_LEFT: TreadPolicy(open_ends=1, riser_kind=RiserKind.OPEN),
    TreadType.OPEN_RIGHT: TreadPolicy(open_ends=1, riser_kind=RiserKind.OPEN),
    TreadType.DOUBLE_OPEN: TreadPolicy(open_ends=2, riser_kind=RiserKind.DOUBLE_OPEN),
}


# --- Order description ---

@dataclass(frozen=True)
class TreadSpec:
    riser_number: int
    type: TreadType
    stair_width: Decimal

    def __post_init__(self):
        object.__setattr__(self, "type", TreadType(self.type))
        _coerce(self, "stair_width")


@dataclass(frozen=True)
class StringerSide:
    width: Decimal
    thickness: Decimal
    material_id: int

    def __post_init__(self):
        _coerce(self, "width", "thickness")


@dataclass(frozen=True)
class UniformStringers:
    """Matching left/right pair cut from one board profile."""
    stringer_type: str
    material_id: int


@dataclass(frozen=True)
class PerSideStringers:
    """Independent members; a side left as None is not built and not priced."""
    left: Optional[StringerSide] = None
    right: Optional[StringerSide] = None
    center: Optional[StringerSide] = None


StringerMode = Union[UniformStringers, PerSideStringers]


@dataclass(frozen=True)
class SpecialPartRequest:
    part_id: str
    quantity: int = 1
    material_id: Optional[int] = None
    unit_price: Optional[Decimal] = None  # declared flat price, overrides the catalog price
    description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "unit_price", _optional_decimal(self.unit_price))


@dataclass(frozen=True)
class StairOrderRequest:
    floor_to_floor: Decimal
    num_risers: int
    treads: Tuple[TreadSpec, ...]
    tread_material_id: int
    riser_material_id: int
    rough_cut_width: Decimal
    nose_size: Decimal
    stringers: StringerMode
    include_landing_tread: bool = False
    full_mitre: bool = False
    special_parts: Tuple[SpecialPartRequest, ...] = ()
    job_id: Optional[int] = None

    def __post_init__(self):
        _coerce(self, "floor_to_floor", "rough_cut_width", "nose_size")
        object.__setattr__(self, "treads", tuple(self.treads))
        object.__setattr__(self, "special_parts", tuple(self.special_parts))

    @property
    def riser_height(self) -> Decimal:
        return self.floor_to_floor / self.num_risers

    @property
    def tread_width(self) -> Decimal:
        """Finished tread depth: rough cut plus nosing."""
        return self.rough_cut_width + self.nose_size


# --- Rule store records ---

@dataclass(frozen=True)
class PricingRule:
    """
    One rate row. Scoped to (board_type, material_id) and optionally a
    half-open width bracket [width_min, width_max). A missing bound is open.
    """
    base_price: Decimal
    length_charge_rate: Decimal
    width_charge_rate: Decimal
    mitre_charge: Decimal
    material_multiplier: Decimal
    board_type: Optional[BoardType] = None
    material_id: Optional[int] = None
    width_min: Optional[Decimal] = None
    width_max: Optional[Decimal] = None

    def __post_init__(self):
        _coerce(self, "base_price", "length_charge_rate", "width_charge_rate",
                "mitre_charge", "material_multiplier")
        object.__setattr__(self, "width_min", _optional_decimal(self.width_min))
        object.__setattr__(self, "width_max", _optional_decimal(self.width_max))
        if self.board_type is not None:
            object.__setattr__(self, "board_type", BoardType(self.board_type))
        for name in ("length_charge_rate", "width_charge_rate", "mitre_charge",
                     "material_multiplier"):
            if getattr(self, name) < 0:
                raise ValueError(f"PricingRule.{name} must be >= 0")

    @property
    def specificity(self) -> int:
        """2 = closed bracket, 1 = one bound, 0 = any width."""
        return int(self.width_min is not None) + int(self.width_max is not None)

    def covers(self, width: Decimal) -> bool:
        if self.width_min is not None and width < self.width_min:
            return False
        if self.width_max is not None and width >= self.width_max:
            return False
        return True


@dataclass(frozen=True)
class SpecialPartDefinition:
    part_id: str
    description: str
    unit_cost: Decimal
    labor_cost: Decimal = Decimal("0")
    pricing: PartPricing = PartPricing.FLAT
    material_id: Optional[int] = None  # None = same price for every material

    def __post_init__(self):
        _coerce(self, "unit_cost", "labor_cost")
        object.__setattr__(self, "pricing", PartPricing(self.pricing))


# --- Output ---

@dataclass(frozen=True)
class PriceBreakdownLine:
    component: Component
    unit_price: Decimal
    quantity: int
    line_total: Decimal
    description: str = ""
    material_id: Optional[int] = None
    length: Optional[Decimal] = None
    width: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return {
            "component": self.component.value,
            "description": self.description,
            "material_id": self.material_id,
            "length": None if self.length is None else f"{self.length:.3f}",
            "width": None if self.width is None else f"{self.width:.3f}",
            "unit_price": f"{self.unit_price:.2f}",
            "quantity": self.quantity,
            "line_total": f"{self.line_total:.2f}",
        }


@dataclass(frozen=True)
class PriceBreakdown:
    lines: Tuple[PriceBreakdownLine, ...] = field(default_factory=tuple)
    subtotal: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")

    def lines_for(self, *components: Component) -> list:
        return [line for line in self.lines if line.component in components]

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "subtotal": f"{self.subtotal:.2f}",
            "total": f"{self.total:.2f}",
        }
