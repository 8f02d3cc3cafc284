"""
Stringer resolver — decides which stringer members get priced.

Two explicit paths, never one path with fallbacks:

    UniformStringers  -> left + right, both cut from the `stringer_type`
                         profile in the uniform material. No center.
    PerSideStringers  -> one member per side that is set, each with its
                         own material, width and thickness.

`StringerMode` is a closed union of these two types; anything else is a
programming error (TypeError), not a third pricing path.

Stringer length comes from the stair geometry (rise and total run).
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple

from .domain import (
    BoardType,
    Component,
    PerSideStringers,
    StairOrderRequest,
    StringerSide,
    UniformStringers,
    to_decimal,
)
from .errors import InvalidOrder
from .unit_price import check_dimension

# "<thickness>x<width>" with an optional suffix, e.g. "1x9.25_Poplar"
STRINGER_TYPE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)x(\d+(?:\.\d+)?)")

SIDE_COMPONENTS = (
    ("left", Component.STRINGER_LEFT),
    ("right", Component.STRINGER_RIGHT),
    ("center", Component.STRINGER_CENTER),
)


@dataclass(frozen=True)
class StringerLineRequest:
    component: Component
    material_id: int
    width: Decimal
    thickness: Decimal
    length: Decimal
    quantity: int = 1
    board_type: BoardType = BoardType.STRINGER

    @property
    def description(self) -> str:
        side = self.component.value.split("_", 1)[1].capitalize()
        return f'{side} stringer {self.thickness}"x{self.width}"'


def parse_stringer_type(stringer_type: str) -> Tuple[Decimal, Decimal]:
    """Return (thickness, width) from a profile token like '1x9.25_Poplar'."""
    match = STRINGER_TYPE_PATTERN.match(stringer_type or "")
    if not match:
        raise InvalidOrder(
            f"Unrecognized stringer type '{stringer_type}', expected '<thickness>x<width>'",
            field="stringerType",
        )
    return to_decimal(match.group(1)), to_decimal(match.group(2))


def stringer_length(order: StairOrderRequest) -> Decimal:
    """Diagonal of the stair: total rise against total run."""
    total_run = (order.num_risers - 1) * order.rough_cut_width
    return (order.floor_to_floor ** 2 + total_run ** 2).sqrt()


def resolve_stringer_lines(order: StairOrderRequest) -> List[StringerLineRequest]:
    mode = order.stringers
    length = stringer_length(order)

    if isinstance(mode, UniformStringers):
        thickness, width = parse_stringer_type(mode.stringer_type)
        check_dimension("stringerType.thickness", thickness, allow_zero=False)
        check_dimension("stringerType.width", width, allow_zero=False)
        return [
            StringerLineRequest(component, mode.material_id, width, thickness, length)
            for _, component in SIDE_COMPONENTS[:2]
        ]

    if isinstance(mode, PerSideStringers):
        lines = []
        for side_name, component in SIDE_COMPONENTS:
            side: StringerSide = getattr(mode, side_name)
            if side is None:
                continue
            field = f"individualStringers.{side_name}"
            check_dimension(f"{field}.width", side.width, allow_zero=False)
            check_dimension(f"{field}.thickness", side.thickness, allow_zero=False)
            lines.append(StringerLineRequest(
                component, side.material_id, side.width, side.thickness, length,
            ))
        if not lines:
            raise InvalidOrder("individualStringers has no sides set",
                               field="individualStringers")
        return lines

    raise TypeError(f"Unsupported stringer mode: {type(mode).__name__}")
