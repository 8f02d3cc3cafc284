"""
Order aggregator — prices a whole stair order into a breakdown.

Order of work:
1. Validate the order (dimensions, riser numbers)
2. One tread line per tread
3. One riser line per tread whose type carries a riser
4. Landing tread (and its riser) when requested
5. Stringer lines from the stringer resolver
6. Special parts: must exist in the catalog; declared flat price or the definition
7. subtotal = sum of line totals, total = subtotal

Any error aborts the calculation; a partial breakdown is never returned.
Pure and synchronous: the only I/O is the rule store it is handed.
"""

from decimal import Decimal
from typing import List, Optional

from .domain import (
    TREAD_POLICIES,
    BoardType,
    Component,
    PartPricing,
    PriceBreakdown,
    PriceBreakdownLine,
    StairOrderRequest,
    TreadSpec,
    to_decimal,
)
from .errors import InvalidOrder
from .rule_store import RuleStore
from .stringers import resolve_stringer_lines
from .unit_price import ZERO, check_dimension, line_total, round_currency, unit_price

DEFAULT_LANDING_TREAD_WIDTH = Decimal("3.5")


class StairPriceCalculator:
    """Prices StairOrderRequests against one rule store."""

    def __init__(self, store: RuleStore, landing_tread_width=DEFAULT_LANDING_TREAD_WIDTH):
        self.store = store
        self.landing_tread_width = check_dimension(
            "landing_tread_width", landing_tread_width, allow_zero=False,
        )

    def calculate(self, order: StairOrderRequest) -> PriceBreakdown:
        self.validate(order)

        lines: List[PriceBreakdownLine] = []
        for tread in order.treads:
            lines.append(self._price_tread(order, tread))
        for tread in order.treads:
            riser = self._price_riser(order, tread)
            if riser is not None:
                lines.append(riser)
        if order.include_landing_tread:
            lines.extend(self._price_landing(order))
        lines.extend(self._price_stringers(order))
        for index, part in enumerate(order.special_parts):
            lines.append(self._price_special_part(order, index, part))

        subtotal = sum((line.line_total for line in lines), ZERO)
        subtotal = round_currency(subtotal)
        return PriceBreakdown(lines=tuple(lines), subtotal=subtotal, total=subtotal)

    # --- Validation ---

    def validate(self, order: StairOrderRequest) -> None:
        if isinstance(order.num_risers, bool) or not isinstance(order.num_risers, int) \
                or order.num_risers < 1:
            raise InvalidOrder(f"numRisers must be a positive integer, got {order.num_risers}",
                               field="numRisers")
        check_dimension("floorToFloor", order.floor_to_floor, allow_zero=False)
        check_dimension("roughCutWidth", order.rough_cut_width, allow_zero=False)
        check_dimension("noseSize", order.nose_size)

        for index, tread in enumerate(order.treads):
            field = f"treads[{index}]"
            if not 1 <= tread.riser_number <= order.num_risers:
                raise InvalidOrder(
                    f"{field}.riserNumber {tread.riser_number} is outside 1..{order.num_risers}",
                    field=f"{field}.riserNumber",
                )
            if tread.type not in TREAD_POLICIES:
                raise InvalidOrder(f"{field}.type '{tread.type}' has no tread policy",
                                   field=f"{field}.type")
            check_dimension(f"{field}.stairWidth", tread.stair_width, allow_zero=False)

        if order.include_landing_tread and not order.treads:
            raise InvalidOrder("A landing tread needs at least one tread to take its width from",
                               field="includeLandingTread")

        for index, part in enumerate(order.special_parts):
            if part.quantity < 1:
                raise InvalidOrder(
                    f"specialParts[{index}].quantity must be >= 1, got {part.quantity}",
                    field=f"specialParts[{index}].quantity",
                )
            if part.unit_price is not None:
                check_dimension(f"specialParts[{index}].unitPrice", part.unit_price)

    # --- Boards ---

    def _board_line(self, component: Component, board_type: BoardType, material_id: int,
                    bracket_width: Decimal, length: Decimal, width: Decimal,
                    description: str, quantity: int = 1,
                    mitred: bool = False) -> PriceBreakdownLine:
        rule = self.store.get_rule(board_type, material_id, bracket_width)
        price = unit_price(rule, length, width, mitred=mitred)
        return PriceBreakdownLine(
            component=component,
            unit_price=price,
            quantity=quantity,
            line_total=line_total(price, quantity),
            description=description,
            material_id=material_id,
            length=length,
            width=width,
        )

    def _price_tread(self, order: StairOrderRequest, tread: TreadSpec) -> PriceBreakdownLine:
        policy = TREAD_POLICIES[tread.type]
        return self._board_line(
            Component.TREAD, BoardType.TREAD, order.tread_material_id,
            bracket_width=tread.stair_width,
            length=tread.stair_width,
            width=order.tread_width,
            description=f"Riser {tread.riser_number} {tread.type.value} tread",
            mitred=order.full_mitre and policy.mitre_eligible,
        )

    def _price_riser(self, order: StairOrderRequest,
                     tread: TreadSpec) -> Optional[PriceBreakdownLine]:
        policy = TREAD_POLICIES[tread.type]
        if policy.riser_kind is None:
            return None
        return self._board_line(
            Component.RISER, BoardType.RISER, order.riser_material_id,
            bracket_width=tread.stair_width,
            length=tread.stair_width,
            width=order.riser_height,
            description=f"Riser {tread.riser_number} {policy.riser_kind.value} riser",
        )

    def _price_landing(self, order: StairOrderRequest) -> List[PriceBreakdownLine]:
        top = max(order.treads, key=lambda tread: tread.riser_number)
        landing_tread = self._board_line(
            Component.LANDING_TREAD, BoardType.TREAD, order.tread_material_id,
            bracket_width=top.stair_width,
            length=top.stair_width,
            width=self.landing_tread_width,
            description="Landing tread",
        )
        landing_riser = self._board_line(
            Component.RISER, BoardType.RISER, order.riser_material_id,
            bracket_width=top.stair_width,
            length=top.stair_width,
            width=order.riser_height,
            description="Landing standard riser",
        )
        return [landing_tread, landing_riser]

    def _price_stringers(self, order: StairOrderRequest) -> List[PriceBreakdownLine]:
        return [
            self._board_line(
                request.component, request.board_type, request.material_id,
                bracket_width=request.width,
                length=request.length,
                width=request.width,
                description=request.description,
                quantity=request.quantity,
            )
            for request in resolve_stringer_lines(order)
        ]

    # --- Special parts ---

    def _price_special_part(self, order: StairOrderRequest, index: int,
                            part) -> PriceBreakdownLine:
        material_id = part.material_id if part.material_id is not None \
            else order.tread_material_id
        # Only catalog parts are priced, even when the order declares a price.
        definition = self.store.get_special_part(part.part_id, material_id)
        if part.unit_price is not None:
            price = round_currency(part.unit_price)
        else:
            per_part = definition.unit_cost + definition.labor_cost
            if definition.pricing == PartPricing.PER_RISER:
                per_part = per_part * order.num_risers
            price = round_currency(per_part)
        description = part.description or definition.description

        return PriceBreakdownLine(
            component=Component.SPECIAL_PART,
            unit_price=price,
            quantity=part.quantity,
            line_total=line_total(price, part.quantity),
            description=description,
            material_id=material_id,
        )


def calculate_stair_price(order: StairOrderRequest, store: RuleStore,
                          landing_tread_width=DEFAULT_LANDING_TREAD_WIDTH) -> PriceBreakdown:
    """Price one stair order. Raises a PricingError subclass on any failure."""
    return StairPriceCalculator(store, landing_tread_width=to_decimal(landing_tread_width)) \
        .calculate(order)
