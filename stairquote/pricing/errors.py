"""
Error taxonomy for stair price calculations.

Every error here aborts the whole calculation; no partial breakdown is
ever returned. The pricing code raises, the caller decides how to report.
"""


class PricingError(Exception):
    """Base class for all conditions that abort a stair price calculation."""


class InvalidOrder(PricingError):
    """Structural problem in the order itself. Caller's fault, never retried."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class InvalidDimension(InvalidOrder):
    """A dimension that must be non-negative (or positive) is not."""

    def __init__(self, field: str, value, allow_zero: bool = True):
        bound = ">= 0" if allow_zero else "> 0"
        super().__init__(f"{field} must be {bound}, got {value}", field=field)
        self.value = value


class RuleNotFound(PricingError):
    """No pricing rule matches a (board type, material, width) combination."""

    def __init__(self, board_type: str, material_id: int, width, message: str = None):
        self.board_type = board_type
        self.material_id = material_id
        self.width = width
        super().__init__(
            message
            or f"No pricing rule for board type '{board_type}', "
               f"material {material_id}, width {width}"
        )


class AmbiguousPricingRule(RuleNotFound):
    """More than one equally specific rule matches. Rejected, never guessed."""

    def __init__(self, board_type: str, material_id: int, width, candidates: int):
        self.candidates = candidates
        super().__init__(
            board_type, material_id, width,
            message=(
                f"{candidates} equally specific pricing rules match board type "
                f"'{board_type}', material {material_id}, width {width}"
            ),
        )


class UnknownSpecialPart(PricingError):
    """A special part has no pricing definition."""

    def __init__(self, part_id: str, material_id: int = None):
        self.part_id = part_id
        self.material_id = material_id
        suffix = f" for material {material_id}" if material_id is not None else ""
        super().__init__(f"No pricing definition for special part '{part_id}'{suffix}")


class StoreUnavailable(PricingError):
    """The rule store failed to answer. Propagated as-is, no retry."""
