"""
Pricing rule lookup.

RuleStore is the read-only boundary the calculator prices against. The
store decides how candidate rows are fetched; select_rule decides which one
applies, so every store resolves brackets the same way:

    - only rules whose width bracket covers the requested width are candidates
    - the most specific bracket wins (closed range > one bound > any width)
    - two winners at the same specificity is a configuration error
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .domain import BoardType, PricingRule, SpecialPartDefinition, to_decimal
from .errors import AmbiguousPricingRule, RuleNotFound, UnknownSpecialPart


def select_rule(candidates: Iterable[PricingRule], board_type: BoardType,
                material_id: int, width) -> PricingRule:
    width = to_decimal(width)
    matching = [rule for rule in candidates if rule.covers(width)]
    if not matching:
        raise RuleNotFound(BoardType(board_type).value, material_id, width)

    best = max(rule.specificity for rule in matching)
    winners = [rule for rule in matching if rule.specificity == best]
    if len(winners) > 1:
        raise AmbiguousPricingRule(BoardType(board_type).value, material_id, width,
                                   candidates=len(winners))
    return winners[0]


def select_special_part(candidates: Iterable[SpecialPartDefinition], part_id: str,
                        material_id: Optional[int]) -> SpecialPartDefinition:
    """Material-specific definition first, then the material-independent one."""
    exact = None
    generic = None
    for part in candidates:
        if part.part_id != part_id:
            continue
        if material_id is not None and part.material_id == material_id:
            exact = part
        elif part.material_id is None:
            generic = part
    chosen = exact or generic
    if chosen is None:
        raise UnknownSpecialPart(part_id, material_id)
    return chosen


class RuleStore(ABC):
    """Read-only rule catalog. Must tolerate concurrent readers."""

    @abstractmethod
    def get_rule(self, board_type: BoardType, material_id: int, width) -> PricingRule:
        """Return the single applicable rule or raise RuleNotFound."""

    @abstractmethod
    def get_special_part(self, part_id: str, material_id: Optional[int]) -> SpecialPartDefinition:
        """Return the part definition or raise UnknownSpecialPart."""


class InMemoryRuleStore(RuleStore):
    """Dict-backed store for fixtures, tests and quick what-if pricing."""

    def __init__(self, rules: Iterable[PricingRule] = (),
                 special_parts: Iterable[SpecialPartDefinition] = ()):
        self._rules: List[PricingRule] = []
        self._special_parts: List[SpecialPartDefinition] = list(special_parts)
        for rule in rules:
            self.add_rule(rule)

    def add_rule(self, rule: PricingRule) -> None:
        if rule.board_type is None or rule.material_id is None:
            raise ValueError("Stored rules need a board_type and material_id")
        self._rules.append(rule)

    def add_special_part(self, part: SpecialPartDefinition) -> None:
        self._special_parts.append(part)

    def get_rule(self, board_type: BoardType, material_id: int, width) -> PricingRule:
        board_type = BoardType(board_type)
        candidates = [
            rule for rule in self._rules
            if rule.board_type == board_type and rule.material_id == material_id
        ]
        return select_rule(candidates, board_type, material_id, width)

    def get_special_part(self, part_id: str, material_id: Optional[int]) -> SpecialPartDefinition:
        return select_special_part(self._special_parts, part_id, material_id)
