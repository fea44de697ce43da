from __future__ import annotations

import logging
import random
from typing import List, Optional

from .assembly import assemble
from .config import DINKUS
from .models import Constraint, OrderingResult, default_constraints
from .ordering import shuffle_sections
from .splitter import split_sections
from .syntax import apply_successor_input
from .validation import can_shuffle, mark_cycles

logger = logging.getLogger(__name__)


class ShufflerSession:
    """Model behind the editing surface: manuscript, constraints, latest shuffle.

    Re-splitting the manuscript replaces the constraint list wholesale, so any
    pins or successor lists entered earlier are discarded. The latest result
    survives re-splits and edits until the next successful shuffle.
    """

    def __init__(
        self,
        manuscript: str = "",
        delimiter: str = DINKUS,
        delimiter_is_regex: bool = False,
    ) -> None:
        self.manuscript = manuscript
        self.delimiter = delimiter
        self.delimiter_is_regex = delimiter_is_regex
        self.regex_error: Optional[str] = None
        self.sections: List[str] = []
        self.constraints: List[Constraint] = []
        self.result: Optional[OrderingResult] = None
        self.update_sections()

    def update_sections(self) -> None:
        split = split_sections(self.manuscript, self.delimiter, self.delimiter_is_regex)
        self.regex_error = split.regex_error
        self.sections = list(split.sections)
        self.constraints = default_constraints(len(self.sections))
        logger.debug("Split manuscript into %d sections", len(self.sections))

    def set_manuscript(self, manuscript: str) -> None:
        self.manuscript = manuscript
        self.update_sections()

    def set_delimiter(self, delimiter: str, is_regex: Optional[bool] = None) -> None:
        self.delimiter = delimiter
        if is_regex is not None:
            self.delimiter_is_regex = is_regex
        self.update_sections()

    def _constraint(self, index: int) -> Constraint:
        if index < 0 or index >= len(self.constraints):
            raise IndexError(f"Section index {index} out of range for {len(self.constraints)} sections")
        return self.constraints[index]

    def can_pin(self, index: int) -> bool:
        return index == 0 or index == len(self.constraints) - 1

    def set_fixed(self, index: int, fixed: bool) -> None:
        constraint = self._constraint(index)
        if not self.can_pin(index):
            raise ValueError("Only the first and last sections can be fixed in place")
        constraint.fixed = fixed

    def set_successors(self, index: int, raw: str) -> bool:
        constraint = self._constraint(index)
        return apply_successor_input(constraint, raw, len(self.sections))

    def can_shuffle(self) -> bool:
        return can_shuffle(self.constraints, len(self.sections))

    def has_errors(self) -> bool:
        return any(c.has_errors for c in self.constraints)

    def shuffle(self, rng: Optional[random.Random] = None) -> Optional[OrderingResult]:
        if not self.can_shuffle():
            logger.info("Shuffle blocked: fix invalid section lists first")
            return None
        graph = mark_cycles(self.constraints)
        if graph is None:
            return None
        result = shuffle_sections(graph, self.sections, rng)
        self.result = result
        logger.info("Shuffled %d sections", len(result))
        return result

    def assembled(self) -> Optional[str]:
        if self.result is None:
            return None
        return assemble(self.result.texts, self.delimiter, self.delimiter_is_regex)
