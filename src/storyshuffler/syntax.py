from __future__ import annotations

import logging
import re
from typing import List, Optional

from .models import Constraint

logger = logging.getLogger(__name__)

# Optionally empty; otherwise comma-separated decimal integers, each with
# optional surrounding whitespace.
SECTIONS_LIST_RE = re.compile(r"(?:\s*[0-9]+\s*(?:,\s*[0-9]+\s*)*)?")


def is_valid_successor_list(raw: str) -> bool:
    return SECTIONS_LIST_RE.fullmatch(raw.strip()) is not None


def parse_successor_list(raw: str) -> Optional[List[int]]:
    """Parse a successor list such as ``"2, 5,7"`` into one-based numbers.

    Returns None when the text is malformed. Literal zeros are dropped. Other
    numbers are kept as typed, including duplicates and numbers past the end
    of the manuscript; range checking belongs to the caller.
    """
    text = raw.strip()
    if SECTIONS_LIST_RE.fullmatch(text) is None:
        return None
    if not text:
        return []
    numbers = (int(token) for token in text.split(","))
    return [n for n in numbers if n != 0]


def out_of_range_references(constraint: Constraint, section_count: int) -> List[int]:
    return [ref for ref in constraint.before if ref < 1 or ref > section_count]


def apply_successor_input(
    constraint: Constraint,
    raw: str,
    section_count: Optional[int] = None,
) -> bool:
    """Store ``raw`` on the constraint and update ``before`` if it parses.

    When ``section_count`` is given, a reference past the last section is
    rejected the same way as malformed text.
    """
    constraint.raw_input = raw
    parsed = parse_successor_list(raw)
    if parsed is not None and section_count is not None:
        if any(ref > section_count for ref in parsed):
            logger.debug("Successor list %r references a section beyond %d", raw, section_count)
            parsed = None
    if parsed is None:
        constraint.is_syntactically_valid = False
        constraint.before = []
        return False
    constraint.is_syntactically_valid = True
    constraint.before = parsed
    return True
