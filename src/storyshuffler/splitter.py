from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .config import DINKUS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitResult:
    sections: List[str] = field(default_factory=list)
    regex_error: Optional[str] = None


def split_sections(manuscript: str, delimiter: str = DINKUS, is_regex: bool = False) -> SplitResult:
    """Split a manuscript into trimmed sections.

    The delimiter is treated as a regular expression only when ``is_regex`` is
    set and the pattern is non-empty. A bad pattern yields no sections and the
    compiler's message. An empty plain delimiter leaves the manuscript whole.
    """
    if is_regex and delimiter:
        try:
            pattern = re.compile(delimiter)
        except re.error as exc:
            logger.info("Invalid delimiter pattern %r: %s", delimiter, exc)
            return SplitResult(sections=[], regex_error=str(exc))
        parts = _split_on_matches(manuscript, pattern)
    elif delimiter:
        parts = manuscript.split(delimiter)
    else:
        parts = [manuscript]
    return SplitResult(sections=[part.strip() for part in parts])


def _split_on_matches(text: str, pattern: "re.Pattern[str]") -> List[str]:
    # Capture groups in the pattern must not leak into the sections.
    parts: List[str] = []
    last = 0
    for match in pattern.finditer(text):
        parts.append(text[last:match.start()])
        last = match.end()
    parts.append(text[last:])
    return parts
