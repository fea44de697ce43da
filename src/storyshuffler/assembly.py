from __future__ import annotations

from typing import Sequence

from .config import DINKUS


def section_break(delimiter: str, is_regex: bool) -> str:
    # A pattern cannot be written back verbatim, so fall back to a dinkus.
    text = DINKUS if is_regex or not delimiter else delimiter
    return f"\n\n{text}\n\n"


def assemble(texts: Sequence[str], delimiter: str = DINKUS, is_regex: bool = False) -> str:
    return section_break(delimiter, is_regex).join(texts)
