from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple


@dataclass(slots=True)
class Constraint:
    """Ordering rules attached to one manuscript section.

    ``before`` lists the sections that must appear strictly after this one,
    as one-based section numbers. ``raw_input`` keeps the text the user typed
    so that a malformed list can be shown back without touching ``before``.
    The error fields are written by the syntax validator and the validation
    pass; nothing else should set them.
    """

    fixed: bool = False
    before: List[int] = field(default_factory=list)
    raw_input: str = ""
    is_syntactically_valid: bool = True
    paradox_message: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        return not self.is_syntactically_valid or self.paradox_message is not None


def default_constraints(count: int) -> List[Constraint]:
    return [Constraint() for _ in range(max(0, count))]


@dataclass(frozen=True, slots=True)
class OrderingResult:
    """A finished reordering: zero-based original indices plus their texts."""

    indices: Tuple[int, ...]
    texts: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.indices) != len(self.texts):
            raise ValueError("indices and texts must have the same length")

    @classmethod
    def from_indices(cls, indices: Sequence[int], sections: Sequence[str]) -> "OrderingResult":
        return cls(indices=tuple(indices), texts=tuple(sections[i] for i in indices))

    def __len__(self) -> int:
        return len(self.indices)
