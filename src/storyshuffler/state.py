from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .config import DINKUS
from .models import Constraint, OrderingResult
from .session import ShufflerSession
from .syntax import apply_successor_input

logger = logging.getLogger(__name__)

STATE_VERSION = 1


class StateFileError(ValueError):
    pass


class ConstraintState(BaseModel):
    fixed: bool = False
    before: List[int] = Field(default_factory=list, description="One-based successor sections")
    raw_input: str = ""
    is_syntactically_valid: bool = True
    paradox_message: Optional[str] = None

    @field_validator("before")
    @classmethod
    def _no_zero_references(cls, value: List[int]) -> List[int]:
        return [ref for ref in value if ref != 0]


class OrderingState(BaseModel):
    indices: List[int]
    texts: List[str]

    @model_validator(mode="after")
    def _same_length(self) -> "OrderingState":
        if len(self.indices) != len(self.texts):
            raise ValueError("indices and texts must have the same length")
        return self


class SessionState(BaseModel):
    version: int = STATE_VERSION
    manuscript: str = ""
    delimiter: str = DINKUS
    delimiter_is_regex: bool = False
    constraints: List[ConstraintState] = Field(default_factory=list)
    result: Optional[OrderingState] = None


def session_to_state(session: ShufflerSession) -> SessionState:
    result = None
    if session.result is not None:
        result = OrderingState(indices=list(session.result.indices), texts=list(session.result.texts))
    return SessionState(
        manuscript=session.manuscript,
        delimiter=session.delimiter,
        delimiter_is_regex=session.delimiter_is_regex,
        constraints=[
            ConstraintState(
                fixed=c.fixed,
                before=list(c.before),
                raw_input=c.raw_input,
                is_syntactically_valid=c.is_syntactically_valid,
                paradox_message=c.paradox_message,
            )
            for c in session.constraints
        ],
        result=result,
    )


def _restore_constraint(saved: ConstraintState, section_count: int) -> Constraint:
    # Saved validity flags are not trusted; the text is re-checked against the current split.
    constraint = Constraint(fixed=saved.fixed, paradox_message=saved.paradox_message)
    raw = saved.raw_input or ", ".join(str(ref) for ref in saved.before)
    if not apply_successor_input(constraint, raw, section_count):
        logger.warning("Saved section list %r is no longer valid", raw)
    return constraint


def session_from_state(state: SessionState) -> ShufflerSession:
    session = ShufflerSession(
        manuscript=state.manuscript,
        delimiter=state.delimiter,
        delimiter_is_regex=state.delimiter_is_regex,
    )
    if len(state.constraints) == len(session.sections):
        session.constraints = [_restore_constraint(c, len(session.sections)) for c in state.constraints]
    elif state.constraints:
        logger.warning(
            "Discarding %d saved constraints; manuscript now has %d sections",
            len(state.constraints),
            len(session.sections),
        )
    if state.result is not None:
        session.result = OrderingResult(indices=tuple(state.result.indices), texts=tuple(state.result.texts))
    return session


def save_state(path: str | Path, session: ShufflerSession) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(session_to_state(session).model_dump_json(indent=2), encoding="utf-8")
    logger.debug("Saved session state to %s", target)


def load_state(path: str | Path) -> ShufflerSession:
    source = Path(path)
    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
        state = SessionState.model_validate(raw)
    except json.JSONDecodeError as exc:
        raise StateFileError(f"State file {source} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise StateFileError(f"State file {source} is malformed: {exc}") from exc
    if state.version != STATE_VERSION:
        raise StateFileError(f"Unsupported state version {state.version} in {source}")
    return session_from_state(state)
