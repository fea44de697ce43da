from __future__ import annotations

import json
import logging
import os
import random
from pathlib import Path
from typing import Dict, List, Optional, Union

import typer
from pydantic import BaseModel, ValidationError, field_validator

from .config import get_settings
from .ordering import get_rng, seed as seed_generator
from .session import ShufflerSession
from .state import save_state
from .validation import all_syntactically_valid, mark_cycles

logger = logging.getLogger(__name__)

LOG_CONFIGURED = False

TOO_FEW_SECTIONS = "A manuscript needs at least two sections to shuffle"


def configure_logging(name: str = "storyshuffler") -> None:
    global LOG_CONFIGURED
    if LOG_CONFIGURED:
        return
    settings = get_settings()
    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    handlers: list[logging.Handler] = []

    if settings.log_dir:
        path = os.path.abspath(settings.log_dir)
        os.makedirs(path, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(path, f"{name}.log"))
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    logging.basicConfig(level=settings.log_level, handlers=handlers, force=True)
    LOG_CONFIGURED = True


class ConstraintEntry(BaseModel):
    fixed: bool = False
    before: str = ""

    @field_validator("before", mode="before")
    @classmethod
    def _join_number_lists(cls, value):
        if isinstance(value, list):
            return ", ".join(str(v) for v in value)
        if isinstance(value, int):
            return str(value)
        return value


def load_constraint_file(path: Path) -> Dict[int, ConstraintEntry]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise typer.BadParameter(f"{path} must hold an object keyed by section number")
    entries: Dict[int, ConstraintEntry] = {}
    for key, value in raw.items():
        try:
            number = int(key)
        except ValueError as exc:
            raise typer.BadParameter(f"Section key {key!r} is not a number") from exc
        payload: Union[dict, str, list, int] = value
        if not isinstance(payload, dict):
            payload = {"before": payload}
        try:
            entries[number] = ConstraintEntry.model_validate(payload)
        except ValidationError as exc:
            raise typer.BadParameter(f"Section {number}: {exc}") from exc
    return entries


def apply_constraints(session: ShufflerSession, entries: Dict[int, ConstraintEntry]) -> None:
    count = len(session.sections)
    for number, entry in sorted(entries.items()):
        if number < 1 or number > count:
            raise typer.BadParameter(f"Section {number} does not exist; the manuscript has {count} sections")
        index = number - 1
        if entry.fixed:
            try:
                session.set_fixed(index, True)
            except ValueError as exc:
                raise typer.BadParameter(f"§{number}: {exc}") from exc
        session.set_successors(index, entry.before)


def _build_session(
    manuscript: Path,
    delimiter: Optional[str],
    regex: Optional[bool],
    constraints: Optional[Path],
) -> ShufflerSession:
    settings = get_settings()
    session = ShufflerSession(
        manuscript=manuscript.read_text(encoding="utf-8"),
        delimiter=settings.delimiter if delimiter is None else delimiter,
        delimiter_is_regex=settings.delimiter_is_regex if regex is None else regex,
    )
    if session.regex_error:
        typer.echo(f"Invalid delimiter pattern: {session.regex_error}", err=True)
        raise typer.Exit(code=2)
    if constraints is not None:
        apply_constraints(session, load_constraint_file(constraints))
    return session


def _report_errors(session: ShufflerSession) -> List[str]:
    lines: List[str] = []
    for number, constraint in enumerate(session.constraints, start=1):
        if not constraint.is_syntactically_valid:
            lines.append(f"§{number}: invalid list of sections: {constraint.raw_input!r}")
        if constraint.paradox_message:
            lines.append(f"§{number}: {constraint.paradox_message.rstrip()}")
    return lines


app = typer.Typer(help="Story Shuffler: constrained random reordering of manuscript sections")

DelimiterOption = typer.Option(None, "--delimiter", "-d", help="Section delimiter (defaults to the dinkus)")
RegexOption = typer.Option(None, "--regex/--plain", help="Treat the delimiter as a regular expression")
ConstraintsOption = typer.Option(None, "--constraints", "-c", help="Constraints JSON keyed by section number")


@app.callback()
def main() -> None:
    configure_logging()


@app.command()
def sections(
    manuscript: Path = typer.Argument(..., exists=True, dir_okay=False, help="Manuscript text file"),
    delimiter: Optional[str] = DelimiterOption,
    regex: Optional[bool] = RegexOption,
):
    """List the manuscript's sections with their numbers."""
    session = _build_session(manuscript, delimiter, regex, None)
    for number, text in enumerate(session.sections, start=1):
        preview = text.replace("\n", " ")
        if len(preview) > 79:
            preview = preview[:79] + "…"
        typer.echo(f"§{number}: {preview}")


@app.command()
def check(
    manuscript: Path = typer.Argument(..., exists=True, dir_okay=False, help="Manuscript text file"),
    constraints: Optional[Path] = ConstraintsOption,
    delimiter: Optional[str] = DelimiterOption,
    regex: Optional[bool] = RegexOption,
):
    """Report invalid section lists and paradoxes without shuffling."""
    session = _build_session(manuscript, delimiter, regex, constraints)
    if all_syntactically_valid(session.constraints):
        mark_cycles(session.constraints)
    problems = _report_errors(session)
    if len(session.sections) < 2:
        problems.append(TOO_FEW_SECTIONS)
    if problems:
        for line in problems:
            typer.echo(line, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{len(session.sections)} sections, no problems found")


@app.command()
def shuffle(
    manuscript: Path = typer.Argument(..., exists=True, dir_okay=False, help="Manuscript text file"),
    constraints: Optional[Path] = ConstraintsOption,
    delimiter: Optional[str] = DelimiterOption,
    regex: Optional[bool] = RegexOption,
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for a reproducible shuffle"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the reordered manuscript here"),
    state: Optional[Path] = typer.Option(None, "--state", help="Save the session state JSON here"),
):
    """Reorder the sections at random while honoring every constraint."""
    settings = get_settings()
    session = _build_session(manuscript, delimiter, regex, constraints)
    if seed is not None:
        rng = random.Random(seed)
    else:
        if settings.seed is not None:
            seed_generator(settings.seed)
        rng = get_rng()
    result = session.shuffle(rng)
    state_path = state or (Path(settings.state_path) if settings.state_path else None)
    if state_path is not None:
        save_state(state_path, session)
    if result is None:
        problems = _report_errors(session) or [TOO_FEW_SECTIONS]
        for line in problems:
            typer.echo(line, err=True)
        raise typer.Exit(code=1)
    text = session.assembled() or ""
    typer.echo("Order: " + ", ".join(f"§{i + 1}" for i in result.indices), err=True)
    if out is not None:
        out.write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {out}", err=True)
    else:
        typer.echo(text)


if __name__ == "__main__":
    app()
