"""Command row parsing.

Turns the free-text statement rows and the selected items into a flat,
ordered list of Commands. Pure: no I/O besides log lines.

Row grammar (case-insensitive, leading whitespace ignored):
    -P31         delete the first P31 statement
    -P31:Q5      delete the first P31 statement whose value is Q5
    P31:Q5       add P31 -> Q5
"""

import re
from dataclasses import dataclass, field

from loguru import logger

from .errors import MalformedRowError, MalformedSelectionError
from .models import Command, CommandMode
from .sanitize import is_placeholder, make_placeholder, normalize_item_id

log = logger.bind(component="parser")

_DELETE_RE = re.compile(r"^\s*-(P\d+)", re.IGNORECASE)
_DELETE_VALUE_RE = re.compile(r"^\s*-(P\d+)\s*:\s*(Q\d+)", re.IGNORECASE)
_ADD_RE = re.compile(r"^\s*(P\d+)\s*:\s*(Q\d+)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class RowCommand:
    """A parsed statement row, not yet bound to an item."""

    mode: CommandMode
    prop: str
    value: str | None = None


@dataclass(frozen=True)
class Selection:
    """One selected result row.

    ``entity_ref`` may be None when ``create`` is set; a placeholder is
    generated in that case. ``group_id`` is the caller's handle on the row.
    """

    entity_ref: str | None = None
    page: str = ""
    from_redlink: bool = False
    create: bool = False
    group_id: str | None = None


@dataclass
class ParseResult:
    commands: list[Command] = field(default_factory=list)
    malformed: list[MalformedRowError] = field(default_factory=list)


def parse_row(line: str, line_no: int = 0) -> RowCommand:
    """Parse a single statement row.

    Raises MalformedRowError when the row matches no pattern.
    """
    m = _DELETE_RE.match(line)
    if m is not None:
        prop = m.group(1).upper()
        vm = _DELETE_VALUE_RE.match(line)
        value = vm.group(2).upper() if vm is not None else None
        return RowCommand(mode=CommandMode.DELETE, prop=prop, value=value)

    m = _ADD_RE.match(line)
    if m is not None:
        return RowCommand(
            mode=CommandMode.ADD, prop=m.group(1).upper(), value=m.group(2).upper()
        )

    raise MalformedRowError(line, line_no)


def parse_rows(text: str) -> tuple[list[RowCommand], list[MalformedRowError]]:
    """Parse every non-blank line of ``text``.

    Returns the recognized rows in order, plus one error per rejected line.
    """
    rows: list[RowCommand] = []
    malformed: list[MalformedRowError] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            rows.append(parse_row(line, line_no))
        except MalformedRowError as e:
            log.warning(f"Skipping row {line_no}: {line.strip()!r}")
            malformed.append(e)
    return rows, malformed


def parse_commands(text: str, selections: list[Selection]) -> ParseResult:
    """Build the command list for a run.

    For each selection: an optional ``create`` command first, then one
    command per recognized row, all sharing the selection's entity ref.
    The last command of each selection closes its group.
    """
    rows, malformed = parse_rows(text)
    commands: list[Command] = []

    for index, selection in enumerate(selections):
        entity_ref = selection.entity_ref
        if not entity_ref:
            if not selection.create:
                raise MalformedSelectionError(
                    f"Selection {index} has no item id and no creation request"
                )
            entity_ref = make_placeholder(index)
        elif not is_placeholder(entity_ref):
            try:
                entity_ref = normalize_item_id(entity_ref)
            except ValueError as e:
                raise MalformedSelectionError(f"Selection {index}: {e}") from e

        group_start = len(commands)

        if selection.create:
            commands.append(
                Command(
                    id=len(commands),
                    entity_ref=entity_ref,
                    mode=CommandMode.CREATE,
                    page=selection.page,
                    from_redlink=selection.from_redlink,
                    group_id=selection.group_id,
                )
            )

        for row in rows:
            commands.append(
                Command(
                    id=len(commands),
                    entity_ref=entity_ref,
                    mode=row.mode,
                    prop=row.prop,
                    value=row.value,
                    group_id=selection.group_id,
                )
            )

        if len(commands) > group_start:
            commands[-1].closes_group = True

    log.info(
        f"Parsed {len(commands)} commands for {len(selections)} items "
        f"({len(rows)} rows, {len(malformed)} skipped)"
    )
    return ParseResult(commands=commands, malformed=malformed)
