"""Core enums, constants, and type definitions for the AutoList scheduler.

Enums:
    CommandMode    -- Edit operation kind (create, add, delete).
    CommandStatus  -- Command lifecycle (waiting, running, done). Forward only.
    ErrorKind      -- Failure classification for a finished command
                      (remote, semantic). Neither is retried.
    RunOutcome     -- How a run ended (completed, stopped).
"""

from dataclasses import dataclass, field
from enum import StrEnum

from .errors import InvalidTransitionError


class CommandMode(StrEnum):
    CREATE = "create"
    ADD = "add"
    DELETE = "delete"


class CommandStatus(StrEnum):
    WAITING = "waiting"
    RUNNING = "running"
    DONE = "done"


class ErrorKind(StrEnum):
    REMOTE = "remote"
    SEMANTIC = "semantic"


class RunOutcome(StrEnum):
    COMPLETED = "completed"
    STOPPED = "stopped"


# Placeholder refs for items that do not exist yet
PLACEHOLDER_PREFIX = "create_item_"

# Regular accounts get one command at a time with a 2 s gap,
# bot accounts up to 5 concurrent commands with a 1 ms gap
USER_MAX_CONCURRENCY = 1
USER_THROTTLE_MS = 2000
BOT_MAX_CONCURRENCY = 5
BOT_THROTTLE_MS = 1

DEFAULT_POLL_INTERVAL_MS = 100

_NEXT_STATUS: dict[CommandStatus, CommandStatus] = {
    CommandStatus.WAITING: CommandStatus.RUNNING,
    CommandStatus.RUNNING: CommandStatus.DONE,
}


@dataclass
class Command:
    """One normalized edit operation awaiting execution.

    ``entity_ref`` is either a concrete item id (``Q42``) or a placeholder
    shared by every command of the same row group. It is rewritten once,
    when the group's ``create`` command succeeds.
    """

    id: int
    entity_ref: str
    mode: CommandMode
    prop: str = ""
    value: str | None = None
    page: str = ""
    from_redlink: bool = False
    status: CommandStatus = CommandStatus.WAITING
    closes_group: bool = False
    group_id: str | None = None

    def mark_running(self) -> None:
        self._advance(CommandStatus.RUNNING)

    def mark_done(self) -> None:
        self._advance(CommandStatus.DONE)

    def _advance(self, target: CommandStatus) -> None:
        if _NEXT_STATUS.get(self.status) != target:
            raise InvalidTransitionError(self.id, str(self.status), str(target))
        self.status = target

    @property
    def is_done(self) -> bool:
        return self.status == CommandStatus.DONE

    def describe(self) -> str:
        """Short human-readable form used in log lines."""
        if self.mode == CommandMode.CREATE:
            return f"#{self.id} create {self.page!r} ({self.entity_ref})"
        text = f"#{self.id} {self.mode} {self.entity_ref} {self.prop}"
        if self.value:
            text += f":{self.value}"
        return text


@dataclass(frozen=True)
class Statement:
    """A statement read back from the remote store."""

    id: str
    value: str | None = None


@dataclass(frozen=True)
class CommandResult:
    """Tagged outcome of executing one command.

    ``ok`` results may carry ``new_id`` (successful creations). Failed
    results carry an ``error_kind`` plus message, and for semantic
    failures the remote error ``code``.
    """

    ok: bool
    new_id: str | None = None
    error_kind: ErrorKind | None = None
    message: str = ""
    code: str = ""

    @classmethod
    def success(cls, new_id: str | None = None) -> "CommandResult":
        return cls(ok=True, new_id=new_id)

    @classmethod
    def failure(
        cls, kind: ErrorKind, message: str, code: str = ""
    ) -> "CommandResult":
        return cls(ok=False, error_kind=kind, message=message, code=code)


@dataclass(frozen=True)
class RunProgress:
    """Progress snapshot for display: done out of total."""

    done: int = 0
    total: int = 0
    running: int = 0

    @property
    def remaining(self) -> int:
        return self.total - self.done


@dataclass
class RunReport:
    """Summary handed to completion callbacks."""

    outcome: RunOutcome
    done: int = 0
    total: int = 0
    created_ids: list[str] = field(default_factory=list)
    failed_ids: list[int] = field(default_factory=list)
