"""Exception hierarchy for the AutoList scheduler."""


class AutoListError(Exception):
    """Base exception for all AutoList errors."""


class ConfigError(AutoListError):
    """Invalid configuration or run parameters."""


class AlreadyRunningError(AutoListError):
    """A run was started while another one is still active."""

    def __init__(self, run_id: str) -> None:
        super().__init__(f"Run {run_id} is still active")
        self.run_id = run_id


class MalformedRowError(AutoListError):
    """A command row matches none of the statement patterns."""

    def __init__(self, text: str, line: int = 0) -> None:
        super().__init__(f"Unrecognized command row {line}: {text!r}")
        self.text = text
        self.line = line


class MalformedSelectionError(AutoListError):
    """A selected row has neither an item id nor a creation request."""


class InvalidTransitionError(AutoListError):
    """A command status would move backwards or skip a state."""

    def __init__(self, command_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Command #{command_id} cannot go from {current} to {target}"
        )
        self.command_id = command_id
        self.current = current
        self.target = target


class RemoteCallError(AutoListError):
    """A remote call failed (transport error, bad status, unreadable body)."""


class SemanticError(AutoListError):
    """The remote side rejected the call with a specific error code."""

    def __init__(self, code: str, info: str = "") -> None:
        message = f"{code}: {info}" if info else code
        super().__init__(message)
        self.code = code
        self.info = info
