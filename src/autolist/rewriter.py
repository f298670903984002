"""Placeholder-to-item id propagation after a successful creation."""

from loguru import logger

from .models import Command, CommandStatus

log = logger.bind(component="rewriter")


def rewrite_entity_ref(old_ref: str, new_ref: str, commands: list[Command]) -> int:
    """Point every unfinished command on ``old_ref`` at ``new_ref``.

    Done commands keep the ref they ran with. Returns the number of
    commands rewritten.
    """
    count = 0
    for command in commands:
        if command.status == CommandStatus.DONE:
            continue
        if command.entity_ref == old_ref:
            command.entity_ref = new_ref
            count += 1
    log.debug(f"Rewrote {count} commands: {old_ref} -> {new_ref}")
    return count
