"""QuickStatements v1 export of a command list.

Lets a batch be handed to QuickStatements instead of being run here.
Commands are joined with ``||``, the v1 row separator; ``LAST`` refers to
the item created by the most recent CREATE.
"""

import re

from loguru import logger

from .models import Command, CommandMode
from .sanitize import is_placeholder, strip_disambiguation

log = logger.bind(component="quickstatements")

_WIKIPEDIA_RE = re.compile(r"^([a-z-]+)wiki$")


def command_to_quickstatements(command: Command, wiki: str) -> str:
    if command.mode == CommandMode.CREATE:
        text = f'CREATE||LAST|S{wiki}|"{command.page}"'
        m = _WIKIPEDIA_RE.match(wiki)
        if m is not None:
            text += f'||LAST|L{m.group(1)}|"{strip_disambiguation(command.page)}"'
        return text

    prefix = "-" if command.mode == CommandMode.DELETE else ""
    item = "LAST" if is_placeholder(command.entity_ref) else command.entity_ref
    text = f"{prefix}{item}|{command.prop}"
    if command.value is not None:
        text += f"|{command.value}"
    return text


def to_quickstatements(commands: list[Command], wiki: str) -> str:
    """Render ``commands`` as one QuickStatements v1 batch string."""
    rows = [command_to_quickstatements(c, wiki) for c in commands]
    log.debug(f"Exported {len(rows)} commands to QuickStatements")
    return "||".join(rows)
