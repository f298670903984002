"""Execution of a single command against an EditClient.

Each command resolves to a CommandResult; remote errors never escape.
"""

from loguru import logger

from .api.base import EditClient
from .errors import RemoteCallError, SemanticError
from .models import Command, CommandMode, CommandResult, ErrorKind
from .sanitize import is_placeholder, label_language, page_label

log = logger.bind(component="executor")


def execute_command(
    command: Command, entity_ref: str, client: EditClient, wiki: str
) -> CommandResult:
    """Run ``command`` against ``entity_ref`` (its ref at dispatch time).

    ``wiki`` is the source wiki for page-linked creations and decides the
    label language for blank ones.
    """
    if command.mode != CommandMode.CREATE and is_placeholder(entity_ref):
        # The group's creation failed, so there is no item to edit
        log.warning(f"{command.describe()}: item was never created, skipping")
        return CommandResult.failure(
            ErrorKind.SEMANTIC,
            f"{entity_ref} was never created",
            code="unresolved-placeholder",
        )

    try:
        if command.mode == CommandMode.CREATE:
            return _create(command, client, wiki)
        if command.mode == CommandMode.ADD:
            client.set_statement(entity_ref, command.prop, command.value or "")
            return CommandResult.success()
        if command.mode == CommandMode.DELETE:
            return _delete(command, entity_ref, client)
    except SemanticError as e:
        if e.code == "no-external-page":
            log.warning(
                f"{command.page} does not exist on {wiki}; "
                f"maybe it has been deleted?"
            )
        else:
            log.warning(f"{command.describe()} rejected: {e}")
        return CommandResult.failure(ErrorKind.SEMANTIC, str(e), code=e.code)
    except RemoteCallError as e:
        log.warning(f"{command.describe()} failed: {e}")
        return CommandResult.failure(ErrorKind.REMOTE, str(e))

    raise ValueError(f"Unknown command mode: {command.mode!r}")


def _create(command: Command, client: EditClient, wiki: str) -> CommandResult:
    if not command.from_redlink:
        new_id = client.create_entity(site=wiki, page=command.page)
        return CommandResult.success(new_id)

    # Redlinks have no page to link; create blank and label it
    new_id = client.create_entity()
    try:
        client.set_label(new_id, label_language(wiki), page_label(command.page))
    except (RemoteCallError, SemanticError) as e:
        log.warning(f"Created {new_id} but setting its label failed: {e}")
    return CommandResult.success(new_id)


def _delete(command: Command, entity_ref: str, client: EditClient) -> CommandResult:
    statements = client.read_statements(entity_ref, command.prop)
    for statement in statements:
        if command.value is not None and statement.value != command.value:
            continue
        # Only the first match is removed
        client.remove_statement(statement.id)
        log.debug(f"Removed {statement.id} from {entity_ref}")
        return CommandResult.success()

    log.debug(f"{command.describe()}: no matching statement, nothing to remove")
    return CommandResult.success()
