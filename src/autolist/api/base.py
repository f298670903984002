"""The edit capability the executor and scheduler are written against."""

from typing import Protocol

from ..models import Statement


class EditClient(Protocol):
    """Remote edit operations.

    Implementations raise RemoteCallError for transport or protocol
    failures and SemanticError when the remote side rejects a call with
    an error code. Per-call timeouts are the implementation's concern.
    """

    def create_entity(self, site: str | None = None, page: str | None = None) -> str:
        """Create an item, blank or linked to ``page`` on ``site``. Returns its id."""
        ...

    def set_label(self, entity_id: str, language: str, text: str) -> None: ...

    def set_statement(self, entity_id: str, prop: str, value: str) -> None: ...

    def read_statements(self, entity_id: str, prop: str) -> list[Statement]:
        """Statements of ``entity_id`` for ``prop``; empty when there are none."""
        ...

    def remove_statement(self, statement_id: str) -> None: ...
