"""WiDaR edit proxy client.

WiDaR performs edits on behalf of a logged-in user. Every call is a GET
with an ``action`` parameter; the JSON answer carries ``error: "OK"`` on
success, or an error string/object otherwise. Session handling (the
OAuth cookie) is the caller's business: pass a prepared httpx.Client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from loguru import logger

from ..errors import RemoteCallError, SemanticError
from ..models import Statement
from ..sanitize import normalize_item_id
from . import wikidata

if TYPE_CHECKING:
    from ..config import AutoListConfig

log = logger.bind(component="widar")


class WidarClient:
    """EditClient implementation backed by the WiDaR proxy."""

    def __init__(
        self,
        base_url: str,
        tool_hashtag: str = "",
        wikidata_api_url: str = wikidata.DEFAULT_API_URL,
        timeout: float = 30.0,
        http: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url
        self.tool_hashtag = tool_hashtag
        self.wikidata_api_url = wikidata_api_url
        self.timeout = timeout
        self._http = http or httpx.Client(timeout=timeout)

    @classmethod
    def from_config(
        cls, config: AutoListConfig, http: httpx.Client | None = None
    ) -> WidarClient:
        return cls(
            base_url=config.widar_url,
            tool_hashtag=config.tool_hashtag,
            wikidata_api_url=config.wikidata_api_url,
            timeout=config.request_timeout,
            http=http,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> WidarClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -- EditClient --

    def create_entity(self, site: str | None = None, page: str | None = None) -> str:
        if site and page:
            data = self._call(
                {"action": "create_item_from_page", "site": site, "page": page}
            )
        else:
            data = self._call({"action": "create_blank_item"})

        raw_id = data.get("q")
        if not raw_id:
            raise RemoteCallError(f"Creation response has no item id: {data!r}")
        try:
            new_id = normalize_item_id(str(raw_id))
        except ValueError as e:
            raise RemoteCallError(str(e)) from e
        log.info(f"Created {new_id}" + (f" from {site}:{page}" if page else ""))
        return new_id

    def set_label(self, entity_id: str, language: str, text: str) -> None:
        self._call(
            {"action": "set_label", "q": entity_id, "lang": language, "label": text}
        )

    def set_statement(self, entity_id: str, prop: str, value: str) -> None:
        self._call(
            {"action": "set_claims", "ids": entity_id, "prop": prop, "target": value}
        )

    def read_statements(self, entity_id: str, prop: str) -> list[Statement]:
        return wikidata.read_statements(
            entity_id, prop, api_url=self.wikidata_api_url, timeout=self.timeout
        )

    def remove_statement(self, statement_id: str) -> None:
        self._call({"action": "remove_claim", "id": statement_id})

    # -- transport --

    def _call(self, params: dict[str, str]) -> dict:
        """Perform one WiDaR action and return the decoded answer.

        Raises RemoteCallError on transport problems or unexplained
        failures, SemanticError when WiDaR reports an error code.
        """
        query = dict(params)
        query["tool_hashtag"] = self.tool_hashtag
        query["botmode"] = "1"

        action = params.get("action", "?")
        log.debug(f"WiDaR {action}: {params}")

        try:
            resp = self._http.get(self.base_url, params=query)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise RemoteCallError(f"WiDaR {action} failed: {e}") from e
        except ValueError as e:
            raise RemoteCallError(f"WiDaR {action} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise RemoteCallError(f"WiDaR {action} returned {type(data).__name__}")

        error = data.get("error")
        if error == "OK":
            return data
        if isinstance(error, dict) and error.get("code"):
            raise SemanticError(str(error["code"]), str(error.get("info", "")))
        raise RemoteCallError(f"WiDaR {action} error: {error!r}")
