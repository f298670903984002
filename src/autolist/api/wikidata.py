"""Statement reads through the Wikidata ``wbgetentities`` API.

Returns the statements of one item for one property as Statement objects.
Item-valued snaks are reported by their id (``Q5``); other value types
by their raw string form; ``somevalue``/``novalue`` snaks have no value.
"""

import httpx
from loguru import logger

from ..errors import RemoteCallError
from ..models import Statement

log = logger.bind(component="wikidata")

DEFAULT_API_URL = "https://www.wikidata.org/w/api.php"


def read_statements(
    entity_id: str,
    prop: str,
    api_url: str = DEFAULT_API_URL,
    timeout: float = 30.0,
) -> list[Statement]:
    """Fetch the ``prop`` statements of ``entity_id``.

    An item without such statements (or a missing item) yields an empty
    list. Transport errors and API errors raise RemoteCallError.
    """
    prop = prop.upper()
    params = {
        "action": "wbgetentities",
        "ids": entity_id,
        "props": "claims",
        "format": "json",
    }

    log.debug(f"wbgetentities: ids={entity_id} prop={prop}")

    try:
        resp = httpx.get(api_url, params=params, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPError as e:
        raise RemoteCallError(f"wbgetentities failed for {entity_id}: {e}") from e
    except ValueError as e:
        raise RemoteCallError(f"wbgetentities returned invalid JSON: {e}") from e

    error = data.get("error")
    if error:
        info = error.get("info", "unknown error") if isinstance(error, dict) else str(error)
        raise RemoteCallError(f"wbgetentities error for {entity_id}: {info}")

    entity = (data.get("entities") or {}).get(entity_id) or {}
    claims = (entity.get("claims") or {}).get(prop) or []

    statements = [
        Statement(id=claim.get("id", ""), value=_snak_value(claim.get("mainsnak")))
        for claim in claims
        if claim.get("id")
    ]
    log.debug(f"{entity_id} {prop}: {len(statements)} statements")
    return statements


def _snak_value(snak: dict | None) -> str | None:
    """Extract a comparable value from a main snak."""
    datavalue = (snak or {}).get("datavalue") or {}
    value = datavalue.get("value")
    if isinstance(value, dict):
        if value.get("id"):
            return str(value["id"]).upper()
        if "numeric-id" in value:
            return f"Q{value['numeric-id']}"
        return None
    if value is None:
        return None
    return str(value)
