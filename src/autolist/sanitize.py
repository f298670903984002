"""Identifier normalization and label helpers."""

import re

from loguru import logger

from .models import PLACEHOLDER_PREFIX

log = logger.bind(component="sanitize")

_ITEM_RE = re.compile(r"^[Qq]?(\d+)$")
_PROPERTY_RE = re.compile(r"^[Pp](\d+)$")


def normalize_item_id(raw: str) -> str:
    """Normalize an item id to ``Q<digits>``.

    Accepts ``Q42``, ``q42`` and bare ``42``. Raises ValueError for
    anything else.
    """
    m = _ITEM_RE.match(str(raw).strip())
    if m is None:
        raise ValueError(f"Not an item id: {raw!r}")
    return f"Q{m.group(1)}"


def normalize_property_id(raw: str) -> str:
    """Normalize a property id to ``P<digits>``."""
    m = _PROPERTY_RE.match(raw.strip())
    if m is None:
        raise ValueError(f"Not a property id: {raw!r}")
    return f"P{m.group(1)}"


def make_placeholder(index: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{index}"


def is_placeholder(entity_ref: str) -> bool:
    return entity_ref.startswith(PLACEHOLDER_PREFIX)


def label_language(wiki: str) -> str:
    """Derive the label language from a wiki db name.

    ``enwiki`` -> ``en``, ``dewikisource`` -> ``de``; Commons labels
    are English.
    """
    lang = re.sub(r"wik.+$", "", wiki)
    lang = lang.replace("commons", "en", 1)
    log.debug(f"label_language(wiki={wiki!r}) -> {lang!r}")
    return lang


def page_label(page: str) -> str:
    """Turn a page title into label text (underscores become spaces)."""
    return page.replace("_", " ").strip()


def strip_disambiguation(page: str) -> str:
    """Label text without the first parenthetical qualifier.

    ``Paris_(band)`` -> ``Paris``
    """
    text = page.replace("_", " ")
    text = re.sub(r"\s*\(.+?\)\s*", " ", text, count=1)
    return text.strip()
