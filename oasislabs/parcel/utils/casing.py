"""Key-casing helpers for wire serialization.

Query parameters are kebab-case on the wire (``page-size``), JSON bodies are
camelCase (``pageSize``); in-memory filters may use either spelling or
snake_case.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic.alias_generators import to_camel, to_snake


# Lower-or-digit followed by upper, and the end of an acronym (``HTTPServer``).
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def param_case(key: str) -> str:
    """Convert ``pageSize`` / ``page_size`` to ``page-size``.

    Digits stay attached to the preceding word (``appId2`` -> ``app-id2``).
    """
    return _WORD_BOUNDARY.sub("-", key).replace("_", "-").lower()


def camel_case(key: str) -> str:
    """Convert ``page_size`` / ``page-size`` to ``pageSize``."""
    return to_camel(to_snake(key))


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def to_query_params(values: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Serialize a filter mapping into kebab-case query pairs.

    ``None`` values are dropped and sequences become repeated keys, in order.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in values.items():
        if value is None:
            continue
        name = param_case(key)
        if isinstance(value, (list, tuple)):
            pairs.extend((name, _query_value(v)) for v in value)
        else:
            pairs.append((name, _query_value(value)))
    return pairs


def to_json_body(values: Mapping[str, Any]) -> dict[str, Any]:
    """Camel-case the top-level keys of a JSON body, dropping ``None`` values.

    Nested objects are left untouched: they carry server-side field paths
    (``document.tags``) and operators (``$and``) that must not be renamed.
    """
    return {camel_case(k): v for k, v in values.items() if v is not None}
