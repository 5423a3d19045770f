"""Compact serialization of extraction results for LLM prompts."""

from __future__ import annotations

import json
from typing import Any, Mapping


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (list, tuple, Mapping)) and len(value) == 0)


def prune_empty(value: Any) -> Any:
    """Return a copy without dict entries that are None, [] or {}.

    Nested values are pruned first, so a dict left empty by pruning is
    dropped from its parent too. List elements keep their positions.
    """
    if isinstance(value, Mapping):
        pruned = {}
        for key, item in value.items():
            item = prune_empty(item)
            if not _is_empty(item):
                pruned[key] = item
        return pruned
    if isinstance(value, (list, tuple)):
        return [prune_empty(item) for item in value]
    return value


def to_compact_json(data: Any) -> str:
    """Serialize without whitespace or empty fields to save prompt tokens."""
    return json.dumps(prune_empty(data), ensure_ascii=False, separators=(",", ":"))
