"""Deterministic flattening of nested JSON-like records into path tokens."""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Sequence


def flatten(value: Any) -> List[str]:
    """Flatten ``value`` into ``"<path>/<json leaf>"`` tokens.

    The walk is depth first; mapping keys are sorted before descent and
    sequences keep their index order, so equal inputs always produce the same
    token list.
    """
    tokens: List[str] = []
    _walk(value, "", tokens)
    return tokens


def _walk(value: Any, path: str, tokens: List[str]) -> None:
    if isinstance(value, Mapping):
        for key in sorted(value, key=str):
            _walk(value[key], f"{path}/{key}", tokens)
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        for index, item in enumerate(value):
            _walk(item, f"{path}/{index}", tokens)
    else:
        tokens.append(f"{path}/{json.dumps(value, ensure_ascii=False)}")


__all__ = ["flatten"]
