"""Convert API paths to unique MCP tool names.

Names are derived from the path alone and only pick up the HTTP method when
another operation already claimed the plain name:

  GET  /get_user/{id}        -> get_user_id
  POST /get_user/{id}        -> post_get_user_id
  GET  /                     -> get_root
  GET  /get-user/{id}        -> get_get_user_id     (after the two above)
  GET  /get_user/{id}/       -> get_get_user_id_2   (after the three above)

Names are assigned in discovery order, so the same spec always yields the same
names.
"""

from __future__ import annotations

import re
from typing import FrozenSet, Iterable, List, Tuple

_BRACES = re.compile(r"[{}]")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]")
_UNDERSCORES = re.compile(r"_+")


def sanitize_tool_name(path: str) -> str:
    """Turn an API path template into a bare identifier."""
    name = path[1:] if path.startswith("/") else path
    name = name.replace("/", "_")
    name = _BRACES.sub("", name)
    name = _INVALID_CHARS.sub("_", name)
    name = _UNDERSCORES.sub("_", name)
    return name.strip("_")


def dedupe_tool_name(base_name: str, method: str, used: FrozenSet[str]) -> str:
    """Return the first name for ``base_name`` that is not in ``used``."""
    base = base_name or f"{method}_root"
    if base not in used:
        return base

    candidate = f"{method}_{base}"
    counter = 2
    while candidate in used:
        candidate = f"{method}_{base}_{counter}"
        counter += 1
    return candidate


def assign_tool_names(pairs: Iterable[Tuple[str, str]]) -> List[str]:
    """Name every ``(path, method)`` pair, in order, threading the used set."""
    used: FrozenSet[str] = frozenset()
    names: List[str] = []
    for path, method in pairs:
        name = dedupe_tool_name(sanitize_tool_name(path), method, used)
        used = used | {name}
        names.append(name)
    return names
