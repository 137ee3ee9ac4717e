"""Depth-first property search over sanitized upstream error payloads."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
import math
from typing import Any

from upstream_errors.normalize.sanitizer import is_container

JOIN_SEPARATOR = " | "

# Nesting levels searched below the starting node; deeper branches yield no match.
MAX_SEARCH_DEPTH = 200


def find_property(
    node: Any,
    potential_keys: Sequence[str],
    traversal_keys: Sequence[str] = (),
) -> str | None:
    """Find a message-like value in ``node``.

    Every key in ``potential_keys`` is tried in order against ``node`` itself:

    1. a string or number is returned as a string;
    2. a list or tuple has its scalar elements collected and its container
       elements searched (``potential_keys`` only), joined with ``" | "``;
    3. a container is searched recursively with ``potential_keys`` only.

    A key whose value yields nothing falls through to the next key. Only when
    no direct key matches, each container under ``traversal_keys`` becomes the
    new starting point, with both key lists. The first match wins; ``None``
    means every path was exhausted.

    ``node`` must have been passed through ``sanitize`` first. Branches nested
    deeper than ``MAX_SEARCH_DEPTH`` levels are not searched.
    """
    return _search(node, potential_keys, traversal_keys, 0)


def _search(
    node: Any,
    potential_keys: Sequence[str],
    traversal_keys: Sequence[str],
    depth: int,
) -> str | None:
    if depth > MAX_SEARCH_DEPTH:
        return None

    fields = _fields(node)
    if fields is None:
        return None

    for key in potential_keys:
        value = fields.get(key)
        if not value or isinstance(value, bool):
            continue

        if _is_scalar(value):
            return _stringify(value)

        if _is_sequence(value):
            resolved = [
                item for item in (_resolve_element(element, potential_keys, depth + 1) for element in value) if item
            ]
            if resolved:
                return JOIN_SEPARATOR.join(resolved)
            continue

        if _is_traversable(value):
            found = _search(value, potential_keys, (), depth + 1)
            if found:
                return found

    for key in traversal_keys:
        value = fields.get(key)
        if _is_traversable(value):
            found = _search(value, potential_keys, traversal_keys, depth + 1)
            if found:
                return found

    return None


def _resolve_element(element: Any, potential_keys: Sequence[str], depth: int) -> str | None:
    if _is_scalar(element):
        return _stringify(element)
    if _is_traversable(element):
        return _search(element, potential_keys, (), depth)
    return None


def _fields(node: Any) -> Mapping[Any, Any] | None:
    if isinstance(node, BaseException):
        return {"message": str(node), **vars(node)}
    if isinstance(node, Mapping) and is_container(node):
        return node
    return None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_traversable(value: Any) -> bool:
    if _is_sequence(value) or not is_container(value):
        return False
    return bool(_fields(value))


def _is_scalar(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, (str, int))


def _stringify(value: str | int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
