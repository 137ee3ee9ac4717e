"""Circular-reference removal for raw upstream error payloads."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

CIRCULAR_MARKER = "[circular]"


def is_container(value: Any) -> bool:
    """Return whether a payload value can hold nested payload values."""
    return isinstance(value, (MutableMapping, list, tuple, BaseException))


def sanitize(root: Any) -> Any:
    """Replace repeated container references in ``root`` with ``[circular]``.

    The walk is depth-first and mutates ``root`` in place. Containers are
    tracked by identity, so every container is entered at most once and the
    walk terminates on any graph. Tuples cannot be changed in place: a tuple
    holding a repeated reference is rebuilt and stored back in its parent, so
    callers must use the returned value when ``root`` itself is a tuple.
    Scalars are returned untouched.

    The walk keeps its own stack, so payload depth is not bounded by the
    interpreter recursion limit.
    """
    if not is_container(root):
        return root

    # Holding the objects keeps their ids from being reused mid-walk.
    visited: dict[int, Any] = {id(root): root}
    stack = [_Frame(root)]

    while stack:
        frame = stack[-1]
        entry = next(frame.entries, None)
        if entry is None:
            stack.pop()
            result = frame.result()
            if result is frame.node:
                continue
            if stack:
                stack[-1].replace(frame.key, result)
            else:
                root = result
            continue

        key, value = entry
        if not is_container(value):
            continue
        if id(value) in visited:
            frame.replace(key, CIRCULAR_MARKER)
            continue
        visited[id(value)] = value
        stack.append(_Frame(value, key))

    return root


class _Frame:
    """One container being walked, with the entries still to visit."""

    def __init__(self, node: Any, key: Any = None) -> None:
        self.node = node
        self.key = key
        self.changed = False
        if isinstance(node, tuple):
            self.target: Any = list(node)
        elif isinstance(node, BaseException):
            self.target = vars(node)
        else:
            self.target = node

        if isinstance(self.target, MutableMapping):
            self.entries = iter(list(self.target.items()))
        else:
            self.entries = iter(list(enumerate(self.target)))

    def replace(self, key: Any, value: Any) -> None:
        self.target[key] = value
        self.changed = True

    def result(self) -> Any:
        if isinstance(self.node, tuple) and self.changed:
            return tuple(self.target)
        return self.node
