"""Hierarchical namespace index with wildcard queries.

Keys are ``/``-separated segments such as ``std_msgs/msg/String``. Patterns
use ``*`` for exactly one segment and ``**`` for zero or more segments, so
``std_msgs/**`` matches every std_msgs type and ``*/srv/*`` every service.

The tree is stored as an arena: all nodes live in one list and refer to each
other by position. It is filled once at startup and only read afterwards, so
queries need no locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from ros2types.errors import InvalidKeyError

if TYPE_CHECKING:
    from collections.abc import Iterator

SEPARATOR = "/"
WILDCARD = "*"
DOUBLE_WILDCARD = "**"

T = TypeVar("T")

_ROOT = 0


def _split(text: str, what: str) -> list[str]:
    if not text:
        raise InvalidKeyError(f"{what} must not be empty")
    segments = text.split(SEPARATOR)
    if any(not segment for segment in segments):
        raise InvalidKeyError(f"{what} {text!r} contains an empty segment")
    return segments


def split_key(key: str) -> list[str]:
    """Split a concrete key, rejecting empty segments and wildcard characters."""
    segments = _split(key, "key")
    if any(WILDCARD in segment for segment in segments):
        raise InvalidKeyError(f"key {key!r} must not contain {WILDCARD!r}")
    return segments


def split_pattern(pattern: str) -> list[str]:
    """Split a query pattern. ``*`` may only appear as a whole ``*`` or ``**`` segment."""
    segments = _split(pattern, "pattern")
    for segment in segments:
        if WILDCARD in segment and segment not in (WILDCARD, DOUBLE_WILDCARD):
            raise InvalidKeyError(
                f"pattern {pattern!r} has a malformed wildcard segment {segment!r}"
            )
    return segments


@dataclass(slots=True)
class _Node(Generic[T]):
    segment: str
    parent: int | None
    children: dict[str, int] = field(default_factory=dict)
    weight: T | None = None
    seq: int = -1  # insertion rank of the weight, -1 when empty


class NamespaceIndex(Generic[T]):
    """Prefix tree mapping segmented keys to values."""

    def __init__(self) -> None:
        self._nodes: list[_Node[T]] = [_Node(segment="", parent=None)]
        self._weighted: list[int] = []

    def __len__(self) -> int:
        return len(self._weighted)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def insert(self, key: str, value: T) -> bool:
        """Store ``value`` at ``key``.

        Returns ``False`` without touching the tree when ``key`` already holds
        a value.

        Raises:
            InvalidKeyError: if ``key`` is empty, has an empty segment or
                contains a wildcard character. Nothing is created in that case.
        """
        segments = split_key(key)
        existing = self._find(segments)
        if existing is not None and self._nodes[existing].weight is not None:
            return False

        position = _ROOT
        for segment in segments:
            child = self._nodes[position].children.get(segment)
            if child is None:
                child = len(self._nodes)
                self._nodes.append(_Node(segment=segment, parent=position))
                self._nodes[position].children[segment] = child
            position = child

        node = self._nodes[position]
        node.weight = value
        node.seq = len(self._weighted)
        self._weighted.append(position)
        return True

    def get(self, key: str) -> T | None:
        """Exact lookup. Wildcards in ``key`` are treated as plain text."""
        if not key:
            return None
        position = self._find(key.split(SEPARATOR))
        if position is None:
            return None
        return self._nodes[position].weight

    def query(self, pattern: str) -> list[T]:
        """Return every value whose key matches ``pattern``, in insertion order.

        Raises:
            InvalidKeyError: if ``pattern`` is malformed.
        """
        segments = split_pattern(pattern)
        end = len(segments)
        matched: set[int] = set()
        visited: set[tuple[int, int]] = set()
        pending = [(_ROOT, 0)]

        while pending:
            state = pending.pop()
            if state in visited:
                continue
            visited.add(state)
            position, cursor = state

            if cursor == end:
                matched.add(position)
                continue

            segment = segments[cursor]
            children = self._nodes[position].children
            if segment == DOUBLE_WILDCARD:
                # either stop consuming here, or swallow one more segment
                pending.append((position, cursor + 1))
                pending.extend((child, cursor) for child in children.values())
            elif segment == WILDCARD:
                pending.extend((child, cursor + 1) for child in children.values())
            else:
                child = children.get(segment)
                if child is not None:
                    pending.append((child, cursor + 1))

        hits = sorted(
            (p for p in matched if self._nodes[p].weight is not None),
            key=lambda p: self._nodes[p].seq,
        )
        return [self._nodes[p].weight for p in hits]  # type: ignore[misc]

    def items(self) -> Iterator[tuple[str, T]]:
        """Yield ``(key, value)`` pairs in insertion order."""
        for position in self._weighted:
            yield self._key_of(position), self._nodes[position].weight  # type: ignore[misc]

    def _find(self, segments: list[str]) -> int | None:
        position = _ROOT
        for segment in segments:
            child = self._nodes[position].children.get(segment)
            if child is None:
                return None
            position = child
        return position

    def _key_of(self, position: int) -> str:
        segments: list[str] = []
        node = self._nodes[position]
        while node.parent is not None:
            segments.append(node.segment)
            node = self._nodes[node.parent]
        return SEPARATOR.join(reversed(segments))
