"""URL router matching static paths, ``:name`` parameters and ``*name`` wildcards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, NamedTuple, Optional

__all__ = [
    "PARAM_CHARACTER",
    "WILDCARD_CHARACTER",
    "TERMINATION_CHARACTER",
    "SEPARATOR_CHARACTER",
    "PATH_PARAM_CHARACTER",
    "MAX_SIZE",
    "RouterError",
    "Param",
    "Params",
    "Record",
    "Router",
    "next_separator",
]

PARAM_CHARACTER = ":"
WILDCARD_CHARACTER = "*"
TERMINATION_CHARACTER = "#"
SEPARATOR_CHARACTER = "/"
PATH_PARAM_CHARACTER = "="
MAX_SIZE = (1 << 22) - 1

_PARAM_MARKERS = (
    SEPARATOR_CHARACTER + PARAM_CHARACTER,
    SEPARATOR_CHARACTER + WILDCARD_CHARACTER,
    PATH_PARAM_CHARACTER + PARAM_CHARACTER,
)


class RouterError(Exception):
    """Raised when a routing table cannot be built."""


class Param(NamedTuple):
    """Name and value of one path parameter."""

    name: str
    value: str


class Params(list):
    """Path parameters in the order they appear in the path."""

    def get(self, name: str) -> str:
        """Return the first value for ``name``, or "" when there is none."""
        return next((p.value for p in self if p.name == name), "")


@dataclass
class Record:
    """A routing key and the value it resolves to."""

    key: str
    value: Any = None


@dataclass
class _Entry:
    key: str
    value: Any
    param_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class _Leaf:
    data: Any
    param_names: tuple[str, ...]


class _Node:
    __slots__ = ("children", "leaf")

    def __init__(self) -> None:
        self.children: dict[str, _Node] = {}
        self.leaf: Optional[_Leaf] = None

    @property
    def has_param(self) -> bool:
        return PARAM_CHARACTER in self.children or WILDCARD_CHARACTER in self.children


def next_separator(path: str, start: int) -> int:
    """Return the index of the next ``/`` or ``#`` in ``path`` from ``start``."""
    while start < len(path) and path[start] not in (SEPARATOR_CHARACTER, TERMINATION_CHARACTER):
        start += 1
    return start


class Router:
    """A URL router built from records and queried with :meth:`lookup`.

    ``size_hint`` is the largest number of parameters in any record; when
    negative it is computed by :meth:`build`.
    """

    def __init__(self, size_hint: int = -1) -> None:
        self.size_hint = size_hint
        self._static: dict[str, Any] = {}
        self._root = _Node()

    def lookup(self, path: str) -> tuple[Any, Params, bool]:
        """Return the data, the path parameters and whether ``path`` matched."""
        if path in self._static:
            return self._static[path], Params(), True
        if not self._root.children:
            return None, Params(), False
        found = _lookup(self._root, path, [])
        if found is None:
            return None, Params(), False
        leaf, values = found
        params = Params(Param(name, value) for name, value in zip(leaf.param_names, values))
        return leaf.data, params, True

    def build(self, records: Iterable[Record]) -> None:
        """Add ``records`` to the routing table."""
        statics: list[Record] = []
        dynamic: list[_Entry] = []
        for record in records:
            if any(marker in record.key for marker in _PARAM_MARKERS):
                dynamic.append(_Entry(record.key + TERMINATION_CHARACTER, record.value))
            else:
                statics.append(record)
        if len(dynamic) > MAX_SIZE:
            raise RouterError("too many records")
        if self.size_hint < 0:
            self.size_hint = max(
                (sum(c in (PARAM_CHARACTER, WILDCARD_CHARACTER) for c in e.key) for e in dynamic),
                default=0,
            )
        for record in statics:
            self._static[record.key] = record.value
        _build(self._root, dynamic, 0)


def _make_leaf(entry: _Entry) -> _Leaf:
    seen: set[str] = set()
    for name in entry.param_names:
        if name in seen:
            raise RouterError(
                f"path parameter `{name}' is duplicated in the key `{entry.key}'"
            )
        seen.add(name)
    return _Leaf(entry.value, tuple(entry.param_names))


def _build(node: _Node, entries: list[_Entry], depth: int) -> None:
    entries = sorted(entries, key=lambda e: e.key)
    leaf: Optional[_Entry] = None
    groups: dict[str, list[_Entry]] = {}
    for entry in entries:
        if len(entry.key) <= depth:
            leaf = entry
            continue
        groups.setdefault(entry.key[depth], []).append(entry)
    if leaf is not None:
        node.leaf = _make_leaf(leaf)
    for char, group in groups.items():
        child = node.children.setdefault(char, _Node())
        if char == PARAM_CHARACTER:
            for entry in group:
                end = next_separator(entry.key, depth + 1)
                entry.param_names.append(entry.key[depth + 1:end])
                entry.key = entry.key[end:]
            _build(child, group, 0)
        elif char == WILDCARD_CHARACTER:
            first = group[0]
            first.param_names.append(first.key[depth + 1:-1])
            first.key = ""
            _build(child, group, 0)
        else:
            _build(child, group, depth + 1)


def _lookup(node: _Node, path: str, values: list[str]) -> Optional[tuple[_Leaf, list[str]]]:
    marks: list[tuple[int, _Node]] = []
    current: Optional[_Node] = node
    for i, char in enumerate(path):
        if current.has_param:
            marks.append((i, current))
        current = current.children.get(char)
        if current is None:
            break
    else:
        end = current.children.get(TERMINATION_CHARACTER)
        if end is not None and end.leaf is not None:
            return end.leaf, values
    for i, marked in reversed(marks):
        param_child = marked.children.get(PARAM_CHARACTER)
        if param_child is not None:
            end_index = next_separator(path, i)
            found = _lookup(param_child, path[end_index:], [*values, path[i:end_index]])
            if found is not None:
                return found
        wildcard = marked.children.get(WILDCARD_CHARACTER)
        if wildcard is not None and wildcard.leaf is not None:
            return wildcard.leaf, [*values, path[i:]]
    return None