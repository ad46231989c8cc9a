"""
nodesource/inventory/types.py - Node dataclasses for inventory snapshots

A ``NodeSet`` is one complete, immutable inventory snapshot. A fresh fetch
always builds a new ``NodeSet``; published sets are never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

NODENAME = "nodename"


@dataclass(frozen=True)
class Node:
    """Single node: string attributes plus a tag set"""

    name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    tags: frozenset[str] = frozenset()

    def __post_init__(self):
        attributes = dict(self.attributes)
        attributes[NODENAME] = self.name
        object.__setattr__(self, "attributes", MappingProxyType(attributes))
        object.__setattr__(self, "tags", frozenset(self.tags))

    def __hash__(self) -> int:
        return hash((self.name, self.tags))

    @property
    def hostname(self) -> str:
        return self.attributes.get("hostname", self.name)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.attributes.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.attributes)
        data["tags"] = ", ".join(sorted(self.tags))
        return data


class NodeSet:
    """Immutable collection of nodes keyed by nodename

    Example:
        nodes = NodeSet([Node("web-1"), Node("web-2")])
        "web-1" in nodes      # True
        nodes.get("web-2")    # Node(...)
    """

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Iterable[Node] = ()):
        by_name: dict[str, Node] = {}
        for node in nodes:
            by_name[node.name] = node
        self._nodes: Mapping[str, Node] = MappingProxyType(by_name)

    @classmethod
    def empty(cls) -> NodeSet:
        return cls()

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeSet):
            return NotImplemented
        return dict(self._nodes) == dict(other._nodes)

    def get(self, name: str) -> Node | None:
        return self._nodes.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._nodes)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Resource model dict: ``{nodename: {attr: value, ..., "tags": "a, b"}}``"""
        return {name: node.to_dict() for name, node in self._nodes.items()}

    def __repr__(self) -> str:
        return f"NodeSet(nodes={len(self._nodes)})"
