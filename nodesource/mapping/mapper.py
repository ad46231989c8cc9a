"""
nodesource/mapping/mapper.py - Instance record -> Node mapping

Applies a mapping configuration to raw ``describe_instances`` records.

Mapping keys:
    <attr>.selector / <attr>.default   node attribute ``<attr>``
    attribute.<name>.selector          alias for attribute ``<name>``
    tags.selector / tags.default       comma-separated tag list
    tag.<name>.selector=<path>=<value> tag ``<name>`` when the value matches

Selectors:
    a,b          first non-empty value
    a|b          all non-empty values joined with ","
    tags/<Key>   value of the EC2 tag ``<Key>``
    a.b.c        nested lookup; ``instanceId`` also matches ``InstanceId``
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from nodesource.inventory.types import NODENAME, Node, NodeSet

logger = logging.getLogger(__name__)

SELECTOR_SUFFIX = ".selector"
DEFAULT_SUFFIX = ".default"
ATTRIBUTE_PREFIX = "attribute."
TAG_PREFIX = "tag."
TAGS_KEY = "tags"


def _lookup_key(data: Mapping[str, Any], key: str) -> Any:
    if key in data:
        return data[key]
    if key:
        return data.get(key[0].upper() + key[1:])
    return None


def _stringify(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        parts = [s for s in (_stringify(v) for v in value) if s]
        return ",".join(parts) or None
    text = str(value)
    return text or None


def _tag_value(record: Mapping[str, Any], tag_key: str) -> str | None:
    for tag in _lookup_key(record, "tags") or []:
        if isinstance(tag, Mapping) and tag.get("Key") == tag_key:
            return _stringify(tag.get("Value"))
    return None


def select_value(record: Mapping[str, Any], path: str) -> str | None:
    """Evaluate a single selector path against a record"""
    path = path.strip()
    if not path:
        return None

    if path.startswith("tags/"):
        return _tag_value(record, path[len("tags/") :])

    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = _lookup_key(current, part)
        if current is None:
            return None
    return _stringify(current)


def evaluate_selector(record: Mapping[str, Any], selector: str) -> str | None:
    """Evaluate a full selector expression (``,`` and ``|`` alternatives)"""
    if "|" in selector:
        values = [select_value(record, part) for part in selector.split("|")]
        return ",".join(v for v in values if v) or None

    for part in selector.split(","):
        value = select_value(record, part)
        if value:
            return value
    return None


def _matches(record: Mapping[str, Any], condition: str) -> bool:
    if "=" not in condition:
        return evaluate_selector(record, condition) is not None
    path, expected = condition.split("=", 1)
    return select_value(record, path) == expected


class InstanceToNodeMapper:
    """Map EC2 instance records to nodes using a mapping configuration

    Example:
        mapper = InstanceToNodeMapper(mapping)
        nodes = mapper.map_instances(instances)
    """

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping
        self._attributes = self._collect_attribute_names(mapping)

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    @staticmethod
    def _collect_attribute_names(mapping: Mapping[str, str]) -> list[str]:
        names: list[str] = []
        for key in mapping:
            for suffix in (SELECTOR_SUFFIX, DEFAULT_SUFFIX):
                if not key.endswith(suffix):
                    continue
                name = key[: -len(suffix)]
                if name.startswith(TAG_PREFIX) or name == TAGS_KEY:
                    break
                if name not in names:
                    names.append(name)
                break
        return names

    def _attribute(self, record: Mapping[str, Any], name: str) -> str | None:
        selector = self._mapping.get(name + SELECTOR_SUFFIX)
        value = evaluate_selector(record, selector) if selector else None
        if value is None:
            value = self._mapping.get(name + DEFAULT_SUFFIX) or None
        return value

    def _tags(self, record: Mapping[str, Any]) -> set[str]:
        tags: set[str] = set()
        raw = self._attribute(record, TAGS_KEY)
        if raw:
            tags.update(t.strip() for t in raw.split(",") if t.strip())

        for key, condition in self._mapping.items():
            if key.startswith(TAG_PREFIX) and key.endswith(SELECTOR_SUFFIX):
                tag = key[len(TAG_PREFIX) : -len(SELECTOR_SUFFIX)]
                if tag and _matches(record, condition):
                    tags.add(tag)
        return tags

    def map_instance(self, record: Mapping[str, Any]) -> Node | None:
        """Map one instance record; ``None`` when no nodename resolves"""
        attributes: dict[str, str] = {}
        for name in self._attributes:
            value = self._attribute(record, name)
            if value is None:
                continue
            if name.startswith(ATTRIBUTE_PREFIX):
                name = name[len(ATTRIBUTE_PREFIX) :]
            attributes[name] = value

        nodename = attributes.pop(NODENAME, None)
        if not nodename:
            logger.warning(
                "nodename을 결정할 수 없어 인스턴스를 건너뜁니다: %s",
                _lookup_key(record, "instanceId") or "unknown",
            )
            return None

        attributes.setdefault("hostname", nodename)
        return Node(name=nodename, attributes=attributes, tags=frozenset(self._tags(record)))

    def map_instances(self, records: Iterable[Mapping[str, Any]]) -> NodeSet:
        """Map instance records into a new NodeSet"""
        nodes: list[Node] = []
        seen: set[str] = set()
        for record in records:
            node = self.map_instance(record)
            if node is None:
                continue
            if node.name in seen:
                logger.debug("중복 nodename, 마지막 인스턴스를 사용합니다: %s", node.name)
            seen.add(node.name)
            nodes.append(node)
        return NodeSet(nodes)
