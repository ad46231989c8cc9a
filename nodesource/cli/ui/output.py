"""
nodesource/cli/ui/output.py - NodeSet 출력 포맷터

table (Rich), json, yaml 세 가지 형식을 지원합니다.
json/yaml 은 ``{nodename: {attribute: value, ..., tags: "a, b"}}`` 형태입니다.
"""

from __future__ import annotations

import json
from collections.abc import Mapping

import yaml
from rich.table import Table

from nodesource.inventory.types import NodeSet

OUTPUT_FORMATS = ("table", "json", "yaml")

TABLE_COLUMNS = ("nodename", "hostname", "instanceId", "state", "environment")


def to_json(nodes: NodeSet) -> str:
    return json.dumps(nodes.to_dict(), indent=2, ensure_ascii=False)


def to_yaml(nodes: NodeSet) -> str:
    return yaml.safe_dump(nodes.to_dict(), sort_keys=False, allow_unicode=True, default_flow_style=False)


def mapping_to_properties(mapping: Mapping[str, str]) -> str:
    """매핑을 ``key=value`` 줄 목록으로 변환"""
    return "\n".join(f"{key}={value}" for key, value in mapping.items())


def build_table(nodes: NodeSet, title: str | None = None) -> Table:
    """NodeSet을 Rich Table로 변환"""
    table = Table(title=title, show_lines=False)
    for column in TABLE_COLUMNS:
        table.add_column(column, overflow="fold")
    table.add_column("tags", overflow="fold")

    for node in sorted(nodes, key=lambda n: n.name):
        row = [node.get(column) or "-" for column in TABLE_COLUMNS]
        row.append(", ".join(sorted(node.tags)) or "-")
        table.add_row(*row)
    return table
