"""
nodesource/factory.py - NodeSource 팩토리

설정 옵션 설명(이름, 타입, 기본값)을 제공하고, 문자열 properties로부터
NodeSource를 생성합니다. CLI와 외부 설정 로더가 같은 옵션 정의를 공유합니다.

Usage:
    factory = NodeSourceFactory()
    for option in factory.describe():
        print(option.key, option.default)

    source = factory.create_source({"project": "prod"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from nodesource import config as cfg
from nodesource.inventory.coordinator import NodeSource
from nodesource.inventory.fetcher import InventoryFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigOption:
    """설정 옵션 설명"""

    key: str
    title: str
    description: str
    type: str = "string"
    default: str | None = None
    required: bool = False


OPTIONS: tuple[ConfigOption, ...] = (
    ConfigOption(cfg.PROJECT, "Project", "AWS profile name used to scope the query"),
    ConfigOption(cfg.REGION, "Regions", "Comma-separated AWS regions", default=cfg.DEFAULT_REGION),
    ConfigOption(
        cfg.FILTER_PARAMS,
        "Filter Params",
        "Semicolon-separated EC2 filters, e.g. 'tag:Team=infra;instance-type=t3.micro'",
    ),
    ConfigOption(cfg.MAPPING_PARAMS, "Mapping Params", "Semicolon-separated 'key=value' mapping overrides"),
    ConfigOption(cfg.MAPPING_FILE, "Mapping File", "Path to a .properties mapping file"),
    ConfigOption(
        cfg.USE_DEFAULT_MAPPING,
        "Use Default Mapping",
        "Start from the built-in mapping",
        type="boolean",
        default="true",
    ),
    ConfigOption(
        cfg.REFRESH_INTERVAL,
        "Refresh Interval",
        "Minimum seconds between inventory queries; negative refreshes on every request",
        type="integer",
        default=str(cfg.DEFAULT_REFRESH_INTERVAL_SECONDS),
    ),
    ConfigOption(
        cfg.RUNNING_ONLY,
        "Only Running Instances",
        "Include only instances in the 'running' state",
        type="boolean",
        default="true",
    ),
    ConfigOption(
        cfg.QUERY_ASYNC,
        "Asynchronous Refresh",
        "After the first query, refresh in the background and serve the previous nodes meanwhile",
        type="boolean",
        default="true",
    ),
    ConfigOption(cfg.CREDENTIALS_FILE, "Credentials File", "AWS shared credentials file for the project"),
)


class NodeSourceFactory:
    """NodeSource 생성 팩토리"""

    PROVIDER_NAME = "aws-ec2"

    def describe(self) -> tuple[ConfigOption, ...]:
        """지원하는 설정 옵션 목록"""
        return OPTIONS

    def create_source(
        self,
        properties: Mapping[str, str],
        fetcher: InventoryFetcher | None = None,
    ) -> NodeSource:
        """properties로부터 NodeSource 생성

        Args:
            properties: 설정 키 -> 문자열 값
            fetcher: 테스트 등에서 주입할 조회기 (선택)
        """
        unknown = set(properties) - {option.key for option in OPTIONS}
        if unknown:
            logger.info("알 수 없는 설정 키 무시: %s", ", ".join(sorted(unknown)))

        source_config = cfg.SourceConfig.from_properties(properties)
        logger.debug("NodeSource 생성: %s", source_config)
        return NodeSource(source_config, fetcher=fetcher)
