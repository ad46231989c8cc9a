"""
nodesource/config.py - 노드 소스 설정

외부 로더가 전달하는 문자열 properties(``Mapping[str, str]``)를
불변 ``SourceConfig`` 로 변환합니다.

설정 키:
    project            AWS 프로파일 (조회 범위)
    region             리전 목록 (콤마 구분)
    filter             필터 표현식 목록 (세미콜론 구분, 그대로 전달)
    mappingFile        매핑 파일 경로
    mappingParams      인라인 매핑 (세미콜론 구분 key=value)
    refreshInterval    갱신 주기 (초, 내부적으로 ms 저장, 음수 = 항상 갱신)
    useDefaultMapping  기본 매핑 사용 여부
    runningOnly        running 인스턴스만 조회
    queryAsync         첫 조회 이후 비동기 갱신 사용 여부
    credentialsFile    AWS shared credentials 파일 경로

Usage:
    from nodesource.config import SourceConfig

    config = SourceConfig.from_properties({"project": "prod", "refreshInterval": "60"})
    config.refresh_interval_ms  # 60000
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from nodesource.exceptions import ConfigError, MappingLoadError
from nodesource.mapping.properties import load_properties

logger = logging.getLogger(__name__)

# =============================================================================
# 설정 키
# =============================================================================

PROJECT = "project"
REGION = "region"
FILTER_PARAMS = "filter"
MAPPING_FILE = "mappingFile"
MAPPING_PARAMS = "mappingParams"
REFRESH_INTERVAL = "refreshInterval"
USE_DEFAULT_MAPPING = "useDefaultMapping"
RUNNING_ONLY = "runningOnly"
QUERY_ASYNC = "queryAsync"
CREDENTIALS_FILE = "credentialsFile"

DEFAULT_REFRESH_INTERVAL_SECONDS = 30
DEFAULT_REGION = "us-east-1"


def get_default_region() -> str:
    """환경변수(AWS_REGION, AWS_DEFAULT_REGION) 또는 기본 리전"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or DEFAULT_REGION


def parse_bool(value: str | None) -> bool:
    """``"true"`` (대소문자 무시)만 True"""
    return value is not None and value.strip().lower() == "true"


def parse_refresh_interval(value: str | None) -> int:
    """갱신 주기(초) 문자열을 ms로 변환

    Raises:
        ConfigError: 정수가 아닌 값
    """
    if value is None or value.strip() == "":
        return DEFAULT_REFRESH_INTERVAL_SECONDS * 1000
    try:
        return int(value.strip()) * 1000
    except ValueError as e:
        raise ConfigError(REFRESH_INTERVAL, f"유효하지 않은 값: {value!r}", cause=e) from e


def _optional(props: Mapping[str, str], key: str) -> str | None:
    value = props.get(key)
    if value is None or value.strip() == "":
        return None
    return value


@dataclass(frozen=True)
class SourceConfig:
    """노드 소스 설정 (불변)"""

    project: str | None = None
    regions: tuple[str, ...] = ()
    filter_params: str | None = None
    mapping_file: str | None = None
    mapping_params: str | None = None
    refresh_interval_ms: int = DEFAULT_REFRESH_INTERVAL_SECONDS * 1000
    use_default_mapping: bool = True
    running_only: bool = True
    query_async: bool = True
    credentials_file: str | None = None

    def __post_init__(self):
        if not self.regions:
            object.__setattr__(self, "regions", (get_default_region(),))

    @property
    def filters(self) -> list[str]:
        """세미콜론 구분 필터 표현식 목록"""
        if not self.filter_params:
            return []
        return [f for f in self.filter_params.split(";") if f]

    @classmethod
    def from_properties(cls, props: Mapping[str, str]) -> SourceConfig:
        """문자열 properties로부터 설정 생성

        잘못된 refreshInterval은 경고 후 기본값으로 대체합니다.
        불리언 키는 존재할 때만 기본값을 덮어씁니다.
        """
        try:
            refresh_ms = parse_refresh_interval(props.get(REFRESH_INTERVAL))
        except ConfigError as e:
            logger.warning("%s (기본값 %d초 사용)", e, DEFAULT_REFRESH_INTERVAL_SECONDS)
            refresh_ms = DEFAULT_REFRESH_INTERVAL_SECONDS * 1000

        region_value = _optional(props, REGION)
        regions = tuple(r.strip() for r in region_value.split(",") if r.strip()) if region_value else ()

        flags: dict[str, bool] = {}
        for key, field_name in (
            (USE_DEFAULT_MAPPING, "use_default_mapping"),
            (RUNNING_ONLY, "running_only"),
            (QUERY_ASYNC, "query_async"),
        ):
            flags[field_name] = parse_bool(props[key]) if key in props else True

        return cls(
            project=_optional(props, PROJECT),
            regions=regions,
            filter_params=_optional(props, FILTER_PARAMS),
            mapping_file=_optional(props, MAPPING_FILE),
            mapping_params=_optional(props, MAPPING_PARAMS),
            refresh_interval_ms=refresh_ms,
            credentials_file=_optional(props, CREDENTIALS_FILE),
            **flags,
        )


def load_config_file(path: str | Path) -> dict[str, str]:
    """``.properties`` 설정 파일 로드

    Raises:
        ConfigError: 파일을 읽을 수 없는 경우
    """
    try:
        return load_properties(path)
    except MappingLoadError as e:
        raise ConfigError(str(path), "설정 파일을 읽을 수 없습니다", cause=e.cause) from e
