"""
nodesource/inventory/coordinator.py - 갱신 캐시 코디네이터

``NodeSource`` 는 마지막으로 게시한 NodeSet을 소유하고, 매 ``get_nodes()``
호출마다 캐시 반환 / 동기 조회 / 비동기 조회 시작 중 하나를 결정합니다.

상태 전이:
    EMPTY ──(동기 조회)──> FRESH ──(TTL 경과)──> STALE
    STALE ──(비동기 조회 시작)──> REFRESHING ──(reconcile)──> FRESH / STALE
    STALE ──(async 비활성)──> FRESH (동기 조회)

보장 사항:
    - 모든 상태 변경은 하나의 Lock 안에서 수행 (reconcile → staleness → fetch)
    - 동시에 진행 중인 조회는 최대 1개
    - 게시된 NodeSet은 참조 교체로만 바뀌며, 관찰되는 스냅샷은 항상 단조 증가
    - 백그라운드 갱신 실패는 호출자에게 전파되지 않음 (WARNING 로그)
    - 첫 조회(또는 async 비활성)만 FetchError를 전파

Usage:
    from nodesource.config import SourceConfig
    from nodesource.inventory import NodeSource

    source = NodeSource(SourceConfig.from_properties(props))
    nodes = source.get_nodes()
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from nodesource.auth import acquire_session
from nodesource.config import SourceConfig
from nodesource.exceptions import CredentialError, FetchError, FetchInterruptedError
from nodesource.mapping.resolver import MappingConfigResolver

from .fetcher import Ec2InventoryFetcher, FetchHandle, InventoryFetcher
from .types import NodeSet

logger = logging.getLogger(__name__)


class SourceState(Enum):
    """코디네이터 상태"""

    EMPTY = "empty"  # 한 번도 조회하지 않음
    FRESH = "fresh"  # TTL 이내 스냅샷
    STALE = "stale"  # TTL 경과, 조회 미시작
    REFRESHING = "refreshing"  # 비동기 조회 진행 중, 이전 스냅샷 제공

    def __str__(self) -> str:
        return self.value


@dataclass
class _RefreshState:
    """코디네이터 전용 가변 상태 (Lock 안에서만 접근)"""

    published: NodeSet = field(default_factory=NodeSet.empty)
    last_refresh_ms: float | None = None
    pending: FetchHandle | None = None


class NodeSource:
    """EC2 인벤토리를 노드 집합으로 제공하는 갱신 캐시 코디네이터

    Example:
        source = NodeSource(config)

        nodes = source.get_nodes()   # 첫 호출: 동기 조회
        nodes = source.get_nodes()   # TTL 이내: 같은 NodeSet 객체
        # TTL 경과 후: 비동기 조회 시작, 이전 NodeSet 반환
        # 조회 완료 후 다음 호출: 새 NodeSet 반환
    """

    def __init__(
        self,
        config: SourceConfig,
        fetcher: InventoryFetcher | None = None,
        resolver: MappingConfigResolver | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """초기화

        Args:
            config: 노드 소스 설정
            fetcher: 인벤토리 조회기 (None이면 자격 증명을 획득해 EC2 조회기 생성)
            resolver: 매핑 해석기 (None이면 내장 기본 매핑 사용)
            clock: 초 단위 단조 시계
        """
        self._config = config
        self._clock = clock
        self._lock = threading.Lock()
        self._cache = _RefreshState()

        self._filters = config.filters
        self._mapping = (resolver or MappingConfigResolver()).resolve(
            config.use_default_mapping,
            config.mapping_file,
            config.mapping_params,
        )
        self._fetcher = fetcher if fetcher is not None else self._create_fetcher(config)

    @staticmethod
    def _create_fetcher(config: SourceConfig) -> InventoryFetcher:
        try:
            session = acquire_session(config.project, config.regions[0], config.credentials_file)
        except CredentialError as e:
            logger.error("자격 증명 획득 실패, 조회가 모두 실패합니다: %s", e)
            return Ec2InventoryFetcher(None, config.regions, credential_error=e)
        return Ec2InventoryFetcher(session, config.regions)

    # =========================================================================
    # 조회
    # =========================================================================

    def get_nodes(self) -> NodeSet:
        """현재 게시된 NodeSet 반환

        Raises:
            FetchError: 동기 조회(첫 호출 또는 async 비활성)가 실패한 경우
        """
        with self._lock:
            self._reconcile()

            if not self._is_stale():
                return self._cache.published

            first_fetch = self._cache.last_refresh_ms is None
            if first_fetch or not self._config.query_async:
                self._cache.published = self._fetcher.fetch_sync(
                    self._mapping, self._filters, self._config.running_only
                )
                self._cache.last_refresh_ms = self._now_ms()
            elif self._cache.pending is None:
                self._cache.pending = self._fetcher.fetch_async(
                    self._mapping, self._filters, self._config.running_only
                )
                self._cache.last_refresh_ms = self._now_ms()
                logger.debug("비동기 갱신 시작")

            return self._cache.published

    def _reconcile(self) -> None:
        """완료된 비동기 조회 결과를 게시"""
        pending = self._cache.pending
        if pending is None or not pending.is_done():
            return

        self._cache.pending = None
        try:
            self._cache.published = pending.result()
            logger.debug("비동기 갱신 완료: 노드 %d개", len(self._cache.published))
        except FetchInterruptedError as e:
            logger.debug("비동기 갱신 중단: %s", e)
        except FetchError as e:
            logger.warning("비동기 갱신 실패, 이전 노드 목록을 유지합니다: %s", e)

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _is_stale(self) -> bool:
        interval = self._config.refresh_interval_ms
        last = self._cache.last_refresh_ms
        stale = interval < 0 or last is None or self._now_ms() - last > interval
        logger.debug("갱신 필요 여부: %s", stale)
        return stale

    # =========================================================================
    # 상태 조회
    # =========================================================================

    @property
    def state(self) -> SourceState:
        with self._lock:
            if self._cache.last_refresh_ms is None:
                return SourceState.EMPTY
            if self._cache.pending is not None:
                return SourceState.REFRESHING
            if self._is_stale():
                return SourceState.STALE
            return SourceState.FRESH

    @property
    def last_refresh(self) -> float | None:
        """마지막 갱신 트리거 시각 (clock 기준 초), 없으면 None"""
        with self._lock:
            last = self._cache.last_refresh_ms
            return None if last is None else last / 1000

    @property
    def refresh_pending(self) -> bool:
        with self._lock:
            return self._cache.pending is not None

    @property
    def config(self) -> SourceConfig:
        return self._config

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    @property
    def filters(self) -> list[str]:
        return list(self._filters)

    # =========================================================================
    # 정리
    # =========================================================================

    def close(self) -> None:
        """백그라운드 조회 리소스 해제 (진행 중인 조회는 버려짐)"""
        self._fetcher.close()

    def __enter__(self) -> NodeSource:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"NodeSource(project={self._config.project!r}, "
            f"regions={list(self._config.regions)}, state={self.state})"
        )
