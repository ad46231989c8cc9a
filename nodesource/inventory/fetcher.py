"""
nodesource/inventory/fetcher.py - EC2 inventory fetcher

Produces complete NodeSets from ``describe_instances``, either blocking
(``fetch_sync``) or as a pollable ``FetchHandle`` (``fetch_async``).

The async fetch runs on a daemon thread and never calls back into
its caller; completion is observed by polling ``FetchHandle.is_done()``.

Example:
    fetcher = Ec2InventoryFetcher(session, regions=["ap-northeast-2"])

    nodes = fetcher.fetch_sync(mapping, ["tag:Team=infra"], running_only=True)

    handle = fetcher.fetch_async(mapping, [], running_only=True)
    if handle.is_done():
        nodes = handle.result()
"""

from __future__ import annotations

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from nodesource.exceptions import FetchError, FetchInterruptedError
from nodesource.mapping.mapper import InstanceToNodeMapper

from .client import get_ec2_client
from .types import NodeSet

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

RUNNING_STATE_FILTER = {"Name": "instance-state-name", "Values": ["running"]}

_worker_ids = itertools.count(1)


class FetchHandle:
    """One outstanding asynchronous fetch

    Wraps a ``concurrent.futures.Future``. ``result()`` may only be called once
    ``is_done()`` is true and never blocks.
    """

    def __init__(self, future: Future[NodeSet]):
        self._future = future

    def is_done(self) -> bool:
        return self._future.done()

    def cancel(self) -> bool:
        return self._future.cancel()

    def result(self) -> NodeSet:
        """Return the fetched NodeSet

        Raises:
            RuntimeError: the fetch is still running
            FetchInterruptedError: the fetch was cancelled
            FetchError: the fetch failed
        """
        if not self._future.done():
            raise RuntimeError("fetch is still in progress")
        if self._future.cancelled():
            raise FetchInterruptedError("비동기 조회가 취소되었습니다")

        error = self._future.exception(timeout=0)
        if error is None:
            return self._future.result(timeout=0)
        if isinstance(error, FetchError):
            raise error
        raise FetchError(f"비동기 조회 중 예외 발생: {error.__class__.__name__}", cause=error) from error


def parse_filters(filters: Sequence[str], running_only: bool = False) -> list[dict[str, Any]]:
    """Convert ``name=v1,v2`` filter expressions into EC2 ``Filters``

    Expressions without ``=`` are ignored.
    """
    parsed: list[dict[str, Any]] = []
    for expression in filters:
        if "=" not in expression:
            logger.debug("필터 표현식 무시: %r", expression)
            continue
        name, values = expression.split("=", 1)
        parsed.append({"Name": name.strip(), "Values": [v.strip() for v in values.split(",")]})

    if running_only:
        parsed.append({"Name": RUNNING_STATE_FILTER["Name"], "Values": list(RUNNING_STATE_FILTER["Values"])})
    return parsed


class InventoryFetcher(ABC):
    """Inventory fetcher contract

    Subclasses implement ``fetch_sync``; ``fetch_async`` runs it on its own
    daemon thread so an abandoned fetch never holds up interpreter exit.
    """

    def __init__(self) -> None:
        self._pending: set[Future[NodeSet]] = set()
        self._pending_lock = threading.Lock()

    @abstractmethod
    def fetch_sync(
        self,
        mapping: Mapping[str, str],
        filters: Sequence[str],
        running_only: bool,
    ) -> NodeSet:
        """Fetch a complete NodeSet, blocking

        Raises:
            FetchError: the inventory could not be retrieved
        """

    def fetch_async(
        self,
        mapping: Mapping[str, str],
        filters: Sequence[str],
        running_only: bool,
    ) -> FetchHandle:
        """Start a fetch in the background and return its handle"""
        future: Future[NodeSet] = Future()
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

        worker = threading.Thread(
            target=self._run,
            args=(future, mapping, list(filters), running_only),
            name=f"nodesource-fetch-{next(_worker_ids)}",
            daemon=True,
        )
        worker.start()
        return FetchHandle(future)

    def _run(
        self,
        future: Future[NodeSet],
        mapping: Mapping[str, str],
        filters: list[str],
        running_only: bool,
    ) -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            nodes = self.fetch_sync(mapping, filters, running_only)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(nodes)

    def _forget(self, future: Future[NodeSet]) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def close(self) -> None:
        """Cancel fetches that have not started; a running fetch is abandoned"""
        with self._pending_lock:
            pending = list(self._pending)
        # cancel() runs done callbacks synchronously, so outside the lock
        abandoned = sum(1 for future in pending if not future.cancel())
        if abandoned:
            logger.debug("진행 중인 비동기 조회 %d개를 버림", abandoned)


class Ec2InventoryFetcher(InventoryFetcher):
    """Fetch EC2 instances across regions and map them to nodes

    A ``None`` session means credentials could not be acquired; every fetch
    then fails with a FetchError caused by ``credential_error``.
    """

    def __init__(
        self,
        session: boto3.Session | None,
        regions: Sequence[str],
        credential_error: Exception | None = None,
    ):
        super().__init__()
        self._session = session
        self._regions = list(regions)
        self._credential_error = credential_error

    @property
    def regions(self) -> list[str]:
        return list(self._regions)

    def describe_instances(self, region: str, filters: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """All instance records in a region matching ``filters``"""
        instances: list[dict[str, Any]] = []
        try:
            ec2 = get_ec2_client(self._session, region)
            paginator = ec2.get_paginator("describe_instances")
            params: dict[str, Any] = {"Filters": filters} if filters else {}
            for page in paginator.paginate(**params):
                for reservation in page.get("Reservations", []):
                    instances.extend(reservation.get("Instances", []))
        except ClientError as e:
            raise FetchError.from_client_error("ec2", "describe_instances", e) from e
        except BotoCoreError as e:
            raise FetchError(
                f"ec2.describe_instances 실패 [{region}]: {e}",
                operation="describe_instances",
                cause=e,
            ) from e
        return instances

    def fetch_sync(
        self,
        mapping: Mapping[str, str],
        filters: Sequence[str],
        running_only: bool,
    ) -> NodeSet:
        if self._session is None:
            raise FetchError("자격 증명이 없어 인벤토리를 조회할 수 없습니다", cause=self._credential_error)

        ec2_filters = parse_filters(filters, running_only)
        records: list[dict[str, Any]] = []
        for region in self._regions:
            found = self.describe_instances(region, ec2_filters)
            logger.debug("인스턴스 조회: region=%s, count=%d", region, len(found))
            records.extend(found)

        nodes = InstanceToNodeMapper(mapping).map_instances(records)
        logger.info("인벤토리 조회 완료: 인스턴스 %d개, 노드 %d개", len(records), len(nodes))
        return nodes
