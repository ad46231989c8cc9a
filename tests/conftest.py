"""
tests/conftest.py - pytest 공통 픽스처

AWS 환경 격리, 가짜 시계/조회기, EC2 인스턴스 레코드 헬퍼를 제공합니다.

Usage:
    def test_something(fake_fetcher, fake_clock, make_instance):
        # fake_fetcher: 호출 횟수를 기록하고 비동기 완료를 수동으로 제어하는 조회기
        # fake_clock: advance()로만 움직이는 초 단위 시계
        # make_instance: describe_instances 형식의 인스턴스 레코드 생성
        pass
"""

import logging
import sys
from collections.abc import Mapping, Sequence
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from nodesource.inventory.fetcher import FetchHandle, InventoryFetcher  # noqa: E402
from nodesource.inventory.types import Node, NodeSet  # noqa: E402

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """테스트 환경 설정 (실제 AWS 설정/자격 증명 차단)"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws_config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws_credentials"))
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)

    # CLI 테스트가 설정한 루트 logger 핸들러/레벨 복원
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level

    yield

    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# 시계 / 조회기
# =============================================================================


class FakeClock:
    """수동으로만 진행하는 단조 시계 (초)"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher(InventoryFetcher):
    """테스트용 조회기

    - fetch_sync: ``results`` 를 순서대로 반환 (소진되면 빈 NodeSet)
    - fetch_async: 완료되지 않은 Future를 반환, ``complete()``/``fail()``/``interrupt()`` 로 제어
    """

    def __init__(self, results: Optional[Sequence[NodeSet]] = None):
        super().__init__()
        self.results: List[NodeSet] = list(results or [])
        self.sync_error: Optional[Exception] = None
        self.sync_calls = 0
        self.async_calls = 0
        self.calls: List[tuple] = []
        self.futures: List[Future] = []
        self.closed = False

    def _next(self) -> NodeSet:
        if self.results:
            return self.results.pop(0)
        return NodeSet.empty()

    def fetch_sync(self, mapping: Mapping[str, str], filters: Sequence[str], running_only: bool) -> NodeSet:
        self.sync_calls += 1
        self.calls.append((dict(mapping), list(filters), running_only))
        if self.sync_error is not None:
            raise self.sync_error
        return self._next()

    def fetch_async(self, mapping: Mapping[str, str], filters: Sequence[str], running_only: bool) -> FetchHandle:
        self.async_calls += 1
        self.calls.append((dict(mapping), list(filters), running_only))
        future: Future = Future()
        self.futures.append(future)
        return FetchHandle(future)

    def complete(self, nodes: Optional[NodeSet] = None) -> None:
        """마지막 비동기 조회를 성공으로 완료"""
        self.futures[-1].set_result(nodes if nodes is not None else self._next())

    def fail(self, error: Exception) -> None:
        """마지막 비동기 조회를 실패로 완료"""
        self.futures[-1].set_exception(error)

    def interrupt(self) -> None:
        """마지막 비동기 조회를 취소"""
        self.futures[-1].cancel()

    def close(self) -> None:
        self.closed = True
        super().close()


@pytest.fixture
def fake_clock():
    """테스트용 시계"""
    return FakeClock()


@pytest.fixture
def fake_fetcher():
    """테스트용 조회기"""
    return FakeFetcher()


# =============================================================================
# 데이터 헬퍼
# =============================================================================


def make_nodes(*names: str) -> NodeSet:
    """이름만 가진 노드들로 NodeSet 생성"""
    return NodeSet([Node(name) for name in names])


def make_instance(
    instance_id: str = "i-0123456789abcdef0",
    name: Optional[str] = "web-1",
    state: str = "running",
    tags: Optional[Dict[str, str]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """describe_instances 응답 형식의 인스턴스 레코드 생성"""
    tag_list = [{"Key": "Name", "Value": name}] if name is not None else []
    tag_list.extend({"Key": key, "Value": value} for key, value in (tags or {}).items())

    record: Dict[str, Any] = {
        "InstanceId": instance_id,
        "InstanceType": "t3.micro",
        "ImageId": "ami-12345678",
        "Architecture": "x86_64",
        "PlatformDetails": "Linux/UNIX",
        "State": {"Code": 16, "Name": state},
        "Placement": {"AvailabilityZone": "ap-northeast-2a"},
        "PrivateIpAddress": "10.0.0.1",
        "PrivateDnsName": "ip-10-0-0-1.ap-northeast-2.compute.internal",
        "PublicDnsName": "",
        "Tags": tag_list,
    }
    record.update(extra)
    return record


@pytest.fixture(name="make_nodes")
def make_nodes_fixture():
    """NodeSet 생성 헬퍼"""
    return make_nodes


@pytest.fixture(name="make_instance")
def make_instance_fixture():
    """인스턴스 레코드 생성 헬퍼"""
    return make_instance


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation_name: str = "DescribeInstances",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation_name,
    )


@pytest.fixture(name="client_error")
def client_error_fixture():
    """ClientError 생성 헬퍼"""
    return create_mock_client_error
