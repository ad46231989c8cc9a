"""
nodesource/inventory/client.py - 인벤토리 조회용 EC2 client

describe_instances 한 번이 백그라운드 갱신을 오래 붙잡지 않도록
재시도 횟수와 타임아웃을 고정한 EC2 client를 만듭니다.

Example:
    from nodesource.inventory.client import get_ec2_client

    ec2 = get_ec2_client(session, "ap-northeast-2")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from botocore.config import Config

if TYPE_CHECKING:
    import boto3

MAX_ATTEMPTS = 3
CONNECT_TIMEOUT = 5  # 초
READ_TIMEOUT = 15  # 초

EC2_CLIENT_CONFIG = Config(
    retries={"max_attempts": MAX_ATTEMPTS, "mode": "adaptive"},  # pyright: ignore[reportArgumentType]
    connect_timeout=CONNECT_TIMEOUT,
    read_timeout=READ_TIMEOUT,
)


def get_ec2_client(session: boto3.Session, region: str) -> Any:
    """리전별 EC2 client 생성 (adaptive 재시도, 짧은 타임아웃)"""
    return session.client("ec2", region_name=region, config=EC2_CLIENT_CONFIG)
