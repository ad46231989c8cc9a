# nodesource/auth/credentials.py
"""
nodesource/auth/credentials.py - AWS 자격 증명 획득

프로젝트(= AWS named profile)에 대한 boto3 Session을 생성합니다.
NodeSource 생성 시 한 번만 호출되며, 실패하면 CredentialError를 발생시킵니다.

자격 증명 탐색 순서:
    1. credentials_file 이 주어지면 해당 파일을 shared credentials 파일로 사용
    2. project 가 주어지면 해당 프로파일 사용
    3. 둘 다 없으면 boto3 기본 자격 증명 체인 (환경변수, 인스턴스 프로파일 등)

Usage:
    from nodesource.auth import acquire_session

    session = acquire_session("prod", region="ap-northeast-2")
"""

from __future__ import annotations

import logging
from pathlib import Path

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ProfileNotFound

from nodesource.exceptions import CredentialError

logger = logging.getLogger(__name__)


def acquire_session(
    project: str | None = None,
    region: str | None = None,
    credentials_file: str | Path | None = None,
) -> boto3.Session:
    """프로젝트용 boto3 Session 생성

    Args:
        project: AWS 프로파일 이름 (None이면 기본 체인)
        region: 기본 리전
        credentials_file: shared credentials 파일 경로 (선택)

    Returns:
        자격 증명이 확인된 boto3 Session

    Raises:
        CredentialError: 자격 증명 파일 없음, 프로파일 없음, 자격 증명 없음
    """
    core_session = None
    if credentials_file is not None:
        path = Path(credentials_file)
        if not path.is_file():
            raise CredentialError(project, f"자격 증명 파일이 없습니다: {path}")
        core_session = botocore.session.Session()
        core_session.set_config_variable("credentials_file", str(path))

    try:
        session = boto3.Session(
            profile_name=project,
            region_name=region,
            botocore_session=core_session,
        )
        credentials = session.get_credentials()
    except ProfileNotFound as e:
        raise CredentialError(project, "프로파일을 찾을 수 없습니다", cause=e) from e
    except BotoCoreError as e:
        raise CredentialError(project, "자격 증명 로드 실패", cause=e) from e

    if credentials is None:
        raise CredentialError(project, "사용 가능한 자격 증명이 없습니다")

    logger.debug("자격 증명 획득: project=%s, method=%s", project or "default", credentials.method)
    return session
