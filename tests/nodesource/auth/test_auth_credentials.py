"""
tests/nodesource/auth/test_auth_credentials.py - 자격 증명 획득 테스트
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import PartialCredentialsError, ProfileNotFound

from nodesource.auth import acquire_session
from nodesource.exceptions import CredentialError


class TestAcquireSession:
    """acquire_session 테스트"""

    def test_environment_credentials(self):
        """환경변수 자격 증명으로 세션 생성"""
        session = acquire_session(region="ap-northeast-2")

        assert session.region_name == "ap-northeast-2"
        assert session.get_credentials().access_key == "testing"

    def test_profile_from_credentials_file(self, tmp_path, monkeypatch):
        """credentials_file 의 프로파일 사용"""
        monkeypatch.delenv("AWS_ACCESS_KEY_ID")
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY")
        monkeypatch.delenv("AWS_SESSION_TOKEN")
        monkeypatch.delenv("AWS_SECURITY_TOKEN")
        path = tmp_path / "credentials"
        path.write_text(
            "[prod]\naws_access_key_id = AKIAPROD\naws_secret_access_key = secret\n",
            encoding="utf-8",
        )

        session = acquire_session("prod", "us-east-1", credentials_file=path)

        assert session.profile_name == "prod"
        assert session.get_credentials().access_key == "AKIAPROD"

    def test_missing_credentials_file(self, tmp_path):
        with pytest.raises(CredentialError) as exc_info:
            acquire_session("prod", credentials_file=tmp_path / "nope")

        assert exc_info.value.project == "prod"

    def test_unknown_profile(self):
        """없는 프로파일은 CredentialError"""
        with pytest.raises(CredentialError) as exc_info:
            acquire_session("does-not-exist")

        assert isinstance(exc_info.value.cause, ProfileNotFound)

    def test_no_credentials(self):
        session = MagicMock()
        session.get_credentials.return_value = None

        with patch("nodesource.auth.credentials.boto3.Session", return_value=session):
            with pytest.raises(CredentialError, match="자격 증명이 없습니다"):
                acquire_session()

    def test_botocore_error_wrapped(self):
        session = MagicMock()
        session.get_credentials.side_effect = PartialCredentialsError(provider="env", cred_var="AWS_SECRET_ACCESS_KEY")

        with patch("nodesource.auth.credentials.boto3.Session", return_value=session):
            with pytest.raises(CredentialError) as exc_info:
                acquire_session("prod")

        assert isinstance(exc_info.value.cause, PartialCredentialsError)
