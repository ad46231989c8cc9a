"""
nodesource/exceptions.py - 통합 예외 계층 구조

노드 소스 전체에서 사용되는 예외 클래스들을 정의합니다.

예외 계층 구조:
    NodeSourceError (베이스)
    ├── ConfigError (설정 값 오류)
    ├── CredentialError (자격 증명 획득 실패)
    ├── MappingLoadError (매핑 파일 로드 실패)
    └── FetchError (인벤토리 조회 실패)
        └── FetchInterruptedError (조회 취소/중단)

복구 지점:
    - ConfigError: 설정 파싱 시 기본값으로 대체 (WARNING 로그)
    - CredentialError: NodeSource 생성 시 로그만 남기고 degraded 상태로 진행
    - MappingLoadError: 매핑 해석 시 로그만 남기고 진행
    - FetchError: 동기 조회 경로에서만 호출자에게 전파
    - FetchInterruptedError: 절대 호출자에게 전파되지 않음

Usage:
    from nodesource.exceptions import FetchError

    try:
        pages = paginator.paginate(Filters=filters)
    except ClientError as e:
        raise FetchError.from_client_error("ec2", "describe_instances", e) from e
"""

from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class NodeSourceError(Exception):
    """노드 소스 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 설정 / 자격 증명 / 매핑
# =============================================================================


class ConfigError(NodeSourceError):
    """설정 값 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


class CredentialError(NodeSourceError):
    """AWS 자격 증명 획득 실패

    NodeSource 생성 시 한 번 발생할 수 있으며, 이후 모든 조회는
    이 예외를 원인으로 하는 FetchError로 실패합니다.
    """

    def __init__(
        self,
        project: Optional[str],
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"자격 증명 오류 [{project or 'default'}]: {message}"
        super().__init__(full_message, cause)
        self.project = project
        self.details["project"] = project


class MappingLoadError(NodeSourceError):
    """매핑 파일 로드 실패"""

    def __init__(
        self,
        path: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"매핑 파일 로드 실패 [{path}]: {message}"
        super().__init__(full_message, cause)
        self.path = path
        self.details["path"] = path


# =============================================================================
# 조회 관련 예외
# =============================================================================


class FetchError(NodeSourceError):
    """인벤토리 조회 실패 (네트워크, 인증, 쿼터 등)

    boto3/botocore 예외를 래핑하여 일관된 예외 처리를 제공합니다.
    """

    def __init__(
        self,
        message: str,
        service: str = "ec2",
        operation: Optional[str] = None,
        error_code: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> "FetchError":
        """botocore.exceptions.ClientError로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: API 작업 이름
            client_error: ClientError 예외

        Returns:
            FetchError 인스턴스
        """
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        return cls(
            message,
            service=service,
            operation=operation,
            error_code=error_code,
            cause=client_error,
        )


class FetchInterruptedError(FetchError):
    """비동기 조회가 완료 전에 취소/중단된 경우"""

    def __init__(self, message: str = "조회가 중단되었습니다", cause: Optional[Exception] = None):
        super().__init__(message, cause=cause)
