# nodesource/cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
콘솔 출력 모듈

로깅 설정과 NodeSet 출력 포맷터
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_WARNING,
    configure_logging,
    console,
    err_console,
    get_console,
    print_error,
    print_warning,
)
from .output import OUTPUT_FORMATS, build_table, mapping_to_properties, to_json, to_yaml

__all__: list[str] = [
    "console",
    "err_console",
    "get_console",
    "configure_logging",
    # 표준 출력 심볼
    "SYMBOL_ERROR",
    "SYMBOL_WARNING",
    # 메시지 출력
    "print_error",
    "print_warning",
    # 포맷터
    "OUTPUT_FORMATS",
    "build_table",
    "mapping_to_properties",
    "to_json",
    "to_yaml",
]
