"""
tests/nodesource/mapping/test_mapping_properties.py - .properties 파서 테스트
"""

import pytest

from nodesource.exceptions import MappingLoadError
from nodesource.mapping.properties import load_properties, parse_properties


class TestParseProperties:
    """parse_properties 테스트"""

    def test_key_value_separators(self):
        """=, :, 공백 구분자"""
        text = "a=1\nb: 2\nc 3\nd = 4\n"

        assert parse_properties(text) == {"a": "1", "b": "2", "c": "3", "d": "4"}

    def test_comments_and_blank_lines(self):
        """# / ! 주석과 빈 줄 무시"""
        text = "# comment\n\n! another\n  # indented comment\nkey=value\n"

        assert parse_properties(text) == {"key": "value"}

    def test_value_keeps_equals(self):
        """첫 구분자 이후의 = 는 값에 포함"""
        result = parse_properties("tag.running.selector=state.name=running\n")

        assert result == {"tag.running.selector": "state.name=running"}

    def test_line_continuation(self):
        """역슬래시 줄 이어쓰기"""
        text = "hostname.selector=publicDnsName,\\\n    privateIpAddress\n"

        assert parse_properties(text) == {"hostname.selector": "publicDnsName,privateIpAddress"}

    def test_escaped_backslash_is_not_continuation(self):
        """짝수 개의 역슬래시는 이어쓰기가 아님"""
        text = "path=C:\\\\\nnext=1\n"

        assert parse_properties(text) == {"path": "C:\\", "next": "1"}

    def test_escapes(self):
        """\\t, \\n, \\uXXXX 이스케이프"""
        result = parse_properties("a=x\\ty\nb=\\u0041BC\nc=line\\nbreak\n")

        assert result["a"] == "x\ty"
        assert result["b"] == "ABC"
        assert result["c"] == "line\nbreak"

    def test_escaped_separator_in_key(self):
        """키 안의 이스케이프된 구분자"""
        result = parse_properties("my\\=key=value\n")

        assert result == {"my=key": "value"}

    def test_empty_value(self):
        """값이 없는 키"""
        assert parse_properties("empty=\nbare\n") == {"empty": "", "bare": ""}

    def test_duplicate_key_last_wins(self):
        """중복 키는 마지막 값"""
        assert parse_properties("a=1\na=2\n") == {"a": "2"}

    def test_preserves_order(self):
        """삽입 순서 유지"""
        result = parse_properties("z=1\na=2\nm=3\n")

        assert list(result) == ["z", "a", "m"]


class TestLoadProperties:
    """load_properties 테스트"""

    def test_load_file(self, tmp_path):
        """파일 로드"""
        path = tmp_path / "mapping.properties"
        path.write_text("nodename.selector=instanceId\n", encoding="utf-8")

        assert load_properties(path) == {"nodename.selector": "instanceId"}

    def test_latin1_fallback(self, tmp_path):
        """UTF-8이 아니면 latin-1로 읽음"""
        path = tmp_path / "legacy.properties"
        path.write_bytes("description.default=caf\xe9\n".encode("latin-1"))

        assert load_properties(path) == {"description.default": "café"}

    def test_missing_file(self, tmp_path):
        """없는 파일은 MappingLoadError"""
        path = tmp_path / "missing.properties"

        with pytest.raises(MappingLoadError) as exc_info:
            load_properties(path)

        assert exc_info.value.path == str(path)
        assert isinstance(exc_info.value.cause, OSError)

    def test_directory_is_unreadable(self, tmp_path):
        """디렉터리는 읽을 수 없음"""
        with pytest.raises(MappingLoadError):
            load_properties(tmp_path)
