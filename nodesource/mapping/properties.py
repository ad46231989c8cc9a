"""
nodesource/mapping/properties.py - Java .properties reader

Mapping files and source configuration files share the ``.properties`` syntax:
``#``/``!`` comments, ``=``/``:``/whitespace separators, trailing-backslash
line continuation and backslash escapes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nodesource.exceptions import MappingLoadError

logger = logging.getLogger(__name__)

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_WHITESPACE = " \t\f"


def _logical_lines(text: str) -> list[str]:
    """Join continuation lines and drop comments/blank lines"""
    lines: list[str] = []
    buffer = ""
    continuing = False

    for raw in text.splitlines():
        line = raw.lstrip(_WHITESPACE)
        if not continuing and (not line or line[0] in "#!"):
            continue

        # odd number of trailing backslashes means continuation
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            buffer += line[:-1]
            continuing = True
            continue

        lines.append(buffer + line)
        buffer = ""
        continuing = False

    if continuing and buffer:
        lines.append(buffer)
    return lines


def _unescape(value: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch != "\\" or i + 1 >= len(value):
            out.append(ch)
            i += 1
            continue

        nxt = value[i + 1]
        if nxt == "u" and i + 6 <= len(value):
            try:
                out.append(chr(int(value[i + 2 : i + 6], 16)))
                i += 6
                continue
            except ValueError:
                pass
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_key_value(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=:" or ch in _WHITESPACE:
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> dict[str, str]:
    """Parse ``.properties`` text into an insertion-ordered dict

    Later duplicate keys overwrite earlier ones (keeping the first position).
    """
    result: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_key_value(line)
        result[key] = value
    return result


def load_properties(path: str | Path) -> dict[str, str]:
    """Read and parse a ``.properties`` file

    Raises:
        MappingLoadError: the file is missing or unreadable
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        # Properties files are traditionally latin-1
        try:
            text = path.read_text(encoding="latin-1")
        except OSError as e:
            raise MappingLoadError(str(path), "파일을 읽을 수 없습니다", cause=e) from e
    except OSError as e:
        raise MappingLoadError(str(path), "파일을 읽을 수 없습니다", cause=e) from e

    entries = parse_properties(text)
    logger.debug("properties 로드: %s (%d개 항목)", path, len(entries))
    return entries
