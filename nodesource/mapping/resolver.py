"""
nodesource/mapping/resolver.py - Effective mapping resolution

Merges the built-in default mapping, an optional mapping file and inline
``key=value`` overrides into one mapping configuration.

Precedence (highest first):
    1. inline params (``"a=1;b=2"``)
    2. mapping file entries
    3. built-in defaults (only when ``use_defaults`` is set)

An empty result always falls back to the defaults, so the node mapper never
runs with an empty rule set.

Example:
    resolver = MappingConfigResolver(DEFAULT_MAPPING)
    mapping = resolver.resolve(True, "/etc/nodes/mapping.properties", "username.default=admin")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from nodesource.exceptions import MappingLoadError

from .defaults import DEFAULT_MAPPING
from .properties import load_properties

logger = logging.getLogger(__name__)

# Read-only, insertion-ordered attribute -> selector/default mapping
MappingConfig = Mapping[str, str]


def parse_inline_params(inline_params: str | None) -> dict[str, str]:
    """Parse ``key=value;key=value`` overrides

    Entries without ``=`` are ignored. Each entry is split on its first ``=``
    only, so values may contain ``=`` themselves.
    """
    params: dict[str, str] = {}
    if not inline_params:
        return params

    for entry in inline_params.split(";"):
        if "=" not in entry:
            continue
        key, value = entry.split("=", 1)
        params[key] = value
    return params


class MappingConfigResolver:
    """Resolve the effective mapping from defaults, file and inline params

    The defaults are injected once and never re-read per call.
    """

    def __init__(self, defaults: Mapping[str, str] = DEFAULT_MAPPING):
        self._defaults = MappingProxyType(dict(defaults))

    @property
    def defaults(self) -> MappingConfig:
        return self._defaults

    def resolve(
        self,
        use_defaults: bool = True,
        file_path: str | Path | None = None,
        inline_params: str | None = None,
    ) -> MappingConfig:
        """Build the effective mapping

        Args:
            use_defaults: seed with the built-in defaults
            file_path: optional ``.properties`` mapping file
            inline_params: optional ``;``-separated ``key=value`` overrides

        Returns:
            Read-only mapping configuration (never empty)
        """
        mapping: dict[str, str] = {}

        if use_defaults:
            mapping.update(self._defaults)

        if file_path:
            try:
                mapping.update(load_properties(file_path))
            except MappingLoadError as e:
                logger.warning("매핑 파일을 무시합니다: %s", e)

        mapping.update(parse_inline_params(inline_params))

        if not mapping:
            logger.debug("해석된 매핑이 비어 있어 기본 매핑을 사용합니다")
            mapping.update(self._defaults)

        return MappingProxyType(mapping)


def resolve_mapping(
    use_defaults: bool = True,
    file_path: str | Path | None = None,
    inline_params: str | None = None,
) -> MappingConfig:
    """Resolve against the process-wide built-in default mapping"""
    return MappingConfigResolver(DEFAULT_MAPPING).resolve(use_defaults, file_path, inline_params)
