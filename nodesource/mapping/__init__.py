"""
nodesource/mapping - Node attribute mapping

Classes:
    - MappingConfigResolver: defaults + file + inline params -> effective mapping
    - InstanceToNodeMapper: applies a mapping to EC2 instance records

Usage:
    from nodesource.mapping import resolve_mapping

    mapping = resolve_mapping(True, "mapping.properties", "username.default=admin")
"""

from .defaults import DEFAULT_MAPPING
from .mapper import InstanceToNodeMapper, evaluate_selector
from .properties import load_properties, parse_properties
from .resolver import MappingConfig, MappingConfigResolver, parse_inline_params, resolve_mapping

__all__ = [
    "DEFAULT_MAPPING",
    "InstanceToNodeMapper",
    "MappingConfig",
    "MappingConfigResolver",
    "evaluate_selector",
    "load_properties",
    "parse_inline_params",
    "parse_properties",
    "resolve_mapping",
]
