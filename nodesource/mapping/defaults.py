"""
nodesource/mapping/defaults.py - Built-in default mapping

Loaded once at import time from the packaged ``default_mapping.properties``.
If the resource can't be read (broken install, zipped package without the data
file), the embedded ``FALLBACK_MAPPING_TEXT`` is used instead; it must stay
identical to the resource file.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from importlib import resources
from types import MappingProxyType

from .properties import parse_properties

logger = logging.getLogger(__name__)

DEFAULT_MAPPING_RESOURCE = "default_mapping.properties"

FALLBACK_MAPPING_TEXT = (
    "nodename.selector=tags/Name,instanceId\n"
    "hostname.selector=publicDnsName,privateIpAddress\n"
    "description.default=EC2 node instance\n"
    "osArch.selector=architecture\n"
    "osFamily.selector=platform\n"
    "osFamily.default=unix\n"
    "osName.selector=platformDetails\n"
    "osName.default=Linux\n"
    "username.selector=tags/Rundeck-User\n"
    "username.default=ec2-user\n"
    "environment.selector=tags/Environment\n"
    "environment.default=test\n"
    "instanceId.selector=instanceId\n"
    "instanceType.selector=instanceType\n"
    "imageId.selector=imageId\n"
    "availabilityZone.selector=placement.availabilityZone\n"
    "privateIpAddress.selector=privateIpAddress\n"
    "publicIpAddress.selector=publicIpAddress\n"
    "privateDnsName.selector=privateDnsName\n"
    "state.selector=state.name\n"
    "tags.selector=tags/Rundeck-Tags\n"
    "tags.default=ec2\n"
    "tag.pending.selector=state.name=pending\n"
    "tag.running.selector=state.name=running\n"
    "tag.shutting-down.selector=state.name=shutting-down\n"
    "tag.stopping.selector=state.name=stopping\n"
    "tag.stopped.selector=state.name=stopped\n"
    "tag.terminated.selector=state.name=terminated\n"
)


def read_default_mapping_text() -> str:
    """Return the packaged default mapping text, or the embedded fallback"""
    try:
        return (
            resources.files(__package__)
            .joinpath(DEFAULT_MAPPING_RESOURCE)
            .read_text(encoding="utf-8")
        )
    except (OSError, ModuleNotFoundError) as e:
        logger.debug("기본 매핑 리소스 로드 실패, 내장 매핑 사용: %s", e)
        return FALLBACK_MAPPING_TEXT


def load_default_mapping() -> Mapping[str, str]:
    """Parse the default mapping into a read-only mapping"""
    return MappingProxyType(parse_properties(read_default_mapping_text()))


DEFAULT_MAPPING: Mapping[str, str] = load_default_mapping()
