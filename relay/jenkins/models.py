"""
Inbound Jenkins webhook records.

Two payload shapes are accepted:

- nested: the Jenkins notification format, job fields at the top level and
  the build described by a ``build`` object
- legacy: a flat object with projectName/buildName/buildUrl/buildVars/event

Only structural problems (wrong JSON types) are rejected here. Unknown or
unexpected values of the right type are kept as-is for the translator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class InboundShape(Enum):
    NESTED = "nested"
    LEGACY = "legacy"


class PayloadError(ValueError):
    """Raised when a webhook body does not have the shape of a Jenkins event."""


LEGACY_KEYS = ("projectName", "buildName", "buildUrl", "buildVars", "event")

# Jenkins numbers are Java longs
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# keys consumed by the records below; everything else is kept opaque in extras
_EVENT_KEYS = {"name", "displayName", "display_name", "url", "build"}
_BUILD_KEYS = {
    "number", "queueId", "queue_id", "timestamp", "duration", "result",
    "status", "phase", "url", "full_url", "fullDisplayName", "full_display_name",
    "cause",
}


@dataclass
class BuildInfo:
    number: int = 0
    queue_id: Optional[int] = None
    timestamp: int = 0  # epoch milliseconds
    duration: int = 0  # milliseconds, 0 while unknown
    result: str = ""
    status: str = ""  # lifecycle phase, e.g. STARTED / COMPLETED
    url: str = ""
    full_display_name: str = ""
    cause: str = ""
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class JenkinsEvent:
    name: str = ""
    display_name: str = ""
    url: str = ""
    build: BuildInfo = field(default_factory=BuildInfo)
    extras: Dict[str, Any] = field(default_factory=dict)

    shape = InboundShape.NESTED


@dataclass
class LegacyJenkinsEvent:
    project_name: str = ""
    build_name: str = ""
    build_url: str = ""
    build_vars: str = ""
    event: str = ""

    shape = InboundShape.LEGACY


InboundEvent = Union[JenkinsEvent, LegacyJenkinsEvent]


def _first(data, *keys):
    for key in keys:
        if data.get(key) is not None:
            return key, data[key]
    return keys[0], None


def _get_str(data, *keys) -> str:
    key, value = _first(data, *keys)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PayloadError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _get_int(data, *keys, default=0):
    key, value = _first(data, *keys)
    if value is None:
        return default
    if isinstance(value, bool):
        raise PayloadError(f"field '{key}' must be an integer, got bool")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise PayloadError(f"field '{key}' must be an integer, got {type(value).__name__}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise PayloadError(f"field '{key}' is out of range for a 64-bit integer")
    return value


def detect_shape(payload: Dict[str, Any]) -> InboundShape:
    """Pick the inbound shape from the keys present in a decoded body."""
    if "build" in payload:
        return InboundShape.NESTED
    if any(key in payload for key in LEGACY_KEYS):
        return InboundShape.LEGACY
    return InboundShape.NESTED


def parse_build(data: Any) -> BuildInfo:
    if data is None:
        return BuildInfo()
    if not isinstance(data, dict):
        raise PayloadError(f"field 'build' must be an object, got {type(data).__name__}")

    return BuildInfo(
        number=_get_int(data, "number"),
        queue_id=_get_int(data, "queueId", "queue_id", default=None),
        timestamp=_get_int(data, "timestamp"),
        duration=_get_int(data, "duration"),
        result=_get_str(data, "result"),
        status=_get_str(data, "status", "phase"),
        url=_get_str(data, "full_url", "url"),
        full_display_name=_get_str(data, "fullDisplayName", "full_display_name"),
        cause=_get_str(data, "cause"),
        extras={k: v for k, v in data.items() if k not in _BUILD_KEYS},
    )


def parse_event(payload: Any, shape: Optional[InboundShape] = None) -> InboundEvent:
    """
    Build an inbound event record from a decoded JSON body.

    Args:
        payload: decoded request body
        shape: force a shape; detected from the payload keys when None

    Raises:
        PayloadError: if the payload is not an object or a field has the wrong type
    """
    if not isinstance(payload, dict):
        raise PayloadError(f"payload must be a JSON object, got {type(payload).__name__}")

    if shape is None:
        shape = detect_shape(payload)

    if shape is InboundShape.LEGACY:
        return LegacyJenkinsEvent(
            project_name=_get_str(payload, "projectName"),
            build_name=_get_str(payload, "buildName"),
            build_url=_get_str(payload, "buildUrl"),
            build_vars=_get_str(payload, "buildVars"),
            event=_get_str(payload, "event"),
        )

    return JenkinsEvent(
        name=_get_str(payload, "name"),
        display_name=_get_str(payload, "displayName", "display_name"),
        url=_get_str(payload, "url"),
        build=parse_build(payload.get("build")),
        extras={k: v for k, v in payload.items() if k not in _EVENT_KEYS},
    )
