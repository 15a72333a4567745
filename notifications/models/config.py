"""Configuration for the toast notification scheduler.

Values come from ``NotificationConfig`` directly, from a mapping handed to
``NotificationScheduler.init`` (snake_case or the camelCase spelling used by
the web client), or from ``load_notification_config`` which reads the
``[notifications]`` section of ``data/app.ini`` and ``NOTIFY_*`` environment
variables.
"""

from __future__ import annotations

import configparser
import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .notification import NoticeType

logger = logging.getLogger(__name__)

Position = Literal[
    "top-left",
    "top-center",
    "top-right",
    "bottom-left",
    "bottom-center",
    "bottom-right",
]

DEFAULT_TARGET = "notification-area"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class NotificationConfig(BaseModel):
    model_config = ConfigDict(
        alias_generator=_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        frozen=True,
        extra="ignore",
    )

    presentation_target: Any = DEFAULT_TARGET
    max_visible: int = Field(default=3, ge=1)
    max_persistent: int = Field(default=2, ge=0)
    max_queue_size: int = Field(default=15, ge=1)
    durations: Dict[NoticeType, int] = Field(default_factory=dict)
    animations_enabled: bool = True
    removal_delay_ms: int = Field(default=200, ge=0)
    position: Position = "bottom-center"
    enabled: bool = True

    @field_validator("durations")
    @classmethod
    def _positive_durations(cls, value: Dict[NoticeType, int]) -> Dict[NoticeType, int]:
        for tag, ms in value.items():
            if ms <= 0:
                raise ValueError(f"duration for {tag.value!r} must be > 0")
        return value


def coerce_config(raw: Any) -> Optional[NotificationConfig]:
    """Return a validated config or ``None`` when ``raw`` is unusable."""

    if raw is None:
        return NotificationConfig()
    if isinstance(raw, NotificationConfig):
        return raw
    try:
        return NotificationConfig.model_validate(dict(raw))
    except (TypeError, ValueError, ValidationError) as exc:
        logger.warning("[notifications] invalid configuration: %s", exc)
        return None


# ---- INI / environment loading --------------------------------------------

_ENV_KEYS = {
    "NOTIFY_MAX_VISIBLE": "max_visible",
    "NOTIFY_MAX_PERSISTENT": "max_persistent",
    "NOTIFY_MAX_QUEUE_SIZE": "max_queue_size",
    "NOTIFY_ANIMATIONS": "animations_enabled",
    "NOTIFY_POSITION": "position",
}

_INT_FIELDS = {"max_visible", "max_persistent", "max_queue_size", "removal_delay_ms"}
_BOOL_FIELDS = {"animations_enabled", "enabled"}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _default_ini_path() -> Path:
    data_dir = Path(os.environ.get("NOTIFY_DATA_DIR", "data"))
    return data_dir / "app.ini"


def _parse_value(key: str, raw: str) -> Any:
    text = raw.strip()
    if key in _INT_FIELDS:
        return int(text)
    if key in _BOOL_FIELDS:
        lowered = text.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    return text


def _read_ini(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    cp = configparser.ConfigParser()
    try:
        cp.read(path, encoding="utf-8")
    except configparser.Error as exc:
        logger.warning("[notifications] unreadable %s: %s", path, exc)
        return {}
    if not cp.has_section("notifications"):
        return {}

    values: dict[str, Any] = {}
    durations: dict[str, int] = {}
    for key, raw in cp.items("notifications"):
        try:
            if key.startswith("duration_"):
                durations[key[len("duration_"):]] = int(raw)
            elif key in NotificationConfig.model_fields:
                values[key] = _parse_value(key, raw)
        except ValueError:
            logger.warning("[notifications] ignoring %s=%r in %s", key, raw, path)
    if durations:
        values["durations"] = durations
    return values


def load_notification_config(ini_path: str | Path | None = None) -> NotificationConfig:
    """Build a config from ``app.ini`` then ``NOTIFY_*`` overrides.

    Bad individual values are dropped; if the merged result still fails
    validation the defaults are returned.
    """

    path = Path(ini_path) if ini_path is not None else _default_ini_path()
    values = _read_ini(path)

    for env_key, field_name in _ENV_KEYS.items():
        raw = os.environ.get(env_key)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[field_name] = _parse_value(field_name, raw)
        except ValueError:
            logger.warning("[notifications] ignoring %s=%r", env_key, raw)

    try:
        return NotificationConfig.model_validate(values)
    except ValidationError as exc:
        logger.warning("[notifications] falling back to default configuration: %s", exc)
        return NotificationConfig()


__all__ = [
    "DEFAULT_TARGET",
    "NotificationConfig",
    "Position",
    "coerce_config",
    "load_notification_config",
]
