"""Turn the loose ``show(...)`` calling conventions into a ``NoticeRequest``."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional
from uuid import uuid4

from notifications.models.notification import (
    DEFAULT_DURATIONS_MS,
    TYPE_PRIORITY,
    NoticeAction,
    NoticeRequest,
    NoticeType,
)

logger = logging.getLogger(__name__)


def resolve_type(tag: Any) -> NoticeType:
    """Map a tag to ``NoticeType``; anything unrecognised becomes ``INFO``."""

    if isinstance(tag, NoticeType):
        return tag
    if tag is None:
        return NoticeType.INFO
    try:
        return NoticeType(str(tag).strip().lower())
    except ValueError:
        logger.warning("[notifications] unknown notice type %r, using 'info'", tag)
        return NoticeType.INFO


def _coerce_action(raw: Any) -> Optional[NoticeAction]:
    if raw is None or isinstance(raw, NoticeAction):
        return raw
    if isinstance(raw, Mapping) and callable(raw.get("callback")):
        return NoticeAction(label=str(raw.get("label", "")), callback=raw["callback"])
    logger.warning("[notifications] ignoring malformed action %r", raw)
    return None


def _coerce_duration(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def normalize(
    message: Any,
    type_or_options: Any = NoticeType.INFO,
    duration: Any = None,
    *,
    durations: Mapping[NoticeType, int] | None = None,
    enqueued_at: float | None = None,
    sequence: int = 0,
) -> NoticeRequest:
    """Build a request from ``(message, type, duration)`` or ``(message, options)``.

    ``duration`` is ignored when ``type_or_options`` is a mapping. A missing or
    non-positive duration falls back to the per-type default from
    ``durations`` (then ``DEFAULT_DURATIONS_MS``); persistent notices carry
    no duration at all.
    """

    if isinstance(type_or_options, Mapping):
        options = dict(type_or_options)
    elif isinstance(type_or_options, (str, NoticeType)):
        options = {"type": type_or_options, "duration": duration}
    else:
        options = {"type": NoticeType.INFO}

    type_tag = resolve_type(options.get("type"))
    persistent = bool(options.get("persistent", False))
    dismissible = options.get("dismissible", True) is not False

    duration_ms: Optional[int] = None
    if not persistent:
        duration_ms = _coerce_duration(options.get("duration"))
        if duration_ms is None:
            table = {**DEFAULT_DURATIONS_MS, **(durations or {})}
            duration_ms = table[type_tag]

    return NoticeRequest(
        notice_id=str(uuid4()),
        message="" if message is None else str(message),
        type_tag=type_tag,
        priority=TYPE_PRIORITY[type_tag],
        duration_ms=duration_ms,
        persistent=persistent,
        dismissible=dismissible,
        enqueued_at=time.monotonic() if enqueued_at is None else enqueued_at,
        sequence=sequence,
        icon=options.get("icon"),
        action=_coerce_action(options.get("action")),
    )


__all__ = ["normalize", "resolve_type"]
