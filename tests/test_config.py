from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from notifications.models.config import NotificationConfig, coerce_config, load_notification_config
from notifications.models.notification import NoticeType


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in (
        "NOTIFY_MAX_VISIBLE",
        "NOTIFY_MAX_PERSISTENT",
        "NOTIFY_MAX_QUEUE_SIZE",
        "NOTIFY_ANIMATIONS",
        "NOTIFY_POSITION",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("NOTIFY_DATA_DIR", str(tmp_path))


def test_defaults() -> None:
    cfg = NotificationConfig()
    assert cfg.max_visible == 3
    assert cfg.max_persistent == 2
    assert cfg.max_queue_size == 15
    assert cfg.animations_enabled is True
    assert cfg.position == "bottom-center"
    assert cfg.removal_delay_ms == 200


def test_validation_rejects_bad_values() -> None:
    with pytest.raises(ValidationError):
        NotificationConfig(max_queue_size=0)
    with pytest.raises(ValidationError):
        NotificationConfig(position="middle")
    with pytest.raises(ValidationError):
        NotificationConfig(durations={"info": -5})


def test_coerce_accepts_both_spellings() -> None:
    cfg = coerce_config({"maxVisible": 5, "max_persistent": 0})
    assert cfg is not None
    assert cfg.max_visible == 5
    assert cfg.max_persistent == 0
    assert coerce_config(None) == NotificationConfig()


def test_coerce_logs_and_returns_none(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        assert coerce_config({"maxVisible": "many"}) is None
    assert "invalid configuration" in caplog.text


def test_missing_ini_gives_defaults() -> None:
    assert load_notification_config() == NotificationConfig()


def test_ini_then_environment(tmp_path, monkeypatch) -> None:
    ini = tmp_path / "app.ini"
    ini.write_text(
        "[notifications]\n"
        "max_visible = 4\n"
        "animations_enabled = off\n"
        "position = top-left\n"
        "duration_error = 9000\n"
        "max_queue_size = lots\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("NOTIFY_MAX_VISIBLE", "6")

    cfg = load_notification_config()
    assert cfg.max_visible == 6
    assert cfg.animations_enabled is False
    assert cfg.position == "top-left"
    assert cfg.durations == {NoticeType.ERROR: 9000}
    assert cfg.max_queue_size == 15


def test_invalid_merged_values_fall_back(tmp_path, monkeypatch, caplog) -> None:
    monkeypatch.setenv("NOTIFY_POSITION", "center-ish")
    with caplog.at_level(logging.WARNING):
        cfg = load_notification_config(tmp_path / "absent.ini")
    assert cfg == NotificationConfig()
    assert "falling back" in caplog.text
