from __future__ import annotations

import pytest

from notifications.models.notification import DisplayedNotice
from notifications.services.capacity import CapacityManager
from notifications.services.normalizer import normalize


def _shown(tag: str, *, persistent: bool = False) -> DisplayedNotice:
    return DisplayedNotice(request=normalize(tag, {"type": tag, "persistent": persistent}))


def test_pools_are_independent() -> None:
    cap = CapacityManager(max_visible=1, max_persistent=1)
    cap.admit(_shown("info"))
    transient = normalize("t", "info")
    sticky = normalize("p", {"type": "info", "persistent": True})

    assert not cap.can_admit(transient)
    assert cap.can_admit(sticky)
    assert cap.transient_count == 1
    assert cap.persistent_count == 0


def test_admit_into_full_pool_raises() -> None:
    cap = CapacityManager(max_visible=1, max_persistent=0)
    cap.admit(_shown("info"))
    with pytest.raises(ValueError):
        cap.admit(_shown("warning"))
    with pytest.raises(ValueError):
        cap.admit(_shown("info", persistent=True))


def test_release_frees_the_slot_once() -> None:
    cap = CapacityManager(max_visible=1)
    notice = _shown("info")
    cap.admit(notice)
    assert cap.get(notice.notice_id) is notice
    assert cap.release(notice) is True
    assert cap.release(notice) is False
    assert cap.get(notice.notice_id) is None
    assert cap.can_admit(notice.request)


def test_preemption_prefers_info_or_success() -> None:
    cap = CapacityManager(max_visible=3)
    warning, success, info = _shown("warning"), _shown("success"), _shown("info")
    for notice in (warning, success, info):
        cap.admit(notice)

    assert cap.find_preemption_candidate(normalize("boom", "error")) is success


def test_preemption_falls_back_to_oldest_transient() -> None:
    cap = CapacityManager(max_visible=2)
    first, second = _shown("warning"), _shown("error")
    cap.admit(first)
    cap.admit(second)

    assert cap.find_preemption_candidate(normalize("boom", "error")) is first


def test_preemption_only_for_error_into_full_transient_pool() -> None:
    cap = CapacityManager(max_visible=2)
    cap.admit(_shown("info"))
    assert cap.find_preemption_candidate(normalize("boom", "error")) is None

    cap.admit(_shown("info"))
    assert cap.find_preemption_candidate(normalize("careful", "warning")) is None
    sticky_error = normalize("boom", {"type": "error", "persistent": True})
    assert cap.find_preemption_candidate(sticky_error) is None


def test_persistent_notices_are_never_candidates() -> None:
    cap = CapacityManager(max_visible=1, max_persistent=2)
    cap.admit(_shown("info", persistent=True))
    cap.admit(_shown("info", persistent=True))
    cap.admit(_shown("warning"))

    candidate = cap.find_preemption_candidate(normalize("boom", "error"))
    assert candidate is not None
    assert candidate.persistent is False
