import pytest

from src.taskflow.feedback import FeedbackService, LoadingManager, NotificationManager


def test_notifications_keep_newest_within_limit():
    manager = NotificationManager(max_notifications=2)
    manager.show("one")
    manager.show("two")
    manager.show("three", "success")

    assert [n.message for n in manager.notifications] == ["two", "three"]
    assert manager.latest("success").message == "three"
    assert manager.latest("error") is None


def test_notification_dismiss_and_clear():
    manager = NotificationManager()
    first = manager.error("failed")
    manager.success("saved")

    assert manager.dismiss(first) is True
    assert manager.dismiss(first) is False
    assert [n.kind for n in manager.notifications] == ["success"]

    manager.clear()
    assert manager.notifications == []


def test_notification_expiry_and_persistence():
    manager = NotificationManager(default_duration=4.0)
    manager.show("temporary")
    manager.show("sticky", duration=None)
    now = manager.notifications[0].timestamp + 5

    assert manager.expire(now) == 1
    assert [n.message for n in manager.notifications] == ["sticky"]
    assert manager.notifications[0].persistent


def test_unknown_notification_kind():
    with pytest.raises(ValueError):
        NotificationManager().show("hello", "fatal")


def test_loading_scopes():
    loading = LoadingManager()
    loading.start("form")
    loading.start("form")
    loading.start(LoadingManager.GLOBAL_SCOPE, "Loading tasks...")

    assert loading.active_scopes == ["form", "global"]
    assert loading.message == "Loading tasks..."

    loading.stop("form")
    assert loading.is_active("form")
    loading.stop("form")
    loading.stop(LoadingManager.GLOBAL_SCOPE)
    assert loading.active_scopes == []
    assert loading.message is None


def test_with_loading_stops_on_error():
    feedback = FeedbackService()

    with pytest.raises(RuntimeError):
        with feedback.with_loading("board"):
            assert feedback.loading.is_active("board")
            raise RuntimeError("boom")

    assert not feedback.loading.is_active("board")


def test_notify():
    feedback = FeedbackService()
    feedback.notify("warning", "Careful")
    assert feedback.notifications.latest().kind == "warning"
