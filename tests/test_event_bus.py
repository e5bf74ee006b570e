from src.tasks import FilterCriteria
from src.taskflow.events import EventBus, FilterChanged, TaskDeleted, TaskDeleteRequested


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe(TaskDeleted, lambda e: calls.append(("first", e.task_id)))
    bus.subscribe(TaskDeleted, lambda e: calls.append(("second", e.task_id)))

    assert bus.publish(TaskDeleted(task_id=3)) == 2
    assert calls == [("first", 3), ("second", 3)]


def test_handlers_only_receive_their_type():
    bus = EventBus()
    calls = []
    bus.subscribe(TaskDeleteRequested, calls.append)

    assert bus.publish(TaskDeleted(task_id=1)) == 0
    assert calls == []


def test_failing_handler_does_not_stop_others(caplog):
    bus = EventBus()
    calls = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(TaskDeleted, broken)
    bus.subscribe(TaskDeleted, calls.append)

    bus.publish(TaskDeleted(task_id=5))
    assert calls == [TaskDeleted(task_id=5)]
    assert "failed" in caplog.text


def test_unsubscribe():
    bus = EventBus()
    calls = []
    unsubscribe = bus.subscribe(FilterChanged, calls.append)
    unsubscribe()
    unsubscribe()

    bus.publish(
        FilterChanged(
            filters=FilterCriteria(), changed_filter="status", old_value="all", new_value="todo"
        )
    )
    assert calls == []
