from datetime import date

from src.tasks import Task, TaskPriority, TaskStatus, aggregate, generate_insights
from src.tasks.statistics import due_bucket, parse_due_date, summarize

TODAY = date(2026, 10, 19)


def task(task_id, status="todo", priority="medium", due_date=None):
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        status=TaskStatus(status),
        priority=TaskPriority(priority),
        due_date=due_date,
    )


def test_empty_snapshot():
    snapshot = aggregate([], TODAY)
    assert snapshot.total == 0
    assert snapshot.completion_rate == 0
    assert snapshot.by_status == {"todo": 0, "in-progress": 0, "done": 0}
    assert snapshot.by_due_date == {"overdue": 0, "today": 0, "week": 0, "none": 0}
    assert generate_insights(snapshot) == ["Add some tasks to see productivity insights."]


def test_counts_sum_to_total():
    tasks = [
        task(1, "todo", "high", "2026-10-10"),
        task(2, "in-progress", "medium", "2026-10-19"),
        task(3, "done", "low"),
        task(4, "done", "high", "2026-10-25"),
    ]
    snapshot = aggregate(tasks, TODAY)

    assert snapshot.total == 4
    assert sum(snapshot.by_status.values()) == 4
    assert sum(snapshot.by_priority.values()) == 4
    assert snapshot.by_status == {"todo": 1, "in-progress": 1, "done": 2}
    assert snapshot.by_due_date == {"overdue": 1, "today": 1, "week": 1, "none": 1}
    assert snapshot.completion_rate == 50


def test_completion_rate_rounds_half_up():
    # 1 of 8 done = 12.5%
    tasks = [task(1, "done")] + [task(i) for i in range(2, 9)]
    assert aggregate(tasks, TODAY).completion_rate == 13

    # 2 of 3 done = 66.67%
    tasks = [task(1, "done"), task(2, "done"), task(3)]
    assert aggregate(tasks, TODAY).completion_rate == 67


def test_due_bucket_boundaries():
    assert due_bucket(None, TODAY) == "none"
    assert due_bucket("", TODAY) == "none"
    assert due_bucket("2026-10-18", TODAY) == "overdue"
    assert due_bucket("2026-10-19", TODAY) == "today"
    assert due_bucket("2026-10-26", TODAY) == "week"
    assert due_bucket("2026-10-27", TODAY) is None
    assert due_bucket("not-a-date", TODAY) is None


def test_far_future_and_invalid_dates_are_not_bucketed():
    tasks = [task(1, due_date="2027-01-01"), task(2, due_date="soon")]
    snapshot = aggregate(tasks, TODAY)
    assert snapshot.total == 2
    assert sum(snapshot.by_due_date.values()) == 0


def test_parse_due_date_accepts_datetimes():
    assert parse_due_date("2026-10-19T12:00:00Z") == date(2026, 10, 19)
    assert parse_due_date("2026-10-19") == date(2026, 10, 19)
    assert parse_due_date("tomorrow") is None


def test_insights():
    tasks = [
        task(1, "done", "high"),
        task(2, "done", "high"),
        task(3, "done", "high"),
        task(4, "done", "low", "2026-10-01"),
        task(5, "todo", "high", "2026-10-19"),
    ]
    insights = generate_insights(aggregate(tasks, TODAY))
    assert insights == [
        "Great job! You're completing most of your tasks.",
        "Many high-priority tasks. Focus on the most critical ones first.",
        "1 task(s) overdue. Consider addressing them soon.",
        "1 task(s) due today. Stay focused!",
    ]


def test_summarize_and_to_dict():
    snapshot = aggregate([task(1, "done"), task(2, "in-progress")], TODAY)
    assert summarize(snapshot) == {
        "total": 2,
        "completed": 1,
        "inProgress": 1,
        "pending": 0,
        "completionRate": 50,
        "overdue": 0,
    }
    assert set(snapshot.to_dict()) == {
        "total",
        "byStatus",
        "byPriority",
        "byDueDate",
        "completionRate",
    }


def test_aggregate_is_idempotent():
    tasks = [task(1, "done", "high", "2026-10-19"), task(2, "todo", "low", "2026-10-01")]
    assert aggregate(tasks, TODAY) == aggregate(tasks, TODAY)


def test_three_task_scenario():
    tasks = [task(1, "done", "high"), task(2, "todo", "low"), task(3, "in-progress", "medium")]
    snapshot = aggregate(tasks, TODAY)
    assert snapshot.total == 3
    assert snapshot.by_status == {"todo": 1, "in-progress": 1, "done": 1}
    assert snapshot.completion_rate == 33
