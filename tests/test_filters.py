from datetime import date

from src.tasks import FilterCriteria, Task, TaskPriority, TaskStatus, filter_tasks, matches

TODAY = date(2026, 10, 19)


def make_tasks():
    return [
        Task(
            id=1,
            title="Design landing page",
            description="Wireframes for marketing",
            status=TaskStatus.TODO,
            priority=TaskPriority.HIGH,
            assignee="Alice Johnson",
            due_date="2026-10-18",
        ),
        Task(
            id=2,
            title="Set up CI",
            description="Run tests on push",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.MEDIUM,
            assignee="Bob Smith",
            due_date="2026-10-19",
        ),
        Task(
            id=3,
            title="Write API docs",
            status=TaskStatus.DONE,
            priority=TaskPriority.LOW,
            assignee=None,
            due_date=None,
        ),
    ]


def test_default_criteria_match_everything():
    tasks = make_tasks()
    assert filter_tasks(tasks, FilterCriteria(), TODAY) == tasks


def test_status_and_priority_filters():
    tasks = make_tasks()
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(status="in-progress"))] == [2]
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(priority="high"))] == [1]
    assert filter_tasks(tasks, FilterCriteria(status="done", priority="high")) == []


def test_search_is_case_insensitive_across_fields():
    tasks = make_tasks()
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(search="WIREFRAMES"))] == [1]
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(search="bob"))] == [2]
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(search="api"))] == [3]


def test_search_does_not_match_across_field_boundaries():
    task = Task(id=1, title="Alpha", description="beta")
    assert not matches(task, FilterCriteria(search="alphabeta"))
    assert not matches(task, FilterCriteria(search="alpha beta"))


def test_due_filter_uses_buckets():
    tasks = make_tasks()
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(due="overdue"), TODAY)] == [1]
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(due="today"), TODAY)] == [2]
    assert [t.id for t in filter_tasks(tasks, FilterCriteria(due="none"), TODAY)] == [3]


def test_filter_result_is_subset_preserving_order():
    tasks = make_tasks()
    result = filter_tasks(tasks, FilterCriteria(search="e"), TODAY)
    assert [t.id for t in result] == [t.id for t in tasks if t in result]
    for task in tasks:
        assert (task in result) == matches(task, FilterCriteria(search="e"), TODAY)


def test_concrete_status_excludes_other_statuses():
    tasks = make_tasks()
    criteria = FilterCriteria(status="todo", priority="all", search="")
    assert [t.id for t in filter_tasks(tasks, criteria, TODAY)] == [1]

    criteria = FilterCriteria(status="done", search="design")
    assert not any(matches(t, criteria, TODAY) for t in tasks if t.status.value != "done")
