"""
Tests for the board view model.
"""
from datetime import datetime, timezone, timedelta

from command_center.render import (
    build_board, build_buckets, build_timeline, format_time, TIMELINE_CONTAINER,
)
from command_center.schema import Task, ActivityEntry, TaskStatus, Priority


def _tasks():
    done = Task(id=3, text="Done", priority=Priority.LOW)
    done.set_status(TaskStatus.COMPLETED)
    return [
        Task(id=1, text="<script>alert(1)</script>", priority=Priority.HIGH),
        Task(id=2, text="Doing", status=TaskStatus.IN_PROGRESS),
        done,
    ]


def test_buckets_partition_by_status():
    buckets = build_buckets(_tasks())
    by_status = {b.status: b for b in buckets}

    assert [b.container for b in buckets] == ["in-progress-tasks", "backlog-tasks", "completed-tasks"]
    assert [r.id for r in by_status[TaskStatus.BACKLOG].rows] == [1]
    assert [r.id for r in by_status[TaskStatus.IN_PROGRESS].rows] == [2]
    assert [r.id for r in by_status[TaskStatus.COMPLETED].rows] == [3]


def test_actions_per_bucket():
    by_status = {b.status: b for b in build_buckets(_tasks())}

    def names(status):
        return [(a.name, a.label) for a in by_status[status].rows[0].actions]

    assert names(TaskStatus.BACKLOG) == [("start", "Start"), ("complete", "Done"), ("delete", "×")]
    assert names(TaskStatus.IN_PROGRESS) == [("complete", "Complete"), ("delete", "×")]
    assert names(TaskStatus.COMPLETED) == [("delete", "×")]


def test_row_text_escaped_and_priority_class():
    row = build_buckets(_tasks())[1].rows[0]
    assert row.text == "&lt;script&gt;alert(1)&lt;/script&gt;"
    assert row.css_class == "priority-high"


def test_empty_buckets_have_messages():
    buckets = build_buckets([])
    assert all(b.rows == [] for b in buckets)
    assert [b.empty_message for b in buckets] == [
        "No tasks in progress", "No tasks in backlog", "No completed tasks yet",
    ]


def test_format_time():
    stamp = datetime(2026, 10, 8, 17, 30, tzinfo=timezone.utc)
    assert format_time(stamp, timezone.utc) == "Oct 8, 05:30 PM"
    assert format_time(stamp, timezone(timedelta(hours=-5))) == "Oct 8, 12:30 PM"


def test_timeline_limit_and_escaping():
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    entries = [ActivityEntry(action=f"step {i} & more", time=base) for i in range(30)]

    rows = build_timeline(entries, limit=20, tz=timezone.utc)

    assert len(rows) == 20
    assert rows[0].action == "step 0 &amp; more"
    assert rows[0].time == "Jan 1, 12:00 AM"
    assert len(build_timeline(entries)) == 30


def test_board_uses_adapter_display_limit(remote_store, api):
    for i in range(25):
        api.create_task(f"t{i}", "low")
    remote_store.refresh()

    board = build_board(remote_store, tz=timezone.utc)

    assert len(board.timeline) == 20
    assert len(board.bucket(TaskStatus.BACKLOG).rows) == 25


def test_board_to_dict(local_store):
    local_store.add_task("Serialize", "medium")
    data = build_board(local_store).to_dict()

    backlog = [b for b in data["buckets"] if b["status"] == "backlog"][0]
    assert backlog["rows"][0]["text"] == "Serialize"
    assert backlog["rows"][0]["class"] == "priority-medium"
    assert data["timeline"]["container"] == TIMELINE_CONTAINER
    assert data["timeline"]["rows"][0]["action"] == "Added task: Serialize"
