"""
Board rendering: a pure projection from store state to a view model.

Nothing here touches the store's data; the page template and the JSON API
both consume BoardView. Every re-render rebuilds the whole view.
"""
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import List, Optional, Dict, Any, Iterable

from markupsafe import escape

from .schema import Task, ActivityEntry, TaskStatus

TIMELINE_CONTAINER = "activity-timeline"
TIMELINE_EMPTY = "No activity recorded yet."

# Page order: in progress first, then backlog, then completed
BUCKETS = [
    (TaskStatus.IN_PROGRESS, "in-progress-tasks", "In Progress", "No tasks in progress"),
    (TaskStatus.BACKLOG, "backlog-tasks", "Backlog", "No tasks in backlog"),
    (TaskStatus.COMPLETED, "completed-tasks", "Completed", "No completed tasks yet"),
]


@dataclass
class Action:
    """A button on a task row."""
    name: str    # start | complete | delete
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "label": self.label}


START = Action("start", "Start")
DONE = Action("complete", "Done")
COMPLETE = Action("complete", "Complete")
DELETE = Action("delete", "×")

ACTIONS_BY_STATUS = {
    TaskStatus.BACKLOG: [START, DONE, DELETE],
    TaskStatus.IN_PROGRESS: [COMPLETE, DELETE],
    TaskStatus.COMPLETED: [DELETE],
}


@dataclass
class TaskRow:
    id: int
    text: str          # HTML-escaped
    css_class: str
    actions: List[Action]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "class": self.css_class,
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass
class Bucket:
    status: TaskStatus
    container: str
    title: str
    empty_message: str
    rows: List[TaskRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "container": self.container,
            "title": self.title,
            "empty_message": self.empty_message,
            "rows": [r.to_dict() for r in self.rows],
        }


@dataclass
class TimelineRow:
    time: str
    action: str        # HTML-escaped

    def to_dict(self) -> Dict[str, Any]:
        return {"time": self.time, "action": self.action}


@dataclass
class BoardView:
    buckets: List[Bucket]
    timeline: List[TimelineRow]
    timeline_container: str = TIMELINE_CONTAINER
    timeline_empty: str = TIMELINE_EMPTY

    def bucket(self, status: TaskStatus) -> Bucket:
        for b in self.buckets:
            if b.status == status:
                return b
        raise KeyError(status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buckets": [b.to_dict() for b in self.buckets],
            "timeline": {
                "container": self.timeline_container,
                "empty_message": self.timeline_empty,
                "rows": [r.to_dict() for r in self.timeline],
            },
        }


def format_time(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Short timeline stamp, e.g. 'Oct 8, 05:30 PM'."""
    local = value.astimezone(tz)
    return f"{local:%b} {local.day}, {local:%I:%M %p}"


def task_row(task: Task) -> TaskRow:
    return TaskRow(
        id=task.id,
        text=str(escape(task.text)),
        css_class=f"priority-{task.priority.value}",
        actions=list(ACTIONS_BY_STATUS[task.status]),
    )


def build_buckets(tasks: Iterable[Task]) -> List[Bucket]:
    tasks = list(tasks)
    buckets = []
    for status, container, title, empty in BUCKETS:
        rows = [task_row(t) for t in tasks if t.status == status]
        buckets.append(Bucket(status, container, title, empty, rows))
    return buckets


def build_timeline(activities: Iterable[ActivityEntry], limit: Optional[int] = None,
                   tz: Optional[tzinfo] = None) -> List[TimelineRow]:
    entries = list(activities)
    if limit is not None:
        entries = entries[:limit]
    return [TimelineRow(time=format_time(a.time, tz), action=str(escape(a.action))) for a in entries]


def build_board(store, tz: Optional[tzinfo] = None) -> BoardView:
    """Project a TaskStore into a BoardView."""
    return BoardView(
        buckets=build_buckets(store.tasks),
        timeline=build_timeline(store.activities, store.adapter.display_limit, tz),
    )
