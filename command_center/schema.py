"""
Command Center task schema.

Task lifecycle:
  Backlog → In progress → Completed

Transitions are not enforced: any status may be set at any time, but a task
carries a `completed` timestamp if and only if its status is COMPLETED.
"""
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any


class TaskStatus(Enum):
    """Kanban buckets a task can sit in."""
    BACKLOG = "backlog"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_str(cls, value: str) -> "TaskStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.BACKLOG


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_str(cls, value: str) -> "Priority":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM


SEED_TASKS = [
    ("Build Command Center Dashboard", Priority.HIGH),
    ("Clone FulmenAgent repository", Priority.HIGH),
    ("Research AI agent monetization strategies", Priority.HIGH),
    ("Set up FulmenAgent Hub server", Priority.MEDIUM),
    ("Create business model canvas", Priority.MEDIUM),
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: datetime) -> str:
    return value.isoformat()


@dataclass
class Task:
    """One entry on the board."""

    id: int
    text: str
    status: TaskStatus = TaskStatus.BACKLOG
    priority: Priority = Priority.MEDIUM
    created: datetime = field(default_factory=utc_now)
    completed: Optional[datetime] = None

    def set_status(self, status: TaskStatus, when: Optional[datetime] = None) -> None:
        """Move to `status`, keeping `completed` in step with it."""
        self.status = status
        if status == TaskStatus.COMPLETED:
            self.completed = when or utc_now()
        else:
            self.completed = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "text": self.text,
            "status": self.status.value,
            "priority": self.priority.value,
            "created": format_timestamp(self.created),
        }
        if self.completed is not None:
            data["completed"] = format_timestamp(self.completed)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        status = TaskStatus.from_str(data.get("status", "backlog"))
        created = parse_timestamp(data.get("created")) or utc_now()
        completed = parse_timestamp(data.get("completed"))
        if status == TaskStatus.COMPLETED and completed is None:
            completed = created
        elif status != TaskStatus.COMPLETED:
            completed = None
        return cls(
            id=int(data["id"]),
            text=str(data.get("text", "")),
            status=status,
            priority=Priority.from_str(data.get("priority", "medium")),
            created=created,
            completed=completed,
        )


@dataclass
class ActivityEntry:
    """A timestamped, human-readable record of one mutation."""

    action: str
    time: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {"time": format_timestamp(self.time), "action": self.action}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityEntry":
        return cls(
            action=str(data.get("action", "")),
            time=parse_timestamp(data.get("time")) or utc_now(),
        )


@dataclass
class Snapshot:
    """Everything the store holds: the unit of load and local persistence."""

    tasks: List[Task] = field(default_factory=list)
    logs: List[Any] = field(default_factory=list)
    activities: List[ActivityEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "logs": list(self.logs),
            "activities": [a.to_dict() for a in self.activities],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        return cls(
            tasks=[Task.from_dict(t) for t in data.get("tasks") or []],
            logs=list(data.get("logs") or []),
            activities=[ActivityEntry.from_dict(a) for a in data.get("activities") or []],
        )
