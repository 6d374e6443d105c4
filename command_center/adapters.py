"""
Persistence adapters.

Two interchangeable backends sit behind the same two calls:

    load()                               → Snapshot, or None if unreachable (never raises)
    persist_mutation(mutation, snapshot) → PersistResult (never raises)

LocalAdapter writes the whole snapshot to one key of LocalStorage.
RemoteAdapter turns each mutation into one API request; the store refetches
everything afterwards because `refetch_after_mutation` is set.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List

from .client import ApiClient
from .schema import Task, ActivityEntry, Snapshot, TaskStatus, Priority, parse_timestamp, utc_now
from .storage import LocalStorage, StorageUnavailable

logger = logging.getLogger(__name__)

STORAGE_KEY = "fulmen-data"


class MutationKind(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class Mutation:
    """One change to the task collection, as handed to an adapter."""
    kind: MutationKind
    task: Task
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PersistResult:
    """Outcome of a persistence call: success with a value, or failure with a reason."""
    ok: bool
    reason: str = ""
    value: Any = None

    @classmethod
    def success(cls, value: Any = None) -> "PersistResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "PersistResult":
        return cls(ok=False, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


class PersistenceAdapter:
    """Base class for storage backends."""

    name = "base"
    owns_activity_log = False
    refetch_after_mutation = False
    activity_limit: Optional[int] = None
    display_limit: Optional[int] = None

    def load(self) -> Optional[Snapshot]:
        """Return the stored state, or None when the backend could not be read."""
        raise NotImplementedError

    def persist_mutation(self, mutation: Optional[Mutation], snapshot: Snapshot) -> PersistResult:
        raise NotImplementedError


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Local variant
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class LocalAdapter(PersistenceAdapter):
    """Stores the full snapshot as one JSON blob."""

    name = "local"
    owns_activity_log = True
    activity_limit = 50

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Snapshot:
        try:
            raw = self.storage.get_item(self.key)
        except StorageUnavailable as e:
            logger.info(f"Storage not available, using memory only: {e}")
            return Snapshot()
        if not raw:
            return Snapshot()
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring corrupt data under {self.key!r}: {e}")
            return Snapshot()
        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object data under {self.key!r}")
            return Snapshot()
        logs = data.get("logs")
        return Snapshot(
            tasks=_convert(_rows(data.get("tasks")), Task.from_dict, "task"),
            logs=list(logs) if isinstance(logs, list) else [],
            activities=_convert(_rows(data.get("activities")), ActivityEntry.from_dict, "activity"),
        )

    def persist_mutation(self, mutation: Optional[Mutation], snapshot: Snapshot) -> PersistResult:
        try:
            self.storage.set_item(self.key, json.dumps(snapshot.to_dict()))
        except StorageUnavailable as e:
            return PersistResult.failure(str(e))
        return PersistResult.success()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Remote variant
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def task_from_api(data: Dict[str, Any]) -> Task:
    """Convert a server task row to a Task."""
    status = TaskStatus.from_str(data.get("status", "backlog"))
    created = parse_timestamp(data.get("created_at") or data.get("created")) or utc_now()
    completed = None
    if status == TaskStatus.COMPLETED:
        completed = (
            parse_timestamp(data.get("completed_at"))
            or parse_timestamp(data.get("updated_at"))
            or created
        )
    return Task(
        id=int(data["id"]),
        text=str(data.get("text", "")),
        status=status,
        priority=Priority.from_str(data.get("priority", "medium")),
        created=created,
        completed=completed,
    )


def activity_from_api(data: Dict[str, Any]) -> ActivityEntry:
    return ActivityEntry(
        action=str(data.get("action", "")),
        time=parse_timestamp(data.get("created_at")) or utc_now(),
    )


class RemoteAdapter(PersistenceAdapter):
    """Proxies every mutation through the task API."""

    name = "remote"
    refetch_after_mutation = True
    display_limit = 20

    def __init__(self, client: ApiClient):
        self.client = client

    def load(self) -> Optional[Snapshot]:
        rows = self.client.list_tasks()
        if rows is None:
            return None
        feed = self.client.list_activity()
        if feed is None:
            return None
        tasks = _convert(rows, task_from_api, "task")
        activities = _convert(feed, activity_from_api, "activity")
        activities.sort(key=lambda a: a.time, reverse=True)
        return Snapshot(tasks=tasks, activities=activities)

    def persist_mutation(self, mutation: Optional[Mutation], snapshot: Snapshot) -> PersistResult:
        if mutation is None:
            return PersistResult.success()
        task = mutation.task
        if mutation.kind == MutationKind.CREATE:
            result = self.client.create_task(task.text, task.priority.value)
        elif mutation.kind == MutationKind.UPDATE:
            status = mutation.changes.get("status", task.status.value)
            result = self.client.update_task(task.id, status)
        elif mutation.kind == MutationKind.DELETE:
            result = self.client.delete_task(task.id)
        else:
            return PersistResult.failure(f"Unsupported mutation: {mutation.kind}")

        if result is None:
            return PersistResult.failure(f"{mutation.kind.value} task {task.id} had no result")
        if mutation.kind == MutationKind.CREATE and isinstance(result, dict) and "id" in result:
            try:
                result = task_from_api(result)
            except (TypeError, ValueError) as e:
                logger.warning(f"Created task came back malformed: {e}")
        return PersistResult.success(result)
