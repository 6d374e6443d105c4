"""
Task store: the in-memory authority for tasks and the activity log.

Every public mutation runs the same sequence:
  apply change → record activity → persist → (refetch) → notify subscribers

"Not found" and "persistence failed" are both absorbed. Persistence failures
go through the store's failure policy, which by default logs and discards.
"""
import copy
import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Union

from .adapters import PersistenceAdapter, Mutation, MutationKind, PersistResult
from .schema import (
    Task, ActivityEntry, Snapshot, TaskStatus, Priority, SEED_TASKS, utc_now,
)

logger = logging.getLogger(__name__)

INIT_ACTIVITY = "Dashboard created and initialized"


class PersistenceError(Exception):
    """Raised by the strict failure policy when a backend reports failure."""
    pass


def log_failure(result: PersistResult, mutation: Optional[Mutation]) -> None:
    """Default failure policy: log and carry on."""
    what = mutation.kind.value if mutation else "save"
    logger.warning(f"Persistence failed ({what}): {result.reason}")


def raise_on_failure(result: PersistResult, mutation: Optional[Mutation]) -> None:
    """Strict failure policy: surface the failure to the caller."""
    raise PersistenceError(result.reason)


FailurePolicy = Callable[[PersistResult, Optional[Mutation]], None]


class TaskStore:
    """Owns the task collection and activity log for one session."""

    def __init__(
        self,
        adapter: PersistenceAdapter,
        on_failure: FailurePolicy = log_failure,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.adapter = adapter
        self.on_failure = on_failure
        self.clock = clock
        self.tasks: List[Task] = []
        self.logs: list = []
        self.activities: List[ActivityEntry] = []
        self.last_result: Optional[PersistResult] = None
        self.subscribers: List[Callable] = []
        self._lock = threading.RLock()

    # ──────────────────────────────────────────
    # Change notification
    # ──────────────────────────────────────────

    def subscribe(self, callback: Callable[["TaskStore"], None]) -> None:
        """Register a callback run after every state change."""
        self.subscribers.append(callback)

    def _emit(self) -> None:
        for callback in self.subscribers:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in change subscriber {callback!r}: {e}")

    # ──────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────

    def get_task(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def tasks_by_status(self, status: TaskStatus) -> List[Task]:
        return [t for t in self.tasks if t.status == status]

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tasks=list(self.tasks),
            logs=list(self.logs),
            activities=list(self.activities),
        )

    # ──────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────

    def _next_id(self, now: datetime) -> int:
        """Millisecond clock id, bumped past any id already in use."""
        candidate = int(now.timestamp() * 1000)
        highest = max((t.id for t in self.tasks), default=0)
        return max(candidate, highest + 1)

    def _record(self, action: str, when: Optional[datetime] = None) -> None:
        self.activities.insert(0, ActivityEntry(action=action, time=when or self.clock()))
        limit = self.adapter.activity_limit
        if limit is not None and len(self.activities) > limit:
            del self.activities[limit:]

    def _apply(self, snapshot: Snapshot) -> None:
        self.tasks = list(snapshot.tasks)
        self.logs = list(snapshot.logs)
        self.activities = list(snapshot.activities)
        limit = self.adapter.activity_limit
        if limit is not None:
            del self.activities[limit:]

    def _persist(self, mutation: Optional[Mutation]) -> PersistResult:
        result = self.adapter.persist_mutation(mutation, self.snapshot())
        self.last_result = result
        if not result.ok:
            self.on_failure(result, mutation)
        return result

    def _checkpoint(self) -> Snapshot:
        return Snapshot(
            tasks=copy.deepcopy(self.tasks),
            logs=list(self.logs),
            activities=list(self.activities),
        )

    def _refetch(self) -> bool:
        """Replace state from the backend. Keeps the current state if it is unreachable."""
        snapshot = self.adapter.load()
        if snapshot is None:
            logger.warning(f"Could not reload from {self.adapter.name} backend, keeping current state")
            return False
        self._apply(snapshot)
        return True

    def _settle(self, result: PersistResult, before: Snapshot) -> None:
        """Refetch when the backend is authoritative, then notify.

        If the mutation failed and the refetch failed too, the change is rolled
        back so that a failed call leaves the board as it was.
        """
        if self.adapter.refetch_after_mutation:
            if not self._refetch() and not result.ok:
                self._apply(before)
        self._emit()

    # ──────────────────────────────────────────
    # Public operations
    # ──────────────────────────────────────────

    def refresh(self) -> None:
        """Replace in-memory state with whatever the backend holds."""
        with self._lock:
            self._refetch()
            self._emit()

    def load(self) -> None:
        """Populate from the backend, seeding defaults when the board is empty."""
        with self._lock:
            if not self._refetch():
                logger.warning("Backend unreachable, not seeding defaults")
                self._emit()
                return
            if self.adapter.owns_activity_log and not self.activities:
                self._record(INIT_ACTIVITY)
                self._persist(None)
            if not self.tasks:
                logger.info("No tasks found, seeding defaults")
                for text, priority in SEED_TASKS:
                    self.add_task(text, priority)
            self._emit()

    def add_task(self, text: str, priority: Union[str, Priority] = Priority.MEDIUM) -> Optional[Task]:
        """Create a backlog task. Returns the task, or None if the backend gave none back."""
        with self._lock:
            if not isinstance(priority, Priority):
                priority = Priority.from_str(priority)
            before = self._checkpoint()
            now = self.clock()
            task = Task(id=self._next_id(now), text=text, priority=priority, created=now)
            self.tasks.append(task)
            self._record(f"Added task: {text}", now)
            result = self._persist(Mutation(MutationKind.CREATE, task))
            self._settle(result, before)
            if not self.adapter.refetch_after_mutation:
                return task
            return result.value if isinstance(result.value, Task) else None

    def _set_status(self, task_id: int, status: TaskStatus, verb: str) -> None:
        with self._lock:
            task = self.get_task(task_id)
            if task is None:
                return
            before = self._checkpoint()
            now = self.clock()
            task.set_status(status, now)
            self._record(f"{verb} task: {task.text}", now)
            result = self._persist(Mutation(MutationKind.UPDATE, task, {"status": status.value}))
            self._settle(result, before)

    def start_task(self, task_id: int) -> None:
        self._set_status(task_id, TaskStatus.IN_PROGRESS, "Started")

    def complete_task(self, task_id: int) -> None:
        self._set_status(task_id, TaskStatus.COMPLETED, "Completed")

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            task = self.get_task(task_id)
            if task is None:
                return
            before = self._checkpoint()
            self.tasks = [t for t in self.tasks if t.id != task_id]
            self._record(f"Deleted task: {task.text}")
            result = self._persist(Mutation(MutationKind.DELETE, task))
            self._settle(result, before)
