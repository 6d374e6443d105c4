"""Shared test fixtures for the Command Center tests."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure dashboard_server.py at the repo root is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from command_center.adapters import LocalAdapter, RemoteAdapter
from command_center.storage import LocalStorage
from command_center.store import TaskStore


class FakeApiClient:
    """In-memory stand-in for ApiClient that behaves like the task API server."""

    def __init__(self):
        self.rows = []
        self.activity = []
        self.calls = []
        self.fail = False
        self.fail_reads = False
        self._next_id = 1

    def _log(self, action):
        stamp = datetime.now(timezone.utc).isoformat()
        self.activity.insert(0, {"created_at": stamp, "action": action, "details": ""})

    def list_tasks(self):
        self.calls.append(("GET", "/tasks"))
        if self.fail or self.fail_reads:
            return None
        return [dict(r) for r in self.rows]

    def list_activity(self):
        self.calls.append(("GET", "/activity"))
        if self.fail or self.fail_reads:
            return None
        return [dict(a) for a in self.activity]

    def create_task(self, text, priority):
        self.calls.append(("POST", "/tasks", text, priority))
        if self.fail:
            return None
        row = {
            "id": self._next_id,
            "text": text,
            "status": "backlog",
            "priority": priority,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self._next_id += 1
        self.rows.append(row)
        self._log(f"Added task: {text}")
        return dict(row)

    def update_task(self, task_id, status):
        self.calls.append(("PATCH", f"/tasks/{task_id}", status))
        if self.fail:
            return None
        for row in self.rows:
            if row["id"] == task_id:
                row["status"] = status
                if status == "completed":
                    row["completed_at"] = datetime.now(timezone.utc).isoformat()
                else:
                    row.pop("completed_at", None)
                self._log(f"Updated task: {row['text']}")
                return dict(row)
        return None

    def delete_task(self, task_id):
        self.calls.append(("DELETE", f"/tasks/{task_id}"))
        if self.fail:
            return None
        self.rows = [r for r in self.rows if r["id"] != task_id]
        return True

    def mutating_calls(self):
        return [c for c in self.calls if c[0] != "GET"]


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "storage.db"))


@pytest.fixture
def local_store(storage):
    return TaskStore(LocalAdapter(storage))


@pytest.fixture
def api():
    return FakeApiClient()


@pytest.fixture
def remote_store(api):
    return TaskStore(RemoteAdapter(api))
