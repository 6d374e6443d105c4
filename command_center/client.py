# Command Center: remote API client
#
# Thin HTTP client for the task API. Every call returns None on failure
# (network error or non-2xx status); nothing is raised to the caller.

import logging
import requests
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)

LOCAL_API_BASE = "http://localhost:3000/api"
REMOTE_API_BASE = "https://hub.fulmenagent.com/api"

LOCAL_HOSTNAMES = ("localhost", "127.0.0.1", "::1", "")


def select_base_url(hostname: str,
                    local_base: str = LOCAL_API_BASE,
                    remote_base: str = REMOTE_API_BASE) -> str:
    """Pick the API base from where the dashboard is being served."""
    if (hostname or "").strip().lower() in LOCAL_HOSTNAMES:
        return local_base
    return remote_base


class ApiClient:
    """HTTP client for the Command Center task API."""

    def __init__(self, base_url: str = LOCAL_API_BASE, api_key: str = "",
                 timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Optional[Any]:
        """Issue one request. Returns the decoded body, True for an empty one, None on failure."""
        url = f"{self.base_url}{path}"
        try:
            r = requests.request(
                method,
                url,
                headers={"X-API-Key": self.api_key},
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            return None
        if not r.ok:
            logger.warning(f"{method} {url} returned {r.status_code}")
            return None
        if not r.content:
            return True
        try:
            return r.json()
        except ValueError:
            return True

    def list_tasks(self) -> Optional[List[Dict[str, Any]]]:
        result = self._request("GET", "/tasks")
        return result if isinstance(result, list) else None

    def create_task(self, text: str, priority: str) -> Optional[Any]:
        return self._request("POST", "/tasks", json={"text": text, "priority": priority})

    def update_task(self, task_id: int, status: str) -> Optional[Any]:
        return self._request("PATCH", f"/tasks/{task_id}", json={"status": status})

    def delete_task(self, task_id: int) -> Optional[Any]:
        return self._request("DELETE", f"/tasks/{task_id}")

    def list_activity(self) -> Optional[List[Dict[str, Any]]]:
        result = self._request("GET", "/activity")
        return result if isinstance(result, list) else None
