"""
Hybrid project/workforce persistence.

Projects and the agent workforce live in an optional remote document store
(one namespace per signed-in user) with the local SQLite database as the
offline fallback. Remote failures are logged and never raised to callers.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Protocol

from .logger import get_logger
from .models import (
    delete_project as db_delete_project,
    get_workforce,
    list_projects as db_list_projects,
    set_workforce,
    upsert_project,
)

logger = get_logger(__name__)


class DocumentStore(Protocol):
    """Remote per-user document store (e.g. a cloud database)."""

    def put_project(self, user_id: str, project: Dict[str, Any]) -> None:
        ...

    def list_projects(self, user_id: str) -> List[Dict[str, Any]]:
        ...

    def delete_project(self, user_id: str, project_id: str) -> None:
        ...

    def put_workforce(self, user_id: str, agents: List[Dict[str, Any]]) -> None:
        ...

    def get_workforce(self, user_id: str) -> List[Dict[str, Any]] | None:
        ...


class HybridStore:
    def __init__(
        self,
        conn: sqlite3.Connection,
        remote: DocumentStore | None = None,
        guest_user: str = "guest",
    ) -> None:
        self.conn = conn
        self.remote = remote
        self.guest_user = guest_user

    def _local_user(self, user_id: str | None) -> str:
        return user_id or self.guest_user

    def _use_remote(self, user_id: str | None) -> bool:
        return self.remote is not None and bool(user_id)

    def _remote_failed(self, operation: str, user_id: str | None, exc: Exception) -> None:
        logger.warning(
            "storage.remote.failed",
            extra={
                "event": "storage.remote.failed",
                "operation": operation,
                "user_id": user_id,
                "error": repr(exc),
            },
        )

    def save_project(self, user_id: str | None, project: Dict[str, Any]) -> str:
        """Returns where the project landed: "remote" or "local"."""
        if self._use_remote(user_id):
            try:
                self.remote.put_project(user_id, project)
                return "remote"
            except Exception as exc:
                self._remote_failed("save_project", user_id, exc)

        upsert_project(self.conn, self._local_user(user_id), project)
        logger.info(
            "storage.project.saved_local",
            extra={"event": "storage.project.saved_local", "project_id": project["id"]},
        )
        return "local"

    def list_projects(self, user_id: str | None) -> List[Dict[str, Any]]:
        remote_projects: List[Dict[str, Any]] = []
        if self._use_remote(user_id):
            try:
                remote_projects = list(self.remote.list_projects(user_id) or [])
            except Exception as exc:
                self._remote_failed("list_projects", user_id, exc)

        local_projects = db_list_projects(self.conn, self._local_user(user_id))

        # Later entries win, so local copies override remote ones with the same id.
        merged: Dict[str, Dict[str, Any]] = {}
        for project in remote_projects + local_projects:
            merged[project["id"]] = project
        return sorted(merged.values(), key=lambda p: int(p.get("timestamp") or 0), reverse=True)

    def delete_project(self, user_id: str | None, project_id: str) -> bool:
        removed = False
        if self._use_remote(user_id):
            try:
                self.remote.delete_project(user_id, project_id)
                removed = True
            except Exception as exc:
                self._remote_failed("delete_project", user_id, exc)
        return db_delete_project(self.conn, self._local_user(user_id), project_id) or removed

    def save_workforce(self, user_id: str | None, agents: List[Dict[str, Any]]) -> None:
        if self._use_remote(user_id):
            try:
                self.remote.put_workforce(user_id, agents)
            except Exception as exc:
                self._remote_failed("save_workforce", user_id, exc)
        set_workforce(self.conn, self._local_user(user_id), agents)

    def load_workforce(self, user_id: str | None) -> List[Dict[str, Any]]:
        if self._use_remote(user_id):
            try:
                agents = self.remote.get_workforce(user_id)
                if agents is not None:
                    return list(agents)
            except Exception as exc:
                self._remote_failed("load_workforce", user_id, exc)
        return get_workforce(self.conn, self._local_user(user_id)) or []
