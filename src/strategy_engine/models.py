"""SQLite schema, migrations, and data access helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Dict, List

from .utils import json_dumps, json_loads, utc_now_iso

MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            applied_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS projects (
            user_id TEXT NOT NULL,
            id TEXT NOT NULL,
            name TEXT NOT NULL,
            timestamp INTEGER NOT NULL,
            brief_json TEXT NOT NULL DEFAULT '{}',
            results_json TEXT NOT NULL DEFAULT '{}',
            updated_at TEXT NOT NULL,
            PRIMARY KEY (user_id, id)
        );

        CREATE TABLE IF NOT EXISTS workforce (
            user_id TEXT PRIMARY KEY,
            agents_json TEXT NOT NULL DEFAULT '[]',
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS llm_calls (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            report_kind TEXT NOT NULL,
            provider TEXT NOT NULL,
            model TEXT NOT NULL,
            quality_mode TEXT NOT NULL,
            tokens_in INTEGER NOT NULL DEFAULT 0,
            tokens_out INTEGER NOT NULL DEFAULT 0,
            cost_usd REAL NOT NULL DEFAULT 0,
            latency_ms INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            meta_json TEXT NOT NULL DEFAULT '{}'
        );

        CREATE INDEX IF NOT EXISTS idx_projects_user_ts ON projects(user_id, timestamp DESC);
        CREATE INDEX IF NOT EXISTS idx_llm_calls_kind_created ON llm_calls(report_kind, created_at);
        """,
    ),
]


def get_connection(db_path: str) -> sqlite3.Connection:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def apply_migrations(db_path: str) -> None:
    with get_connection(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                version INTEGER PRIMARY KEY,
                applied_at TEXT NOT NULL
            )
            """
        )
        applied = {
            row["version"]
            for row in conn.execute("SELECT version FROM schema_migrations").fetchall()
        }
        for version, sql in MIGRATIONS:
            if version in applied:
                continue
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_migrations(version, applied_at) VALUES (?, ?)",
                (version, utc_now_iso()),
            )
        conn.commit()


def _row_to_project(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "timestamp": int(row["timestamp"]),
        "brief": json_loads(row["brief_json"], {}),
        "results": json_loads(row["results_json"], {}),
    }


def upsert_project(conn: sqlite3.Connection, user_id: str, project: Dict[str, Any]) -> Dict[str, Any]:
    conn.execute(
        """
        INSERT INTO projects(user_id, id, name, timestamp, brief_json, results_json, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id, id)
        DO UPDATE SET name = excluded.name, timestamp = excluded.timestamp,
                      brief_json = excluded.brief_json, results_json = excluded.results_json,
                      updated_at = excluded.updated_at
        """,
        (
            user_id,
            project["id"],
            project.get("name") or project["id"],
            int(project.get("timestamp") or 0),
            json_dumps(project.get("brief")),
            json_dumps(project.get("results")),
            utc_now_iso(),
        ),
    )
    conn.commit()
    return get_project(conn, user_id, project["id"]) or {}


def get_project(conn: sqlite3.Connection, user_id: str, project_id: str) -> Dict[str, Any] | None:
    row = conn.execute(
        "SELECT * FROM projects WHERE user_id = ? AND id = ?",
        (user_id, project_id),
    ).fetchone()
    if row is None:
        return None
    return _row_to_project(row)


def list_projects(conn: sqlite3.Connection, user_id: str) -> List[Dict[str, Any]]:
    rows = conn.execute(
        "SELECT * FROM projects WHERE user_id = ? ORDER BY timestamp DESC, id ASC",
        (user_id,),
    ).fetchall()
    return [_row_to_project(row) for row in rows]


def delete_project(conn: sqlite3.Connection, user_id: str, project_id: str) -> bool:
    cur = conn.execute(
        "DELETE FROM projects WHERE user_id = ? AND id = ?",
        (user_id, project_id),
    )
    conn.commit()
    return cur.rowcount > 0


def set_workforce(conn: sqlite3.Connection, user_id: str, agents: List[Dict[str, Any]]) -> None:
    conn.execute(
        """
        INSERT INTO workforce(user_id, agents_json, updated_at)
        VALUES (?, ?, ?)
        ON CONFLICT(user_id)
        DO UPDATE SET agents_json = excluded.agents_json, updated_at = excluded.updated_at
        """,
        (user_id, json_dumps(list(agents)), utc_now_iso()),
    )
    conn.commit()


def get_workforce(conn: sqlite3.Connection, user_id: str) -> List[Dict[str, Any]] | None:
    row = conn.execute("SELECT agents_json FROM workforce WHERE user_id = ?", (user_id,)).fetchone()
    if row is None:
        return None
    agents = json_loads(row["agents_json"], [])
    return agents if isinstance(agents, list) else []


def log_llm_call(
    conn: sqlite3.Connection,
    report_kind: str,
    provider: str,
    model: str,
    quality_mode: str,
    tokens_in: int,
    tokens_out: int,
    cost_usd: float,
    latency_ms: int,
    meta: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    cur = conn.execute(
        """
        INSERT INTO llm_calls(report_kind, provider, model, quality_mode, tokens_in, tokens_out,
                              cost_usd, latency_ms, created_at, meta_json)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            report_kind,
            provider,
            model,
            quality_mode,
            tokens_in,
            tokens_out,
            cost_usd,
            latency_ms,
            utc_now_iso(),
            json_dumps(meta),
        ),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM llm_calls WHERE id = ?", (cur.lastrowid,)).fetchone()
    return dict(row)


def get_cost_summary(conn: sqlite3.Connection) -> Dict[str, Any]:
    row = conn.execute(
        """
        SELECT
          COUNT(*) AS calls,
          COALESCE(SUM(tokens_in), 0) AS tokens_in,
          COALESCE(SUM(tokens_out), 0) AS tokens_out,
          COALESCE(SUM(cost_usd), 0) AS cost_usd
        FROM llm_calls
        """
    ).fetchone()
    return dict(row)


def get_cost_by_kind(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT report_kind, COUNT(*) AS calls, COALESCE(SUM(cost_usd), 0) AS cost_usd
        FROM llm_calls
        GROUP BY report_kind
        ORDER BY cost_usd DESC, report_kind ASC
        """
    ).fetchall()
    return [dict(r) for r in rows]
