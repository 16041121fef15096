from strategy_engine.models import (
    apply_migrations,
    get_connection,
    get_cost_by_kind,
    get_cost_summary,
    log_llm_call,
)


REQUIRED_TABLES = {
    "schema_migrations",
    "projects",
    "workforce",
    "llm_calls",
}


def test_db_migrations_are_idempotent(tmp_path):
    db_path = str(tmp_path / "app.db")
    apply_migrations(db_path)
    apply_migrations(db_path)

    with get_connection(db_path) as conn:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        tables = {row["name"] for row in rows}
        versions = conn.execute("SELECT COUNT(*) AS n FROM schema_migrations").fetchone()

    assert REQUIRED_TABLES.issubset(tables)
    assert versions["n"] == 1


def test_cost_summary_groups_by_report_kind(tmp_path):
    db_path = str(tmp_path / "app.db")
    apply_migrations(db_path)

    with get_connection(db_path) as conn:
        log_llm_call(conn, "b2bAnalysis", "gemini", "m", "fast", 100, 50, 0.5, 10)
        log_llm_call(conn, "b2bAnalysis", "gemini", "m", "fast", 100, 50, 0.25, 10)
        log_llm_call(conn, "loneWolf", "gemini", "m", "thorough", 10, 5, 1.0, 10)
        summary = get_cost_summary(conn)
        by_kind = get_cost_by_kind(conn)

    assert summary["calls"] == 3
    assert summary["tokens_in"] == 210
    assert [row["report_kind"] for row in by_kind] == ["loneWolf", "b2bAnalysis"]
    assert by_kind[1]["calls"] == 2
