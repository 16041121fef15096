from strategy_engine.models import apply_migrations, get_connection, list_projects
from strategy_engine.storage import HybridStore


class MemoryRemote:
    def __init__(self):
        self.projects = {}
        self.workforce = {}

    def put_project(self, user_id, project):
        self.projects.setdefault(user_id, {})[project["id"]] = project

    def list_projects(self, user_id):
        return list(self.projects.get(user_id, {}).values())

    def delete_project(self, user_id, project_id):
        self.projects.get(user_id, {}).pop(project_id, None)

    def put_workforce(self, user_id, agents):
        self.workforce[user_id] = list(agents)

    def get_workforce(self, user_id):
        return self.workforce.get(user_id)


class OfflineRemote:
    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise ConnectionError("offline")

        return _fail


def _project(pid, ts, name=None):
    return {"id": pid, "name": name or pid, "timestamp": ts, "brief": {"marketTopic": "x"}, "results": {}}


def _conn(tmp_path):
    db_path = str(tmp_path / "app.db")
    apply_migrations(db_path)
    return get_connection(db_path)


def test_guest_projects_stay_local(tmp_path):
    remote = MemoryRemote()
    with _conn(tmp_path) as conn:
        store = HybridStore(conn, remote=remote)
        assert store.save_project(None, _project("p1", 100)) == "local"
        assert [p["id"] for p in store.list_projects("")] == ["p1"]
        assert [p["id"] for p in list_projects(conn, "guest")] == ["p1"]
    assert remote.projects == {}


def test_signed_in_save_goes_remote_first(tmp_path):
    remote = MemoryRemote()
    with _conn(tmp_path) as conn:
        store = HybridStore(conn, remote=remote)
        assert store.save_project("u1", _project("p1", 100)) == "remote"
        assert list_projects(conn, "u1") == []
        assert [p["id"] for p in store.list_projects("u1")] == ["p1"]


def test_remote_failure_falls_back_to_local(tmp_path, caplog):
    with _conn(tmp_path) as conn:
        store = HybridStore(conn, remote=OfflineRemote())
        assert store.save_project("u1", _project("p1", 100)) == "local"
        assert [p["id"] for p in store.list_projects("u1")] == ["p1"]

    assert any(getattr(r, "operation", None) == "save_project" for r in caplog.records)


def test_list_merges_prefers_local_and_sorts_newest_first(tmp_path):
    remote = MemoryRemote()
    remote.put_project("u1", _project("p1", 100, name="remote copy"))
    remote.put_project("u1", _project("p2", 300))

    with _conn(tmp_path) as conn:
        HybridStore(conn).save_project("u1", _project("p1", 200, name="local copy"))
        merged = HybridStore(conn, remote=remote).list_projects("u1")

    assert [p["id"] for p in merged] == ["p2", "p1"]
    assert merged[1]["name"] == "local copy"


def test_delete_removes_both_copies(tmp_path):
    remote = MemoryRemote()
    remote.put_project("u1", _project("p1", 100))
    with _conn(tmp_path) as conn:
        HybridStore(conn).save_project("u1", _project("p1", 100))
        store = HybridStore(conn, remote=remote)
        assert store.delete_project("u1", "p1") is True
        assert store.list_projects("u1") == []


def test_delete_with_offline_remote_reports_local_result(tmp_path):
    with _conn(tmp_path) as conn:
        store = HybridStore(conn, remote=OfflineRemote())
        assert store.delete_project("u1", "missing") is False


def test_workforce_saved_to_both_and_loaded_from_remote(tmp_path):
    remote = MemoryRemote()
    agents = [{"id": "a1", "agentType": "Scout", "tasks": []}]
    with _conn(tmp_path) as conn:
        store = HybridStore(conn, remote=remote)
        store.save_workforce("u1", agents)
        assert remote.workforce["u1"] == agents
        assert HybridStore(conn).load_workforce("u1") == agents

        remote.workforce["u1"] = [{"id": "a2"}]
        assert store.load_workforce("u1") == [{"id": "a2"}]


def test_workforce_falls_back_to_local_then_empty(tmp_path):
    with _conn(tmp_path) as conn:
        offline = HybridStore(conn, remote=OfflineRemote())
        assert offline.load_workforce("u1") == []
        offline.save_workforce("u1", [{"id": "a1"}])
        assert offline.load_workforce("u1") == [{"id": "a1"}]
        assert HybridStore(conn, remote=MemoryRemote()).load_workforce("u1") == [{"id": "a1"}]
