import pytest

from services.row_store import CheckStatus
from services.snapshot_repository import load_rows, save_rows
from services.workspace import Workspace, WorkspaceBusyError, drop_workspaces, get_workspace


def test_remote_call_rejects_second_request(make_row):
    workspace = Workspace("k", [make_row(商品名称="A")])
    workspace.debug_log = "old"

    with workspace.remote_call():
        assert workspace.busy
        assert workspace.debug_log is None
        with pytest.raises(WorkspaceBusyError):
            with workspace.remote_call():
                pass

    assert workspace.busy is False


def test_remote_call_releases_after_failure():
    workspace = Workspace("k")

    with pytest.raises(RuntimeError):
        with workspace.remote_call():
            raise RuntimeError("boom")

    assert workspace.busy is False


def test_persist_skips_unchanged_store(db_session, make_row):
    workspace = Workspace("k", [make_row(商品名称="A")])

    assert workspace.persist(db_session) is False
    assert load_rows(db_session, "k") is None

    workspace.store.add([make_row(商品名称="B")])
    assert workspace.persist(db_session) is True
    assert [r.get("商品名称") for r in load_rows(db_session, "k")] == ["A", "B"]
    assert workspace.persist(db_session) is False


def test_visible_rows_drops_filters_on_empty_table():
    workspace = Workspace("k")
    workspace.view = workspace.view.toggle_unique("商品名称")

    assert workspace.visible_rows() == []
    assert workspace.view.is_empty


def test_reset_clears_everything(db_session, make_row):
    workspace = Workspace("k", [make_row(商品名称="A")])
    workspace.store.add([make_row(商品名称="B")])
    workspace.persist(db_session)
    workspace.debug_log = "raw"

    workspace.reset(db_session)

    assert workspace.rows == ()
    assert workspace.debug_log is None
    assert load_rows(db_session, "k") == []
    assert workspace.persist(db_session) is False


def test_get_workspace_loads_snapshot_once(db_session, make_row, monkeypatch):
    monkeypatch.setenv("SNAPSHOT_KEY", "shop-a")
    drop_workspaces()
    save_rows(db_session, "shop-a", [make_row("r1", status=CheckStatus.VERIFIED, 商品名称="A")])

    try:
        workspace = get_workspace(db_session)
        assert [r.id for r in workspace.rows] == ["r1"]
        assert workspace.rows[0].check_status is CheckStatus.VERIFIED

        save_rows(db_session, "shop-a", [])
        assert get_workspace(db_session) is workspace
        assert len(workspace.rows) == 1
    finally:
        drop_workspaces()
