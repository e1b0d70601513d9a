import logging
import threading
from contextlib import contextmanager
from typing import Iterable

from sqlalchemy.orm import Session

from services.row_store import Row, RowStore
from services.snapshot_repository import clear_rows, load_rows, save_rows, snapshot_key
from services.view_filters import FilterState

logger = logging.getLogger(__name__)

_workspace_lock = threading.Lock()
_workspaces: dict[str, "Workspace"] = {}


class WorkspaceBusyError(RuntimeError):
    pass


class Workspace:
    """The operator's table: one row store plus the current filter state."""

    def __init__(self, key: str, rows: Iterable[Row] | None = None):
        self.key = key
        self.store = RowStore(rows)
        self.view = FilterState()
        self.busy = False
        self.debug_log: str | None = None
        self._saved_version = self.store.version

    @property
    def rows(self) -> tuple[Row, ...]:
        return self.store.rows

    def persist(self, db: Session) -> bool:
        if self.store.version == self._saved_version:
            return False
        save_rows(db, self.key, self.store.rows)
        self._saved_version = self.store.version
        return True

    def visible_rows(self) -> list[Row]:
        if not self.store.rows and not self.view.is_empty:
            self.view = self.view.cleared()
        return self.view.visible(self.store.rows)

    def import_rows(self, rows: Iterable[Row]) -> list[Row]:
        added = self.store.add(rows)
        self.view = self.view.cleared()
        return added

    def reset(self, db: Session) -> None:
        self.store.reset()
        self.view = FilterState()
        self.debug_log = None
        clear_rows(db, self.key)
        self._saved_version = self.store.version

    @contextmanager
    def remote_call(self):
        if self.busy:
            raise WorkspaceBusyError("Another AI request is still running")
        self.busy = True
        self.debug_log = None
        try:
            yield self
        finally:
            self.busy = False


def get_workspace(db: Session) -> Workspace:
    key = snapshot_key()
    with _workspace_lock:
        workspace = _workspaces.get(key)
        if workspace is None:
            rows = load_rows(db, key) or []
            workspace = Workspace(key, rows)
            _workspaces[key] = workspace
            logger.info("Loaded workspace %s with %s rows", key, len(rows))
        return workspace


def drop_workspaces() -> None:
    with _workspace_lock:
        _workspaces.clear()
