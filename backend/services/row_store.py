import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping

from services.columns import DATA_COLUMN_SET, STATUS_COLUMN, resets_verification

ID_KEY = "_internal_id"
STATUS_KEY = "checkStatus"

# Row metadata, never writable as a cell.
RESERVED_KEYS = frozenset({ID_KEY, STATUS_KEY, STATUS_COLUMN})


class CheckStatus(str, Enum):
    UNVERIFIED = "unverified"
    VERIFIED = "verified"


def new_row_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Row:
    """
    One product-or-variant record.

    Template columns live in ``cells``; anything else an import brought
    along is kept in ``extras`` so it survives a save/load cycle.
    """

    id: str = ""
    check_status: CheckStatus = CheckStatus.UNVERIFIED
    cells: Mapping[str, Any] = field(default_factory=dict)
    extras: Mapping[str, Any] = field(default_factory=dict)

    def get(self, column: str, default: Any = None) -> Any:
        if column in self.cells:
            return self.cells[column]
        return self.extras.get(column, default)

    def with_changes(self, changes: Mapping[str, Any]) -> "Row":
        cells = dict(self.cells)
        extras = dict(self.extras)
        changes = {col: value for col, value in changes.items() if col not in RESERVED_KEYS}
        for column, value in changes.items():
            if column in DATA_COLUMN_SET:
                cells[column] = value
            else:
                extras[column] = value
        status = self.check_status
        if any(resets_verification(column) for column in changes):
            status = CheckStatus.UNVERIFIED
        return replace(self, cells=cells, extras=extras, check_status=status)

    def with_status(self, status: CheckStatus) -> "Row":
        return replace(self, check_status=status)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extras)
        out.update(self.cells)
        out[ID_KEY] = self.id
        out[STATUS_KEY] = self.check_status.value
        return out

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Row":
        cells: dict[str, Any] = {}
        extras: dict[str, Any] = {}
        for key, value in payload.items():
            if key in RESERVED_KEYS:
                continue
            if key in DATA_COLUMN_SET:
                cells[key] = value
            else:
                extras[key] = value

        raw_status = payload.get(STATUS_KEY)
        try:
            status = CheckStatus(raw_status) if raw_status else CheckStatus.UNVERIFIED
        except ValueError:
            status = CheckStatus.UNVERIFIED

        raw_id = payload.get(ID_KEY)
        return cls(
            id=str(raw_id) if raw_id not in (None, "") else "",
            check_status=status,
            cells=cells,
            extras=extras,
        )


class RowStore:
    """
    Ordered row list with copy-on-write semantics.

    Every mutation publishes a fresh tuple and bumps ``version``; rows that
    were handed out earlier are never modified.
    """

    def __init__(self, rows: Iterable[Row] | None = None):
        self._rows: tuple[Row, ...] = ()
        self.version = 0
        if rows:
            self._rows = tuple(self._stamp(list(rows), keep_status=True))

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def find(self, row_id: str) -> Row | None:
        return next((row for row in self._rows if row.id == row_id), None)

    def _commit(self, rows: Iterable[Row]) -> None:
        self._rows = tuple(rows)
        self.version += 1

    def _stamp(self, rows: list[Row], keep_status: bool = False) -> list[Row]:
        taken = {row.id for row in self._rows}
        stamped = []
        for row in rows:
            row_id = row.id
            if not row_id or row_id in taken:
                row_id = new_row_id()
            taken.add(row_id)
            status = row.check_status if keep_status else CheckStatus.UNVERIFIED
            stamped.append(replace(row, id=row_id, check_status=status))
        return stamped

    def add(self, rows: Iterable[Row]) -> list[Row]:
        new_rows = self._stamp(list(rows))
        if new_rows:
            self._commit(self._rows + tuple(new_rows))
        return new_rows

    def remove(self, ids: Iterable[str]) -> int:
        id_set = set(ids)
        kept = [row for row in self._rows if row.id not in id_set]
        removed = len(self._rows) - len(kept)
        if removed:
            self._commit(kept)
        return removed

    def set_status(self, ids: Iterable[str], status: CheckStatus) -> int:
        id_set = set(ids)
        touched = 0
        out = []
        for row in self._rows:
            if row.id in id_set:
                row = row.with_status(status)
                touched += 1
            out.append(row)
        if touched:
            self._commit(out)
        return touched

    def apply_batch(self, updates: Iterable[tuple[str, Mapping[str, Any]]]) -> int:
        update_map: dict[str, dict[str, Any]] = {}
        for row_id, changes in updates:
            update_map.setdefault(row_id, {}).update(changes)
        if not update_map:
            return 0

        touched = 0
        out = []
        for row in self._rows:
            changes = update_map.get(row.id)
            if changes is not None:
                row = row.with_changes(changes)
                touched += 1
            out.append(row)
        if touched:
            self._commit(out)
        return touched

    def replace_rows(self, rows: Iterable[Row]) -> None:
        self._commit(rows)

    def reset(self) -> None:
        self._commit(())
