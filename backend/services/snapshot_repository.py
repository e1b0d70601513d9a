import os
from typing import Sequence

from sqlalchemy.orm import Session

from models.table_snapshot import TableSnapshot
from services.row_store import Row

DEFAULT_SNAPSHOT_KEY = "sku_gen_db"


def snapshot_key() -> str:
    return (os.getenv("SNAPSHOT_KEY", DEFAULT_SNAPSHOT_KEY) or DEFAULT_SNAPSHOT_KEY).strip()


def _get(db: Session, key: str) -> TableSnapshot | None:
    return db.query(TableSnapshot).filter(TableSnapshot.key == key).first()


def load_rows(db: Session, key: str) -> list[Row] | None:
    snapshot = _get(db, key)
    if snapshot is None or not isinstance(snapshot.data, list):
        return None
    return [Row.from_dict(item) for item in snapshot.data if isinstance(item, dict)]


def save_rows(db: Session, key: str, rows: Sequence[Row]) -> None:
    payload = [row.to_dict() for row in rows]
    snapshot = _get(db, key)
    if snapshot is None:
        db.add(TableSnapshot(key=key, data=payload))
    else:
        snapshot.data = payload
    db.commit()


def clear_rows(db: Session, key: str) -> None:
    save_rows(db, key, [])
