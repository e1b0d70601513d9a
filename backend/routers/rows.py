# routers/rows.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from db.deps import get_db
from models.schemas import (
    AddRowsRequest,
    BatchUpdateRequest,
    CellEditRequest,
    RowIdsRequest,
    StatusUpdateRequest,
)
from services.cleaning_service import CleaningInputError, content_preview
from services.columns import blank_cells
from services.row_store import Row
from services.sync_engine import edit_cell
from services.workspace import get_workspace

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rows", tags=["rows"])


@router.get("")
def list_rows(db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    return {
        "rows": [row.to_dict() for row in workspace.rows],
        "total": len(workspace.rows),
    }


@router.post("")
def add_rows(payload: AddRowsRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    new_rows = []
    for item in payload.rows:
        row = Row.from_dict(item)
        new_rows.append(row.with_changes({**blank_cells(), **row.cells}))
    added = workspace.store.add(new_rows)
    workspace.persist(db)
    return {"rows": [row.to_dict() for row in added], "rows_inserted": len(added)}


@router.delete("")
def remove_rows(payload: RowIdsRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    removed = workspace.store.remove(payload.ids)
    workspace.persist(db)
    return {"deleted_rows": removed}


@router.patch("/{row_id}/cells")
def update_cell(row_id: str, payload: CellEditRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    updated_ids = edit_cell(workspace.store, row_id, payload.column, payload.value)
    workspace.persist(db)
    return {"updated_ids": updated_ids, "updated_rows": len(updated_ids)}


@router.post("/status")
def update_status(payload: StatusUpdateRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    touched = workspace.store.set_status(payload.ids, payload.status)
    workspace.persist(db)
    return {"updated_rows": touched, "status": payload.status.value}


@router.post("/batch")
def batch_update(payload: BatchUpdateRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    touched = workspace.store.apply_batch((item.id, item.changes) for item in payload.updates)
    workspace.persist(db)
    return {"updated_rows": touched}


@router.post("/reset")
def reset_rows(db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    workspace.reset(db)
    logger.info("RESET: workspace %s cleared", workspace.key)
    return {"status": "ok", "total": 0}


@router.get("/{row_id}/content")
def row_content(row_id: str, column: str, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    row = workspace.store.find(row_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Row not found")
    try:
        return content_preview(row, column)
    except CleaningInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
