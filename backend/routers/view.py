# routers/view.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from db.deps import get_db
from models.schemas import FilterSelectionRequest
from services.view_filters import compute_stats
from services.workspace import Workspace, get_workspace

router = APIRouter(prefix="/view", tags=["view"])


def _view_payload(workspace: Workspace) -> dict:
    visible = workspace.visible_rows()
    return {
        "rows": [row.to_dict() for row in visible],
        "visible": len(visible),
        "total": len(workspace.rows),
        **workspace.view.to_dict(),
    }


def _stats_payload(stats: list[tuple[str, int]]) -> list[dict]:
    return [{"value": value, "count": count} for value, count in stats]


@router.get("")
def get_view(db: Session = Depends(get_db)):
    return _view_payload(get_workspace(db))


@router.get("/stats")
def column_stats(column: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    return {"column": column, "values": _stats_payload(compute_stats(workspace.rows, column))}


@router.get("/filters/{column}")
def open_filter(column: str, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    stats = compute_stats(workspace.rows, column)
    selected = workspace.view.selection_for(column, stats)
    return {
        "column": column,
        "values": _stats_payload(stats),
        "selected": [value for value, _ in stats if value in selected],
        "active": column in workspace.view.filters,
        "unique": column in workspace.view.unique_columns,
    }


@router.put("/filters/{column}")
def apply_filter(column: str, payload: FilterSelectionRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    all_values = [value for value, _ in compute_stats(workspace.rows, column)]
    workspace.view = workspace.view.apply_filter(column, payload.values, all_values)
    return _view_payload(workspace)


@router.delete("/filters/{column}")
def clear_filter(column: str, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    workspace.view = workspace.view.clear_filter(column)
    return _view_payload(workspace)


@router.delete("/filters")
def clear_all_filters(db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    workspace.view = workspace.view.cleared()
    return _view_payload(workspace)


@router.post("/unique/{column}")
def toggle_unique(column: str, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    workspace.view = workspace.view.toggle_unique(column)
    return _view_payload(workspace)
