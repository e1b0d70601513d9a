from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from db.deps import get_db
from services.grid_export import EXPORT_FORMATS, export_rows
from services.grid_import import ImportShapeError, parse_grid, read_grid
from services.workspace import get_workspace

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


@router.post("/import")
async def import_file(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    contents = await file.read()
    if not contents:
        raise HTTPException(status_code=400, detail="Empty file")

    try:
        rows = parse_grid(read_grid(contents, file.filename or ""))
    except ImportShapeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    workspace = get_workspace(db)
    added = workspace.import_rows(rows)
    workspace.persist(db)

    logger.info("IMPORT: file=%s rows=%s", file.filename, len(added))
    return {"rows_inserted": len(added), "total": len(workspace.rows)}


@router.get("/export")
def export_file(
    format: str = Query("xlsx"),
    db: Session = Depends(get_db),
):
    fmt = (format or "xlsx").strip().lower()
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail="format must be xlsx or csv")

    workspace = get_workspace(db)
    try:
        content, media_type, filename = export_rows(workspace.visible_rows(), fmt)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return StreamingResponse(
        iter([content]),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
