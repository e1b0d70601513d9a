# routers/cleaning.py

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from db.deps import get_db
from models.schemas import DetailImagesRequest, ExtractRequest, PromptedCleaningRequest
from services import openrouter_client
from services.cleaning_service import (
    CleaningInputError,
    detail_image_updates,
    optimize_updates,
    rename_updates,
    require_rows,
    require_text,
    unique_product_names,
    unique_sku_specs,
)
from services.extraction_merge import build_rows_from_products
from services.prompts import RENAME_PROMPT, SKU_OPTIMIZE_PROMPT
from services.workspace import Workspace, WorkspaceBusyError, get_workspace

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cleaning", tags=["cleaning"])


def _remote_failure(workspace: Workspace, exc: Exception) -> HTTPException:
    if isinstance(exc, openrouter_client.ApiError):
        workspace.debug_log = exc.raw_response
        message = exc.message
    else:
        message = f"Request failed: {exc}"
    logger.warning("Remote model call failed: %s", message)
    return HTTPException(
        status_code=502,
        detail={"message": message, "raw_response": workspace.debug_log},
    )


def _api_key(api_key: str | None) -> str:
    try:
        return openrouter_client.resolve_api_key(api_key)
    except openrouter_client.ApiError as exc:
        raise CleaningInputError(exc.message)


@router.get("/prompts")
def default_prompts():
    return {"rename": RENAME_PROMPT, "sku_optimize": SKU_OPTIMIZE_PROMPT}


@router.get("/debug-log")
def debug_log(db: Session = Depends(get_db)):
    return {"raw_response": get_workspace(db).debug_log}


@router.post("/extract")
async def extract(payload: ExtractRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    try:
        require_text(payload.text, "Enter the content to extract")
        api_key = _api_key(payload.api_key)
    except CleaningInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        with workspace.remote_call():
            products = await openrouter_client.extract_products_from_text(payload.text, api_key)
    except WorkspaceBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (openrouter_client.ApiError, httpx.HTTPError) as exc:
        raise _remote_failure(workspace, exc)

    if not products:
        return {"status": "No data extracted; check the input or the key quota.", "rows_inserted": 0}

    merged = build_rows_from_products(workspace.rows, products)
    added = workspace.store.add(merged.rows)
    workspace.persist(db)

    logger.info(
        "EXTRACT: parsed=%s added=%s duplicates=%s",
        merged.parsed_count,
        len(added),
        merged.duplicate_count,
    )
    return {
        "status": (
            f"Extracted {merged.parsed_count} SKUs "
            f"(added {len(added)}, skipped {merged.duplicate_count} duplicates)"
        ),
        "parsed": merged.parsed_count,
        "rows_inserted": len(added),
        "duplicates": merged.duplicate_count,
    }


@router.post("/rename")
async def rename(payload: PromptedCleaningRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    try:
        require_rows(workspace.rows)
        api_key = _api_key(payload.api_key)
        prompt = require_text(payload.prompt if payload.prompt is not None else RENAME_PROMPT, "Prompt cannot be empty")
    except CleaningInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    names = unique_product_names(workspace.rows)
    if not names:
        return {"status": "No product names found", "updated_rows": 0}

    try:
        with workspace.remote_call():
            results = await openrouter_client.rename_product_names(names, api_key, prompt)
    except WorkspaceBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (openrouter_client.ApiError, httpx.HTTPError) as exc:
        raise _remote_failure(workspace, exc)

    if not results:
        return {"status": "The model returned no results", "updated_rows": 0}

    touched = workspace.store.apply_batch(rename_updates(workspace.rows, results))
    workspace.persist(db)
    logger.info("RENAME: names=%s rows=%s", len(names), touched)
    status = f"Renamed {touched} rows" if touched else "No changes"
    return {"status": status, "updated_rows": touched}


@router.post("/optimize-specs")
async def optimize_specs(payload: PromptedCleaningRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    try:
        require_rows(workspace.rows)
        api_key = _api_key(payload.api_key)
        prompt = require_text(
            payload.prompt if payload.prompt is not None else SKU_OPTIMIZE_PROMPT,
            "Prompt cannot be empty",
        )
    except CleaningInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    specs = unique_sku_specs(workspace.rows)
    if not specs:
        return {"status": "No SKU specs found", "updated_rows": 0}

    try:
        with workspace.remote_call():
            results = await openrouter_client.optimize_sku_specs(specs, api_key, prompt)
    except WorkspaceBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (openrouter_client.ApiError, httpx.HTTPError) as exc:
        raise _remote_failure(workspace, exc)

    if not results:
        return {"status": "The model returned no results", "updated_rows": 0}

    touched = workspace.store.apply_batch(optimize_updates(workspace.rows, results))
    workspace.persist(db)
    logger.info("OPTIMIZE: specs=%s rows=%s", len(specs), touched)
    status = f"Optimized {touched} rows" if touched else "No changes"
    return {"status": status, "updated_rows": touched}


@router.post("/detail-images")
def insert_detail_images(payload: DetailImagesRequest, db: Session = Depends(get_db)):
    workspace = get_workspace(db)
    try:
        require_rows(workspace.rows)
        updates = detail_image_updates(workspace.rows, payload.header_images, payload.footer_images)
    except CleaningInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    touched = workspace.store.apply_batch(updates)
    workspace.persist(db)
    return {"status": f"Inserted images into {touched} rows", "updated_rows": touched}
