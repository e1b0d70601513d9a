from typing import Any, Iterable, Sequence

from models.schemas import RenameResult, SpecOptimizeResult
from services.columns import HTML_COLUMNS, IMAGE_COLUMNS, PRODUCT_DETAIL, PRODUCT_NAME, SKU_SPEC
from services.row_store import Row

IMAGE_BLOCK = '<p><img src="{url}" style="display:block;max-width:100%;margin:0 auto;" /></p>'


class CleaningInputError(ValueError):
    """An operator action was triggered without the input it needs."""


def require_text(text: str | None, message: str) -> str:
    if not text or not text.strip():
        raise CleaningInputError(message)
    return text


def require_rows(rows: Sequence[Row]) -> None:
    if not rows:
        raise CleaningInputError("The table has no rows")


def _distinct_text(rows: Sequence[Row], column: str) -> list[str]:
    values = (str(row.get(column) or "") for row in rows)
    return list(dict.fromkeys(v for v in values if v))


def unique_product_names(rows: Sequence[Row]) -> list[str]:
    return _distinct_text(rows, PRODUCT_NAME)


def unique_sku_specs(rows: Sequence[Row]) -> list[str]:
    return _distinct_text(rows, SKU_SPEC)


def _mapping_updates(rows: Sequence[Row], column: str, mapping: dict[str, str]) -> list[tuple[str, dict[str, Any]]]:
    updates = []
    for row in rows:
        current = row.get(column) or ""
        if current in mapping:
            updates.append((row.id, {column: mapping[current]}))
    return updates


def rename_updates(rows: Sequence[Row], results: Iterable[RenameResult]) -> list[tuple[str, dict[str, Any]]]:
    return _mapping_updates(rows, PRODUCT_NAME, {r.original: r.new_name for r in results})


def optimize_updates(rows: Sequence[Row], results: Iterable[SpecOptimizeResult]) -> list[tuple[str, dict[str, Any]]]:
    return _mapping_updates(rows, SKU_SPEC, {r.original: r.optimized for r in results})


def detail_image_updates(
    rows: Sequence[Row],
    header_urls: Iterable[str],
    footer_urls: Iterable[str],
) -> list[tuple[str, dict[str, Any]]]:
    headers = [u.strip() for u in header_urls if u and u.strip()]
    footers = [u.strip() for u in footer_urls if u and u.strip()]
    if not headers and not footers:
        raise CleaningInputError("Provide at least one image URL")

    header_html = "".join(IMAGE_BLOCK.format(url=url) for url in headers)
    footer_html = "".join(IMAGE_BLOCK.format(url=url) for url in footers)
    return [
        (row.id, {PRODUCT_DETAIL: f"{header_html}{row.get(PRODUCT_DETAIL) or ''}{footer_html}"})
        for row in rows
    ]


def content_preview(row: Row, column: str) -> dict[str, Any]:
    value = str(row.get(column) or "")
    if column in HTML_COLUMNS:
        return {"column": column, "type": "html", "value": value}
    if column in IMAGE_COLUMNS:
        images = [part.strip() for part in value.split(",") if part.strip()]
        return {"column": column, "type": "images", "value": value, "images": images}
    raise CleaningInputError(f"{column} has no content editor")
