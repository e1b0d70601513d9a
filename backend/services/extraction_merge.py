import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Sequence

from models.schemas import ParsedProduct
from services import columns as cols
from services.row_store import CheckStatus, Row, new_row_id

UNNAMED_PRODUCT = "未命名商品"

_CJK = re.compile(r"[\u4e00-\u9fa5]")


@dataclass
class MergeResult:
    rows: list[Row] = field(default_factory=list)
    duplicate_count: int = 0
    parsed_count: int = 0


def clean_code(code: str | None) -> str:
    """Usable merchant code, or "" when the model's code is too short once Chinese is removed."""
    cleaned = _CJK.sub("", code or "").strip()
    return cleaned if len(cleaned) > 2 else ""


def timestamp_id(now: datetime) -> str:
    return now.strftime("%Y%m%d%H%M%S")


def _row_key(name: Any, specs: Any) -> str:
    return f"{name if name is not None else ''}-{specs if specs is not None else ''}"


def group_by_product(products: Sequence[ParsedProduct]) -> list[list[ParsedProduct]]:
    groups: dict[str, list[ParsedProduct]] = {}
    for product in products:
        groups.setdefault(product.product_name or UNNAMED_PRODUCT, []).append(product)
    return list(groups.values())


def _variant_cells(product: ParsedProduct, product_code: str, sku_code: str, multi_sku: bool) -> dict[str, str]:
    cells = cols.blank_cells()
    cells.update(
        {
            cols.PRODUCT_NAME: product.product_name,
            cols.PRODUCT_CODE: product_code,
            cols.PRODUCT_IMAGES: product.images,
            cols.PRODUCT_DETAIL: product.detail_html,
            cols.PRODUCT_SELLING_POINTS: product.description,
            cols.PRODUCT_CATEGORY: product.category,
        }
    )
    if multi_sku:
        cells.update(
            {
                cols.SKU_SPEC: product.specs,
                cols.SKU_PRICE: product.price,
                cols.SKU_STOCK: product.stock,
                cols.SKU_CODE: sku_code,
                cols.SKU_IMAGE: product.sku_image,
            }
        )
    else:
        cells.update({cols.PRODUCT_PRICE: product.price, cols.PRODUCT_STOCK: product.stock})
    return cells


def build_rows_from_products(
    existing_rows: Sequence[Row],
    products: Sequence[ParsedProduct],
    now: datetime | None = None,
) -> MergeResult:
    """
    Lay extracted records out as template rows. Variants of one product
    share a product code; records already present as (name, specs) are
    skipped.
    """
    result = MergeResult(parsed_count=len(products))
    existing_keys = {_row_key(r.get(cols.PRODUCT_NAME), r.get(cols.SKU_SPEC)) for r in existing_rows}
    stamp = timestamp_id(now or datetime.now())

    for counter, group in enumerate(group_by_product(products), start=1):
        multi_sku = len(group) > 1
        product_code = clean_code(group[0].sku_code) or f"{stamp}{counter:03d}"

        for index, product in enumerate(group):
            key = _row_key(product.product_name, product.specs)
            if key in existing_keys:
                result.duplicate_count += 1
                continue
            existing_keys.add(key)

            sku_code = clean_code(product.sku_code) or f"{product_code}{index + 1:02d}"
            result.rows.append(
                Row(id=new_row_id(), check_status=CheckStatus.UNVERIFIED).with_changes(
                    _variant_cells(product, product_code, sku_code, multi_sku)
                )
            )

    return result
