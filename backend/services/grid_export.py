import math
import re
from io import BytesIO
from typing import Any, Sequence

import pandas as pd

from services.columns import HEADER_INSTRUCTIONS, HEADERS, NUMERIC_FIELDS, PRODUCT_NAME, STATUS_COLUMN
from services.row_store import Row

DEFAULT_EXPORT_NAME = "sku_data_export"
EXPORT_FORMATS = {"xlsx", "csv"}

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def _to_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            num = float(text)
        except ValueError:
            return None
    if isinstance(num, float):
        if not math.isfinite(num):
            return None
        if num.is_integer():
            return int(num)
    return num


def export_value(column: str, value: Any) -> Any:
    if value is None or value == "":
        return ""
    if column in NUMERIC_FIELDS:
        num = _to_number(value)
        if num is not None:
            return num
    return value


def export_filename(rows: Sequence[Row]) -> str:
    if not rows:
        return DEFAULT_EXPORT_NAME
    first_name = rows[0].get(PRODUCT_NAME)
    if not isinstance(first_name, str):
        return DEFAULT_EXPORT_NAME
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", first_name.strip())[:100]
    return cleaned or DEFAULT_EXPORT_NAME


def build_export_grid(rows: Sequence[Row], headers: Sequence[str] = HEADERS) -> list[list[Any]]:
    """Instruction row, header row, then one line per row."""
    export_headers = [h for h in headers if h != STATUS_COLUMN]
    grid: list[list[Any]] = [
        [HEADER_INSTRUCTIONS.get(h, "") for h in export_headers],
        list(export_headers),
    ]
    for row in rows:
        grid.append([export_value(h, row.get(h, "")) for h in export_headers])
    return grid


def write_grid(grid: list[list[Any]], fmt: str) -> tuple[bytes, str]:
    df = pd.DataFrame(grid)
    if fmt == "csv":
        return df.to_csv(index=False, header=False).encode("utf-8"), "text/csv"

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Sheet1", index=False, header=False)
    return (
        buffer.getvalue(),
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def export_rows(rows: Sequence[Row], fmt: str = "xlsx") -> tuple[bytes, str, str]:
    """Returns (content, media type, filename)."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError("format must be xlsx or csv")
    if not rows:
        raise ValueError("Nothing to export: the table or the filtered view is empty")

    content, media_type = write_grid(build_export_grid(rows), fmt)
    return content, media_type, f"{export_filename(rows)}.{fmt}"
