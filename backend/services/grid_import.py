import csv
import logging
from io import BytesIO, StringIO
from typing import Any, Sequence

import numpy as np
import pandas as pd

from services.columns import REQUIRED_HEADER_KEYS, STATUS_COLUMN, blank_cells
from services.row_store import CheckStatus, Row, new_row_id

logger = logging.getLogger(__name__)

HEADER_SCAN_LIMIT = 10


class ImportShapeError(ValueError):
    """The grid has no usable header or no data rows."""


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and np.isnan(value):
        return ""
    return str(value).strip()


def _is_blank_row(cells: Sequence[Any] | None) -> bool:
    if not cells:
        return True
    return all(_cell_text(c) == "" for c in cells)


def find_header_row(grid: Sequence[Sequence[Any]]) -> int | None:
    """Index of the first of the leading rows holding every required header."""
    for index, cells in enumerate(grid[:HEADER_SCAN_LIMIT]):
        texts = {_cell_text(c) for c in (cells or [])}
        if all(key in texts for key in REQUIRED_HEADER_KEYS):
            return index
    return None


def header_columns(header: Sequence[Any]) -> list[tuple[str, int]]:
    columns = []
    for index, cell in enumerate(header or []):
        name = _cell_text(cell)
        if not name or name == STATUS_COLUMN:
            continue
        columns.append((name, index))
    return columns


def parse_grid(raw_grid: Sequence[Sequence[Any]]) -> list[Row]:
    """
    Turn a 2-D cell grid into rows. The header row is located by its
    required column names; the rest of the grid below it becomes data.
    """
    if not raw_grid:
        raise ImportShapeError("The file contains no rows.")

    header_index = find_header_row(raw_grid)
    if header_index is None:
        logger.warning(
            "Could not find standard headers (%s). Defaulting to first row.",
            ", ".join(REQUIRED_HEADER_KEYS),
        )
        header_index = 0

    columns = header_columns(raw_grid[header_index])

    rows: list[Row] = []
    for cells in raw_grid[header_index + 1 :]:
        if _is_blank_row(cells):
            continue
        values: dict[str, Any] = blank_cells()
        for name, index in columns:
            values[name] = cells[index] if index < len(cells) and cells[index] is not None else ""
        rows.append(Row(id=new_row_id(), check_status=CheckStatus.UNVERIFIED).with_changes(values))

    if not rows:
        raise ImportShapeError(
            "No valid data found. Check that the sheet follows the bulk-upload template."
        )

    logger.info("Parsed %s rows from grid (header row %s)", len(rows), header_index)
    return rows


def _csv_width(text: str) -> int:
    return max((len(fields) for fields in csv.reader(StringIO(text))), default=0)


def read_grid(contents: bytes, filename: str) -> list[list[Any]]:
    """Read the first sheet of an uploaded file as a raw string grid."""
    name = (filename or "").lower()
    try:
        if name.endswith(".csv"):
            text = contents.decode("utf-8-sig")
            width = _csv_width(text)
            if not width:
                return []
            # title rows above the header are often shorter than the data
            df = pd.read_csv(
                StringIO(text),
                header=None,
                names=list(range(width)),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
            )
        elif name.endswith(".xlsx") or name.endswith(".xls"):
            engine = "xlrd" if name.endswith(".xls") else "openpyxl"
            df = pd.read_excel(BytesIO(contents), header=None, dtype=str, engine=engine)
        else:
            raise ImportShapeError("Only .csv, .xls, and .xlsx are supported")
    except ImportShapeError:
        raise
    except Exception as exc:
        raise ImportShapeError(f"Failed to parse file: {exc}") from exc

    df = df.astype(object).where(pd.notnull(df), "")
    return df.values.tolist()
