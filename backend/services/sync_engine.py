import logging
from typing import Any, Sequence

from services.columns import PRODUCT_CODE, SKU_CODE, FieldScope, field_scope
from services.row_store import Row, RowStore

logger = logging.getLogger(__name__)


def _code_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def codes_match(source_code: Any, other_code: Any) -> bool:
    """Blank codes never match anything, including other blank codes."""
    source = _code_text(source_code)
    if not source:
        return False
    return source == _code_text(other_code)


def identity_column(column: str) -> str:
    if field_scope(column) is FieldScope.PRODUCT:
        return PRODUCT_CODE
    return SKU_CODE


def propagation_targets(rows: Sequence[Row], source: Row, column: str) -> set[str]:
    """
    Ids of every row that must receive an edit of ``column`` made on
    ``source``. Product-scope columns fan out over rows sharing the product
    code, SKU-scope columns over rows sharing the SKU code.
    """
    code_column = identity_column(column)
    source_code = source.get(code_column)

    targets = {source.id}
    for row in rows:
        if row.id == source.id:
            continue
        if codes_match(source_code, row.get(code_column)):
            targets.add(row.id)
    return targets


def edit_cell(store: RowStore, row_id: str, column: str, value: Any) -> list[str]:
    """
    Apply ``column = value`` to the edited row and its identity siblings in
    one store mutation. Returns the ids that changed; an unknown row id is a
    no-op.
    """
    rows = store.rows
    source = next((row for row in rows if row.id == row_id), None)
    if source is None:
        logger.debug("Dropping edit for missing row %s", row_id)
        return []

    targets = propagation_targets(rows, source, column)
    changes = {column: value}
    store.replace_rows(
        row.with_changes(changes) if row.id in targets else row
        for row in rows
    )

    if len(targets) > 1:
        logger.info(
            "Synced %s across %s rows via %s",
            column,
            len(targets),
            identity_column(column),
        )
    return [row.id for row in rows if row.id in targets]
