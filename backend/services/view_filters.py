from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from services.row_store import Row

BLANK = "(空白)"


def canonical_value(value: Any) -> str:
    if value is None:
        return BLANK
    if isinstance(value, float) and np.isnan(value):
        return BLANK
    text = str(value).strip()
    return text or BLANK


def compute_stats(rows: Sequence[Row], column: str) -> list[tuple[str, int]]:
    """
    Histogram of canonical values for one column, most frequent first.
    Ties sort lexicographically, with the blank marker after every
    non-blank value of the same count.
    """
    counts = Counter(canonical_value(row.get(column)) for row in rows)
    return sorted(
        counts.items(),
        key=lambda item: (-item[1], item[0] == BLANK, item[0]),
    )


def _passes_filters(row: Row, filters: Mapping[str, frozenset[str]]) -> bool:
    for column, allowed in filters.items():
        if allowed is None:
            continue
        if canonical_value(row.get(column)) not in allowed:
            return False
    return True


def compute_visible_rows(
    rows: Sequence[Row],
    filters: Mapping[str, Iterable[str]],
    unique_columns: Iterable[str] = (),
) -> list[Row]:
    active = {col: frozenset(values) for col, values in filters.items() if values is not None}
    result = [row for row in rows if _passes_filters(row, active)]

    unique = list(unique_columns)
    if not unique:
        return result

    seen: dict[str, set[str]] = {col: set() for col in unique}
    kept = []
    for row in result:
        values = {col: canonical_value(row.get(col)) for col in unique}
        if any(values[col] in seen[col] for col in unique):
            continue
        for col in unique:
            seen[col].add(values[col])
        kept.append(row)
    return kept


@dataclass(frozen=True)
class FilterState:
    """Active allow-sets plus the columns in dedup mode. Updates return new states."""

    filters: Mapping[str, frozenset[str]] = field(default_factory=dict)
    unique_columns: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.filters and not self.unique_columns

    def toggle_unique(self, column: str) -> "FilterState":
        if column in self.unique_columns:
            return replace(self, unique_columns=self.unique_columns - {column})
        filters = {col: allowed for col, allowed in self.filters.items() if col != column}
        return FilterState(filters=filters, unique_columns=self.unique_columns | {column})

    def selection_for(self, column: str, stats: Sequence[tuple[str, int]]) -> set[str]:
        if column in self.filters:
            return set(self.filters[column])
        return {value for value, _ in stats}

    def apply_filter(self, column: str, selection: Iterable[str], all_values: Iterable[str]) -> "FilterState":
        chosen = frozenset(selection)
        filters = dict(self.filters)
        if chosen >= frozenset(all_values):
            filters.pop(column, None)
            return replace(self, filters=filters)
        # a filtered column leaves unique mode
        filters[column] = chosen
        return FilterState(filters=filters, unique_columns=self.unique_columns - {column})

    def clear_filter(self, column: str) -> "FilterState":
        filters = {col: allowed for col, allowed in self.filters.items() if col != column}
        return replace(self, filters=filters)

    def cleared(self) -> "FilterState":
        return FilterState()

    def visible(self, rows: Sequence[Row]) -> list[Row]:
        return compute_visible_rows(rows, self.filters, sorted(self.unique_columns))

    def to_dict(self) -> dict:
        return {
            "filters": {col: sorted(values) for col, values in self.filters.items()},
            "unique_columns": sorted(self.unique_columns),
        }
