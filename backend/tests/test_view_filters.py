from services.view_filters import BLANK, FilterState, canonical_value, compute_stats, compute_visible_rows


def _rows(make_row, column, values):
    return [make_row(row_id=str(i), **{column: v}) for i, v in enumerate(values)]


def test_canonical_value():
    assert canonical_value(None) == BLANK
    assert canonical_value(float("nan")) == BLANK
    assert canonical_value("   ") == BLANK
    assert canonical_value(" 红 ") == "红"
    assert canonical_value(12) == "12"


def test_color_filter_scenario(make_row):
    rows = _rows(make_row, "色", ["红", "蓝", "红"])

    assert compute_stats(rows, "色") == [("红", 2), ("蓝", 1)]

    visible = compute_visible_rows(rows, {"色": {"红"}}, set())
    assert [r.id for r in visible] == ["0", "2"]


def test_stats_tie_break_puts_blank_last(make_row):
    rows = _rows(make_row, "SKU规格", ["b", "", "a", None, "b", "a", "  ", "c"])

    stats = compute_stats(rows, "SKU规格")

    assert stats == [(BLANK, 3), ("a", 2), ("b", 2), ("c", 1)]
    assert sum(count for _, count in stats) == len(rows)


def test_stats_blank_after_equal_count_values(make_row):
    rows = _rows(make_row, "商品类目", ["", "z", "a"])
    assert compute_stats(rows, "商品类目") == [("a", 1), ("z", 1), (BLANK, 1)]


def test_filter_on_blank_marker(make_row):
    rows = _rows(make_row, "商品类目", ["Golf", "", None])
    visible = compute_visible_rows(rows, {"商品类目": {BLANK}})
    assert [r.id for r in visible] == ["1", "2"]


def test_filters_combine_across_columns(make_row):
    rows = [
        make_row(row_id="1", **{"商品类目": "Golf", "SKU库存": "5"}),
        make_row(row_id="2", **{"商品类目": "Golf", "SKU库存": "0"}),
        make_row(row_id="3", **{"商品类目": "Tennis", "SKU库存": "5"}),
    ]
    visible = compute_visible_rows(rows, {"商品类目": {"Golf"}, "SKU库存": {"5"}})
    assert [r.id for r in visible] == ["1"]


def test_visible_rows_idempotent(make_row):
    rows = [
        make_row(row_id="1", **{"商品名称": "A", "商品类目": "Golf"}),
        make_row(row_id="2", **{"商品名称": "A", "商品类目": "Golf"}),
        make_row(row_id="3", **{"商品名称": "B", "商品类目": "Tennis"}),
        make_row(row_id="4", **{"商品名称": "C", "商品类目": "Golf"}),
    ]
    filters = {"商品类目": {"Golf"}}
    unique = {"商品名称"}

    once = compute_visible_rows(rows, filters, unique)
    twice = compute_visible_rows(once, filters, unique)

    assert [r.id for r in once] == ["1", "4"]
    assert once == twice


def test_single_unique_column_keeps_first_occurrence(make_row):
    rows = _rows(make_row, "商品名称", ["A", "B", "A", " B", "", None, "C"])

    visible = compute_visible_rows(rows, {}, {"商品名称"})

    assert [r.id for r in visible] == ["0", "1", "4", "6"]


def test_multiple_unique_columns_drop_on_any_seen_value(make_row):
    rows = [
        make_row(row_id="1", **{"商品名称": "A", "SKU规格": "red"}),
        make_row(row_id="2", **{"商品名称": "B", "SKU规格": "red"}),
        make_row(row_id="3", **{"商品名称": "A", "SKU规格": "blue"}),
        make_row(row_id="4", **{"商品名称": "C", "SKU规格": "blue"}),
    ]

    visible = compute_visible_rows(rows, {}, {"商品名称", "SKU规格"})

    assert [r.id for r in visible] == ["1", "4"]


def test_toggle_unique_clears_filter_on_same_column():
    state = FilterState(filters={"商品名称": frozenset({"A"}), "商品类目": frozenset({"Golf"})})

    state = state.toggle_unique("商品名称")

    assert "商品名称" not in state.filters
    assert "商品类目" in state.filters
    assert state.unique_columns == {"商品名称"}

    state = state.toggle_unique("商品名称")
    assert state.unique_columns == frozenset()


def test_apply_filter_with_every_value_removes_restriction():
    state = FilterState().apply_filter("色", {"红"}, ["红", "蓝"])
    assert state.filters == {"色": frozenset({"红"})}

    state = state.apply_filter("色", {"红", "蓝"}, ["红", "蓝"])
    assert state.filters == {}


def test_selection_for_preseeds_from_existing_filter():
    stats = [("红", 2), ("蓝", 1)]
    state = FilterState()

    assert state.selection_for("色", stats) == {"红", "蓝"}

    state = state.apply_filter("色", {"蓝"}, ["红", "蓝"])
    assert state.selection_for("色", stats) == {"蓝"}


def test_filter_state_updates_are_functional():
    state = FilterState()
    updated = state.apply_filter("色", {"红"}, ["红", "蓝"])

    assert state.filters == {}
    assert updated is not state
    assert updated.cleared().is_empty


def test_apply_filter_takes_column_out_of_unique_mode():
    state = FilterState().toggle_unique("色").toggle_unique("商品名称")

    state = state.apply_filter("色", {"红"}, ["红", "蓝"])

    assert state.filters == {"色": frozenset({"红"})}
    assert state.unique_columns == {"商品名称"}


def test_select_all_on_unique_column_keeps_unique_mode():
    state = FilterState().toggle_unique("色")

    state = state.apply_filter("色", {"红", "蓝"}, ["红", "蓝"])

    assert state.filters == {}
    assert state.unique_columns == {"色"}
