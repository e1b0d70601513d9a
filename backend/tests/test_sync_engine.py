from services.row_store import CheckStatus, RowStore
from services.sync_engine import codes_match, edit_cell, propagation_targets


def test_codes_match_requires_non_blank_source():
    assert codes_match("A1", " A1 ")
    assert not codes_match("", "")
    assert not codes_match("  ", "  ")
    assert not codes_match(None, None)
    assert not codes_match("A1", "A2")


def test_product_name_edit_propagates_and_resets_status(make_row):
    store = RowStore([
        make_row(row_id="1", status=CheckStatus.VERIFIED, **{"商品商家编码": "A1", "商品名称": "X"}),
        make_row(row_id="2", status=CheckStatus.VERIFIED, **{"商品商家编码": "A1", "商品名称": "X"}),
    ])

    updated = edit_cell(store, "1", "商品名称", "Y")

    assert updated == ["1", "2"]
    assert [r.get("商品名称") for r in store.rows] == ["Y", "Y"]
    assert all(r.check_status is CheckStatus.UNVERIFIED for r in store.rows)


def test_product_scope_ignores_other_products(make_row):
    store = RowStore([
        make_row(row_id="1", **{"商品商家编码": "A1", "商品类目": "Golf"}),
        make_row(row_id="2", **{"商品商家编码": " A1", "商品类目": "Golf"}),
        make_row(row_id="3", **{"商品商家编码": "B7", "商品类目": "Golf"}),
        make_row(row_id="4", **{"商品商家编码": "", "商品类目": "Golf"}),
    ])

    edit_cell(store, "1", "商品类目", "Golf>>Clubs")

    assert [r.get("商品类目") for r in store.rows] == ["Golf>>Clubs", "Golf>>Clubs", "Golf", "Golf"]


def test_dimension_columns_follow_product_code(make_row):
    store = RowStore([
        make_row(row_id="1", **{"商品商家编码": "P9", "SKU商家编码": "P901"}),
        make_row(row_id="2", **{"商品商家编码": "P9", "SKU商家编码": "P902"}),
    ])

    edit_cell(store, "2", "长", "120")

    assert [r.get("长") for r in store.rows] == ["120", "120"]


def test_sku_scope_follows_sku_code_only(make_row):
    store = RowStore([
        make_row(row_id="1", **{"商品商家编码": "P9", "SKU商家编码": "P901", "SKU价格": "10"}),
        make_row(row_id="2", **{"商品商家编码": "P9", "SKU商家编码": "P902", "SKU价格": "10"}),
        make_row(row_id="3", **{"商品商家编码": "P9", "SKU商家编码": "P901", "SKU价格": "10"}),
    ])

    edit_cell(store, "1", "SKU价格", "12")

    assert [r.get("SKU价格") for r in store.rows] == ["12", "10", "12"]


def test_blank_codes_keep_edit_row_local(make_row):
    store = RowStore([
        make_row(row_id="1", status=CheckStatus.VERIFIED, **{"SKU规格": "颜色:红"}),
        make_row(row_id="2", status=CheckStatus.VERIFIED, **{"SKU规格": "颜色:红"}),
    ])

    edit_cell(store, "1", "SKU规格", "Color:Red")

    assert store.find("1").get("SKU规格") == "Color:Red"
    assert store.find("1").check_status is CheckStatus.UNVERIFIED
    assert store.find("2").get("SKU规格") == "颜色:红"
    assert store.find("2").check_status is CheckStatus.VERIFIED


def test_non_critical_edit_keeps_verification(make_row):
    store = RowStore([make_row(row_id="1", status=CheckStatus.VERIFIED)])

    edit_cell(store, "1", "商品卖点", "Lightweight")

    assert store.find("1").check_status is CheckStatus.VERIFIED


def test_missing_row_is_a_no_op(make_row):
    store = RowStore([make_row(row_id="1")])
    before = store.rows
    version = store.version

    assert edit_cell(store, "ghost", "商品名称", "Y") == []
    assert store.rows is before
    assert store.version == version


def test_edit_commits_once(make_row):
    rows = [make_row(row_id=str(i), **{"商品商家编码": "A1"}) for i in range(5)]
    store = RowStore(rows)
    version = store.version

    edit_cell(store, "3", "商品价格", "9.9")

    assert store.version == version + 1
    assert {r.get("商品价格") for r in store.rows} == {"9.9"}


def test_propagation_targets_reads_codes_before_edit(make_row):
    source = make_row(row_id="1", **{"商品商家编码": "A1"})
    sibling = make_row(row_id="2", **{"商品商家编码": "A1"})

    # editing the code column itself fans out to rows holding the old code
    assert propagation_targets([source, sibling], source, "商品商家编码") == {"1", "2"}


def test_edit_of_metadata_column_cannot_verify_or_rename_row(make_row):
    store = RowStore([make_row(row_id="1", **{"商品名称": "X"})])

    edit_cell(store, "1", "checkStatus", "verified")
    edit_cell(store, "1", "_internal_id", "zzz")

    row = store.rows[0]
    assert row.id == "1"
    assert row.check_status is CheckStatus.UNVERIFIED
    assert row.to_dict()["checkStatus"] == "unverified"
    assert row.to_dict()["_internal_id"] == "1"
