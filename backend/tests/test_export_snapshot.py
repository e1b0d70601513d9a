import pandas as pd
import pytest

from scripts.export_snapshot import export_snapshot
from services.snapshot_repository import save_rows


def test_export_snapshot_writes_file(db_session, make_row, tmp_path):
    save_rows(db_session, "k", [make_row(商品名称="Wedge", 商品价格="59.0")])

    target = export_snapshot(db_session, "k", "csv", tmp_path / "out")

    assert target == tmp_path / "out" / "Wedge.csv"
    sheet = pd.read_csv(target, header=None, dtype=str, keep_default_na=False)
    assert sheet.iloc[1][0] == "商品名称"
    assert sheet.iloc[2][0] == "Wedge"
    assert sheet.iloc[2][1] == "59"


def test_export_snapshot_without_rows(db_session, tmp_path):
    with pytest.raises(SystemExit):
        export_snapshot(db_session, "missing", "xlsx", tmp_path)
