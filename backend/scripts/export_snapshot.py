import argparse
from pathlib import Path

from db.session import SessionLocal
from db.base import Base
from db.session import engine
from models.table_snapshot import TableSnapshot  # noqa: F401
from services.grid_export import export_rows
from services.snapshot_repository import load_rows, snapshot_key


def export_snapshot(db, key: str, fmt: str, out_dir: Path) -> Path:
    rows = load_rows(db, key)
    if not rows:
        raise SystemExit(f"No rows stored under '{key}'")
    content, _, filename = export_rows(rows, fmt)
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / filename
    target.write_bytes(content)
    return target


def main(argv=None):
    parser = argparse.ArgumentParser(description="Export the saved SKU table to a bulk-upload file.")
    parser.add_argument("--key", default=None, help="snapshot key (defaults to SNAPSHOT_KEY)")
    parser.add_argument("--format", default="xlsx", choices=["xlsx", "csv"])
    parser.add_argument("--out", default=".", help="output directory")
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        target = export_snapshot(db, args.key or snapshot_key(), args.format, Path(args.out))
        print(f"Exported {target}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
