# backend/scripts/maintenance.py
"""Manual maintenance against the configured database.

    python backend/scripts/maintenance.py stats
    python backend/scripts/maintenance.py export [--out DIR]
    python backend/scripts/maintenance.py dedupe
"""
import argparse
import json
import sys
from pathlib import Path

from linesurvey.core.config import settings
from linesurvey.core.logging import configure_logging
from linesurvey.db import SessionLocal, init_db
from linesurvey.services.export.geojson import build_feature_collection, write_feature_collection
from linesurvey.services.maintenance.dedupe import remove_duplicate_sessions
from linesurvey.services.maintenance.stats import compute_statistics
from linesurvey.services.store.sheets import find_sheet, read_rows


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("stats", help="print response statistics")
    p_export = sub.add_parser("export", help="write responses as a GeoJSON file")
    p_export.add_argument("--out", type=Path, default=None, help=f"output dir (default {settings.exports_path})")
    sub.add_parser("dedupe", help="back up the sheet, then drop repeated session ids")
    args = parser.parse_args(argv)

    configure_logging()
    init_db()
    with SessionLocal() as db:
        sheet = find_sheet(db, settings.sheet_name)
        if args.command == "stats":
            print(json.dumps(compute_statistics(read_rows(db, sheet) if sheet else []), indent=2))
            return 0
        if sheet is None:
            print(f"sheet {settings.sheet_name!r} does not exist yet", file=sys.stderr)
            return 1
        if args.command == "export":
            out = write_feature_collection(build_feature_collection(read_rows(db, sheet)), args.out or settings.exports_path)
            print(out)
        elif args.command == "dedupe":
            print(json.dumps(remove_duplicate_sessions(db, sheet), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
