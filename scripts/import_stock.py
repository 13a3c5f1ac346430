#!/usr/bin/env python3
"""Import a manufacturer stock export from the command line.

Usage:
  python scripts/import_stock.py --input ./data/stock.xlsx
  python scripts/import_stock.py --input ./data/bmw_pl.xlsx --feed bmw_pl
  python scripts/import_stock.py --input ./data/stock.xlsx --dry-run

With --dry-run the sheet is only normalized and the counters are printed;
nothing is written to the database.
"""
import argparse, json, sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from showroom.app.core.logging_config import configure_logging
from showroom.app.domain.stock import error_preview
from showroom.app.parsers._sheet_common import load_sheet_rows
from showroom.app.services.stock_upload import FEED_STANDARD, NORMALIZERS, ingest_stock_upload


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Import a stock spreadsheet")
    parser.add_argument("--input", required=True, type=Path, help="xlsx or csv stock export")
    parser.add_argument("--feed", default=FEED_STANDARD, choices=sorted(NORMALIZERS))
    parser.add_argument("--dry-run", action="store_true", help="normalize only, do not write")
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level)

    content = args.input.read_bytes()
    if args.dry_run:
        result = NORMALIZERS[args.feed](load_sheet_rows(args.input.name, content))
        summary = {**result.as_counters(), "errors": error_preview(result.errors), "warnings": result.warnings}
    else:
        summary = ingest_stock_upload(args.input.name, content, feed=args.feed)
        summary["errors"] = summary.pop("errors_preview")

    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
