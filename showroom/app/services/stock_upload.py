from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from showroom.app.db import models
from showroom.app.db.session import session_scope
from showroom.app.domain.stock import ImportResult, error_preview
from showroom.app.parsers._sheet_common import SheetRows, load_sheet_rows
from showroom.app.parsers.bmw_pl_sheet import normalize_bmw_pl_sheet
from showroom.app.parsers.stock_sheet import normalize_stock_sheet
from showroom.app.services.stock_sync import sync_stock_units

logger = logging.getLogger(__name__)

FEED_STANDARD = "standard"
FEED_BMW_PL = "bmw_pl"

NORMALIZERS: Dict[str, Callable[[SheetRows], ImportResult]] = {
    FEED_STANDARD: normalize_stock_sheet,
    FEED_BMW_PL: normalize_bmw_pl_sheet,
}


@dataclass
class StockUploadSummary:
    import_id: int
    filename: str
    feed: str
    result: ImportResult
    rows_updated: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "import_id": self.import_id,
            "filename": self.filename,
            "feed": self.feed,
            **self.result.as_counters(),
            "rows_updated": self.rows_updated,
            "errors": self.result.errors,
            "errors_preview": error_preview(self.result.errors),
            "warnings": self.result.warnings,
            "status": "completed",
        }


def ingest_stock_upload(filename: str, content: bytes, feed: str = FEED_STANDARD) -> Dict[str, Any]:
    if not content:
        raise ValueError("Uploaded file is empty")
    normalizer = NORMALIZERS.get(feed)
    if normalizer is None:
        raise ValueError(f"Unsupported stock feed '{feed}'")

    import_id = _create_import_stub(filename, feed)
    logger.info("Stock import %s started: %s (%s)", import_id, filename, feed)
    try:
        summary = _process_stock_file(import_id, filename, feed, content, normalizer)
    except Exception as exc:
        logger.exception("Stock import %s failed", import_id)
        _mark_import_failed(import_id, str(exc))
        raise
    else:
        _mark_import_completed(summary)
        logger.info("Stock import %s completed: %s", import_id, summary.result.as_counters())
        return summary.as_dict()


def _create_import_stub(filename: str, feed: str) -> int:
    with session_scope() as session:
        stock_import = models.StockImport(
            filename=filename,
            feed=feed,
            status="processing",
            processed=0,
            skipped_status=0,
            skipped_type=0,
            hidden_de=0,
            rows_updated=0,
            errors=[],
        )
        session.add(stock_import)
        session.flush()
        return stock_import.id


def _mark_import_failed(import_id: int, message: str) -> None:
    with session_scope() as session:
        stock_import = session.get(models.StockImport, import_id)
        if not stock_import:
            return
        stock_import.status = "failed"
        stock_import.errors = [message]
        stock_import.processed_at = datetime.now(timezone.utc)


def _mark_import_completed(summary: StockUploadSummary) -> None:
    counters = summary.result.as_counters()
    with session_scope() as session:
        stock_import = session.get(models.StockImport, summary.import_id)
        if not stock_import:
            return
        stock_import.status = "completed"
        stock_import.processed = counters["processed"]
        stock_import.skipped_status = counters["skipped_status"]
        stock_import.skipped_type = counters["skipped_type"]
        stock_import.hidden_de = counters["hidden_de"]
        stock_import.rows_updated = summary.rows_updated
        stock_import.errors = summary.result.errors
        stock_import.processed_at = datetime.now(timezone.utc)


def _process_stock_file(
    import_id: int,
    filename: str,
    feed: str,
    content: bytes,
    normalizer: Callable[[SheetRows], ImportResult],
) -> StockUploadSummary:
    rows = load_sheet_rows(filename, content)
    result = normalizer(rows)

    sync_counts = sync_stock_units(result.vehicles)
    return StockUploadSummary(
        import_id=import_id,
        filename=filename,
        feed=feed,
        result=result,
        rows_updated=sync_counts["updated"],
    )
