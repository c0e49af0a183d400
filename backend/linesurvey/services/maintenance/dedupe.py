# backend/linesurvey/services/maintenance/dedupe.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from linesurvey.core.constants import BACKUP_SHEET_PREFIX, STAMP_FORMAT
from linesurvey.models.sheet import Sheet
from linesurvey.services.store.sheets import copy_sheet, delete_rows, find_sheet, read_rows

logger = logging.getLogger(__name__)


def backup_sheet_name(db: Session, now: datetime | None = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).strftime(STAMP_FORMAT)
    name = f"{BACKUP_SHEET_PREFIX}{stamp}"
    n = 1
    while find_sheet(db, name) is not None:
        name = f"{BACKUP_SHEET_PREFIX}{stamp}_{n}"
        n += 1
    return name


def remove_duplicate_sessions(db: Session, sheet: Sheet) -> dict:
    """
    重複 session_id を削除（先勝ち）。
    1) シート全体をバックアップシートへ複製
    2) 上から走査して 2 件目以降を収集
    3) 下から削除
    """
    backup_name = backup_sheet_name(db)
    try:
        copy_sheet(db, sheet, backup_name)

        rows = read_rows(db, sheet)
        seen: set[str] = set()
        dupes = []
        for r in rows:
            if r.session_id in seen:
                dupes.append(r)
            else:
                seen.add(r.session_id)
        removed = delete_rows(db, reversed(dupes))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("dedupe on %r: %d rows, %d removed, backup %r", sheet.name, len(rows), removed, backup_name)
    return {
        "backupSheet": backup_name,
        "rowsBefore": len(rows),
        "duplicatesRemoved": removed,
        "rowsAfter": len(rows) - removed,
    }
