# backend/linesurvey/services/store/sheets.py
"""Named, ordered, append-only sheets on top of the SQL database.

A sheet is created lazily with its header the first time something is
appended to it. Rows keep insertion order (`SheetRow.id`), so "top to
bottom" in a sheet is ascending id.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from linesurvey.core.constants import FROZEN_HEADER_ROWS, SHEET_COLUMNS
from linesurvey.models.sheet import Sheet
from linesurvey.models.sheet_row import SheetRow

logger = logging.getLogger(__name__)

# 値としてコピーする列（row_id 含む、id/sheet_id 除く）
_VALUE_COLUMNS: Sequence[str] = SHEET_COLUMNS


def find_sheet(db: Session, name: str) -> Sheet | None:
    return db.execute(select(Sheet).where(Sheet.name == name)).scalar_one_or_none()


def get_or_create_sheet(db: Session, name: str) -> Sheet:
    sheet = find_sheet(db, name)
    if sheet is not None:
        return sheet
    sheet = Sheet(name=name, header=list(SHEET_COLUMNS), frozen_rows=FROZEN_HEADER_ROWS)
    db.add(sheet)
    db.flush()
    logger.info("created sheet %r with %d columns", name, len(SHEET_COLUMNS))
    return sheet


def append_row(db: Session, sheet: Sheet, values: dict) -> SheetRow:
    """Append one row. `row_id` is taken from the row's own key when not given.

    The caller owns the transaction (commit / rollback).
    """
    unknown = set(values) - set(_VALUE_COLUMNS)
    if unknown:
        raise ValueError(f"unknown sheet columns: {sorted(unknown)}")
    row = SheetRow(sheet_id=sheet.id, **values)
    db.add(row)
    db.flush()  # id 採番
    if row.row_id is None:
        row.row_id = row.id
    return row


def read_rows(db: Session, sheet: Sheet) -> list[SheetRow]:
    return list(
        db.execute(
            select(SheetRow).where(SheetRow.sheet_id == sheet.id).order_by(SheetRow.id.asc())
        ).scalars()
    )


def row_values(row: SheetRow) -> dict:
    return {col: getattr(row, col) for col in _VALUE_COLUMNS}


def copy_sheet(db: Session, source: Sheet, new_name: str) -> Sheet:
    """Snapshot every row of `source` into a new sheet, preserving order."""
    if find_sheet(db, new_name) is not None:
        raise ValueError(f"sheet {new_name!r} already exists")
    target = Sheet(name=new_name, header=list(source.header), frozen_rows=source.frozen_rows)
    db.add(target)
    db.flush()
    rows = read_rows(db, source)
    for r in rows:
        db.add(SheetRow(sheet_id=target.id, **row_values(r)))
    db.flush()
    logger.info("copied %d rows from %r to %r", len(rows), source.name, new_name)
    return target


def delete_rows(db: Session, rows: Iterable[SheetRow]) -> int:
    n = 0
    for r in rows:
        db.delete(r)
        n += 1
    db.flush()
    return n
