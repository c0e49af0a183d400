# backend/linesurvey/services/ingest.py
"""Append-one-row handler behind POST /submissions."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from linesurvey.core.config import settings
from linesurvey.core.constants import MISSING_FIELDS_ERROR, SAVED_MESSAGE, UNKNOWN
from linesurvey.schemas.submission import SubmissionAck, SubmissionIn
from linesurvey.services.geometry import line_coordinates
from linesurvey.services.store.sheets import append_row, get_or_create_sheet

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def has_required_fields(payload: Any) -> bool:
    return isinstance(payload, dict) and bool(payload.get("sessionId")) and bool(payload.get("geometry"))


def record_submission(db: Session, payload: Any, sheet_name: str | None = None) -> SubmissionAck:
    """Validate presence of sessionId/geometry and append one row.

    Never raises: every failure is reported through the acknowledgment and
    leaves the sheet untouched.
    """
    if not has_required_fields(payload):
        logger.warning("rejected submission without sessionId/geometry")
        return SubmissionAck(success=False, error=MISSING_FIELDS_ERROR)

    received_at = now_iso()
    try:
        sub = SubmissionIn.model_validate(payload)
        coords = line_coordinates(sub.geometry)
        point_count = sub.point_count if sub.point_count is not None else len(coords)

        sheet = get_or_create_sheet(db, sheet_name or settings.sheet_name)
        row = append_row(
            db,
            sheet,
            {
                "session_id": sub.session_id,
                "timestamp": sub.timestamp or received_at,
                "received_at": received_at,
                "survey_version": sub.survey_version or UNKNOWN,
                "point_count": point_count,
                "geometry_json": json.dumps(sub.geometry, ensure_ascii=False),
                "coordinates": json.dumps(coords),
                "user_agent": sub.user_agent or UNKNOWN,
            },
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("failed to record submission")
        return SubmissionAck(success=False, error=str(e))

    logger.info("recorded row %s (session %s, %s points)", row.row_id, sub.session_id, point_count)
    return SubmissionAck(success=True, row_id=row.row_id, message=SAVED_MESSAGE)
