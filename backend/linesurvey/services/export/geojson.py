# backend/linesurvey/services/export/geojson.py
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from linesurvey.core.constants import EXPORT_FILE_PREFIX, STAMP_FORMAT
from linesurvey.models.sheet_row import SheetRow
from linesurvey.schemas.commons import FeatureCollection
from linesurvey.services.geometry import geodesic_length_m, line_geometry

logger = logging.getLogger(__name__)


def row_to_feature(row: SheetRow) -> dict:
    """Rebuild a Feature from a stored row; raises ValueError on bad geometry_json."""
    stored = json.loads(row.geometry_json)
    geom = line_geometry(stored)
    return {
        "type": "Feature",
        "geometry": geom,
        "properties": {
            "rowId": row.row_id,
            "sessionId": row.session_id,
            "timestamp": row.timestamp,
            "receivedAt": row.received_at,
            "surveyVersion": row.survey_version,
            "pointCount": row.point_count,
            "userAgent": row.user_agent,
            "length_m": round(geodesic_length_m(geom), 1),
        },
    }


def build_feature_collection(rows: Iterable[SheetRow]) -> dict:
    """
    全行を FeatureCollection に再構成する。
    - geometry_json を解釈できない行はログに残してスキップ
    - metadata に出力時刻と件数を付与
    """
    feats: list[dict] = []
    for row in rows:
        try:
            feats.append(row_to_feature(row))
        except (ValueError, TypeError) as e:
            logger.warning("skipping row %s: unparseable geometry (%s)", row.row_id, e)
            continue
    return FeatureCollection(
        features=feats,
        metadata={
            "exportedAt": datetime.now(timezone.utc).isoformat(),
            "totalFeatures": len(feats),
        },
    ).model_dump()


def write_feature_collection(collection: dict, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime(STAMP_FORMAT)
    out = out_dir / f"{EXPORT_FILE_PREFIX}{stamp}.geojson"
    n = 1
    while out.exists():
        out = out_dir / f"{EXPORT_FILE_PREFIX}{stamp}_{n}.geojson"
        n += 1
    out.write_text(json.dumps(collection, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("wrote %d features to %s", collection["metadata"]["totalFeatures"], out)
    return out
