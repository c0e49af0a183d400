# backend/linesurvey/services/maintenance/stats.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from linesurvey.models.sheet_row import SheetRow


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    """ISO-8601 → datetime; None when the cell is empty or not a timestamp."""
    if not value:
        return None
    s = str(value).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def _sort_key(dt: datetime) -> float:
    # naive と aware が混在しても比較できるように（naive はローカル時刻扱い）
    return dt.timestamp()


def compute_statistics(rows: Iterable[SheetRow]) -> dict:
    rows = list(rows)
    counts = [r.point_count for r in rows if isinstance(r.point_count, int)]

    versions: list[str] = []
    for r in rows:
        v = r.survey_version
        if v and v not in versions:
            versions.append(v)

    instants = [dt for dt in (parse_instant(r.timestamp) for r in rows) if dt is not None]
    first = min(instants, key=_sort_key) if instants else None
    last = max(instants, key=_sort_key) if instants else None

    return {
        "totalResponses": len(rows),
        "averagePoints": round(sum(counts) / len(counts), 1) if counts else 0,
        "minPoints": min(counts) if counts else 0,
        "maxPoints": max(counts) if counts else 0,
        "surveyVersions": versions,
        "firstResponse": first.isoformat() if first else None,
        "lastResponse": last.isoformat() if last else None,
    }
