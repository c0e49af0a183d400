import json

from conftest import line_payload
from linesurvey.core.config import settings
from linesurvey.services.store.sheets import find_sheet, read_rows


def _rows(db):
    db.expire_all()
    sheet = find_sheet(db, settings.sheet_name)
    return read_rows(db, sheet) if sheet else []


def test_valid_submission_appends_one_row(client, db):
    r = client.post("/submissions", json=line_payload(n=5))
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["success"] is True
    assert isinstance(data["rowId"], int)
    assert "error" not in data

    rows = _rows(db)
    assert len(rows) == 1
    row = rows[0]
    assert row.row_id == data["rowId"]
    assert row.point_count == 5
    assert row.point_count == len(json.loads(row.coordinates))
    assert row.session_id == "a" * 24
    assert row.survey_version == "1.0"
    assert row.user_agent == "pytest"
    assert row.timestamp == "2025-06-01T09:00:00Z"
    assert row.received_at


def test_sheet_created_with_header_on_first_use(client, db):
    assert find_sheet(db, settings.sheet_name) is None
    client.post("/submissions", json=line_payload())
    sheet = find_sheet(db, settings.sheet_name)
    assert sheet.header == [
        "row_id", "session_id", "timestamp", "received_at", "survey_version",
        "point_count", "geometry_json", "coordinates", "user_agent",
    ]
    assert sheet.frozen_rows == 1


def test_row_ids_increase(client):
    ids = [client.post("/submissions", json=line_payload(session_id=f"{i:024x}")).json()["rowId"] for i in range(3)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3


def test_missing_session_id_is_rejected(client, db):
    payload = line_payload()
    del payload["sessionId"]
    data = client.post("/submissions", json=payload).json()
    assert data["success"] is False
    assert "sessionId" in data["error"]
    assert _rows(db) == []


def test_missing_geometry_is_rejected(client, db):
    payload = line_payload()
    del payload["geometry"]
    data = client.post("/submissions", json=payload).json()
    assert data["success"] is False
    assert _rows(db) == []


def test_invalid_json_body(client, db):
    r = client.post("/submissions", content=b"{not json", headers={"Content-Type": "text/plain"})
    assert r.status_code == 200
    assert r.json()["success"] is False
    assert _rows(db) == []


def test_plain_text_body_is_accepted(client, db):
    r = client.post(
        "/submissions",
        content=json.dumps(line_payload()).encode(),
        headers={"Content-Type": "text/plain;charset=utf-8"},
    )
    assert r.json()["success"] is True
    assert len(_rows(db)) == 1


def test_optional_fields_get_defaults(client, db):
    payload = line_payload(n=4)
    for k in ("timestamp", "surveyVersion", "pointCount", "userAgent"):
        del payload[k]
    assert client.post("/submissions", json=payload).json()["success"] is True

    row = _rows(db)[0]
    assert row.timestamp == row.received_at
    assert row.survey_version == "unknown"
    assert row.user_agent == "unknown"
    assert row.point_count == 4


def test_bad_geometry_type_reports_error_without_write(client, db):
    payload = line_payload()
    payload["geometry"] = "LINESTRING(0 0, 1 1)"
    data = client.post("/submissions", json=payload).json()
    assert data["success"] is False
    assert data["error"]
    assert _rows(db) == []
