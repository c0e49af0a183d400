import io
import os
import json
import zipfile

import pytest
import shapefile
from openpyxl import load_workbook

from conftest import line_payload
from linesurvey.core.config import settings
from linesurvey.services.store.sheets import append_row, find_sheet


def _store_broken_row(db, geometry_json="{broken"):
    sheet = find_sheet(db, settings.sheet_name)
    append_row(db, sheet, {
        "session_id": "f" * 24,
        "timestamp": "2025-06-01T10:00:00Z",
        "received_at": "2025-06-01T10:00:01+00:00",
        "survey_version": "1.0",
        "point_count": 2,
        "geometry_json": geometry_json,
        "coordinates": "[]",
        "user_agent": "pytest",
    })
    db.commit()


def test_export_geojson_rebuilds_features(client):
    client.post("/submissions", json=line_payload(session_id="1" * 24, n=2))
    client.post("/submissions", json=line_payload(session_id="2" * 24, n=6))

    r = client.get("/export/geojson")
    assert r.status_code == 200
    fc = r.json()
    assert fc["type"] == "FeatureCollection"
    assert fc["metadata"]["totalFeatures"] == 2
    assert fc["metadata"]["exportedAt"]

    f0 = fc["features"][0]
    assert f0["geometry"]["type"] == "LineString"
    assert len(f0["geometry"]["coordinates"]) == 2
    props = f0["properties"]
    assert props["sessionId"] == "1" * 24
    assert props["pointCount"] == 2
    assert props["surveyVersion"] == "1.0"
    assert props["length_m"] > 0


def test_export_skips_unparseable_geometry(client, db):
    client.post("/submissions", json=line_payload(n=3))
    _store_broken_row(db)
    client.post("/submissions", json=line_payload(session_id="b" * 24, n=3))

    fc = client.get("/export/geojson").json()
    assert fc["metadata"]["totalFeatures"] == 2
    assert [f["properties"]["sessionId"] for f in fc["features"]] == ["a" * 24, "b" * 24]


def test_export_without_responses_is_404(client):
    assert client.get("/export/geojson").status_code == 404


def test_export_file_written_to_exports_dir(client):
    client.post("/submissions", json=line_payload())
    r = client.post("/export/geojson/file")
    assert r.status_code == 200
    data = r.json()
    assert data["file"].startswith("line_survey_export_")
    assert data["file"].endswith(".geojson")
    out = settings.exports_path / data["file"]
    fc = json.loads(out.read_text(encoding="utf-8"))
    assert fc["metadata"]["totalFeatures"] == 1 == data["totalFeatures"]


def test_export_xlsx_has_frozen_bold_header(client):
    client.post("/submissions", json=line_payload(n=4))
    r = client.get("/export/xlsx")
    assert r.status_code == 200
    wb = load_workbook(io.BytesIO(r.content))
    ws = wb[settings.sheet_name]
    header = [c.value for c in ws[1]]
    assert header[0] == "row_id"
    assert header[-1] == "user_agent"
    assert ws["A1"].font.bold
    assert ws.freeze_panes == "A2"
    assert ws.max_row == 2
    assert ws.cell(row=2, column=header.index("point_count") + 1).value == 4


def test_export_shapefile_zip(client):
    client.post("/submissions", json=line_payload(n=3))
    r = client.post("/export/shapefile", params={"target_epsg": 6677})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/zip"
    names = set(zipfile.ZipFile(io.BytesIO(r.content)).namelist())
    assert {"responses.shp", "responses.shx", "responses.dbf", "responses.prj"} <= names


def test_export_shapefile_bad_epsg(client):
    client.post("/submissions", json=line_payload(n=3))
    r = client.post("/export/shapefile", params={"target_epsg": 999999})
    assert r.status_code == 400


@pytest.mark.parametrize("stored", ["null", "[]", "42", '"LINESTRING"'])
def test_export_skips_geometry_that_is_not_an_object(client, db, stored):
    client.post("/submissions", json=line_payload(n=3))
    _store_broken_row(db, geometry_json=stored)

    fc = client.get("/export/geojson").json()
    assert fc["metadata"]["totalFeatures"] == 1
    assert fc["features"][0]["properties"]["sessionId"] == "a" * 24


def test_export_xlsx_data_starts_right_below_header(client):
    client.post("/submissions", json=line_payload(session_id="1" * 24, n=2))
    client.post("/submissions", json=line_payload(session_id="2" * 24, n=3))
    ws = load_workbook(io.BytesIO(client.get("/export/xlsx").content))[settings.sheet_name]
    assert ws.max_row == 3
    assert all(ws.cell(row=r, column=1).value is not None for r in (2, 3))


def test_export_shapefile_skips_unusable_lines(client):
    client.post("/submissions", json=line_payload(session_id="1" * 24, n=3))
    client.post("/submissions", json=line_payload(session_id="2" * 24, n=1))
    odd = line_payload(session_id="3" * 24)
    odd["geometry"] = {"foo": 1}
    client.post("/submissions", json=odd)

    r = client.post("/export/shapefile", params={"target_epsg": 6677})
    assert r.status_code == 200, r.text
    zf = zipfile.ZipFile(io.BytesIO(r.content))
    reader = shapefile.Reader(
        shp=io.BytesIO(zf.read("responses.shp")),
        shx=io.BytesIO(zf.read("responses.shx")),
        dbf=io.BytesIO(zf.read("responses.dbf")),
    )
    assert len(reader) == 1
    assert reader.record(0)["session"] == "1" * 24


def test_exported_file_is_downloadable(client):
    client.post("/submissions", json=line_payload())
    link = client.post("/export/geojson/file").json()["download"]
    r = client.get(link)
    assert r.status_code == 200
    assert r.json()["type"] == "FeatureCollection"


def test_database_file_is_not_served(client):
    db_name = os.path.basename(os.environ["DATABASE_URL"])
    assert client.get(f"/data/{db_name}").status_code == 404
    assert client.get(f"/data/exports/../{db_name}").status_code == 404
