# backend/linesurvey/api/routers/export.py
from fastapi import APIRouter, Depends, HTTPException, Response
from pathlib import Path
from sqlalchemy.orm import Session
import tempfile

from linesurvey.db import get_db
from linesurvey.core.config import settings
from linesurvey.core.constants import EXPORTS_URL
from linesurvey.models.sheet import Sheet
from linesurvey.services.export.geojson import build_feature_collection, write_feature_collection
from linesurvey.services.export.shapefile import export_line_shapefile
from linesurvey.services.export.workbook import render_workbook
from linesurvey.services.store.sheets import find_sheet, read_rows

router = APIRouter()


def _responses_sheet(db: Session) -> Sheet:
    sheet = find_sheet(db, settings.sheet_name)
    if not sheet:
        raise HTTPException(status_code=404, detail="no responses yet")
    return sheet


@router.get("/geojson")
def export_geojson(db: Session = Depends(get_db)):
    return build_feature_collection(read_rows(db, _responses_sheet(db)))


@router.post("/geojson/file")
def export_geojson_file(db: Session = Depends(get_db)):
    collection = build_feature_collection(read_rows(db, _responses_sheet(db)))
    out = write_feature_collection(collection, settings.exports_path)
    return {
        "file": out.name,
        "download": f"{EXPORTS_URL}/{out.name}",
        "totalFeatures": collection["metadata"]["totalFeatures"],
    }


@router.post("/shapefile")
def make_shp(target_epsg: int, encoding: str = "UTF-8", db: Session = Depends(get_db)):
    collection = build_feature_collection(read_rows(db, _responses_sheet(db)))

    # 一時ディレクトリにZIPを作成し、メモリに読み込んで返す（サーバ上に残さない）
    with tempfile.TemporaryDirectory() as tmpdir:
        out = Path(tmpdir) / "line_survey.zip"
        try:
            export_line_shapefile(collection["features"], out, target_epsg, encoding)
        except Exception as e:  # pyproj.exceptions.CRSError など
            raise HTTPException(status_code=400, detail=f"shapefile export failed: {e}")
        data = out.read_bytes()
    headers = {"Content-Disposition": "attachment; filename=\"line_survey.zip\""}
    return Response(content=data, media_type="application/zip", headers=headers)


@router.get("/xlsx")
def export_xlsx(db: Session = Depends(get_db)):
    sheet = _responses_sheet(db)
    data = render_workbook(sheet, read_rows(db, sheet))
    headers = {"Content-Disposition": f"attachment; filename=\"{sheet.name}.xlsx\""}
    return Response(
        content=data,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=headers,
    )
