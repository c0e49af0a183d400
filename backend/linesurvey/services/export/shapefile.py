# backend/linesurvey/services/export/shapefile.py
import shapefile  # pyshp
from pyproj import CRS, Transformer
from shapely.errors import ShapelyError
from shapely.geometry import shape
from pathlib import Path
from typing import Iterable, Tuple
import logging
import shutil

logger = logging.getLogger(__name__)

# DBF の列名は 10 文字まで
LINE_FIELDS: Tuple[Tuple[str, str, int, int], ...] = (
    ("row_id", "N", 18, 0),
    ("session", "C", 24, 0),
    ("version", "C", 20, 0),
    ("points", "N", 10, 0),
    ("length_m", "N", 18, 1),
    ("timestamp", "C", 35, 0),
    ("received", "C", 35, 0),
)


def _as_line(geom):
    # 未検証のまま保存された形状は LineString（2 点以上）以外を除外
    if not isinstance(geom, dict) or geom.get("type") != "LineString":
        return None
    coords = geom.get("coordinates")
    if not isinstance(coords, list) or len(coords) < 2:
        return None
    try:
        line = shape(geom)
    except (ValueError, TypeError, ShapelyError):
        return None
    return None if line.is_empty else line


def export_line_shapefile(features: Iterable[dict], out_zip: Path, target_epsg: int, encoding: str = "UTF-8") -> int:
    """
    features: build_feature_collection() の features（LineString, EPSG:4326）
    出力: responses.shp/.shx/.dbf/.prj を zip にまとめて out_zip へ
    """
    out_dir = out_zip.parent / (out_zip.stem)
    out_dir.mkdir(parents=True, exist_ok=True)

    src_crs = CRS.from_epsg(4326)
    dst_crs = CRS.from_epsg(target_epsg)
    tf = Transformer.from_crs(src_crs, dst_crs, always_xy=True)

    path_base = out_dir / "responses"
    w = shapefile.Writer(str(path_base), shapeType=shapefile.POLYLINE, encoding=encoding)
    for f in LINE_FIELDS:
        w.field(*f)

    written = 0
    for feat in features:
        geom_ll = _as_line(feat.get("geometry"))  # LineString EPSG:4326
        if geom_ll is None:
            logger.warning("skipping non-line feature (row %s)", feat["properties"].get("rowId"))
            continue
        coords = [tf.transform(x, y) for x, y in geom_ll.coords]
        w.line([coords])
        p = feat["properties"]
        w.record(
            p.get("rowId"),
            p.get("sessionId") or "",
            (p.get("surveyVersion") or "")[:20],
            p.get("pointCount") or 0,
            p.get("length_m") or 0.0,
            (p.get("timestamp") or "")[:35],
            (p.get("receivedAt") or "")[:35],
        )
        written += 1
    w.close()
    (path_base.with_suffix('.prj')).write_text(dst_crs.to_wkt())

    # zip化
    shutil.make_archive(str(out_dir), 'zip', root_dir=out_dir)
    Path(str(out_dir) + '.zip').replace(out_zip)
    logger.info("shapefile export: %d lines -> EPSG:%d", written, target_epsg)
    return written
