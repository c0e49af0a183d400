# backend/linesurvey/models/sheet_row.py
from sqlalchemy import Integer, String, Column, ForeignKey, Text
from .base import Base


class SheetRow(Base):
    """One data row of a sheet. Row order within a sheet is the order of `id`."""

    __tablename__ = "sheet_rows"
    id = Column(Integer, primary_key=True)
    sheet_id = Column(Integer, ForeignKey("sheets.id", ondelete="CASCADE"), nullable=False, index=True)
    row_id = Column(Integer, nullable=True)  # 回答シートでは id と同値、バックアップでは元の値を保持
    session_id = Column(String, nullable=False, index=True)
    # 時刻はシートのセル同様に文字列で保持（クライアント由来の値は未検証）
    timestamp = Column(String, nullable=True)
    received_at = Column(String, nullable=False)
    survey_version = Column(String, default="unknown")
    point_count = Column(Integer, nullable=True)
    geometry_json = Column(Text, nullable=False)  # GeoJSON string (Feature<LineString>, EPSG:4326)
    coordinates = Column(Text, nullable=True)  # [[lon,lat],...] JSON
    user_agent = Column(String, default="unknown")
