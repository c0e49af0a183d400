# backend/linesurvey/models/sheet.py
from datetime import datetime, timezone

from sqlalchemy import Integer, String, Column, DateTime, JSON
from sqlalchemy.orm import relationship
from .base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Sheet(Base):
    __tablename__ = "sheets"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    header = Column(JSON, nullable=False)  # 列名の配列（順序付き）
    frozen_rows = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    rows = relationship(
        "SheetRow",
        order_by="SheetRow.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
