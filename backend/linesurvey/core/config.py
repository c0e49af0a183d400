# backend/linesurvey/core/config.py
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


def _default_data_dir() -> str:
    # コンテナでは /app/data、ローカルでは <repo root>/data
    container_data = Path("/app/data")
    if container_data.exists():
        return str(container_data)
    return str(Path(__file__).resolve().parents[3] / "data")


class Settings(BaseSettings):
    database_url: str | None = None  # 未指定なら data_dir 配下の SQLite
    data_dir: str = _default_data_dir()
    exports_dir: str | None = None  # 未指定なら <data_dir>/exports

    # 回答シート
    sheet_name: str = "Responses"

    # クライアント設定（静的）
    endpoint_url: str = "/submissions"
    survey_id: str = "line_survey_v1"
    survey_version: str = "1.0"
    map_center: tuple[float, float] = (35.6812, 139.7671)  # (lat, lon)
    min_zoom: int = 11
    max_zoom: int = 18
    initial_zoom: int = 13
    # [[south, west], [north, east]]
    pan_bounds: tuple[tuple[float, float], tuple[float, float]] = ((35.55, 139.55), (35.82, 139.95))
    min_points: int = 2
    max_points: int = 100
    line_color: str = "#e4572e"
    line_weight: int = 4
    line_opacity: float = 0.85

    log_level: str = "INFO"

    @field_validator("database_url", "exports_dir", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v in ("", None, "null", "None"):
            return None
        return v

    @property
    def exports_path(self) -> Path:
        return Path(self.exports_dir) if self.exports_dir else Path(self.data_dir) / "exports"

    class Config:
        env_file = ".env"


settings = Settings()
