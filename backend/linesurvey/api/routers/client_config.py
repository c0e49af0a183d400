from fastapi import APIRouter

from linesurvey.core.config import Settings, settings
from linesurvey.schemas.client_config import ClientConfig, LineStyle

router = APIRouter()


def client_config_from(s: Settings) -> ClientConfig:
    return ClientConfig(
        endpoint_url=s.endpoint_url,
        survey_id=s.survey_id,
        survey_version=s.survey_version,
        map_center=s.map_center,
        initial_zoom=s.initial_zoom,
        min_zoom=s.min_zoom,
        max_zoom=s.max_zoom,
        pan_bounds=s.pan_bounds,
        min_points=s.min_points,
        max_points=s.max_points,
        line_style=LineStyle(color=s.line_color, weight=s.line_weight, opacity=s.line_opacity),
    )


@router.get("")
@router.get("/")
def get_client_config():
    return client_config_from(settings).model_dump(by_alias=True)
