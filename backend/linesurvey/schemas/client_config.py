# backend/linesurvey/schemas/client_config.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LineStyle(BaseModel):
    color: str
    weight: int
    opacity: float


class ClientConfig(BaseModel):
    """Static configuration the survey page reads at load time."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    endpoint_url: str
    survey_id: str
    survey_version: str
    map_center: tuple[float, float]
    initial_zoom: int
    min_zoom: int
    max_zoom: int
    pan_bounds: tuple[tuple[float, float], tuple[float, float]]
    min_points: int = Field(ge=2)
    max_points: int
    line_style: LineStyle
