# backend/linesurvey/schemas/submission.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class SubmissionIn(BaseModel):
    """POST body. Only sessionId and geometry are required; everything else is best effort."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    timestamp: Optional[str] = None
    survey_version: Optional[str] = Field(default=None, alias="surveyVersion")
    point_count: Optional[int] = Field(default=None, alias="pointCount")
    geometry: dict[str, Any]
    user_agent: Optional[str] = Field(default=None, alias="userAgent")


class SubmissionAck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    row_id: Optional[int] = Field(default=None, serialization_alias="rowId")
    message: Optional[str] = None
    error: Optional[str] = None

    def as_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
