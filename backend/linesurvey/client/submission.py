# backend/linesurvey/client/submission.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from linesurvey.client.device import DeviceStore
from linesurvey.core.constants import SEND_ERROR_MESSAGE
from linesurvey.schemas.client_config import ClientConfig
from linesurvey.schemas.commons import GeoJSONFeature, LineStringGeometry

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "linesurvey-python-client"


class DrawValidationError(ValueError):
    pass


class AlreadySubmittedError(RuntimeError):
    pass


class SubmissionSendError(RuntimeError):
    """Transport or response failure; the device flag is left untouched."""

    def __init__(self, detail: str):
        super().__init__(SEND_ERROR_MESSAGE)
        self.detail = detail


@dataclass
class DrawState:
    """The polyline being drawn: ordered [lon, lat] vertices."""

    min_points: int = 2
    max_points: int = 100
    points: list[tuple[float, float]] = field(default_factory=list)

    def add_point(self, lon: float, lat: float) -> None:
        if len(self.points) >= self.max_points:
            raise DrawValidationError(f"at most {self.max_points} points allowed")
        self.points.append((float(lon), float(lat)))

    def undo(self) -> None:
        if self.points:
            self.points.pop()

    def clear(self) -> None:
        self.points.clear()

    @property
    def point_count(self) -> int:
        return len(self.points)

    def can_submit(self) -> bool:
        return self.min_points <= len(self.points) <= self.max_points

    def validate(self) -> None:
        n = len(self.points)
        if n < self.min_points:
            raise DrawValidationError(f"draw at least {self.min_points} points (have {n})")
        if n > self.max_points:
            raise DrawValidationError(f"at most {self.max_points} points allowed (have {n})")

    def to_feature(self) -> dict:
        geom = LineStringGeometry(coordinates=[[lon, lat] for lon, lat in self.points])
        return GeoJSONFeature(geometry=geom.model_dump()).model_dump()


class SubmissionClient:
    """Posts one drawn line per device to the survey endpoint.

    `http` is any httpx.Client; FastAPI's TestClient works too.
    """

    def __init__(self, config: ClientConfig, device: DeviceStore, http: httpx.Client | None = None,
                 user_agent: str = DEFAULT_USER_AGENT):
        self.config = config
        self.device = device
        self.http = http or httpx.Client(timeout=30.0)
        self.user_agent = user_agent

    def new_drawing(self) -> DrawState:
        return DrawState(min_points=self.config.min_points, max_points=self.config.max_points)

    @property
    def already_submitted(self) -> bool:
        return self.device.has_submitted(self.config.survey_id)

    def build_payload(self, drawing: DrawState) -> dict:
        return {
            "sessionId": self.device.session_id(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "surveyVersion": self.config.survey_version,
            "pointCount": drawing.point_count,
            "geometry": drawing.to_feature(),
            "userAgent": self.user_agent,
        }

    def submit(self, drawing: DrawState) -> dict:
        if self.already_submitted:
            raise AlreadySubmittedError(f"survey {self.config.survey_id} already submitted on this device")
        drawing.validate()

        payload = self.build_payload(drawing)
        try:
            resp = self.http.post(self.config.endpoint_url, json=payload)
            resp.raise_for_status()
            result = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("submission failed: %s", e)
            raise SubmissionSendError(str(e)) from e

        if not result.get("success"):
            logger.warning("endpoint rejected submission: %s", result.get("error"))
            raise SubmissionSendError(result.get("error") or "rejected")

        self.device.mark_submitted(self.config.survey_id)
        logger.info("submitted %d points, row %s", drawing.point_count, result.get("rowId"))
        return result

    @classmethod
    def from_server(cls, base_url: str, device: DeviceStore, **kwargs) -> "SubmissionClient":
        """Fetch /config from a running server and point the client at it."""
        http = kwargs.pop("http", None) or httpx.Client(base_url=base_url, timeout=30.0)
        resp = http.get("/config")
        resp.raise_for_status()
        config = ClientConfig.model_validate(resp.json())
        return cls(config, device, http=http, **kwargs)
