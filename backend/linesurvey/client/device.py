# backend/linesurvey/client/device.py
"""Device-local state for the survey client.

The browser page keeps this in localStorage; the Python client keeps the
same two things in a small JSON file: the device's session id and one
"already submitted" flag per survey id.
"""
from __future__ import annotations

import json
import logging
import secrets
from pathlib import Path

from linesurvey.core.constants import SESSION_ID_BYTES

logger = logging.getLogger(__name__)

SESSION_KEY = "line_survey_session_id"
SUBMITTED_PREFIX = "line_survey_submitted_"


def new_session_id() -> str:
    return secrets.token_hex(SESSION_ID_BYTES)


class DeviceStore:
    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._data: dict[str, str] = {}
        if self.path.exists():
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8"))
            except ValueError:
                logger.warning("device store %s is corrupt; starting empty", self.path)
                self._data = {}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")

    def session_id(self) -> str:
        """Stable per device: generated on first use, then reused."""
        sid = self._data.get(SESSION_KEY)
        if not sid:
            sid = new_session_id()
            self._data[SESSION_KEY] = sid
            self._save()
        return sid

    def has_submitted(self, survey_id: str) -> bool:
        return self._data.get(SUBMITTED_PREFIX + survey_id) == "true"

    def mark_submitted(self, survey_id: str) -> None:
        self._data[SUBMITTED_PREFIX + survey_id] = "true"
        self._save()
