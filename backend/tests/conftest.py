import os
import tempfile

# Settings and the engine are built at import time, so point them at a
# throwaway SQLite file before anything from linesurvey is imported.
_TMP = tempfile.mkdtemp(prefix="linesurvey-test-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP}/test.db")
os.environ.setdefault("DATA_DIR", _TMP)

import pytest  # noqa: E402


@pytest.fixture(scope="session")
def app():
    from linesurvey.db import init_db  # noqa: WPS433
    from linesurvey.main import app as fastapi_app  # noqa: WPS433
    init_db()
    return fastapi_app


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient  # noqa: WPS433
    return TestClient(app)


@pytest.fixture()
def db(app):
    from linesurvey.db import SessionLocal  # noqa: WPS433
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _clean_sheets(app):
    yield
    from linesurvey.db import SessionLocal  # noqa: WPS433
    from linesurvey.models.sheet import Sheet  # noqa: WPS433
    from linesurvey.models.sheet_row import SheetRow  # noqa: WPS433
    with SessionLocal() as s:
        s.query(SheetRow).delete()
        s.query(Sheet).delete()
        s.commit()


def line_payload(session_id="a" * 24, n=3, **extra):
    coords = [[139.70 + i * 0.001, 35.68 + i * 0.001] for i in range(n)]
    payload = {
        "sessionId": session_id,
        "timestamp": "2025-06-01T09:00:00Z",
        "surveyVersion": "1.0",
        "pointCount": n,
        "geometry": {
            "type": "Feature",
            "geometry": {"type": "LineString", "coordinates": coords},
            "properties": {},
        },
        "userAgent": "pytest",
    }
    payload.update(extra)
    return payload
