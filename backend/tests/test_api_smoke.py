def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_submissions_ping(client):
    r = client.get("/submissions")
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["message"]
    assert "T" in data["timestamp"]


def test_client_config_is_camel_case(client):
    r = client.get("/config")
    assert r.status_code == 200
    cfg = r.json()
    assert cfg["surveyId"]
    assert cfg["endpointUrl"] == "/submissions"
    assert cfg["minPoints"] == 2
    assert cfg["maxPoints"] == 100
    assert cfg["minZoom"] <= cfg["initialZoom"] <= cfg["maxZoom"]
    assert len(cfg["panBounds"]) == 2
    assert set(cfg["lineStyle"]) == {"color", "weight", "opacity"}


def test_survey_page_served(client):
    r = client.get("/survey/")
    assert r.status_code == 200
    assert "survey.js" in r.text
