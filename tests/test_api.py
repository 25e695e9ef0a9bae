"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from choropleth_api.dependencies import get_session_service
from choropleth_api.main import app
from choropleth_api.services.session_service import SessionService

API = "/api/v1"


@pytest.fixture
def service():
    return SessionService(max_sessions=2)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_session_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client):
    response = client.post(f"{API}/sessions", json={"title": "Population"})
    assert response.status_code == 201
    return response.json()["session_id"]


@pytest.fixture
def ready_session(client, session_id, states_csv, states_svg):
    client.post(
        f"{API}/sessions/{session_id}/table",
        files={"file": ("states.csv", states_csv, "text/csv")},
    )
    client.post(
        f"{API}/sessions/{session_id}/geometry",
        files={"file": ("states.svg", states_svg, "image/svg+xml")},
    )
    return session_id


class TestSessions:
    def test_create_and_get(self, client, session_id):
        response = client.get(f"{API}/sessions/{session_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Population"
        assert body["ready"] is False
        assert body["validation"] is None

    def test_list_most_recent_first(self, client, session_id):
        other = client.post(f"{API}/sessions", json={}).json()["session_id"]
        ids = [s["session_id"] for s in client.get(f"{API}/sessions").json()]
        assert ids == [other, session_id]

    def test_delete(self, client, session_id):
        assert client.delete(f"{API}/sessions/{session_id}").status_code == 204
        response = client.get(f"{API}/sessions/{session_id}")
        assert response.status_code == 404
        assert response.json()["error_type"] == "SessionNotFoundError"

    def test_invalid_session_id(self, client):
        response = client.get(f"{API}/sessions/bad$id")
        assert response.status_code == 400
        assert response.json()["error_type"] == "InvalidSessionIdError"

    def test_least_recently_used_session_is_evicted(self, client, session_id):
        client.post(f"{API}/sessions", json={})
        client.post(f"{API}/sessions", json={})
        assert client.get(f"{API}/sessions/{session_id}").status_code == 404


class TestUploads:
    def test_table_upload(self, client, session_id, states_csv):
        response = client.post(
            f"{API}/sessions/{session_id}/table",
            files={"file": ("states.csv", states_csv, "text/csv")},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["validation"]["is_valid"] is True
        assert body["validation"]["row_count"] == 5
        assert body["columns"] == ["State", "Population", "Note"]
        assert body["region_column"] == "State"
        assert body["value_column"] == "Population"
        assert body["preview"][0]["Population"] == 39

    def test_invalid_table_is_reported(self, client, session_id):
        response = client.post(
            f"{API}/sessions/{session_id}/table",
            files={"file": ("empty.csv", "State,Value\n", "text/csv")},
        )
        assert response.status_code == 200
        assert response.json()["validation"]["errors"] == ["No data rows found"]

    def test_wrong_table_type(self, client, session_id):
        response = client.post(
            f"{API}/sessions/{session_id}/table",
            files={"file": ("states.xlsx", b"PK\x03\x04", "application/octet-stream")},
        )
        assert response.status_code == 415
        assert response.json()["detail"] == "Please upload a CSV file"

    def test_geometry_upload(self, client, session_id, states_svg):
        response = client.post(
            f"{API}/sessions/{session_id}/geometry",
            files={"file": ("states.svg", states_svg, "image/svg+xml")},
        )
        assert response.status_code == 200
        body = response.json()
        assert "Texas" in body["candidates"]
        assert body["candidate_count"] == len(body["candidates"])

    def test_wrong_geometry_type(self, client, session_id):
        response = client.post(
            f"{API}/sessions/{session_id}/geometry",
            files={"file": ("map.png", b"\x89PNG", "image/png")},
        )
        assert response.status_code == 415


class TestBinding:
    def test_binding(self, client, ready_session):
        response = client.get(f"{API}/sessions/{ready_session}/binding")
        assert response.status_code == 200
        body = response.json()
        assert body["unmatched"] == ["Atlantis"]
        assert body["classification"]["buckets"] == 5
        assert len(body["scale"]) == 5
        assert set(body["color_lookup"]) == {"California", "Texas", "Oregon"}
        assert body["legend"]["title"] == "Population"
        assert len(body["rows"]) == 5

    def test_binding_not_ready(self, client, session_id):
        response = client.get(f"{API}/sessions/{session_id}/binding")
        assert response.status_code == 409
        assert response.json()["error_type"] == "BindingNotReadyError"

    def test_update_settings(self, client, ready_session):
        response = client.put(
            f"{API}/sessions/{ready_session}/settings",
            json={"scheme_id": "set1", "method": "quantile", "buckets": 3},
        )
        assert response.status_code == 200
        settings = response.json()["settings"]
        assert settings["scheme_id"] == "set1"
        assert settings["region_column"] == "State"

        body = client.get(f"{API}/sessions/{ready_session}/binding").json()
        assert body["scheme"]["id"] == "set1"
        assert body["classification"]["method"]["id"] == "quantile"
        assert body["scale"] == ["#e41a1c", "#377eb8", "#4daf4a"]

    def test_manual_breaks(self, client, ready_session):
        client.put(
            f"{API}/sessions/{ready_session}/settings",
            json={"method": "manual", "buckets": 2, "manual_breaks": [0, 10, 50]},
        )
        body = client.get(f"{API}/sessions/{ready_session}/binding").json()
        assert body["classification"]["breaks"] == [0, 10, 50]

    def test_manual_breaks_with_wrong_count(self, client, ready_session):
        client.put(
            f"{API}/sessions/{ready_session}/settings",
            json={"method": "manual", "buckets": 3, "manual_breaks": [0, 10, 50]},
        )
        response = client.get(f"{API}/sessions/{ready_session}/binding")
        assert response.status_code == 400
        assert response.json()["error_type"] == "InvalidBreaksError"

    @pytest.mark.parametrize("payload", [
        {"method": "kmeans"},
        {"buckets": 0},
        {"custom_colors": ["#fff"]},
        {"custom_colors": ["#fff", "nope"]},
        {"manual_breaks": [10, 0]},
        {"interpolation": "spline"},
        {"region_column": "  "},
    ])
    def test_invalid_settings(self, client, ready_session, payload):
        response = client.put(f"{API}/sessions/{ready_session}/settings", json=payload)
        assert response.status_code == 422
        assert response.json()["error_type"] == "ValidationError"

    def test_unknown_scheme_setting(self, client, ready_session):
        response = client.put(f"{API}/sessions/{ready_session}/settings", json={"scheme_id": "nope"})
        assert response.status_code == 404

    def test_unknown_column(self, client, ready_session):
        client.put(f"{API}/sessions/{ready_session}/settings", json={"value_column": "GDP"})
        response = client.get(f"{API}/sessions/{ready_session}/binding")
        assert response.status_code == 400
        assert response.json()["error_type"] == "ColumnNotFoundError"

    def test_export(self, client, ready_session):
        response = client.get(f"{API}/sessions/{ready_session}/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="states_matched.csv"' in response.headers["content-disposition"]
        assert response.text.splitlines()[0] == "State,Population,Note,matched_region,match_confidence"


class TestCatalogs:
    def test_schemes(self, client):
        schemes = client.get(f"{API}/schemes").json()
        assert len(schemes) == 12
        diverging = client.get(f"{API}/schemes", params={"type": "diverging"}).json()
        assert [s["id"] for s in diverging] == ["rdbu", "rdylgn", "brbg", "piyg"]

    def test_scheme_scale(self, client):
        response = client.get(f"{API}/schemes/buenos-aries/scale", params={"buckets": 3})
        assert response.status_code == 200
        body = response.json()
        assert body["buckets"] == 3
        assert body["colors"][0] == "#f7fbff"
        assert body["colors"][-1] == "#08519c"

    def test_unknown_scheme_scale(self, client):
        assert client.get(f"{API}/schemes/nope/scale").status_code == 404

    def test_classification_methods(self, client):
        methods = client.get(f"{API}/classification-methods").json()
        assert [m["id"] for m in methods] == ["equalInterval", "quantile", "natural", "manual"]

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
