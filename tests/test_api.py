"""
Tests for the HTTP planning API
"""
import pytest
from fastapi.testclient import TestClient

from conjure_orchestrator.main import app


class TestPlansApi:
    """Test /api/plans"""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_plan(self, client, temp_dir):
        response = client.post("/api/plans", json={
            "name": "foo",
            "version": "1.0.0",
            "project_dir": str(temp_dir),
            "children": [{"name": "foo-objects"}, {"name": "foo-jersey"}],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["root_name"] == "foo"
        assert body["generate_task"] == ":compileConjure"
        assert body["clean_task"] == ":clean"
        tasks = {task["name"]: task for task in body["tasks"]}
        assert set(tasks[":compileConjure"]["dependencies"]) == {
            ":compileConjureObjects", ":compileConjureJersey"
        }
        assert body["order"].index(":compileIr") < body["order"].index(":compileConjureJersey")

    def test_configuration_error(self, client):
        response = client.post("/api/plans", json={
            "name": "foo",
            "children": [{"name": "foo-rust"}],
        })

        assert response.status_code == 422
        assert response.json()["error"] == "MissingGenerator"
        assert "conjure-rust" in response.json()["detail"]

    def test_malformed_generator(self, client):
        response = client.post("/api/plans", json={
            "name": "foo",
            "children": [{"name": "foo-dialogue"}],
            "generators": ["com.example:bad-name-objects:1.0.0"],
        })

        assert response.status_code == 422
        assert response.json()["error"] == "MalformedGeneratorName"

    def test_invalid_coordinate(self, client):
        response = client.post("/api/plans", json={
            "name": "foo",
            "children": [{"name": "foo-rust"}],
            "generators": ["a:conjure-rust:1:2"],
        })

        assert response.status_code == 422
        assert response.json()["error"] == "InvalidCoordinate"
        assert "a:conjure-rust:1:2" in response.json()["detail"]

    def test_invalid_manifest(self, client):
        response = client.post("/api/plans", json={"children": []})

        assert response.status_code == 422
