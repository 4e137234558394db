import pytest
from fastapi.testclient import TestClient

from alias_service.config import settings


class TestShorten:
    """Test the shorten endpoint"""

    def test_create_with_alias(self, client: TestClient):
        response = client.post("/api/v1/urls/", json={"long_url": "https://example.com/a", "alias": "abc123"})
        assert response.status_code == 201

        data = response.json()
        assert data["alias"] == "abc123"
        assert data["long_url"] == "https://example.com/a"
        assert data["short_url"] == f"{settings.base_url}/abc123"
        assert data["hit_count"] == 0
        assert data["is_active"] is True
        assert data["deleted_at"] is None

    def test_create_generates_alias(self, client: TestClient):
        response = client.post("/api/v1/urls/", json={"long_url": "https://www.python.org/"})
        assert response.status_code == 201

        alias = response.json()["alias"]
        assert len(alias) == settings.alias_length
        assert alias.isalnum()

    def test_duplicate_alias(self, client: TestClient):
        client.post("/api/v1/urls/", json={"long_url": "https://example.com/a", "alias": "abc123"})

        response = client.post("/api/v1/urls/", json={"long_url": "https://example.com/b", "alias": "abc123"})

        assert response.status_code == 422
        assert response.json()["code"] == "alias_not_available"

    def test_reserved_alias(self, client: TestClient):
        response = client.post("/api/v1/urls/", json={"long_url": "https://example.com/", "alias": "health"})

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_invalid_url(self, client: TestClient):
        response = client.post("/api/v1/urls/", json={"long_url": "not-a-valid-url"})
        assert response.status_code == 422  # Validation error

    @pytest.mark.parametrize("alias", ["a b", "", "x" * 65])
    def test_invalid_alias(self, client: TestClient, alias):
        response = client.post("/api/v1/urls/", json={"long_url": "https://example.com/", "alias": alias})

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"



class TestRedirect:
    """Test URL redirection"""

    def test_redirect_url(self, client: TestClient):
        client.post("/api/v1/urls/", json={"long_url": "https://www.github.com/", "alias": "gh0001"})

        response = client.get("/gh0001", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_unknown_alias(self, client: TestClient):
        response = client.get("/zzzzzz", follow_redirects=False)

        assert response.status_code == 404
        assert response.headers["location"] == settings.fallback_url

    def test_rate_limit(self, client: TestClient):
        client.post("/api/v1/urls/", json={"long_url": "https://example.com/a", "alias": "abc123"})

        for _ in range(settings.rate_limit_threshold):
            assert client.get("/abc123", follow_redirects=False).status_code == 302

        response = client.get("/abc123", follow_redirects=False)

        assert response.status_code == 429
        assert response.json()["code"] == "rate_limit_exceeded"

    def test_redirect_records_user_agent(self, client: TestClient):
        url_id = client.post(
            "/api/v1/urls/", json={"long_url": "https://example.com/a", "alias": "ua0001"}
        ).json()["id"]

        client.get("/ua0001", headers={"User-Agent": "test-agent/1.0"}, follow_redirects=False)

        stats = client.get(f"/api/v1/urls/{url_id}/stats").json()
        assert stats["total_access_count"] == 1
        assert stats["signature_counts"] == {"test-agent/1.0": 1}


class TestUrlAdmin:
    """Test info, delete and statistics endpoints"""

    def test_get_url_info(self, client: TestClient):
        url_id = client.post(
            "/api/v1/urls/", json={"long_url": "https://www.google.com/", "alias": "goo001"}
        ).json()["id"]

        response = client.get(f"/api/v1/urls/{url_id}")

        assert response.status_code == 200
        assert response.json()["alias"] == "goo001"

    def test_get_nonexistent_url(self, client: TestClient):
        response = client.get("/api/v1/urls/9999")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_delete_url(self, client: TestClient):
        url_id = client.post(
            "/api/v1/urls/", json={"long_url": "https://www.python.org/", "alias": "py0001"}
        ).json()["id"]

        response = client.delete(f"/api/v1/urls/{url_id}")
        assert response.status_code == 200
        assert response.json()["url"]["is_active"] is False

        # Deleted alias falls back
        response = client.get("/py0001", follow_redirects=False)
        assert response.status_code == 404

        # Deleting again is a no-op
        response = client.delete(f"/api/v1/urls/{url_id}")
        assert response.status_code == 200

        # Still visible to the administrative lookup
        assert client.get(f"/api/v1/urls/{url_id}").json()["deleted_at"] is not None

    def test_delete_nonexistent_url(self, client: TestClient):
        response = client.delete("/api/v1/urls/9999")
        assert response.status_code == 404

    def test_statistics(self, client: TestClient):
        first = client.post("/api/v1/urls/", json={"long_url": "https://example.com/1", "alias": "stat01"}).json()
        second = client.post("/api/v1/urls/", json={"long_url": "https://example.com/2", "alias": "stat02"}).json()
        client.get("/stat01", headers={"User-Agent": "a"}, follow_redirects=False)
        client.get("/stat01", headers={"User-Agent": "b"}, follow_redirects=False)

        response = client.get("/api/v1/urls/statistics")
        assert response.status_code == 200

        stats = {s["id"]: s for s in response.json()["statistics"]}
        assert stats[first["id"]]["total_access_count"] == 2
        assert stats[first["id"]]["signature_counts"] == {"a": 1, "b": 1}
        assert stats[second["id"]]["total_access_count"] == 0
        assert stats[second["id"]]["signature_counts"] == {}


class TestRoot:
    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
