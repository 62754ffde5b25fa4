"""
Tests for the Static Server
============================
"""

import pytest
import sys
from pathlib import Path

from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from zoneplay.server.app import DEFAULT_PORT, create_app, resolve_port


@pytest.fixture
def site(tmp_path):
    """Frontend and vendor trees on disk."""
    frontend = tmp_path / "frontend"
    vendor = tmp_path / "vendor"
    frontend.mkdir()
    (vendor / "lib").mkdir(parents=True)

    (frontend / "front.html").write_text("<h1>ZonePlay</h1>")
    (frontend / "style.css").write_text("body { color: red; }")
    (vendor / "lib" / "lib.js").write_text("export default 1;")
    return frontend, vendor


@pytest.fixture
def client(site):
    frontend, vendor = site
    return TestClient(create_app(str(frontend), str(vendor)))


class TestRoutes:
    """Test suite for the three route groups."""

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "ZonePlay" in response.text
        assert response.headers["content-type"].startswith("text/html")

    def test_frontend_file(self, client):
        response = client.get("/style.css")
        assert response.status_code == 200
        assert "color: red" in response.text

    def test_vendor_file(self, client):
        response = client.get("/vendor/lib/lib.js")
        assert response.status_code == 200
        assert "export default" in response.text

    def test_missing_file(self, client):
        assert client.get("/nope.js").status_code == 404

    def test_post_not_allowed(self, client):
        assert client.post("/").status_code == 405

    def test_missing_vendor_dir(self, site, tmp_path):
        frontend, _ = site
        client = TestClient(create_app(str(frontend), str(tmp_path / "absent")))
        assert client.get("/").status_code == 200
        assert client.get("/vendor/lib/lib.js").status_code == 404


class TestPort:
    """Test suite for PORT handling."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        assert resolve_port() == DEFAULT_PORT == 3000

    def test_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert resolve_port() == 8080

    def test_invalid_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "http")
        assert resolve_port(4000) == 4000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
