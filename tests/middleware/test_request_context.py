"""
Request Context Middleware Tests
================================
"""

import pytest


pytestmark = pytest.mark.integration


class TestRequestContextMiddleware:
    """Tests for request ID and timing headers."""

    def test_generates_request_id(self, client):
        # Act
        response = client.get("/health")

        # Assert
        assert response.status_code == 200
        assert response.headers["X-Request-ID"]
        assert float(response.headers["X-Process-Time"]) >= 0

    def test_echoes_incoming_request_id(self, client):
        # Act
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        # Assert
        assert response.headers["X-Request-ID"] == "req-123"

    def test_headers_on_rejected_request(self, client):
        # Act
        response = client.get("/rest/members")

        # Assert
        assert response.status_code == 401
        assert "X-Request-ID" in response.headers
