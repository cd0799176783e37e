from __future__ import annotations

import uuid
from fastapi import status
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


class TestCorrelationIdMiddleware:
    """Test correlation id middleware functionality."""

    def test_correlation_id_generated_when_missing(self, test_client: TestClient) -> None:
        response = test_client.get("/catalog/authors")
        assert response.status_code == status.HTTP_200_OK
        uuid.UUID(response.headers["X-Request-ID"])

    def test_correlation_id_preserved_when_provided(
        self, test_client: TestClient, headers_with_correlation: dict[str, str]
    ) -> None:
        response = test_client.get("/catalog/authors", headers=headers_with_correlation)
        assert response.headers["X-Request-ID"] == headers_with_correlation["X-Request-ID"]

    def test_correlation_id_different_per_request(self, test_client: TestClient) -> None:
        first = test_client.get("/catalog/authors").headers["X-Request-ID"]
        second = test_client.get("/catalog/authors").headers["X-Request-ID"]
        assert first != second

    def test_correlation_id_empty_string(self, test_client: TestClient) -> None:
        response = test_client.get("/catalog/authors", headers={"X-Request-ID": ""})
        assert response.headers["X-Request-ID"] != ""

    def test_correlation_id_in_error_pages(self, test_client: TestClient) -> None:
        headers = {"X-Request-ID": "trace-abc"}
        response = test_client.get(f"/catalog/author/{uuid.uuid4()}", headers=headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.headers["X-Request-ID"] == "trace-abc"
        assert "trace-abc" in response.text

    def test_correlation_id_on_redirects(self, test_client: TestClient) -> None:
        response = test_client.get(
            f"/catalog/author/{uuid.uuid4()}/delete",
            headers={"X-Request-ID": "trace-redirect"},
            follow_redirects=False,
        )
        assert response.status_code == status.HTTP_302_FOUND
        assert response.headers["X-Request-ID"] == "trace-redirect"
