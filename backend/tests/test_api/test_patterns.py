"""Tests for the pattern detection endpoints."""
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from pattern_scanner.api.v1.patterns import PATTERN_RATE_LIMIT
from pattern_scanner.core.config import Settings
from pattern_scanner.core.rate_limit import limiter


class TestDetectFormationEndpoint:
    """Tests for GET /api/v1/patterns/{formation}/{symbol}."""

    @pytest.mark.unit
    def test_double_bottom_confirmed(self, client: TestClient):
        response = client.get("/api/v1/patterns/double_bottom/PATTERNUSDT")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["symbol"] == "PATTERNUSDT"
        assert data["formation"] == "double_bottom"
        assert data["message"] == "Found 1 confirmed Double Bottom pattern(s) for PATTERNUSDT."
        assert data["potential_formations_count"] == 1
        assert data["rejected_count"] == 0
        assert data["total_candles_analyzed"] == 40
        assert data["insufficient_data"] is False

        pattern = data["patterns"][0]
        assert pattern["breakout_confirmation"]["index"] == 27
        assert pattern["breakout_confirmation"]["volume_confirmed"] is True
        assert pattern["projection"]["target_price"] == pytest.approx(130.0)
        assert pattern["status"] == "Double Bottom confirmed with breakout"

    def test_insufficient_data(self, client: TestClient):
        response = client.get("/api/v1/patterns/inverse_head_and_shoulders/PATTERNUSDT")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["insufficient_data"] is True
        assert data["patterns"] == []

    def test_unknown_formation(self, client: TestClient):
        response = client.get("/api/v1/patterns/cup_and_handle/PATTERNUSDT")

        assert response.status_code == 422

    def test_unknown_symbol(self, client: TestClient):
        response = client.get("/api/v1/patterns/double_bottom/NOPEUSDT")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_limit(self, client: TestClient):
        response = client.get("/api/v1/patterns/double_bottom/PATTERNUSDT", params={"limit": -1})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestScanEndpoint:
    """Tests for GET /api/v1/patterns/scan/{symbol} without a secret."""

    def test_scan_all_formations(self, client: TestClient):
        response = client.get("/api/v1/patterns/scan/PATTERNUSDT")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["symbol"] == "PATTERNUSDT"
        assert data["granularity"] == "1h"
        assert data["total_candles"] == 40
        assert data["errors"] == []
        assert [p["pattern_type"] for p in data["detected_patterns"]] == ["double_bottom"]
        assert "falling_wedge" in data["parameters_used"]

    def test_scan_unknown_symbol(self, client: TestClient):
        response = client.get("/api/v1/patterns/scan/NOPEUSDT")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestScanEndpointSecret:
    """Tests for the scan secret check."""

    @pytest.fixture
    def override_get_settings(self, test_settings: Settings) -> Settings:
        return test_settings.model_copy(update={"scan_secret": "s3cret"})

    def test_missing_secret_rejected(self, client: TestClient):
        response = client.get("/api/v1/patterns/scan/PATTERNUSDT")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["www-authenticate"] == "Bearer"

    def test_wrong_secret_rejected(self, client: TestClient):
        response = client.get(
            "/api/v1/patterns/scan/PATTERNUSDT", headers={"Authorization": "Bearer nope"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_valid_secret_accepted(self, client: TestClient):
        response = client.get(
            "/api/v1/patterns/scan/PATTERNUSDT", headers={"Authorization": "Bearer s3cret"}
        )

        assert response.status_code == status.HTTP_200_OK

    def test_single_formation_is_open(self, client: TestClient):
        response = client.get("/api/v1/patterns/double_bottom/PATTERNUSDT")

        assert response.status_code == status.HTTP_200_OK


class TestPatternRateLimit:
    """Tests for the per-client limit on pattern endpoints."""

    @pytest.fixture
    def enabled_limiter(self):
        limiter.reset()
        limiter.enabled = True
        yield limiter
        limiter.enabled = False
        limiter.reset()

    def test_requests_over_limit_rejected(self, client: TestClient, enabled_limiter):
        allowed = int(PATTERN_RATE_LIMIT.split("/")[0])

        statuses = [
            client.get("/api/v1/patterns/double_bottom/PATTERNUSDT").status_code
            for _ in range(allowed)
        ]
        over = client.get("/api/v1/patterns/double_bottom/PATTERNUSDT")

        assert set(statuses) == {status.HTTP_200_OK}
        assert over.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_limit_is_per_route(self, client: TestClient, enabled_limiter):
        allowed = int(PATTERN_RATE_LIMIT.split("/")[0])
        for _ in range(allowed + 1):
            client.get("/api/v1/patterns/double_bottom/PATTERNUSDT")

        response = client.get("/api/v1/patterns/scan/PATTERNUSDT")

        assert response.status_code == status.HTTP_200_OK

    def test_disabled_under_test_environment(self, client: TestClient):
        assert limiter.enabled is False
        allowed = int(PATTERN_RATE_LIMIT.split("/")[0])

        statuses = {
            client.get("/api/v1/patterns/double_bottom/PATTERNUSDT").status_code
            for _ in range(allowed + 1)
        }

        assert statuses == {status.HTTP_200_OK}
