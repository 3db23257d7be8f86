"""
Test the REST API with the upstream client replaced by mocks
"""

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ConnectionFailure
from unittest.mock import AsyncMock

import controllers.preference_controller as preference_module
import main
from controllers.coin_controller import coin_controller
from main import app
from models.chart_model import MarketChartPayload, TimeWindow
from models.coin_detail_model import CoinDetailPayload
from models.coin_model import Coin
from services.coingecko_service import CoinGeckoService
from services.fetch_errors import HttpError, NetworkFailure
from services.theme_service import ThemeService


@pytest.fixture
def coingecko(monkeypatch, market_rows, detail_payload, chart_payload):
    mock = AsyncMock(spec=CoinGeckoService)
    mock.get_coin_markets.return_value = [Coin(**row) for row in market_rows]
    mock.get_coin_detail.return_value = CoinDetailPayload.model_validate(detail_payload).to_detail()
    mock.get_market_chart.return_value = MarketChartPayload.model_validate(chart_payload)
    monkeypatch.setattr(coin_controller, "coingecko", mock)
    return mock


@pytest.fixture
def client():
    return TestClient(app)


class TestCoinEndpoints:
    """Test cases for /api/coins."""

    def test_list_coins(self, client, coingecko):
        response = client.get("/api/coins")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["error_message"] is None
        assert [coin["id"] for coin in body["value"]] == ["bitcoin", "ethereum", "tether"]
        assert body["value"][1]["price_change_display"] == "0.00%"

    def test_search_coins(self, client, coingecko):
        response = client.get("/api/coins", params={"search": "bit"})
        assert [coin["id"] for coin in response.json()["value"]] == ["bitcoin"]

    def test_coin_detail(self, client, coingecko):
        response = client.get("/api/coins/bitcoin")

        assert response.status_code == 200
        value = response.json()["value"]
        assert value["id"] == "bitcoin"
        assert value["description_html"] == "Bitcoin is the first cryptocurrency."
        coingecko.get_coin_detail.assert_awaited_once_with("bitcoin")

    def test_coin_detail_not_found(self, client, coingecko):
        coingecko.get_coin_detail.side_effect = HttpError(404)

        response = client.get("/api/coins/no-such-coin")

        assert response.status_code == 404
        assert "404" in response.json()["detail"]

    def test_upstream_failure_is_bad_gateway(self, client, coingecko):
        coingecko.get_coin_markets.side_effect = NetworkFailure("connection refused")

        response = client.get("/api/coins")

        assert response.status_code == 502
        assert response.json()["detail"] == "Network error: connection refused"

    def test_chart(self, client, coingecko):
        response = client.get("/api/coins/bitcoin/chart", params={"window": "1"})

        assert response.status_code == 200
        points = response.json()["value"]
        assert [point["timestamp"] for point in points] == [1700000000000, 1700003600000]
        assert [point["label"] for point in points] == ["22:13", "23:13"]
        coingecko.get_market_chart.assert_awaited_once_with("bitcoin", TimeWindow.ONE_DAY)

    def test_chart_rejects_unknown_window(self, client, coingecko):
        response = client.get("/api/coins/bitcoin/chart", params={"window": "365"})
        assert response.status_code == 422
        coingecko.get_market_chart.assert_not_awaited()


class TestPreferenceEndpoints:
    """Test cases for /api/preferences."""

    @pytest.fixture
    def themes(self, monkeypatch):
        mock = AsyncMock(spec=ThemeService)
        mock.load.return_value = "light"
        mock.save.side_effect = lambda theme: theme
        monkeypatch.setattr(preference_module, "theme_service", mock)
        broadcast = AsyncMock()
        monkeypatch.setattr(preference_module.websocket_service, "broadcast_theme", broadcast)
        mock.broadcast = broadcast
        return mock

    def test_get_theme(self, client, themes):
        response = client.get("/api/preferences/theme")
        assert response.json() == {"status": "Success", "theme": "light"}

    def test_update_theme_broadcasts(self, client, themes):
        response = client.post("/api/preferences/theme", json={"theme": "dark"})

        assert response.status_code == 200
        assert response.json()["theme"] == "dark"
        themes.save.assert_awaited_once_with("dark")
        themes.broadcast.assert_awaited_once_with("dark")

    def test_update_theme_validation(self, client, themes):
        response = client.post("/api/preferences/theme", json={"theme": "blue"})
        assert response.status_code == 422
        themes.save.assert_not_awaited()

    def test_storage_failure(self, client, themes):
        themes.save.side_effect = RuntimeError("Database not connected. Call connect() first.")
        response = client.post("/api/preferences/theme", json={"theme": "dark"})
        assert response.status_code == 500


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_starts_without_mongodb(self, monkeypatch):
        connect = AsyncMock(side_effect=ConnectionFailure("server selection timed out"))
        monkeypatch.setattr(main.db_config, "connect", connect)
        monkeypatch.setattr(main.db_config, "disconnect", AsyncMock())

        with TestClient(app) as client:
            response = client.get("/health")

        connect.assert_awaited_once()
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
