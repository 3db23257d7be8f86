# ==========================
# CoinGecko Service
# ==========================
import httpx
import logging
from urllib.parse import quote
from typing import Any, Dict, List, Optional
from pydantic import TypeAdapter, ValidationError
from config.settings import settings
from models.coin_model import Coin
from models.coin_detail_model import CoinDetail, CoinDetailPayload
from models.chart_model import MarketChartPayload, TimeWindow
from services.fetch_errors import FetchTimeout, HttpError, NetworkFailure, ParseFailure

logger = logging.getLogger(__name__)

_coin_list_adapter = TypeAdapter(List[Coin])


class CoinGeckoService:
    """
    Read-only client for the CoinGecko market-data API
    Every call is a single attempt; failures are raised as FetchError subclasses
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        currency: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = (base_url or settings.coingecko_base_url).rstrip('/')
        self.api_key = api_key if api_key is not None else settings.coingecko_api_key
        self.currency = currency or settings.vs_currency
        self.timeout = timeout or settings.request_timeout
        self.headers = {'accept': 'application/json'}
        if self.api_key:
            self.headers['x-cg-demo-api-key'] = self.api_key

        # Shared HTTP client with connection pooling
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create shared HTTP client with connection pooling"""
        if self._client is None or self._client.is_closed:
            limits = httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10
            )
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=limits
            )
        return self._client

    async def close_client(self):
        """Close the HTTP client"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _make_request(self, endpoint: str, params: Dict[str, Any]) -> Any:
        """
        GET an endpoint and decode its JSON body

        Raises:
            FetchTimeout: no response within the configured timeout
            NetworkFailure: transport-level failure (DNS, connection reset, ...)
            HttpError: non-2xx status
            ParseFailure: body is not JSON
        """
        client = await self._get_client()
        try:
            response = await client.get(
                f"{self.base_url}{endpoint}",
                params=params,
                headers=self.headers
            )
        except httpx.TimeoutException as e:
            logger.warning(f"[COINGECKO] {endpoint} timed out after {self.timeout:g}s")
            raise FetchTimeout(self.timeout) from e
        except httpx.HTTPError as e:
            logger.warning(f"[COINGECKO] {endpoint} failed: {type(e).__name__} - {str(e)[:100]}")
            raise NetworkFailure(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(f"[COINGECKO] HTTP {response.status_code} for {endpoint}")
            raise HttpError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"[COINGECKO] Non-JSON body from {endpoint}")
            raise ParseFailure("body is not valid JSON") from e

    async def get_coin_markets(self, per_page: Optional[int] = None, page: int = 1) -> List[Coin]:
        """Top coins ordered by descending market capitalization"""
        params = {
            'vs_currency': self.currency,
            'order': 'market_cap_desc',
            'per_page': per_page or settings.coin_list_size,
            'page': page,
            'sparkline': 'false'
        }

        data = await self._make_request('/coins/markets', params)

        try:
            coins = _coin_list_adapter.validate_python(data)
        except ValidationError as e:
            raise ParseFailure(f"coin listing - {e.error_count()} validation error(s)") from e

        logger.info(f"[COINGECKO] Fetched {len(coins)} coins by market cap")
        return coins

    async def get_coin_detail(self, coin_id: str) -> CoinDetail:
        """Descriptive and market statistics for one coin"""
        params = {
            'localization': 'false',
            'tickers': 'false',
            'community_data': 'false',
            'developer_data': 'false',
            'sparkline': 'false'
        }

        data = await self._make_request(f'/coins/{quote(coin_id, safe="")}', params)

        try:
            return CoinDetailPayload.model_validate(data).to_detail(self.currency)
        except ValidationError as e:
            raise ParseFailure(f"coin detail for {coin_id} - {e.error_count()} validation error(s)") from e
        except ValueError as e:
            raise ParseFailure(str(e)) from e

    async def get_market_chart(self, coin_id: str, window: TimeWindow) -> MarketChartPayload:
        """Raw [timestamp, price] series for one coin over a window"""
        params = {
            'vs_currency': self.currency,
            'days': window.value
        }

        data = await self._make_request(f'/coins/{quote(coin_id, safe="")}/market_chart', params)

        try:
            return MarketChartPayload.model_validate(data)
        except ValidationError as e:
            raise ParseFailure(f"market chart for {coin_id} - {e.error_count()} validation error(s)") from e


# Singleton instance
coingecko_service = CoinGeckoService()
