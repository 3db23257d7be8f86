# ==========================
# Chart Data Service
# ==========================
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence
from models.chart_model import ChartKey, ChartPoint, TimeWindow
from models.fetch_state_model import FetchState
from services.coingecko_service import CoinGeckoService, coingecko_service
from services.display_formatter import format_chart_label
from services.resource_fetcher import ResourceFetchStateMachine

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = TimeWindow.SEVEN_DAYS


def to_chart_points(prices: Iterable[Sequence[float]], window: TimeWindow) -> List[ChartPoint]:
    """
    Convert raw [timestamp, price] pairs into chart points

    Upstream order is kept as-is; nothing is sorted.
    """
    points = []
    for timestamp, price in prices:
        timestamp = int(timestamp)
        points.append(ChartPoint(
            timestamp=timestamp,
            price=price,
            label=format_chart_label(timestamp, window)
        ))
    return points


class ChartDataService:
    """
    Price series keyed by (coin, window)

    Both parts must be set to fetch; changing either one supersedes the
    request in flight and clears the previous series.
    """

    def __init__(self, coingecko: Optional[CoinGeckoService] = None, window: Optional[TimeWindow] = DEFAULT_WINDOW, **kwargs):
        self.coingecko = coingecko or coingecko_service
        self._coin_id: Optional[str] = None
        self._window: Optional[TimeWindow] = window
        self.machine: ResourceFetchStateMachine[ChartKey, List[ChartPoint]] = ResourceFetchStateMachine(
            'chart_data', self._fetch, **kwargs
        )

    @property
    def state(self) -> FetchState:
        return self.machine.state

    @property
    def key(self) -> ChartKey:
        return ChartKey(self._coin_id, self._window)

    def add_listener(self, callback):
        self.machine.add_listener(callback)

    def set_key(self, coin_id: Optional[str], window: Optional[TimeWindow]) -> Optional[asyncio.Task]:
        parsed_window = TimeWindow.parse(window) if window is not None else None
        self._coin_id = coin_id.strip() if coin_id else None
        self._window = parsed_window

        if self._coin_id is None or self._window is None:
            return self.machine.set_key(None)
        return self.machine.set_key(self.key)

    def select_coin(self, coin_id: Optional[str]) -> Optional[asyncio.Task]:
        return self.set_key(coin_id, self._window)

    def select_window(self, window: Optional[TimeWindow]) -> Optional[asyncio.Task]:
        return self.set_key(self._coin_id, window)

    async def wait(self):
        await self.machine.wait()

    def snapshot(self) -> Dict[str, Any]:
        return {
            'coin_id': self._coin_id,
            'window': self._window.value if self._window else None,
            **self.state.model_dump(mode='json')
        }

    async def _fetch(self, key: ChartKey) -> List[ChartPoint]:
        payload = await self.coingecko.get_market_chart(key.coin_id, key.window)
        points = to_chart_points(payload.prices, key.window)
        logger.debug(f"Chart for {key.coin_id} ({key.window.label}): {len(points)} points")
        return points
