# ==========================
# View Session
# ==========================
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional
from models.chart_model import TimeWindow
from services.chart_data_service import ChartDataService
from services.coin_detail_service import CoinDetailService
from services.coin_list_service import CoinListService
from services.coingecko_service import CoinGeckoService

logger = logging.getLogger(__name__)

Emitter = Callable[[str, Dict[str, Any]], Awaitable[Any]]

class ViewSession:
    """
    One client's list, detail and chart services

    Every committed state is queued and delivered to the client in commit
    order by a single sender task.
    """

    def __init__(self, session_id: str, emit: Emitter, coingecko: Optional[CoinGeckoService] = None):
        self.session_id = session_id
        self._emit = emit
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._sender: Optional[asyncio.Task] = None
        self._closed = False

        self.coin_list = CoinListService(coingecko)
        self.coin_detail = CoinDetailService(coingecko)
        self.chart = ChartDataService(coingecko)

        self.coin_list.add_listener(lambda _state: self._publish('coins_state', self.coin_list.snapshot()))
        self.coin_detail.add_listener(lambda _state: self._publish('coin_detail_state', self.coin_detail.snapshot()))
        self.chart.add_listener(lambda _state: self._publish('chart_state', self.chart.snapshot()))

    def start(self):
        if self._sender is None:
            self._sender = asyncio.get_running_loop().create_task(
                self._drain(), name=f"session-sender-{self.session_id}"
            )

    def refresh_coins(self):
        self.coin_list.activate()

    def select_coin(self, coin_id: Optional[str]):
        """Open (or with None, leave) the detail view for a coin"""
        self.coin_detail.select(coin_id)
        self.chart.select_coin(coin_id)

    def select_window(self, window):
        """
        Raises:
            ValueError: window is not one of 1, 7 or 30 days
        """
        self.chart.select_window(TimeWindow.parse(window))

    async def flush(self):
        """Wait until every queued state has been handed to the emitter"""
        await self._outbox.join()

    async def close(self):
        self._closed = True
        self.coin_list.deactivate()
        self.coin_detail.select(None)
        self.chart.select_coin(None)
        if self._sender is not None:
            self._sender.cancel()
            try:
                await self._sender
            except asyncio.CancelledError:
                pass
            self._sender = None
        logger.info(f"[SESSION] Closed session {self.session_id}")

    def _publish(self, event: str, payload: Dict[str, Any]):
        if self._closed:
            return
        self._outbox.put_nowait((event, payload))

    async def _drain(self):
        while True:
            event, payload = await self._outbox.get()
            try:
                await self._emit(event, payload)
            except Exception as e:
                logger.error(f"[SESSION] Failed to deliver {event} to {self.session_id}: {e}")
            finally:
                self._outbox.task_done()
