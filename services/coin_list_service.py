# ==========================
# Coin List Service
# ==========================
import asyncio
import logging
from typing import Any, Dict, List, Optional
from config.settings import settings
from models.coin_model import Coin
from models.fetch_state_model import FetchState
from services.coingecko_service import CoinGeckoService, coingecko_service
from services.resource_fetcher import ResourceFetchStateMachine

logger = logging.getLogger(__name__)

class CoinListService:
    """
    Top-N coins by market capitalization

    No key of its own: activate() issues exactly one fetch, calling it again
    is an explicit re-trigger. Errors stay until the consumer re-activates.
    """

    def __init__(self, coingecko: Optional[CoinGeckoService] = None, page_size: Optional[int] = None, **kwargs):
        self.coingecko = coingecko or coingecko_service
        self.page_size = page_size or settings.coin_list_size
        self.machine: ResourceFetchStateMachine[int, List[Coin]] = ResourceFetchStateMachine(
            'coin_list', self._fetch, **kwargs
        )

    @property
    def state(self) -> FetchState:
        return self.machine.state

    def add_listener(self, callback):
        self.machine.add_listener(callback)

    def activate(self) -> Optional[asyncio.Task]:
        logger.info(f"Loading top {self.page_size} coins by market cap")
        return self.machine.set_key(self.page_size)

    def deactivate(self):
        self.machine.set_key(None)

    async def wait(self):
        await self.machine.wait()

    def search(self, query: Optional[str]) -> List[Coin]:
        """Filter the loaded list; empty when nothing is loaded"""
        if not self.state.is_success:
            return []
        coins = self.state.value
        if not query:
            return list(coins)
        return [coin for coin in coins if coin.matches(query)]

    def snapshot(self) -> Dict[str, Any]:
        return self.state.model_dump(mode='json')

    async def _fetch(self, page_size: int) -> List[Coin]:
        return await self.coingecko.get_coin_markets(per_page=page_size)
