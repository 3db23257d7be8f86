# ==========================
# Coin Detail Service
# ==========================
import asyncio
import logging
from typing import Any, Dict, Optional
from models.coin_detail_model import CoinDetail
from models.fetch_state_model import FetchState
from services.coingecko_service import CoinGeckoService, coingecko_service
from services.resource_fetcher import ResourceFetchStateMachine

logger = logging.getLogger(__name__)

class CoinDetailService:
    """
    Detail data for the selected coin; no selection means idle and no request
    """

    def __init__(self, coingecko: Optional[CoinGeckoService] = None, **kwargs):
        self.coingecko = coingecko or coingecko_service
        self.machine: ResourceFetchStateMachine[str, CoinDetail] = ResourceFetchStateMachine(
            'coin_detail', self._fetch, **kwargs
        )

    @property
    def state(self) -> FetchState:
        return self.machine.state

    @property
    def coin_id(self) -> Optional[str]:
        return self.machine.key

    def add_listener(self, callback):
        self.machine.add_listener(callback)

    def select(self, coin_id: Optional[str]) -> Optional[asyncio.Task]:
        """
        Select a coin, or clear the selection with None / blank

        Args:
            coin_id: CoinGecko identifier (e.g. bitcoin)
        """
        coin_id = coin_id.strip() if coin_id else None
        return self.machine.set_key(coin_id or None)

    async def wait(self):
        await self.machine.wait()

    def snapshot(self) -> Dict[str, Any]:
        return {'coin_id': self.coin_id, **self.state.model_dump(mode='json')}

    async def _fetch(self, coin_id: str) -> CoinDetail:
        return await self.coingecko.get_coin_detail(coin_id)
