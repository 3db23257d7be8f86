# ==========================
# Coin Controller
# ==========================
from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional
import logging
from models.chart_model import ChartPoint, TimeWindow
from models.coin_detail_model import CoinDetail
from models.coin_model import Coin
from models.fetch_state_model import FetchState
from services.chart_data_service import ChartDataService
from services.coin_detail_service import CoinDetailService
from services.coin_list_service import CoinListService
from services.coingecko_service import CoinGeckoService, coingecko_service
from services.resource_fetcher import ResourceFetchStateMachine

logger = logging.getLogger(__name__)

class CoinController:
    """
    REST API Controller for coin data
    Each request drives a fresh fetch service to completion
    """

    def __init__(self, coingecko: Optional[CoinGeckoService] = None):
        self.router = APIRouter(prefix="/api/coins", tags=["coins"])
        self.coingecko = coingecko or coingecko_service
        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes"""
        self.router.add_api_route(
            "",
            self.get_coins,
            methods=["GET"],
            response_model=FetchState[List[Coin]]
        )
        self.router.add_api_route(
            "/{coin_id}",
            self.get_coin_detail,
            methods=["GET"],
            response_model=FetchState[CoinDetail]
        )
        self.router.add_api_route(
            "/{coin_id}/chart",
            self.get_chart,
            methods=["GET"],
            response_model=FetchState[List[ChartPoint]]
        )

    async def get_coins(
        self,
        search: Optional[str] = Query(None, description="Filter by name, symbol or id")
    ) -> FetchState:
        """
        Top coins by market cap

        Examples:
            GET /api/coins
            GET /api/coins?search=eth
        """
        logger.info(f"GET coins - search: {search}")
        service = CoinListService(self.coingecko)
        service.activate()
        await service.wait()
        self._raise_for_error(service.machine)

        if search:
            return FetchState.success(service.search(search))
        return service.state

    async def get_coin_detail(self, coin_id: str) -> FetchState:
        """
        Detail for one coin

        Args:
            coin_id: CoinGecko identifier (e.g. bitcoin)
        """
        logger.info(f"GET coin detail - {coin_id}")
        service = CoinDetailService(self.coingecko)
        service.select(coin_id)
        await service.wait()
        self._raise_for_error(service.machine)
        return service.state

    async def get_chart(
        self,
        coin_id: str,
        window: str = Query(default="7", description="Time window in days (1, 7, 30)")
    ) -> FetchState:
        """Price series for one coin over a time window"""
        try:
            time_window = TimeWindow.parse(window)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

        logger.info(f"GET chart - {coin_id} ({time_window.label})")
        service = ChartDataService(self.coingecko)
        service.set_key(coin_id, time_window)
        await service.wait()
        self._raise_for_error(service.machine)
        return service.state

    @staticmethod
    def _raise_for_error(machine: ResourceFetchStateMachine):
        if not machine.state.is_error:
            return
        error = machine.last_error
        status_code = 404 if error is not None and error.status_code == 404 else 502
        raise HTTPException(status_code=status_code, detail=machine.state.error_message)

# Create controller instance
coin_controller = CoinController()
