"""
Shared fixtures: upstream payload samples and a fetcher the test resolves by hand
"""

import asyncio
import copy
import pytest


class ControlledFetcher:
    """Fetcher whose calls stay pending until the test resolves them"""

    def __init__(self):
        self.calls = []

    async def __call__(self, key):
        future = asyncio.get_running_loop().create_future()
        self.calls.append((key, future))
        return await future

    @property
    def keys(self):
        return [key for key, _ in self.calls]

    def resolve(self, index, value):
        self.calls[index][1].set_result(value)

    def fail(self, index, error):
        self.calls[index][1].set_exception(error)


async def _settle(rounds: int = 10):
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fetcher():
    return ControlledFetcher()


@pytest.fixture
def settle():
    """Let scheduled fetch tasks run until they block or finish"""
    return _settle


MARKET_ROWS = [
    {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "image": "https://assets.example/bitcoin.png",
        "current_price": 42000.5,
        "market_cap": 820000000000,
        "market_cap_rank": 1,
        "total_volume": 21000000000,
        "price_change_percentage_24h": 1.234,
        "ath": 69045,
    },
    {
        "id": "ethereum",
        "symbol": "eth",
        "name": "Ethereum",
        "image": "https://assets.example/ethereum.png",
        "current_price": 2250.1,
        "market_cap": 270000000000,
        "market_cap_rank": 2,
        "total_volume": 9000000000,
        "price_change_percentage_24h": 0,
    },
    {
        "id": "tether",
        "symbol": "usdt",
        "name": "Tether",
        "image": "https://assets.example/tether.png",
        "current_price": 1.0,
        "market_cap": 90000000000,
        "market_cap_rank": 3,
        "total_volume": 30000000000,
        "price_change_percentage_24h": None,
    },
]

DETAIL_PAYLOAD = {
    "id": "bitcoin",
    "symbol": "btc",
    "name": "Bitcoin",
    "description": {
        "en": 'Bitcoin is the first <a href="https://www.coingecko.com/en?category=cryptocurrency">cryptocurrency</a>.'
    },
    "image": {"thumb": "https://assets.example/btc-thumb.png", "large": "https://assets.example/btc-large.png"},
    "market_cap_rank": 1,
    "links": {"homepage": ["", "http://www.bitcoin.org"]},
    "market_data": {
        "current_price": {"usd": 42000.5, "eur": 38500.2},
        "high_24h": {"usd": 42100.0},
        "low_24h": {"usd": 42050.0},
        "market_cap": {"usd": 820000000000},
        "total_volume": {"usd": 21000000000},
        "circulating_supply": 19550000.0,
        "total_supply": 21000000.0,
        "ath": {"usd": 69045},
        "ath_date": {"usd": "2021-11-10T14:24:11.849Z"},
    },
}

CHART_PAYLOAD = {
    "prices": [[1700000000000, 42000.5], [1700003600000, 42500.0]],
    "market_caps": [[1700000000000, 820000000000], [1700003600000, 830000000000]],
    "total_volumes": [[1700000000000, 21000000000], [1700003600000, 20000000000]],
}


@pytest.fixture
def market_rows():
    return copy.deepcopy(MARKET_ROWS)


@pytest.fixture
def detail_payload():
    return copy.deepcopy(DETAIL_PAYLOAD)


@pytest.fixture
def chart_payload():
    return copy.deepcopy(CHART_PAYLOAD)


@pytest.fixture
def fetcher_factory():
    """Build fresh ControlledFetcher instances inside one test"""
    return ControlledFetcher
