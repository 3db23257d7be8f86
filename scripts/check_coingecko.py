"""
Script to check connectivity with the CoinGecko API
Runs the list, detail and chart services once and prints their final state
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from models.chart_model import TimeWindow
from services.chart_data_service import ChartDataService
from services.coin_detail_service import CoinDetailService
from services.coin_list_service import CoinListService
from services.coingecko_service import CoinGeckoService

async def check_coingecko(coin_id: str = 'bitcoin'):
    """Fetch the listing, one coin's detail and its 1-day chart"""

    print("=" * 80)
    print("COINGECKO CONNECTIVITY CHECK")
    print("=" * 80)

    coingecko = CoinGeckoService()
    try:
        coins = CoinListService(coingecko)
        coins.activate()
        await coins.wait()
        print(f"\nCoin list: {coins.state.status.value}")
        if coins.state.is_success:
            for coin in coins.state.value[:5]:
                print(f"  #{coin.market_cap_rank:<3} {coin.name:<20} ${coin.current_price:,.2f}  {coin.price_change_display}")
        else:
            print(f"  Error: {coins.state.error_message}")

        detail = CoinDetailService(coingecko)
        detail.select(coin_id)
        await detail.wait()
        print(f"\nDetail ({coin_id}): {detail.state.status.value}")
        if detail.state.is_success:
            data = detail.state.value
            print(f"  {data.name} ({data.symbol.upper()}) - ${data.current_price:,.2f}")
            print(f"  Total supply: {data.total_supply_display}")
        else:
            print(f"  Error: {detail.state.error_message}")

        chart = ChartDataService(coingecko)
        chart.set_key(coin_id, TimeWindow.ONE_DAY)
        await chart.wait()
        print(f"\nChart ({coin_id}, 1 day): {chart.state.status.value}")
        if chart.state.is_success:
            points = chart.state.value
            print(f"  {len(points)} points")
            if points:
                print(f"  First: {points[0].label} ${points[0].price:,.2f}")
                print(f"  Last:  {points[-1].label} ${points[-1].price:,.2f}")
        else:
            print(f"  Error: {chart.state.error_message}")

    finally:
        await coingecko.close_client()

    print("\n" + "=" * 80)

if __name__ == "__main__":
    asyncio.run(check_coingecko(*sys.argv[1:2]))
