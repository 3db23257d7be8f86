# ==========================
# Coin Detail Model
# ==========================
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field
from services.display_formatter import format_supply, sanitize_description

class CoinDetail(BaseModel):
    """
    Descriptive and market statistics for a single coin, in one currency

    low_24h <= current_price <= high_24h is not guaranteed by upstream data.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    name: str
    description: str = Field("", description="Raw HTML description from upstream")
    image: str = ""
    market_cap_rank: Optional[int] = None
    current_price: float
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    market_cap: Optional[float] = None
    total_volume: Optional[float] = None
    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = Field(None, description="None when the coin has no maximum supply")
    ath: Optional[float] = Field(None, description="All-time-high price")
    ath_date: Optional[datetime] = None
    homepage: Optional[str] = None

    @computed_field
    @property
    def description_html(self) -> str:
        return sanitize_description(self.description)

    @computed_field
    @property
    def total_supply_display(self) -> str:
        return format_supply(self.total_supply)

    @computed_field
    @property
    def circulating_supply_display(self) -> str:
        return format_supply(self.circulating_supply)


class MarketDataPayload(BaseModel):
    """market_data sub-object of the upstream /coins/{id} response"""

    current_price: Dict[str, Optional[float]]
    high_24h: Dict[str, Optional[float]] = Field(default_factory=dict)
    low_24h: Dict[str, Optional[float]] = Field(default_factory=dict)
    market_cap: Dict[str, Optional[float]] = Field(default_factory=dict)
    total_volume: Dict[str, Optional[float]] = Field(default_factory=dict)
    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = None
    ath: Dict[str, Optional[float]] = Field(default_factory=dict)
    ath_date: Dict[str, Optional[datetime]] = Field(default_factory=dict)


class CoinDetailPayload(BaseModel):
    """Upstream /coins/{id} response, reduced to the fields we read"""

    id: str = Field(..., min_length=1)
    symbol: str
    name: str
    description: Dict[str, Optional[str]] = Field(default_factory=dict)
    image: Dict[str, Optional[str]] = Field(default_factory=dict)
    market_cap_rank: Optional[int] = None
    market_data: MarketDataPayload
    links: Dict[str, Any] = Field(default_factory=dict)

    def to_detail(self, currency: str = 'usd') -> CoinDetail:
        """
        Flatten the payload for one currency

        Raises:
            ValueError: when the coin has no price in the requested currency
        """
        market = self.market_data
        price = market.current_price.get(currency)
        if price is None:
            raise ValueError(f"no current price in '{currency}' for {self.id}")

        return CoinDetail(
            id=self.id,
            symbol=self.symbol,
            name=self.name,
            description=self.description.get('en') or "",
            image=self.image.get('large') or "",
            market_cap_rank=self.market_cap_rank,
            current_price=price,
            high_24h=market.high_24h.get(currency),
            low_24h=market.low_24h.get(currency),
            market_cap=market.market_cap.get(currency),
            total_volume=market.total_volume.get(currency),
            circulating_supply=market.circulating_supply,
            total_supply=market.total_supply,
            ath=market.ath.get(currency),
            ath_date=market.ath_date.get(currency),
            homepage=_first_link(self.links.get('homepage')),
        )


def _first_link(links: Any) -> Optional[str]:
    if not isinstance(links, list):
        return None
    return next((link for link in links if isinstance(link, str) and link), None)
