# ==========================
# Coin Model
# ==========================
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field
from services.display_formatter import format_percent_change

class Coin(BaseModel):
    """
    One row of the coins-by-market-cap listing
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable coin identifier (e.g. bitcoin)")
    symbol: str = Field(..., description="Ticker symbol")
    name: str = Field(..., description="Display name")
    image: str = Field("", description="Image URL")
    current_price: float = Field(..., description="Current price")
    market_cap_rank: int = Field(..., gt=0, description="Market cap rank")
    market_cap: float = Field(..., description="Market capitalization")
    total_volume: float = Field(..., description="24h trading volume")
    price_change_percentage_24h: Optional[float] = Field(None, description="24h price change in percent")

    @computed_field
    @property
    def price_change_display(self) -> str:
        return format_percent_change(self.price_change_percentage_24h)

    def matches(self, query: str) -> bool:
        """Case-insensitive match against name, symbol or identifier"""
        needle = query.strip().lower()
        if not needle:
            return True
        return (
            needle in self.name.lower()
            or needle in self.symbol.lower()
            or needle in self.id.lower()
        )
