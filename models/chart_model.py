# ==========================
# Chart Model
# ==========================
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

class TimeWindow(str, Enum):
    """Chart windows exposed to the user; the value is the upstream 'days' parameter"""
    ONE_DAY = '1'
    SEVEN_DAYS = '7'
    THIRTY_DAYS = '30'

    @property
    def days(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return "1 day" if self.days == 1 else f"{self.days} days"

    @property
    def is_intraday(self) -> bool:
        return self is TimeWindow.ONE_DAY

    @classmethod
    def parse(cls, raw) -> "TimeWindow":
        """
        Accept '7', 7, '7 days' or a TimeWindow

        Raises:
            ValueError: for windows that are not offered
        """
        if isinstance(raw, cls):
            return raw
        text = str(raw).strip().lower()
        for window in cls:
            if text in (window.value, window.label):
                return window
        raise ValueError(f"Unsupported time window: {raw!r}")


class ChartKey(NamedTuple):
    coin_id: Optional[str]
    window: Optional[TimeWindow]


class ChartPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., description="Epoch milliseconds")
    price: float
    label: str = Field(..., min_length=1, description="Date or time-of-day label")


class MarketChartPayload(BaseModel):
    """Upstream /coins/{id}/market_chart response; only prices are used"""

    prices: List[Tuple[float, float]]
