# ==========================
# Display Formatter
# ==========================
import re
from datetime import datetime, timezone
from typing import Optional

NOT_AVAILABLE = "not available"
NO_CHANGE_DATA = "N/A"

_ANCHOR_PATTERN = re.compile(r'<a\b[^>]*>(.*?)</a\s*>', re.IGNORECASE | re.DOTALL)


def sanitize_description(html: Optional[str]) -> str:
    """
    Strip anchor tags from upstream HTML, keeping the link text

    Example:
        'See <a href="x">Bitcoin</a>.' -> 'See Bitcoin.'
    """
    if not html:
        return ""
    return _ANCHOR_PATTERN.sub(r'\1', html)


def format_percent_change(value: Optional[float]) -> str:
    """Render a 24h change; only a missing value is N/A, zero is a real change"""
    if value is None:
        return NO_CHANGE_DATA
    return f"{value:.2f}%"


def format_supply(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:,.0f}"


def format_chart_label(timestamp_ms: int, window) -> str:
    """
    Human readable label for a chart point

    Intraday windows show the time of day, longer windows the date (DD/MM/YYYY).
    Timestamps are rendered in UTC.
    """
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    if getattr(window, 'is_intraday', False):
        return moment.strftime('%H:%M')
    return moment.strftime('%d/%m/%Y')
