# ==========================
# Theme Service
# ==========================
import logging
from typing import Optional
from repositories.preference_repository import PreferenceRepository

logger = logging.getLogger(__name__)

VALID_THEMES = ('light', 'dark')
DEFAULT_THEME = 'light'

class ThemeService:
    """
    Explicit load()/save() for the persisted light/dark theme
    Never used by the fetch services
    """

    def __init__(self, repository: Optional[PreferenceRepository] = None):
        self.repository = repository or PreferenceRepository()
        self.field = 'theme'

    async def load(self) -> str:
        """Saved theme, or the default when missing, invalid or unreadable"""
        try:
            saved = await self.repository.get(self.field)
        except Exception as e:
            logger.error(f"[THEME] Error loading theme: {e}")
            return DEFAULT_THEME

        return saved if saved in VALID_THEMES else DEFAULT_THEME

    async def save(self, theme: str) -> str:
        """
        Persist a theme

        Raises:
            ValueError: theme is not light or dark
        """
        if theme not in VALID_THEMES:
            raise ValueError(f"Unsupported theme: {theme!r}")

        await self.repository.set(self.field, theme)
        logger.info(f"[THEME] Theme saved: {theme}")
        return theme


# Singleton instance
theme_service = ThemeService()
