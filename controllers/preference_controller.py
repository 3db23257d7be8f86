# ==========================
# Preference Controller
# ==========================
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Literal
import logging
from services.theme_service import theme_service
from services.websocket_service import websocket_service

logger = logging.getLogger(__name__)

class ThemeUpdate(BaseModel):
    theme: Literal['light', 'dark']

class PreferenceController:
    """
    REST API Controller for UI preferences
    """

    def __init__(self):
        self.router = APIRouter(prefix="/api/preferences", tags=["preferences"])
        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes"""
        self.router.add_api_route(
            "/theme",
            self.get_theme,
            methods=["GET"]
        )
        self.router.add_api_route(
            "/theme",
            self.update_theme,
            methods=["POST"]
        )

    async def get_theme(self):
        """
        Get the saved theme

        Returns:
            Current theme (light when nothing is saved)
        """
        theme = await theme_service.load()
        return {
            "status": "Success",
            "theme": theme
        }

    async def update_theme(self, data: ThemeUpdate):
        """
        Save the theme and broadcast it to all clients

        Args:
            data: light or dark
        """
        try:
            theme = await theme_service.save(data.theme)
        except Exception as e:
            logger.error(f"[THEME UPDATE] Error: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        await websocket_service.broadcast_theme(theme)

        return {
            "status": "Success",
            "message": f"Theme changed to {theme}",
            "theme": theme
        }

# Create controller instance
preference_controller = PreferenceController()
