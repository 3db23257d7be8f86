# ==========================
# WebSocket Service
# ==========================
import logging
from typing import Any, Dict, Optional
import socketio
from services.coingecko_service import CoinGeckoService, coingecko_service
from services.theme_service import ThemeService, theme_service
from services.view_session import ViewSession

logger = logging.getLogger(__name__)

class WebSocketService:
    """
    Socket.IO front end: one ViewSession per connected client
    """

    def __init__(self, coingecko: Optional[CoinGeckoService] = None, themes: Optional[ThemeService] = None):
        self.sio = socketio.AsyncServer(
            async_mode='asgi',
            cors_allowed_origins='*',
            logger=False,
            engineio_logger=False
        )
        self.coingecko = coingecko or coingecko_service
        self.themes = themes or theme_service
        self.sessions: Dict[str, ViewSession] = {}
        self._setup_events()

    def _setup_events(self):
        """Setup WebSocket event handlers"""

        @self.sio.event
        async def connect(sid, environ):
            """Client connection handler"""
            logger.info(f'[WEBSOCKET] Client connected: {sid}')
            await self.open_session(sid)

        @self.sio.event
        async def disconnect(sid, *args):
            """Client disconnection handler"""
            logger.info(f'[WEBSOCKET] Client disconnected: {sid}')
            await self.close_session(sid)

        @self.sio.event
        async def refresh_coins(sid):
            await self.handle_refresh_coins(sid)

        @self.sio.event
        async def select_coin(sid, data=None):
            await self.handle_select_coin(sid, data)

        @self.sio.event
        async def select_window(sid, data=None):
            await self.handle_select_window(sid, data)

        @self.sio.event
        async def request_theme(sid):
            theme = await self.themes.load()
            await self.sio.emit('theme_update', {'theme': theme}, room=sid)

    async def open_session(self, sid: str) -> ViewSession:
        async def emit(event: str, payload: Dict[str, Any]):
            await self.sio.emit(event, payload, room=sid)

        session = ViewSession(sid, emit, self.coingecko)
        session.start()
        self.sessions[sid] = session

        theme = await self.themes.load()
        await self.sio.emit('theme_update', {'theme': theme}, room=sid)

        session.refresh_coins()
        return session

    async def close_session(self, sid: str):
        session = self.sessions.pop(sid, None)
        if session is not None:
            await session.close()

    async def close_all(self):
        for sid in list(self.sessions):
            await self.close_session(sid)

    async def handle_refresh_coins(self, sid: str):
        session = self.sessions.get(sid)
        if session is None:
            return
        session.refresh_coins()

    async def handle_select_coin(self, sid: str, data: Any):
        """data is {'coin_id': ...}, a bare identifier, or None to leave the detail view"""
        session = self.sessions.get(sid)
        if session is None:
            return
        coin_id = data.get('coin_id') if isinstance(data, dict) else data
        if coin_id is not None and not isinstance(coin_id, str):
            await self._reject(sid, 'select_coin', f"coin_id must be a string, got {type(coin_id).__name__}")
            return
        session.select_coin(coin_id)

    async def handle_select_window(self, sid: str, data: Any):
        """data is {'window': '1' | '7' | '30'} or the bare value"""
        session = self.sessions.get(sid)
        if session is None:
            return
        window = data.get('window') if isinstance(data, dict) else data
        try:
            session.select_window(window)
        except ValueError as e:
            await self._reject(sid, 'select_window', str(e))

    async def broadcast_theme(self, theme: str):
        """Broadcast a saved theme to all connected clients"""
        await self.sio.emit('theme_update', {'theme': theme})
        logger.info(f"[WEBSOCKET] Broadcasted theme '{theme}' to all clients")

    async def _reject(self, sid: str, event: str, message: str):
        logger.warning(f"[WEBSOCKET] Rejected {event} from {sid}: {message}")
        await self.sio.emit('invalid_request', {'event': event, 'message': message}, room=sid)


# Singleton instance
websocket_service = WebSocketService()
