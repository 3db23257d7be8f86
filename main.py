# ==========================
# Main Application - Crypto Tracker Server
# ==========================
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import socketio
from config.settings import settings
from config.database import db_config
from controllers.coin_controller import coin_controller
from controllers.preference_controller import preference_controller
from services.coingecko_service import coingecko_service
from services.websocket_service import websocket_service

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager
    """
    # Startup
    logger.info("="*70)
    logger.info(" CRYPTO TRACKER - MARKET DATA SERVER")
    logger.info("="*70)
    logger.info("Starting application...")

    # Connect to database (theme preferences only; market data works without it)
    try:
        await db_config.connect()
        logger.info("MongoDB: Connected successfully")
    except Exception as e:
        logger.warning(f"MongoDB: Unavailable ({e}) - theme falls back to 'light'")

    logger.info(f"Market data source: {coingecko_service.base_url}")
    logger.info(f"Coin list size: {settings.coin_list_size} | Request timeout: {settings.request_timeout}s")
    logger.info("="*70)
    logger.info(f" Server running on http://{settings.host}:{settings.port}")
    logger.info(" WebSocket available at /socket.io/")
    logger.info(" API Documentation at /docs")
    logger.info("="*70)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await websocket_service.close_all()
    await coingecko_service.close_client()
    await db_config.disconnect()
    logger.info("Application shut down successfully")

# Create FastAPI application
app = FastAPI(
    title="Crypto Tracker API",
    description="Cryptocurrency market data, coin details and price charts with race-safe live updates",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount SocketIO application
sio_asgi_app = socketio.ASGIApp(
    websocket_service.sio,
    other_asgi_app=app,
    socketio_path='/socket.io'
)

# Register controllers
app.include_router(coin_controller.router)
app.include_router(preference_controller.router)

# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint
    """
    return {
        "status": "healthy",
        "service": "Crypto Tracker API",
        "version": "1.0.0",
        "connected_clients": len(websocket_service.sessions)
    }

# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint
    """
    return {
        "message": "Crypto Tracker API",
        "version": "1.0.0",
        "documentation": "/docs",
        "health": "/health",
        "websocket": "/socket.io/",
        "endpoints": {
            "coins": "/api/coins",
            "coin_detail": "/api/coins/{coin_id}",
            "chart": "/api/coins/{coin_id}/chart?window=7",
            "theme": "/api/preferences/theme"
        }
    }

if __name__ == "__main__":
    import uvicorn

    # Run unified server with SocketIO integration
    uvicorn.run(
        sio_asgi_app,
        host=settings.host,
        port=settings.port,
        log_level="info"
    )
