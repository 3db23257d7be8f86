# ==========================
# Database Configuration
# ==========================
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import ConnectionFailure
import logging
from config.settings import settings

logger = logging.getLogger(__name__)

class DatabaseConfig:
    """
    MongoDB connection management for user preferences
    """

    def __init__(self, uri: str = None, db_name: str = None):
        self.client = None
        self.database = None
        self.uri = uri or settings.mongodb_uri
        self.db_name = db_name or settings.db_name

    async def connect(self):
        """Establish database connection"""
        client = AsyncIOMotorClient(self.uri)
        try:
            # Verify connection before exposing the database
            await client.admin.command('ping')
            self.client = client
            self.database = client[self.db_name]
            logger.info(f"Connected to MongoDB database: {self.db_name}")
            return self.database

        except ConnectionFailure as e:
            client.close()
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise
        except Exception as e:
            client.close()
            logger.error(f"Unexpected error during database connection: {e}")
            raise

    async def disconnect(self):
        """Close database connection"""
        if self.client is not None:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    def get_collection(self, collection_name: str):
        """Get collection from database"""
        if self.database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.database[collection_name]

# Singleton instance
db_config = DatabaseConfig()
