# ==========================
# Application Settings
# ==========================
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """
    Runtime settings read from the environment (or a .env file)
    """

    def __init__(self):
        self.coingecko_base_url = os.getenv('COINGECKO_BASE_URL', 'https://api.coingecko.com/api/v3')
        self.coingecko_api_key = os.getenv('COINGECKO_API_KEY') or None
        self.request_timeout = float(os.getenv('REQUEST_TIMEOUT', 15))
        self.vs_currency = os.getenv('VS_CURRENCY', 'usd')
        self.coin_list_size = int(os.getenv('COIN_LIST_SIZE', 20))
        self.mongodb_uri = os.getenv('MONGODB_URI', 'mongodb://localhost:27017')
        self.db_name = os.getenv('DB_NAME', 'crypto_tracker')
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.host = os.getenv('HOST', '0.0.0.0')
        self.port = int(os.getenv('PORT', 8000))


# Singleton instance
settings = Settings()
