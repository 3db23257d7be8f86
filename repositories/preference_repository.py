# ==========================
# Preference Repository
# ==========================
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from config.database import db_config

logger = logging.getLogger(__name__)

class PreferenceRepository:
    """
    Key-value store for UI preferences (singleton document)
    """

    def __init__(self):
        self.collection_name = 'ui_preferences'
        self.preference_type = 'ui_preferences'  # Singleton identifier

    @property
    def collection(self):
        """Get the MongoDB collection"""
        return db_config.get_collection(self.collection_name)

    async def get(self, field: str) -> Optional[Any]:
        """Read one preference, None when never saved"""
        document = await self.collection.find_one({'type': self.preference_type})
        if document is None:
            return None
        return document.get(field)

    async def set(self, field: str, value: Any) -> Dict[str, Any]:
        """
        Insert or update one preference

        Returns:
            Dictionary with operation result
        """
        try:
            result = await self.collection.update_one(
                {'type': self.preference_type},
                {
                    '$set': {
                        field: value,
                        'last_updated': datetime.now()
                    }
                },
                upsert=True
            )

            action = "created" if result.upserted_id else "updated"
            logger.info(f"[PREFERENCES] {field} {action}: {value}")

            return {
                'status': 'success',
                'action': action,
                'field': field,
                'value': value
            }

        except Exception as e:
            logger.error(f"[PREFERENCES] Error saving {field}: {e}")
            raise
