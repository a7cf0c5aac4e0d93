import logging
from typing import Optional

from chat_animation.core.config.settings import storage_config
from chat_animation.infrastructure.storage.base import KeyValueStore
from chat_animation.infrastructure.storage.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class SqliteKeyValueStore(KeyValueStore):
    def __init__(self, db_path: Optional[str] = None):
        self.conn_mgr = DatabaseConnection(db_path or storage_config.path)

    def get(self, key: str) -> Optional[bytes]:
        try:
            with self.conn_mgr.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT value FROM key_value WHERE key = ?", (key,))
                row = cursor.fetchone()
                if row:
                    return bytes(row["value"])
                return None
        except Exception as e:
            logger.error(f"Error reading key {key}: {e}", exc_info=True)
            return None

    def set(self, key: str, value: bytes) -> bool:
        try:
            with self.conn_mgr.transaction() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO key_value (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                """, (key, bytes(value)))
                return True
        except Exception as e:
            logger.error(f"Error writing key {key}: {e}", exc_info=True)
            return False

    def delete(self, key: str) -> bool:
        try:
            with self.conn_mgr.transaction() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM key_value WHERE key = ?", (key,))
                return cursor.rowcount > 0
        except Exception as e:
            logger.error(f"Error deleting key {key}: {e}", exc_info=True)
            return False
