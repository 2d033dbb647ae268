"""Repository for flat key/value settings."""

import logging
from typing import Dict

from daydeck.database.database import Database
from daydeck.database.models import SettingDB

logger = logging.getLogger(__name__)


class SettingsRepository:
    def __init__(self, db: Database):
        self.db = db

    def load_all(self) -> Dict[str, str]:
        session = self.db.session()
        try:
            return {row.key: row.value for row in session.query(SettingDB).all()}
        finally:
            session.close()

    def save(self, key: str, value: str) -> None:
        try:
            with self.db.transaction() as session:
                session.merge(SettingDB(key=key, value=value))
            logger.debug(f"Saved setting {key}")
        except Exception as e:
            logger.error(f"Failed to save setting {key}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, key: str) -> bool:
        try:
            with self.db.transaction() as session:
                deleted = session.query(SettingDB).filter(SettingDB.key == key).delete(synchronize_session=False)
            return bool(deleted)
        except Exception as e:
            logger.error(f"Failed to delete setting {key}: {type(e).__name__}: {str(e)}")
            raise
