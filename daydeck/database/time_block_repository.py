"""Repository for TimeBlock database operations."""

import logging
from typing import List

from sqlalchemy.orm import Session

from daydeck.database.database import Database
from daydeck.database.models import TimeBlockDB
from daydeck.models.time_block import TimeBlock

logger = logging.getLogger(__name__)


def _upsert_row(session: Session, block: TimeBlock) -> None:
    incoming = TimeBlockDB.from_pydantic(block)
    row = session.get(TimeBlockDB, block.id)
    if row is None:
        session.add(incoming)
        return
    for field in TimeBlockDB.MUTABLE_FIELDS:
        setattr(row, field, getattr(incoming, field))


class TimeBlockRepository:
    """Repository for TimeBlock database operations."""

    def __init__(self, db: Database):
        self.db = db

    def load_all(self) -> List[TimeBlock]:
        """Get all time blocks sorted by start_time."""
        session = self.db.session()
        try:
            rows = session.query(TimeBlockDB).order_by(TimeBlockDB.start_time).all()
            return [row.to_pydantic() for row in rows]
        finally:
            session.close()

    def upsert(self, block: TimeBlock) -> None:
        try:
            with self.db.transaction() as session:
                _upsert_row(session, block)
            logger.debug(f"Saved time block {block.id} ({block.start_time} - {block.end_time})")
        except Exception as e:
            logger.error(f"Failed to save time block {block.id}: {type(e).__name__}: {str(e)}")
            raise

    def upsert_many(self, blocks: List[TimeBlock]) -> None:
        """Write several blocks in one transaction."""
        if not blocks:
            return
        try:
            with self.db.transaction() as session:
                for block in blocks:
                    _upsert_row(session, block)
            logger.debug(f"Saved {len(blocks)} time blocks")
        except Exception as e:
            logger.error(f"Failed to save {len(blocks)} time blocks: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, block_id: str) -> bool:
        try:
            with self.db.transaction() as session:
                deleted = (
                    session.query(TimeBlockDB)
                    .filter(TimeBlockDB.id == block_id)
                    .delete(synchronize_session=False)
                )
            logger.debug(f"Deleted time block {block_id}")
            return bool(deleted)
        except Exception as e:
            logger.error(f"Failed to delete time block {block_id}: {type(e).__name__}: {str(e)}")
            raise
