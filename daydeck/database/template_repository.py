"""Repository for Template database operations."""

import logging
from typing import List

from daydeck.database.database import Database
from daydeck.database.models import TemplateDB
from daydeck.models.template import Template

logger = logging.getLogger(__name__)


class TemplateRepository:
    """Repository for Template database operations."""

    def __init__(self, db: Database):
        self.db = db

    def load_all(self) -> List[Template]:
        """Get all templates, oldest first."""
        session = self.db.session()
        try:
            rows = session.query(TemplateDB).order_by(TemplateDB.created_at.asc()).all()
            return [row.to_pydantic() for row in rows]
        finally:
            session.close()

    def count(self) -> int:
        session = self.db.session()
        try:
            return session.query(TemplateDB).count()
        finally:
            session.close()

    def upsert(self, template: Template) -> None:
        """Insert or update a template, keeping the stored created_at."""
        try:
            with self.db.transaction() as session:
                incoming = TemplateDB.from_pydantic(template)
                row = session.get(TemplateDB, template.id)
                if row is None:
                    session.add(incoming)
                else:
                    for field in TemplateDB.MUTABLE_FIELDS:
                        setattr(row, field, getattr(incoming, field))
            logger.debug(f"Saved template {template.id}: {template.name}")
        except Exception as e:
            logger.error(f"Failed to save template {template.id}: {type(e).__name__}: {str(e)}")
            raise

    def seed(self, templates: List[Template]) -> bool:
        """Insert `templates` only if the collection is empty. Returns True if seeded."""
        try:
            with self.db.transaction() as session:
                if session.query(TemplateDB).count() > 0:
                    return False
                session.add_all([TemplateDB.from_pydantic(t) for t in templates])
            logger.info(f"Seeded {len(templates)} default templates")
            return True
        except Exception as e:
            logger.error(f"Failed to seed templates: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, template_id: str) -> bool:
        try:
            with self.db.transaction() as session:
                deleted = (
                    session.query(TemplateDB)
                    .filter(TemplateDB.id == template_id)
                    .delete(synchronize_session=False)
                )
            logger.debug(f"Deleted template {template_id}")
            return bool(deleted)
        except Exception as e:
            logger.error(f"Failed to delete template {template_id}: {type(e).__name__}: {str(e)}")
            raise
