"""Templates: seeded once with the defaults, applied to days, captured from days."""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from daydeck.database.template_repository import TemplateRepository
from daydeck.engine.templates import build_default_templates, instantiate_template, template_from_blocks
from daydeck.models.template import Template
from daydeck.models.time_block import TimeBlock

logger = logging.getLogger(__name__)


class TemplateStore:
    def __init__(self, repository: TemplateRepository, writer):
        self.repository = repository
        self.writer = writer
        self._templates: Dict[str, Template] = {}

    def hydrate(self) -> int:
        """Load templates, seeding the defaults first if storage has none."""
        self.repository.seed(build_default_templates())
        self._templates = {t.id: t for t in self.repository.load_all()}
        logger.info(f"Loaded {len(self._templates)} templates")
        return len(self._templates)

    @property
    def templates(self) -> List[Template]:
        return sorted(self._templates.values(), key=lambda t: t.created_at)

    def get(self, template_id: str) -> Optional[Template]:
        return self._templates.get(template_id)

    def add(self, template: Template) -> Template:
        self._templates[template.id] = template
        self.writer.submit(f"save template {template.id}", lambda: self.repository.upsert(template))
        return template

    def update(self, template_id: str, **patch) -> Optional[Template]:
        template = self._templates.get(template_id)
        if template is None:
            return None
        patch.pop("id", None)
        patch.pop("created_at", None)
        patch.setdefault("updated_at", datetime.utcnow())
        return self.add(Template.model_validate({**template.model_dump(), **patch}))

    def delete(self, template_id: str) -> bool:
        if self._templates.pop(template_id, None) is None:
            return False
        self.writer.submit(f"delete template {template_id}", lambda: self.repository.delete(template_id))
        return True

    def apply(self, template_id: str, day: date, time_blocks) -> Optional[List[TimeBlock]]:
        """Add the template's blocks to `day` on `time_blocks`. None if the template is unknown."""
        template = self._templates.get(template_id)
        if template is None:
            return None
        blocks = instantiate_template(template, day)
        time_blocks.add_many(blocks)
        logger.debug(f"Applied template {template.name} to {day}: {len(blocks)} blocks")
        return blocks

    def save_day_as_template(self, day: date, time_blocks, name: Optional[str] = None) -> Template:
        """Capture the blocks of `day` as a new template.

        Raises:
            ValueError: the day has no blocks
        """
        template = template_from_blocks(time_blocks.blocks_for_date(day), day, name=name)
        return self.add(template)
