"""Turning templates into time blocks and back."""

import uuid
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional

from daydeck.models.constants import MIN_TEMPLATE_BLOCK_MINUTES
from daydeck.models.template import DEFAULT_TEMPLATES, Template, TemplateBlock
from daydeck.models.time_block import TimeBlock


def _new_id() -> str:
    return str(uuid.uuid4())


def instantiate_template(
    template: Template,
    day: date,
    id_factory: Callable[[], str] = _new_id,
) -> List[TimeBlock]:
    """Concrete, unlinked blocks for `day` built from the template's blueprints.

    Overlaps with blocks already on that day are left for the caller to resolve.
    """
    blocks: List[TimeBlock] = []
    for blueprint in template.blocks:
        start = datetime.combine(day, time(blueprint.start_hour, blueprint.start_minute))
        blocks.append(TimeBlock(
            id=id_factory(),
            task_id=None,
            title=blueprint.title,
            start_time=start,
            end_time=start + timedelta(minutes=blueprint.duration_minutes),
            color=blueprint.color,
            type=blueprint.type,
        ))
    return blocks


def template_from_blocks(
    blocks: List[TimeBlock],
    day: date,
    name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Template:
    """Capture a day's blocks as a reusable template."""
    if not blocks:
        raise ValueError("Cannot build a template from an empty day")
    now = now or datetime.utcnow()
    blueprints = []
    for block in sorted(blocks, key=lambda b: b.start_time):
        minutes = round(block.duration.total_seconds() / 60)
        blueprints.append(TemplateBlock(
            title=block.title,
            type=block.type,
            start_hour=block.start_time.hour,
            start_minute=block.start_time.minute,
            duration_minutes=max(MIN_TEMPLATE_BLOCK_MINUTES, minutes),
            color=block.color,
        ))
    return Template(
        id=_new_id(),
        name=name or f"My {day.strftime('%A')} Plan",
        icon="⭐",
        blocks=blueprints,
        created_at=now,
        updated_at=now,
    )


def build_default_templates(now: Optional[datetime] = None) -> List[Template]:
    now = now or datetime.utcnow()
    return [
        Template(id=_new_id(), created_at=now, updated_at=now, **fields)
        for fields in DEFAULT_TEMPLATES
    ]
