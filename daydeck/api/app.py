"""FastAPI web application for DayDeck."""

import logging
from contextlib import asynccontextmanager
import uuid
from datetime import date, datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import ValidationError

from daydeck import __version__
from daydeck.api.schemas import (
    AppliedTemplateResponse,
    BlockCreate,
    BlockPatch,
    CarryOverRequest,
    CarryOverResponse,
    ConflictRequest,
    ConflictResponse,
    DayPlanUpdate,
    DropRequest,
    MoveRequest,
    MutationResponse,
    ResizeRequest,
    SettingUpdate,
    StatusRequest,
    SubtaskRequest,
    TaskCreate,
    TaskPatch,
    TemplateCreate,
)
from daydeck.database.database import Database
from daydeck.database.migrations import init_db
from daydeck.engine.conflicts import detect_conflicts
from daydeck.engine.scheduler import MutationResult
from daydeck.errors import DuplicateBlockError, SubtaskLimitError, UnknownTaskError
from daydeck.models.constants import BLOCK_COLORS
from daydeck.models.day_plan import DayPlan
from daydeck.models.settings import AppSettings
from daydeck.models.task import Subtask, Task
from daydeck.models.template import Template
from daydeck.models.time_block import TimeBlock, TimeBlockType
from daydeck.store import Stores, create_writer

logger = logging.getLogger(__name__)


def get_stores(request: Request) -> Stores:
    return request.app.state.stores


def _mutation_response(result: MutationResult, block_id: str) -> MutationResponse:
    if not result.found:
        raise HTTPException(status_code=404, detail=f"Time block {block_id} not found")
    return MutationResponse(status=result.status.value, block=result.block, dirty=result.dirty)


def _require(entity, kind: str, entity_id: str):
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{kind} {entity_id} not found")
    return entity


def create_app(database: Optional[Database] = None, writer=None) -> FastAPI:
    """Build the application over `database` (migrated and loaded here).

    Raises:
        MigrationError: the schema could not be brought up to date
    """
    db = database or Database()
    init_db(db)
    stores = Stores(db, writer or create_writer(database_url=db.url))
    stores.hydrate()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        stores.writer.shutdown()

    app = FastAPI(
        title="DayDeck API",
        description="Plan your day as time blocks on a timeline",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.stores = stores
    # Read-only calendar overlay per date, as last submitted.
    app.state.calendar_events = {}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    # Time blocks

    @app.get("/blocks", response_model=List[TimeBlock])
    async def list_blocks(date: date, stores: Stores = Depends(get_stores)):
        return stores.time_blocks.blocks_for_date(date)

    @app.post("/blocks", response_model=MutationResponse, status_code=201)
    async def create_block(body: BlockCreate, stores: Stores = Depends(get_stores)):
        try:
            data = body.model_dump()
            data["color"] = data["color"] or BLOCK_COLORS[TimeBlockType(data["type"]).value]
            block = TimeBlock(**data)
            result = stores.time_blocks.add(block)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=f"Invalid time block: {e.errors()[0]['msg']}")
        except DuplicateBlockError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except UnknownTaskError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return _mutation_response(result, block.id)

    @app.patch("/blocks/{block_id}", response_model=MutationResponse)
    async def update_block(block_id: str, body: BlockPatch, stores: Stores = Depends(get_stores)):
        try:
            result = stores.time_blocks.update(block_id, **body.model_dump(exclude_unset=True))
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=f"Invalid time block: {e.errors()[0]['msg']}")
        except UnknownTaskError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return _mutation_response(result, block_id)

    @app.delete("/blocks/{block_id}", response_model=MutationResponse)
    async def delete_block(block_id: str, stores: Stores = Depends(get_stores)):
        return _mutation_response(stores.time_blocks.delete(block_id), block_id)

    @app.post("/blocks/{block_id}/move", response_model=MutationResponse)
    async def move_block(block_id: str, body: MoveRequest, stores: Stores = Depends(get_stores)):
        try:
            result = stores.time_blocks.move(block_id, body.new_start_time, body.new_end_time)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=f"Invalid time block: {e.errors()[0]['msg']}")
        return _mutation_response(result, block_id)

    @app.post("/blocks/{block_id}/drop", response_model=MutationResponse)
    async def drop_block(block_id: str, body: DropRequest, stores: Stores = Depends(get_stores)):
        return _mutation_response(stores.time_blocks.commit_drop(block_id, body.new_top), block_id)

    @app.post("/blocks/{block_id}/resize", response_model=MutationResponse)
    async def resize_block(block_id: str, body: ResizeRequest, stores: Stores = Depends(get_stores)):
        return _mutation_response(stores.time_blocks.commit_resize(block_id, body.new_length), block_id)

    # Calendar overlay

    @app.post("/conflicts", response_model=ConflictResponse)
    async def submit_calendar_events(body: ConflictRequest, stores: Stores = Depends(get_stores)):
        """Replace the calendar overlay for a day and report conflicts against it."""
        app.state.calendar_events[body.day] = list(body.events)
        blocks = stores.time_blocks.blocks_for_date(body.day)
        return ConflictResponse(conflicts=detect_conflicts(blocks, body.events))

    @app.get("/conflicts", response_model=ConflictResponse)
    async def list_conflicts(date: date, stores: Stores = Depends(get_stores)):
        events = app.state.calendar_events.get(date, [])
        blocks = stores.time_blocks.blocks_for_date(date)
        return ConflictResponse(conflicts=detect_conflicts(blocks, events))

    # Tasks

    @app.get("/tasks", response_model=List[Task])
    async def list_tasks(date: Optional[date] = None, stores: Stores = Depends(get_stores)):
        if date is not None:
            return stores.tasks.tasks_for_date(date)
        return stores.tasks.tasks

    @app.post("/tasks", response_model=Task, status_code=201)
    async def create_task(body: TaskCreate, stores: Stores = Depends(get_stores)):
        if stores.tasks.get(body.id) is not None:
            raise HTTPException(status_code=409, detail=f"Task {body.id} already exists")
        now = datetime.utcnow()
        data = body.model_dump()
        data["subtasks"] = [Subtask(parent_task_id=body.id, **s) for s in data["subtasks"]]
        return stores.tasks.add(Task(created_at=now, updated_at=now, **data))

    @app.post("/tasks/carry-over", response_model=CarryOverResponse)
    async def carry_over(body: CarryOverRequest, stores: Stores = Depends(get_stores)):
        """Move unfinished tasks from earlier days onto `target_date` (default today)."""
        result = stores.tasks.carry_over(body.today or date.today(), body.target_date)
        return CarryOverResponse(count=len(result.carried_over), tasks=result.carried_over)

    @app.post("/tasks/carry-over/undo", response_model=CarryOverResponse)
    async def undo_carry_over(stores: Stores = Depends(get_stores)):
        restored = stores.tasks.undo_carry_over()
        return CarryOverResponse(count=len(restored), tasks=restored)

    @app.patch("/tasks/{task_id}", response_model=Task)
    async def update_task(task_id: str, body: TaskPatch, stores: Stores = Depends(get_stores)):
        try:
            task = stores.tasks.update(task_id, **body.model_dump(exclude_unset=True))
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=f"Invalid task: {e.errors()[0]['msg']}")
        return _require(task, "Task", task_id)

    @app.delete("/tasks/{task_id}")
    async def delete_task(task_id: str, stores: Stores = Depends(get_stores)):
        if not stores.tasks.delete(task_id):
            raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
        return {"deleted": task_id}

    @app.post("/tasks/{task_id}/status", response_model=Task)
    async def set_task_status(task_id: str, body: StatusRequest, stores: Stores = Depends(get_stores)):
        return _require(stores.tasks.set_status(task_id, body.status), "Task", task_id)

    @app.post("/tasks/{task_id}/clear-carry-over", response_model=Task)
    async def clear_carry_over_badge(task_id: str, stores: Stores = Depends(get_stores)):
        return _require(stores.tasks.clear_carry_over_badge(task_id), "Task", task_id)

    @app.post("/tasks/{task_id}/subtasks", response_model=Task, status_code=201)
    async def add_subtask(task_id: str, body: SubtaskRequest, stores: Stores = Depends(get_stores)):
        try:
            task = stores.tasks.add_subtask(task_id, body.title)
        except SubtaskLimitError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return _require(task, "Task", task_id)

    @app.post("/tasks/{task_id}/subtasks/{subtask_id}/toggle", response_model=Task)
    async def toggle_subtask(task_id: str, subtask_id: str, stores: Stores = Depends(get_stores)):
        return _require(stores.tasks.toggle_subtask(task_id, subtask_id), "Subtask", subtask_id)

    @app.delete("/tasks/{task_id}/subtasks/{subtask_id}", response_model=Task)
    async def remove_subtask(task_id: str, subtask_id: str, stores: Stores = Depends(get_stores)):
        return _require(stores.tasks.remove_subtask(task_id, subtask_id), "Subtask", subtask_id)

    # Day plans

    @app.get("/day-plans/{day}", response_model=DayPlan)
    async def get_day_plan(day: date, stores: Stores = Depends(get_stores)):
        return stores.day_plans.get(day)

    @app.put("/day-plans/{day}", response_model=DayPlan)
    async def update_day_plan(day: date, body: DayPlanUpdate, stores: Stores = Depends(get_stores)):
        return stores.day_plans.update(day, **body.model_dump(exclude_unset=True))

    # Templates

    @app.get("/templates", response_model=List[Template])
    async def list_templates(stores: Stores = Depends(get_stores)):
        return stores.templates.templates

    @app.post("/templates", response_model=Template, status_code=201)
    async def create_template(body: TemplateCreate, stores: Stores = Depends(get_stores)):
        now = datetime.utcnow()
        template = Template(id=str(uuid.uuid4()), created_at=now, updated_at=now, **body.model_dump())
        return stores.templates.add(template)

    @app.post("/templates/from-day", response_model=Template, status_code=201)
    async def save_day_as_template(date: date, name: Optional[str] = None, stores: Stores = Depends(get_stores)):
        try:
            return stores.templates.save_day_as_template(date, stores.time_blocks, name=name)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.delete("/templates/{template_id}")
    async def delete_template(template_id: str, stores: Stores = Depends(get_stores)):
        if not stores.templates.delete(template_id):
            raise HTTPException(status_code=404, detail=f"Template {template_id} not found")
        return {"deleted": template_id}

    @app.post("/templates/{template_id}/apply", response_model=AppliedTemplateResponse)
    async def apply_template(template_id: str, date: date, stores: Stores = Depends(get_stores)):
        blocks = _require(stores.templates.apply(template_id, date, stores.time_blocks), "Template", template_id)
        return AppliedTemplateResponse(template_id=template_id, blocks=blocks)

    # Settings

    @app.get("/settings", response_model=AppSettings)
    async def get_settings(stores: Stores = Depends(get_stores)):
        return stores.settings.settings

    @app.put("/settings/{key}", response_model=AppSettings)
    async def update_setting(key: str, body: SettingUpdate, stores: Stores = Depends(get_stores)):
        try:
            return stores.settings.update(key, body.value)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown setting {key}")
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=f"Invalid value for {key}: {e.errors()[0]['msg']}")

    logger.info(f"DayDeck API ready ({db.url})")
    return app
