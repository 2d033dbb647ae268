"""Exceptions raised by DayDeck."""


class DayDeckError(Exception):
    """Base class for DayDeck errors."""


class DuplicateBlockError(DayDeckError):
    """A time block with the same id is already on the schedule."""

    def __init__(self, block_id: str):
        super().__init__(f"Time block {block_id} already exists")
        self.block_id = block_id


class MigrationError(DayDeckError):
    """A schema migration step failed; the store is left at the last committed version."""

    def __init__(self, version: int, cause: Exception):
        super().__init__(f"Migration to schema version {version} failed: {type(cause).__name__}: {cause}")
        self.version = version
        self.cause = cause


class SubtaskLimitError(DayDeckError):
    """A task already holds the maximum number of subtasks."""

    def __init__(self, task_id: str, limit: int):
        super().__init__(f"Task {task_id} already has {limit} subtasks")
        self.task_id = task_id
        self.limit = limit


class UnknownTaskError(DayDeckError):
    """A time block links to a task that does not exist."""

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id
