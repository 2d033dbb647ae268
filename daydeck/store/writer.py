"""Fire-and-forget persistence writes.

Stores update their in-memory state first and then hand the durable write to
a writer. A failed write is logged and dropped: memory stays the source of
truth until the next successful write of that entity (at-most-once).
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from daydeck import config
from daydeck.database.database import is_memory_url

logger = logging.getLogger(__name__)


def _run_logged(description: str, write: Callable[[], None]) -> None:
    try:
        write()
    except Exception as e:
        logger.error(f"Background write failed ({description}): {type(e).__name__}: {str(e)}")


class InlineWriter:
    """Runs each write immediately on the caller's thread."""

    def submit(self, description: str, write: Callable[[], None]) -> None:
        _run_logged(description, write)

    def flush(self) -> None:
        pass

    def shutdown(self) -> None:
        pass


class BackgroundWriter:
    """Runs writes in submission order on a single worker thread."""

    def __init__(self):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="daydeck-writer")
        self._last: Optional[Future] = None

    def submit(self, description: str, write: Callable[[], None]) -> None:
        self._last = self._executor.submit(_run_logged, description, write)

    def flush(self) -> None:
        """Block until every write submitted so far has finished."""
        if self._last is not None:
            self._last.result()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


def create_writer(mode: Optional[str] = None, database_url: Optional[str] = None):
    """Pick the writer for `mode` (default from DAYDECK_WRITER).

    In-memory SQLite always gets the inline writer: its single pooled
    connection must not be used from the worker thread.
    """
    mode = mode or config.writer_mode()
    if database_url and is_memory_url(database_url):
        if mode != "inline":
            logger.info("In-memory database, using inline writes")
        return InlineWriter()
    if mode == "inline":
        return InlineWriter()
    if mode != "background":
        logger.warning(f"Unknown writer mode {mode!r}, using background")
    return BackgroundWriter()
