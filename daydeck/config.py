"""Runtime configuration for DayDeck.

Values come from the environment (optionally via a `.env` file).
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


def database_url() -> str:
    """SQLite file by default; any SQLAlchemy URL is accepted."""
    return os.getenv("DATABASE_URL", "sqlite:///./daydeck.db")


def sql_echo() -> bool:
    return os.getenv("DEBUG", "False").lower() == "true"


def writer_mode() -> str:
    """`background` (default) or `inline` persistence writes.

    In-memory SQLite URLs always use inline writes, whatever this says.
    """
    return os.getenv("DAYDECK_WRITER", "background").lower()


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
