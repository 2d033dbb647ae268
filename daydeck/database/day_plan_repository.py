"""Repository for DayPlan database operations."""

import logging
from datetime import date

from daydeck.database.database import Database
from daydeck.database.models import DayPlanDB
from daydeck.models.constants import DEFAULT_SLEEP_TIME, DEFAULT_WAKE_TIME
from daydeck.models.day_plan import DayPlan

logger = logging.getLogger(__name__)


class DayPlanRepository:
    """Repository for DayPlan database operations.

    Args:
        db: storage handle
        default_wake_time / default_sleep_time: used for plans created on first read
    """

    def __init__(self, db: Database, default_wake_time: str = DEFAULT_WAKE_TIME, default_sleep_time: str = DEFAULT_SLEEP_TIME):
        self.db = db
        self.default_wake_time = default_wake_time
        self.default_sleep_time = default_sleep_time

    def load(self, day: date) -> DayPlan:
        """Get the plan for `day`, creating and persisting the default on first read."""
        try:
            with self.db.transaction() as session:
                row = session.get(DayPlanDB, day)
                if row is not None:
                    return row.to_pydantic()
                plan = DayPlan(date=day, wake_time=self.default_wake_time, sleep_time=self.default_sleep_time)
                session.add(DayPlanDB.from_pydantic(plan))
            logger.debug(f"Created default day plan for {day}")
            return plan
        except Exception as e:
            logger.error(f"Failed to load day plan {day}: {type(e).__name__}: {str(e)}")
            raise

    def save(self, plan: DayPlan) -> None:
        try:
            with self.db.transaction() as session:
                session.merge(DayPlanDB.from_pydantic(plan))
            logger.debug(f"Saved day plan {plan.date}")
        except Exception as e:
            logger.error(f"Failed to save day plan {plan.date}: {type(e).__name__}: {str(e)}")
            raise
