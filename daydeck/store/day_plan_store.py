"""Day plans, loaded lazily per date and cached."""

import logging
from datetime import date
from typing import Dict

from daydeck.database.day_plan_repository import DayPlanRepository
from daydeck.models.day_plan import DayPlan

logger = logging.getLogger(__name__)


class DayPlanStore:
    def __init__(self, repository: DayPlanRepository, writer):
        self.repository = repository
        self.writer = writer
        self._plans: Dict[date, DayPlan] = {}

    def get(self, day: date) -> DayPlan:
        """The plan for `day`; the first read of a new date stores the default plan."""
        plan = self._plans.get(day)
        if plan is None:
            plan = self.repository.load(day)
            self._plans[day] = plan
        return plan

    def update(self, day: date, **patch) -> DayPlan:
        patch.pop("date", None)
        plan = DayPlan.model_validate({**self.get(day).model_dump(), **patch})
        self._plans[day] = plan
        self.writer.submit(f"save day plan {day}", lambda: self.repository.save(plan))
        return plan
