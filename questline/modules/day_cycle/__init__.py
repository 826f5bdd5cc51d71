"""Day Cycle Manager."""

from questline.modules.day_cycle.service import DayCycleService, DayStartResult

__all__ = ["DayCycleService", "DayStartResult"]
