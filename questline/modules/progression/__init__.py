"""Progression Engine and stat allocation."""

from questline.modules.progression.allocation_service import AllocationService
from questline.modules.progression.service import LevelUpResult, ProgressionService

__all__ = ["AllocationService", "LevelUpResult", "ProgressionService"]
