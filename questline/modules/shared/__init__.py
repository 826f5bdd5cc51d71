"""
Shared building blocks for the engine modules: exceptions, constants,
pure formulas, validators and the tagged Outcome.
"""

from questline.modules.shared.exceptions import (
    ConcurrentModificationError,
    DayNotStartedError,
    ErrorKind,
    ErrorSeverity,
    InsufficientResourcesError,
    NotFoundError,
    PreconditionError,
    QuestAlreadyCompletedError,
    QuestlineDomainException,
    ValidationError,
)
from questline.modules.shared.outcome import Outcome

__all__ = [
    "ConcurrentModificationError",
    "DayNotStartedError",
    "ErrorKind",
    "ErrorSeverity",
    "InsufficientResourcesError",
    "NotFoundError",
    "Outcome",
    "PreconditionError",
    "QuestAlreadyCompletedError",
    "QuestlineDomainException",
    "ValidationError",
]
