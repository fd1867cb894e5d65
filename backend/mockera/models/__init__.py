from mockera.models.user import User, UserRole
from mockera.models.test import Question, Test, TestPercentileBand
from mockera.models.attempt import Attempt, AttemptStatus

__all__ = [
    "User",
    "UserRole",
    "Test",
    "Question",
    "TestPercentileBand",
    "Attempt",
    "AttemptStatus",
]
