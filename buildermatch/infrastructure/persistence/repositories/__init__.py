"""Repository implementations using SQLModel and domain mappers."""

from .conversation_repository import SQLModelConversationRepository
from .interest_repository import SQLModelInterestRepository
from .match_repository import SQLModelMatchRepository
from .opening_repository import SQLModelOpeningRepository
from .profile_repository import SQLModelProfileRepository
from .trial_repository import SQLModelTrialRepository

__all__ = [
    "SQLModelConversationRepository",
    "SQLModelInterestRepository",
    "SQLModelMatchRepository",
    "SQLModelOpeningRepository",
    "SQLModelProfileRepository",
    "SQLModelTrialRepository",
]
