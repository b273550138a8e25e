"""Table models; importing this package registers them on ``SQLModel.metadata``."""

from buildermatch.infrastructure.persistence.models.conversation_table import (
    ConversationTable,
    MessageTable,
)
from buildermatch.infrastructure.persistence.models.interest_table import InterestTable
from buildermatch.infrastructure.persistence.models.match_table import SuggestedMatchTable
from buildermatch.infrastructure.persistence.models.opening_table import OpeningTable
from buildermatch.infrastructure.persistence.models.profile_table import (
    BuilderProfileTable,
    FounderProfileTable,
    UserAccountTable,
)
from buildermatch.infrastructure.persistence.models.trial_table import TrialTable

__all__ = [
    "BuilderProfileTable",
    "ConversationTable",
    "FounderProfileTable",
    "InterestTable",
    "MessageTable",
    "OpeningTable",
    "SuggestedMatchTable",
    "TrialTable",
    "UserAccountTable",
]
