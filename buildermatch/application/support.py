"""Helpers shared by the workflow services."""

from __future__ import annotations

from collections.abc import Awaitable
from datetime import datetime
from typing import Any

import structlog

from buildermatch.domain.entities.conversation import Message, MessageType
from buildermatch.domain.events.base import ActorSummary
from buildermatch.domain.repositories.conversation_repository import IConversationRepository
from buildermatch.domain.repositories.profile_repository import IProfileRepository
from buildermatch.domain.value_objects import ConversationId, UserId

logger = structlog.get_logger(__name__)

UNKNOWN_USER_NAME = "Unknown user"


async def run_best_effort(action: str, operation: Awaitable[Any], **context: Any) -> bool:
    """Await a secondary write; log and swallow its failure."""
    try:
        await operation
        return True
    except Exception as exc:
        logger.warning("Secondary update failed", action=action, error=str(exc), **context)
        return False


async def load_actor(profiles: IProfileRepository, user_id: UserId) -> ActorSummary:
    """Resolve display data for event payloads.

    Event payloads are filled in after the primary write, so a failed lookup
    degrades to a placeholder name instead of failing the operation.
    """
    try:
        account = await profiles.get_account(user_id)
    except Exception as exc:
        logger.warning("Actor lookup failed", user_id=str(user_id), error=str(exc))
        account = None
    if account is None:
        return ActorSummary(id=user_id, name=UNKNOWN_USER_NAME)
    return ActorSummary.from_account(account)


async def post_system_message(
    conversations: IConversationRepository,
    *,
    conversation_id: ConversationId,
    message_type: MessageType,
    content: str,
    now: datetime,
    metadata: dict[str, Any] | None = None,
) -> Message | None:
    """Append a system message without failing the surrounding transition.

    Archived and blocked conversations take no new messages, system ones included.
    """
    try:
        conversation = await conversations.get_by_id(conversation_id)
        if conversation is None or not conversation.accepts_messages:
            logger.debug(
                "System message skipped",
                conversation_id=str(conversation_id),
                message_type=message_type.value,
                conversation_status=conversation.status.value if conversation else None,
            )
            return None
        message = Message.system(
            conversation_id=conversation_id,
            message_type=message_type,
            content=content,
            now=now,
            metadata=metadata,
        )
        await conversations.append_message(message)
    except Exception as exc:
        logger.warning(
            "Secondary update failed",
            action="post_system_message",
            error=str(exc),
            conversation_id=str(conversation_id),
            message_type=message_type.value,
        )
        return None
    return message


__all__ = ["UNKNOWN_USER_NAME", "load_actor", "post_system_message", "run_best_effort"]
