"""Mapper between Interest entities and InterestTable rows."""

from __future__ import annotations

from buildermatch.domain.entities.interest import Interest, InterestStatus
from buildermatch.domain.value_objects import ConversationId, InterestId, OpeningId, UserId
from buildermatch.infrastructure.persistence.mappers.time_utils import ensure_utc
from buildermatch.infrastructure.persistence.models.interest_table import InterestTable


class InterestMapper:
    @staticmethod
    def to_domain(table: InterestTable) -> Interest:
        return Interest(
            id=InterestId(table.id),
            builder_id=UserId(table.builder_id),
            opening_id=OpeningId(table.opening_id),
            founder_id=UserId(table.founder_id),
            status=InterestStatus(table.status),
            is_mutual_match=table.is_mutual_match,
            builder_note=table.builder_note,
            created_at=ensure_utc(table.created_at),
            updated_at=ensure_utc(table.updated_at),
            shortlisted_at=ensure_utc(table.shortlisted_at),
            passed_at=ensure_utc(table.passed_at),
            withdrawn_at=ensure_utc(table.withdrawn_at),
            matched_at=ensure_utc(table.matched_at),
            conversation_id=ConversationId(table.conversation_id) if table.conversation_id else None,
        )

    @staticmethod
    def transition_values(entity: Interest) -> dict:
        """Column values written by a status transition."""
        return {
            "status": entity.status.value,
            "is_mutual_match": entity.is_mutual_match,
            "updated_at": entity.updated_at,
            "shortlisted_at": entity.shortlisted_at,
            "passed_at": entity.passed_at,
            "withdrawn_at": entity.withdrawn_at,
            "matched_at": entity.matched_at,
        }

    @staticmethod
    def to_table(entity: Interest) -> InterestTable:
        return InterestTable(
            id=entity.id.value,
            builder_id=entity.builder_id.value,
            opening_id=entity.opening_id.value,
            founder_id=entity.founder_id.value,
            builder_note=entity.builder_note,
            created_at=entity.created_at,
            conversation_id=entity.conversation_id.value if entity.conversation_id else None,
            **InterestMapper.transition_values(entity),
        )


__all__ = ["InterestMapper"]
