"""Founder-initiated opening status management."""

from __future__ import annotations

from typing import Any

import structlog

from buildermatch.application.dependencies.workflow_dependencies import OpeningDependencies
from buildermatch.application.results import WorkflowResult
from buildermatch.domain.entities.opening import Opening, OpeningStatus
from buildermatch.domain.exceptions import AuthorizationError, OpeningNotFoundError
from buildermatch.domain.value_objects import OpeningId, UserId

logger = structlog.get_logger(__name__)


class OpeningService:
    def __init__(self, dependencies: OpeningDependencies) -> None:
        self._deps = dependencies
        self._openings = dependencies.opening_repository

    async def change_opening_status(
        self,
        *,
        founder_id: Any,
        opening_id: Any,
        new_status: OpeningStatus,
        filled_by: Any | None = None,
    ) -> WorkflowResult[Opening]:
        """Pause, reactivate, fill or close an opening the founder owns."""
        founder_id = UserId(founder_id)
        opening = await self._openings.get_by_id(OpeningId(opening_id))
        if opening is None:
            raise OpeningNotFoundError("Opening not found")
        if not opening.is_owned_by(founder_id):
            raise AuthorizationError("You can only manage your own openings")

        previous = opening.status
        opening.change_status(
            new_status,
            now=self._deps.clock(),
            filled_by=UserId(filled_by) if filled_by is not None else None,
        )
        await self._openings.save(opening)
        logger.info(
            "Opening status changed",
            opening_id=str(opening.id),
            previous_status=previous.value,
            new_status=opening.status.value,
        )
        return WorkflowResult(opening)


__all__ = ["OpeningService"]
