"""Application service ranking, storing and serving builder/opening matches."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from buildermatch.application.dependencies.workflow_dependencies import MatchGenerationDependencies
from buildermatch.domain.entities.match import SuggestedMatch
from buildermatch.domain.entities.opening import Opening, OpeningStatus
from buildermatch.domain.entities.profile import BuilderProfile, FounderProfile
from buildermatch.domain.exceptions import OpeningNotFoundError, ProfileNotFoundError
from buildermatch.domain.policies import MatchTier
from buildermatch.domain.services.compatibility_scorer import CompatibilityScore
from buildermatch.domain.value_objects import OpeningId, UserId

logger = structlog.get_logger(__name__)

BATCH_SIZE = 200


@dataclass
class MatchCandidate:
    """One ranked opening/builder pairing."""

    opening_id: OpeningId
    builder_id: UserId
    score: CompatibilityScore

    @property
    def overall(self) -> float:
        return self.score.overall


@dataclass
class MatchGenerationReport:
    openings_processed: int = 0
    matches_created: int = 0
    matches_updated: int = 0
    errors: int = 0
    duration_ms: int = 0


class MatchGenerationService:
    """Scores every eligible pair, keeps the best per opening and serves daily suggestions."""

    def __init__(self, dependencies: MatchGenerationDependencies) -> None:
        self._deps = dependencies
        self._openings = dependencies.opening_repository
        self._profiles = dependencies.profile_repository
        self._matches = dependencies.match_repository
        self._interests = dependencies.interest_repository
        self._scorer = dependencies.scorer

    async def generate_matches_for_opening(
        self,
        *,
        opening_id: Any,
        min_tier: MatchTier | None = None,
        limit: int | None = None,
    ) -> list[MatchCandidate]:
        opening = await self._openings.get_by_id(OpeningId(opening_id))
        if opening is None:
            raise OpeningNotFoundError("Opening not found")
        founder = await self._profiles.get_founder_profile(opening.founder_id)

        candidates = []
        async for builder in self._iter_builders():
            if builder.user_id == opening.founder_id:
                continue
            candidate = self._score(opening, builder, founder)
            if candidate is not None:
                candidates.append(candidate)
        return self._rank(candidates, min_tier, limit)

    async def generate_matches_for_builder(
        self,
        *,
        builder_id: Any,
        min_tier: MatchTier | None = None,
        limit: int | None = None,
    ) -> list[MatchCandidate]:
        builder = await self._profiles.get_builder_profile(UserId(builder_id))
        if builder is None:
            raise ProfileNotFoundError("Builder profile not found")

        founders: dict[UserId, FounderProfile | None] = {}
        candidates = []
        async for opening in self._iter_active_openings():
            if opening.founder_id == builder.user_id:
                continue
            if opening.founder_id not in founders:
                founders[opening.founder_id] = await self._profiles.get_founder_profile(
                    opening.founder_id
                )
            candidate = self._score(opening, builder, founders[opening.founder_id])
            if candidate is not None:
                candidates.append(candidate)
        return self._rank(candidates, min_tier, limit)

    async def run_nightly(self, *, min_tier: MatchTier | None = None) -> MatchGenerationReport:
        """Generate and store matches for every active opening; failures are counted, not raised."""
        started = time.perf_counter()
        report = MatchGenerationReport()

        async for opening in self._iter_active_openings():
            try:
                candidates = await self.generate_matches_for_opening(
                    opening_id=opening.id, min_tier=min_tier
                )
                created = await self._store_candidates(opening, candidates)
            except Exception as exc:
                report.errors += 1
                logger.error("Match generation failed for opening", opening_id=str(opening.id), error=str(exc))
                continue
            report.openings_processed += 1
            report.matches_created += created
            report.matches_updated += len(candidates) - created

        report.duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Nightly match generation finished",
            openings_processed=report.openings_processed,
            matches_created=report.matches_created,
            matches_updated=report.matches_updated,
            errors=report.errors,
            duration_ms=report.duration_ms,
        )
        return report

    # ------------------------------------------------------------------
    # Daily matches
    # ------------------------------------------------------------------

    async def get_daily_matches_for_founder(
        self,
        *,
        founder_id: Any,
        limit: int | None = None,
    ) -> list[SuggestedMatch]:
        """Best stored matches across the founder's active openings."""
        founder_id = UserId(founder_id)
        openings = [
            opening
            for opening in await self._openings.list_by_founder(founder_id)
            if opening.status == OpeningStatus.ACTIVE
        ]
        if not openings:
            return []
        opening_ids = [opening.id for opening in openings]
        return await self._collect_daily(
            lambda size, offset: self._matches.list_for_openings(opening_ids, size, offset),
            limit,
            active_openings={opening.id for opening in openings},
        )

    async def get_daily_matches_for_builder(
        self,
        *,
        builder_id: Any,
        limit: int | None = None,
    ) -> list[SuggestedMatch]:
        """Best stored matches for a builder on openings that are still active."""
        builder_id = UserId(builder_id)
        return await self._collect_daily(
            lambda size, offset: self._matches.list_for_builder(builder_id, size, offset),
            limit,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _store_candidates(self, opening: Opening, candidates: list[MatchCandidate]) -> int:
        now = self._deps.clock()
        created = 0
        for candidate in candidates:
            match = SuggestedMatch.suggest(
                opening=opening,
                builder_id=candidate.builder_id,
                score=candidate.overall,
                tier=candidate.score.tier,
                breakdown=candidate.score.breakdown.as_dict(),
                now=now,
            )
            if await self._matches.upsert(match):
                created += 1
        return created

    async def _collect_daily(
        self,
        fetch: Callable[[int, int], Awaitable[list[SuggestedMatch]]],
        limit: int | None,
        *,
        active_openings: set[OpeningId] | None = None,
    ) -> list[SuggestedMatch]:
        """Walk matches best-first, skipping closed openings and pairs already acted on."""
        limit = limit or self._deps.config.daily_match_limit
        opening_active: dict[OpeningId, bool] = {}
        if active_openings is not None:
            opening_active = {opening_id: True for opening_id in active_openings}

        kept: list[SuggestedMatch] = []
        offset = 0
        while len(kept) < limit:
            batch = await fetch(BATCH_SIZE, offset)
            for match in batch:
                if match.opening_id not in opening_active:
                    opening = await self._openings.get_by_id(match.opening_id)
                    opening_active[match.opening_id] = (
                        opening is not None and opening.status == OpeningStatus.ACTIVE
                    )
                if not opening_active[match.opening_id]:
                    continue
                # An interest, in any status, means the pair has been acted on.
                if await self._interests.find_by_builder_and_opening(match.builder_id, match.opening_id):
                    continue
                kept.append(match)
                if len(kept) == limit:
                    break
            if len(batch) < BATCH_SIZE:
                break
            offset += BATCH_SIZE
        return kept

    def _score(
        self,
        opening: Opening,
        builder: BuilderProfile,
        founder: FounderProfile | None,
    ) -> MatchCandidate | None:
        score = self._scorer.score(opening, builder, founder)
        if not score.is_eligible:
            logger.debug(
                "Pair disqualified",
                opening_id=str(opening.id),
                builder_id=str(builder.user_id),
                reason=score.disqualified_reason,
            )
            return None
        return MatchCandidate(opening_id=opening.id, builder_id=builder.user_id, score=score)

    def _rank(
        self,
        candidates: list[MatchCandidate],
        min_tier: MatchTier | None,
        limit: int | None,
    ) -> list[MatchCandidate]:
        config = self._deps.config
        floor = self._scorer.thresholds.min_score_for(min_tier or config.match_generation_min_tier)
        kept = [candidate for candidate in candidates if candidate.overall >= floor]
        kept.sort(key=lambda c: (-c.overall, str(c.builder_id), str(c.opening_id)))
        return kept[: limit or config.match_generation_limit]

    async def _iter_builders(self):
        offset = 0
        while True:
            batch = await self._profiles.list_discoverable_builders(BATCH_SIZE, offset)
            for builder in batch:
                yield builder
            if len(batch) < BATCH_SIZE:
                return
            offset += BATCH_SIZE

    async def _iter_active_openings(self):
        offset = 0
        while True:
            batch = await self._openings.list_by_status(OpeningStatus.ACTIVE, BATCH_SIZE, offset)
            for opening in batch:
                yield opening
            if len(batch) < BATCH_SIZE:
                return
            offset += BATCH_SIZE


__all__ = ["MatchCandidate", "MatchGenerationReport", "MatchGenerationService"]
