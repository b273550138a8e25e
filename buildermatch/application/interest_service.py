"""Application service owning the interest and mutual-match lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import structlog

from buildermatch.application.dependencies.workflow_dependencies import InterestDependencies
from buildermatch.application.results import Page, WorkflowResult, page_window
from buildermatch.application.support import load_actor, run_best_effort
from buildermatch.domain.entities.interest import Interest, InterestStatus
from buildermatch.domain.entities.opening import Opening
from buildermatch.domain.entities.profile import UserAccount, UserRole
from buildermatch.domain.events.workflow_events import (
    BuilderPassedEvent,
    InterestWithdrawnEvent,
    NewInterestEvent,
    ShortlistedEvent,
)
from buildermatch.domain.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    DailyLimitReachedError,
    DuplicateInterestError,
    InterestNotFoundError,
    InvalidStateError,
    OpeningNotFoundError,
    ProfileIncompleteError,
    ProfileNotFoundError,
    UserNotFoundError,
)
from buildermatch.domain.value_objects import InterestId, OpeningId, UserId

logger = structlog.get_logger(__name__)


@dataclass
class QuotaUsage:
    """Today's interest quota for a builder."""

    used: int
    limit: int
    remaining: int
    resets_at: datetime


@dataclass
class MutualMatchCheck:
    is_mutual_match: bool
    interest_id: InterestId | None = None
    matched_at: datetime | None = None


@dataclass
class InterestCheck:
    has_interest: bool
    interest_id: InterestId | None = None
    status: InterestStatus | None = None


@dataclass
class InterestStats:
    role: UserRole
    by_status: dict[InterestStatus, int]
    total: int
    mutual_matches: int


class InterestService:
    """Express, withdraw, shortlist and pass; query interests and mutual matches."""

    def __init__(self, dependencies: InterestDependencies) -> None:
        self._deps = dependencies
        self._interests = dependencies.interest_repository
        self._openings = dependencies.opening_repository
        self._profiles = dependencies.profile_repository
        self._quota = dependencies.config.quota

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def express_interest(
        self,
        *,
        builder_id: Any,
        opening_id: Any,
        note: str | None = None,
    ) -> WorkflowResult[Interest]:
        """Create an INTERESTED interest for a builder with a complete profile.

        Raises:
            ProfileIncompleteError: builder profile is missing required fields.
            InvalidStateError: the opening is not accepting interest.
            DuplicateInterestError: an interest already exists for the pair.
            DailyLimitReachedError: the builder used up today's quota.
        """
        builder_id = UserId(builder_id)
        opening_id = OpeningId(opening_id)
        now = self._deps.clock()

        account = await self._require_account(builder_id)
        if account.role != UserRole.BUILDER:
            raise AuthorizationError("Only builders can express interest")

        profile = await self._profiles.get_builder_profile(builder_id)
        if profile is None:
            raise ProfileNotFoundError("Builder profile not found")
        if not profile.is_complete:
            raise ProfileIncompleteError("Please complete your profile before expressing interest")

        opening = await self._require_opening(opening_id)
        if opening.founder_id == builder_id:
            raise AuthorizationError("You cannot express interest in your own opening")
        if not opening.is_accepting_interest:
            raise InvalidStateError(
                "opening",
                opening.status.value,
                "express interest in",
                message="This opening is no longer accepting interests",
            )

        if await self._interests.find_by_builder_and_opening(builder_id, opening_id):
            raise DuplicateInterestError("You have already expressed interest in this opening")

        limit = self._quota.limit_for(account.subscription_tier)
        used = await self._interests.count_created_since(builder_id, self._quota.day_start(now))
        if used >= limit:
            raise DailyLimitReachedError(limit=limit, used=used)

        interest = Interest.express(builder_id=builder_id, opening=opening, now=now, note=note)
        await self._interests.add(interest)

        await run_best_effort(
            "increment_opening_interest_count",
            self._openings.increment_counters(opening_id, interest_count=1),
            opening_id=str(opening_id),
        )
        await run_best_effort(
            "increment_builder_interest_sent",
            self._profiles.increment_builder_counters(builder_id, interest_sent=1),
            builder_id=str(builder_id),
        )

        event = NewInterestEvent(
            recipient_id=opening.founder_id,
            occurred_at=now,
            interest_id=interest.id,
            builder=await load_actor(self._profiles, builder_id),
            opening_id=opening.id,
            opening_title=opening.title,
            note=interest.builder_note,
        )

        logger.info(
            "Interest expressed",
            interest_id=str(interest.id),
            builder_id=str(builder_id),
            opening_id=str(opening_id),
            quota_used=used + 1,
            quota_limit=limit,
        )
        return WorkflowResult(interest, [event])

    async def withdraw_interest(self, *, builder_id: Any, interest_id: Any) -> WorkflowResult[Interest]:
        builder_id = UserId(builder_id)
        now = self._deps.clock()

        interest = await self._require_interest(InterestId(interest_id))
        if interest.builder_id != builder_id:
            raise AuthorizationError("You can only withdraw your own interests")

        previous = interest.withdraw(now)
        await self._store_transition(interest, previous)

        event = InterestWithdrawnEvent(
            recipient_id=interest.founder_id,
            occurred_at=now,
            interest_id=interest.id,
            builder=await load_actor(self._profiles, builder_id),
            opening_id=interest.opening_id,
        )
        logger.info("Interest withdrawn", interest_id=str(interest.id), builder_id=str(builder_id))
        return WorkflowResult(interest, [event])

    async def shortlist_builder(self, *, founder_id: Any, interest_id: Any) -> WorkflowResult[Interest]:
        """Shortlist an interested builder. This is the only way to create a mutual match."""
        founder_id = UserId(founder_id)
        now = self._deps.clock()

        interest = await self._require_interest(InterestId(interest_id))
        opening = await self._require_owned_opening(interest, founder_id, "shortlist builders for")

        previous = interest.shortlist(now)
        await self._store_transition(interest, previous)

        await run_best_effort(
            "increment_builder_match_counters",
            self._profiles.increment_builder_counters(interest.builder_id, shortlist=1, match=1),
            builder_id=str(interest.builder_id),
        )
        await run_best_effort(
            "increment_founder_match_count",
            self._profiles.increment_founder_counters(founder_id, match=1),
            founder_id=str(founder_id),
        )
        await run_best_effort(
            "increment_opening_shortlist_count",
            self._openings.increment_counters(opening.id, shortlist_count=1),
            opening_id=str(opening.id),
        )

        event = ShortlistedEvent(
            recipient_id=interest.builder_id,
            occurred_at=now,
            interest_id=interest.id,
            founder=await load_actor(self._profiles, founder_id),
            opening_id=opening.id,
            opening_title=opening.title,
        )
        logger.info(
            "Builder shortlisted",
            interest_id=str(interest.id),
            founder_id=str(founder_id),
            builder_id=str(interest.builder_id),
        )
        return WorkflowResult(interest, [event])

    async def pass_on_builder(self, *, founder_id: Any, interest_id: Any) -> WorkflowResult[Interest]:
        founder_id = UserId(founder_id)
        now = self._deps.clock()

        interest = await self._require_interest(InterestId(interest_id))
        opening = await self._require_owned_opening(interest, founder_id, "pass on builders for")

        previous = interest.pass_on(now)
        await self._store_transition(interest, previous)

        event = BuilderPassedEvent(
            recipient_id=interest.builder_id,
            occurred_at=now,
            interest_id=interest.id,
            opening_id=opening.id,
            opening_title=opening.title,
        )
        logger.info("Builder passed", interest_id=str(interest.id), founder_id=str(founder_id))
        return WorkflowResult(interest, [event])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def check_mutual_match(self, *, founder_id: Any, builder_id: Any) -> MutualMatchCheck:
        interest = await self._interests.find_mutual_match(UserId(founder_id), UserId(builder_id))
        if interest is None:
            return MutualMatchCheck(is_mutual_match=False)
        return MutualMatchCheck(
            is_mutual_match=True,
            interest_id=interest.id,
            matched_at=interest.matched_at,
        )

    async def get_mutual_matches(self, *, user_id: Any) -> list[Interest]:
        account = await self._require_account(UserId(user_id))
        if account.role == UserRole.FOUNDER:
            return await self._interests.list_mutual_matches(founder_id=account.id)
        return await self._interests.list_mutual_matches(builder_id=account.id)

    async def get_match_by_id(self, *, interest_id: Any, user_id: Any) -> Interest:
        user_id = UserId(user_id)
        interest = await self._interests.get_by_id(InterestId(interest_id))
        if interest is None or not interest.is_mutual_match:
            raise InterestNotFoundError("Match not found")
        if not interest.is_participant(user_id):
            raise AuthorizationError("You do not have access to this match")
        return interest

    async def get_builder_interests(
        self,
        *,
        builder_id: Any,
        status: InterestStatus | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[Interest]:
        builder_id = UserId(builder_id)
        offset = page_window(page, limit)
        items = await self._interests.list_for_builder(builder_id, status, limit, offset)
        total = await self._interests.count_for_builder(builder_id, status)
        return Page(items=items, total=total, page=page, limit=limit)

    async def get_founder_interests(
        self,
        *,
        founder_id: Any,
        opening_id: Any | None = None,
        status: InterestStatus | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[Interest]:
        founder_id = UserId(founder_id)
        opening = OpeningId(opening_id) if opening_id is not None else None
        offset = page_window(page, limit)
        items = await self._interests.list_for_founder(founder_id, opening, status, limit, offset)
        total = await self._interests.count_for_founder(founder_id, opening, status)
        return Page(items=items, total=total, page=page, limit=limit)

    async def get_pending_interests_count(self, *, founder_id: Any) -> int:
        return await self._interests.count_for_founder(
            UserId(founder_id), status=InterestStatus.INTERESTED
        )

    async def get_interest_stats(self, *, user_id: Any) -> InterestStats:
        account = await self._require_account(UserId(user_id))
        if account.role == UserRole.FOUNDER:
            counts = await self._interests.count_by_status(founder_id=account.id)
        else:
            counts = await self._interests.count_by_status(builder_id=account.id)
        by_status = {status: counts.get(status, 0) for status in InterestStatus}
        return InterestStats(
            role=account.role,
            by_status=by_status,
            total=sum(by_status.values()),
            mutual_matches=by_status[InterestStatus.SHORTLISTED],
        )

    async def get_today_interest_count(self, *, builder_id: Any) -> QuotaUsage:
        builder_id = UserId(builder_id)
        account = await self._require_account(builder_id)
        day_start = self._quota.day_start(self._deps.clock())
        used = await self._interests.count_created_since(builder_id, day_start)
        limit = self._quota.limit_for(account.subscription_tier)
        return QuotaUsage(
            used=used,
            limit=limit,
            remaining=max(0, limit - used),
            resets_at=day_start + timedelta(days=1),
        )

    async def check_interest_by_opening(self, *, builder_id: Any, opening_id: Any) -> InterestCheck:
        interest = await self._interests.find_by_builder_and_opening(
            UserId(builder_id), OpeningId(opening_id)
        )
        if interest is None:
            return InterestCheck(has_interest=False)
        return InterestCheck(has_interest=True, interest_id=interest.id, status=interest.status)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_account(self, user_id: UserId) -> UserAccount:
        account = await self._profiles.get_account(user_id)
        if account is None:
            raise UserNotFoundError("User not found")
        return account

    async def _require_opening(self, opening_id: OpeningId) -> Opening:
        opening = await self._openings.get_by_id(opening_id)
        if opening is None:
            raise OpeningNotFoundError("Opening not found")
        return opening

    async def _require_interest(self, interest_id: InterestId) -> Interest:
        interest = await self._interests.get_by_id(interest_id)
        if interest is None:
            raise InterestNotFoundError("Interest not found")
        return interest

    async def _require_owned_opening(
        self,
        interest: Interest,
        founder_id: UserId,
        action: str,
    ) -> Opening:
        opening = await self._require_opening(interest.opening_id)
        if not opening.is_owned_by(founder_id):
            raise AuthorizationError(f"You can only {action} your own openings")
        return opening

    async def _store_transition(self, interest: Interest, previous: InterestStatus) -> None:
        if not await self._interests.save_transition(interest, previous):
            raise ConcurrencyError("Interest was modified by another request")


__all__ = [
    "InterestCheck",
    "InterestService",
    "InterestStats",
    "MutualMatchCheck",
    "QuotaUsage",
]
