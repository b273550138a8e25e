"""Tests for scoring weights, tier thresholds, quotas and error codes."""

from datetime import datetime, timezone

import pytest

from buildermatch.domain.entities.profile import SubscriptionTier
from buildermatch.domain.exceptions import (
    AuthorizationError,
    ConfigurationError,
    DailyLimitReachedError,
    DuplicateInterestError,
    InterestNotFoundError,
    InvalidStateError,
    LiveTrialExistsError,
    status_code_for,
)
from buildermatch.domain.policies import (
    MatchTier,
    QuotaPolicy,
    ScoringWeights,
    TierThresholds,
    WorkflowConfig,
)


class TestScoringWeights:
    def test_defaults_sum_to_one(self):
        ScoringWeights().validate()

    def test_rejects_weights_not_summing_to_one(self):
        with pytest.raises(ConfigurationError, match="sum to 1.0"):
            ScoringWeights(skills=0.5).validate()

    def test_rejects_negative_weight(self):
        with pytest.raises(ConfigurationError, match="within"):
            ScoringWeights(skills=-0.1, compensation=0.6).validate()


class TestTierThresholds:
    @pytest.mark.parametrize(
        "overall,tier",
        [
            (0.0, MatchTier.LOW),
            (0.49, MatchTier.LOW),
            (0.5, MatchTier.FAIR),
            (0.7, MatchTier.GOOD),
            (0.85, MatchTier.EXCELLENT),
            (1.0, MatchTier.EXCELLENT),
        ],
    )
    def test_tier_boundaries_are_inclusive(self, overall, tier):
        assert TierThresholds().tier_for(overall) == tier

    def test_rejects_non_increasing_thresholds(self):
        with pytest.raises(ConfigurationError, match="strictly increasing"):
            TierThresholds(fair=0.7, good=0.7, excellent=0.9).validate()

    def test_tier_order(self):
        assert MatchTier.EXCELLENT.at_least(MatchTier.GOOD)
        assert not MatchTier.FAIR.at_least(MatchTier.GOOD)
        assert TierThresholds().min_score_for(MatchTier.GOOD) == 0.7


class TestQuotaPolicy:
    def test_limit_per_tier(self):
        quota = QuotaPolicy()
        assert quota.limit_for(SubscriptionTier.FREE) == 5
        assert quota.limit_for(SubscriptionTier.BUILDER_BOOST) == 15
        assert quota.limit_for(SubscriptionTier.FOUNDER_PRO) == 5

    def test_day_start_in_utc(self):
        now = datetime(2025, 3, 10, 23, 59, tzinfo=timezone.utc)
        assert QuotaPolicy().day_start(now) == datetime(2025, 3, 10, tzinfo=timezone.utc)

    def test_day_start_in_local_timezone(self):
        quota = QuotaPolicy(timezone_name="America/New_York")
        # 02:00 UTC on the 11th is still the 10th in New York (UTC-4 in DST).
        now = datetime(2025, 3, 11, 2, 0, tzinfo=timezone.utc)
        assert quota.day_start(now) == datetime(2025, 3, 10, 4, 0, tzinfo=timezone.utc)

    def test_unknown_timezone(self):
        with pytest.raises(ConfigurationError, match="Unknown quota timezone"):
            QuotaPolicy(timezone_name="Mars/Olympus").validate()

    def test_boost_cannot_be_lower_than_free(self):
        with pytest.raises(ConfigurationError):
            QuotaPolicy(free_limit=10, boosted_limit=5).validate()


class TestWorkflowConfig:
    def test_defaults_are_valid(self):
        assert WorkflowConfig().validate().trial_ending_soon_days == 2

    def test_reminder_window_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            WorkflowConfig(trial_ending_soon_days=0).validate()

    def test_daily_match_limit_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="Daily match limit"):
            WorkflowConfig(daily_match_limit=0).validate()


class TestErrorCodes:
    @pytest.mark.parametrize(
        "exc,status",
        [
            (InvalidStateError("trial", "proposed", "complete"), 400),
            (DailyLimitReachedError(limit=5, used=5), 400),
            (AuthorizationError("nope"), 403),
            (InterestNotFoundError("missing"), 404),
            (DuplicateInterestError("dup"), 409),
            (LiveTrialExistsError("live"), 409),
            (ConfigurationError("bad"), 500),
        ],
    )
    def test_status_codes(self, exc, status):
        assert status_code_for(exc) == status

    def test_daily_limit_message(self):
        exc = DailyLimitReachedError(limit=5, used=5)
        assert exc.code == "DAILY_LIMIT_REACHED"
        assert "daily limit of 5" in str(exc)
