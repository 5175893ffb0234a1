"""Tests for the usage store and tier-based daily quota."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from ai_proxy.config import GatewayPolicy
from ai_proxy.models import UsageLog
from ai_proxy.services.core.quota import QuotaDecision, QuotaService
from ai_proxy.services.utils.usage import (
    UsageStore,
    UsageStoreError,
    seconds_until_utc_midnight,
    start_of_utc_day,
)
from tests.conftest import add_usage_logs, count_usage_logs

NOON = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


class TestUtcDay:
    def test_start_of_utc_day(self):
        assert start_of_utc_day(NOON) == datetime(2026, 3, 14, tzinfo=timezone.utc)

    def test_start_of_utc_day_converts_offsets(self):
        # 01:30 in UTC+5 is still the previous UTC day
        local = datetime(2026, 3, 14, 1, 30, tzinfo=timezone(timedelta(hours=5)))
        assert start_of_utc_day(local) == datetime(2026, 3, 13, tzinfo=timezone.utc)

    def test_seconds_until_midnight(self):
        assert seconds_until_utc_midnight(NOON) == 12 * 3600


class TestUsageStore:
    def test_get_tier(self, session: Session, test_user_id: str, subscribe):
        subscribe("pro")
        assert UsageStore(session).get_tier(test_user_id) == "pro"

    def test_get_tier_without_subscription(self, session: Session, test_user_id: str):
        assert UsageStore(session).get_tier(test_user_id) is None

    def test_count_since_only_counts_today(self, session: Session, test_user_id: str):
        today = start_of_utc_day()
        add_usage_logs(session, test_user_id, 3)
        add_usage_logs(session, test_user_id, 4, created_at=today - timedelta(minutes=1))

        assert UsageStore(session).count_since(test_user_id, today) == 3

    def test_count_since_is_per_user(self, session: Session, test_user_id: str):
        add_usage_logs(session, test_user_id, 2)
        add_usage_logs(session, "someone-else", 5)

        assert UsageStore(session).count_since(test_user_id, start_of_utc_day()) == 2

    def test_count_counts_rows_not_tokens(self, session: Session, test_user_id: str):
        session.add(UsageLog(user_id=test_user_id, tokens_used=250))
        session.commit()

        assert UsageStore(session).count_since(test_user_id, start_of_utc_day()) == 1

    def test_record_usage_appends(self, session: Session, test_user_id: str):
        store = UsageStore(session)
        store.record_usage(test_user_id)
        store.record_usage(test_user_id)

        assert count_usage_logs(session, test_user_id) == 2

    def test_database_errors_are_wrapped(self, test_user_id: str):
        db = MagicMock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        store = UsageStore(db)

        with pytest.raises(UsageStoreError):
            store.count_since(test_user_id, start_of_utc_day())
        with pytest.raises(UsageStoreError):
            store.get_tier(test_user_id)

    def test_failed_write_rolls_back(self, test_user_id: str):
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("read-only"))

        with pytest.raises(UsageStoreError):
            UsageStore(db).record_usage(test_user_id)
        db.rollback.assert_called_once()


class TestQuotaService:
    def test_no_subscription_means_free(self, session: Session, test_user_id: str, policy):
        decision = QuotaService(UsageStore(session), policy).check_quota(test_user_id)

        assert decision == QuotaDecision(allowed=True, tier="free", limit=20, used=0)

    def test_free_tier_twentieth_request_allowed(self, session: Session, test_user_id: str, policy):
        add_usage_logs(session, test_user_id, 19)

        decision = QuotaService(UsageStore(session), policy).check_quota(test_user_id)

        assert decision.allowed
        assert decision.used == 19

    def test_free_tier_twenty_first_request_rejected(
        self, session: Session, test_user_id: str, policy, subscribe
    ):
        subscribe("free")
        add_usage_logs(session, test_user_id, 20)

        decision = QuotaService(UsageStore(session), policy).check_quota(test_user_id)

        assert not decision.allowed
        assert decision.limit == 20
        assert decision.used == 20
        assert decision.tier == "free"

    def test_yesterdays_usage_does_not_count(self, session: Session, test_user_id: str, policy):
        add_usage_logs(session, test_user_id, 20, created_at=start_of_utc_day() - timedelta(hours=1))

        assert QuotaService(UsageStore(session), policy).check_quota(test_user_id).allowed

    def test_pro_tier_budget(self, session: Session, test_user_id: str, policy, subscribe):
        subscribe("pro")
        add_usage_logs(session, test_user_id, 20)

        decision = QuotaService(UsageStore(session), policy).check_quota(test_user_id)

        assert decision.allowed
        assert decision.limit == 500

    def test_founder_never_counts(self, test_user_id: str, policy):
        store = MagicMock(spec=UsageStore)
        store.get_tier.return_value = "founder"

        decision = QuotaService(store, policy).check_quota(test_user_id)

        assert decision.allowed
        assert decision.limit is None
        store.count_since.assert_not_called()

    def test_custom_budget_table(self, test_user_id: str):
        store = MagicMock(spec=UsageStore)
        store.get_tier.return_value = None
        store.count_since.return_value = 2
        policy = GatewayPolicy(tier_budgets={"free": 2, "pro": 10, "founder": None})

        assert not QuotaService(store, policy).check_quota(test_user_id).allowed

    def test_count_failure_propagates(self, test_user_id: str, policy):
        store = MagicMock(spec=UsageStore)
        store.get_tier.return_value = "free"
        store.count_since.side_effect = UsageStoreError("usage count failed")

        with pytest.raises(UsageStoreError):
            QuotaService(store, policy).check_quota(test_user_id)

    def test_rejection_body_for_free_tier(self, policy):
        quota = QuotaService(MagicMock(spec=UsageStore), policy)
        body = quota.rejection_body(QuotaDecision(allowed=False, tier="free", limit=20, used=20))

        assert body == {
            "error": "Daily limit reached (20 requests/day). Upgrade to Pro for 500 daily requests!",
            "limit": 20,
            "used": 20,
            "tier": "free",
        }

    def test_rejection_hint_for_unlimited_upgrade(self):
        policy = GatewayPolicy(tier_budgets={"free": 20, "pro": None, "founder": None})
        quota = QuotaService(MagicMock(spec=UsageStore), policy)

        body = quota.rejection_body(QuotaDecision(allowed=False, tier="free", limit=20, used=20))

        assert body["error"] == (
            "Daily limit reached (20 requests/day). Upgrade to Pro for unlimited daily requests!"
        )

    def test_unlimited_tier_from_policy(self, test_user_id: str):
        store = MagicMock(spec=UsageStore)
        store.get_tier.return_value = "pro"
        policy = GatewayPolicy(tier_budgets={"free": 20, "pro": None, "founder": None})

        decision = QuotaService(store, policy).check_quota(test_user_id)

        assert decision.allowed
        store.count_since.assert_not_called()

    def test_rejection_body_for_pro_tier(self, policy):
        quota = QuotaService(MagicMock(spec=UsageStore), policy)
        body = quota.rejection_body(QuotaDecision(allowed=False, tier="pro", limit=500, used=512))

        assert body["error"] == "Daily limit reached (500 requests/day). You've reached your daily limit."
        assert body["used"] == 512

    def test_usage_summary(self, session: Session, test_user_id: str, policy):
        add_usage_logs(session, test_user_id, 7)

        summary = QuotaService(UsageStore(session), policy).usage_summary(test_user_id)

        assert summary["tier"] == "free"
        assert summary["used"] == 7
        assert summary["remaining"] == 13
        assert summary["unlimited"] is False

    def test_usage_summary_unlimited(self, session: Session, test_user_id: str, policy, subscribe):
        subscribe("founder")
        add_usage_logs(session, test_user_id, 900)

        summary = QuotaService(UsageStore(session), policy).usage_summary(test_user_id)

        assert summary["limit"] is None
        assert summary["remaining"] is None
        assert summary["unlimited"] is True
        assert summary["used"] == 900
