"""Tests for spending analytics."""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.user import User
from app.repositories.analytics_repository import AnalyticsRepository, CategorySpend, StatusTally
from tests.conftest import DEFAULT_USER_ID, make_subscription, utc


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def portfolio(db_session):
    make_subscription(db_session, utc(2024, 2, 10))
    make_subscription(
        db_session,
        utc(2024, 6, 1),
        name="Adobe",
        amount="1200",
        billing_cycle="Yearly",
        category="Software",
    )
    make_subscription(db_session, utc(2024, 2, 12), name="Spotify", amount="119", status="Paused")
    make_subscription(db_session, utc(2024, 2, 13), name="Hulu", amount="500", status="Cancelled")


class TestAnalyticsRepository:
    def test_total_monthly_spend(self, db_session, portfolio) -> None:
        # 649 monthly + 1200 / 12 yearly; paused and cancelled excluded
        total = AnalyticsRepository(db_session).total_monthly_spend(DEFAULT_USER_ID)
        assert total == pytest.approx(749.0)

    def test_category_breakdown(self, db_session, portfolio) -> None:
        assert AnalyticsRepository(db_session).category_breakdown(DEFAULT_USER_ID) == [
            CategorySpend(category="Entertainment", total=649.0, count=1),
            CategorySpend(category="Software", total=1200.0, count=1),
        ]

    def test_status_counts(self, db_session, portfolio) -> None:
        assert AnalyticsRepository(db_session).status_counts(DEFAULT_USER_ID) == [
            StatusTally(status="Active", count=2),
            StatusTally(status="Cancelled", count=1),
            StatusTally(status="Paused", count=1),
        ]

    def test_empty(self, db_session) -> None:
        repo = AnalyticsRepository(db_session)
        assert repo.total_monthly_spend(DEFAULT_USER_ID) == 0.0
        assert repo.category_breakdown(DEFAULT_USER_ID) == []
        assert repo.status_counts(DEFAULT_USER_ID) == []


class TestAnalyticsApi:
    def test_requires_token(self, client) -> None:
        assert client.get("/api/analytics/").status_code == 401

    def test_analytics(self, client, auth_headers, portfolio) -> None:
        response = client.get("/api/analytics/", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["totalMonthlySpend"] == pytest.approx(749.0)
        assert body["categoryBreakdown"] == [
            {"_id": "Entertainment", "total": 649.0, "count": 1},
            {"_id": "Software", "total": 1200.0, "count": 1},
        ]
        assert body["statusCounts"] == [
            {"_id": "Active", "count": 2},
            {"_id": "Cancelled", "count": 1},
            {"_id": "Paused", "count": 1},
        ]

    def test_other_users_are_excluded(self, client, auth_headers, db_session) -> None:
        stranger = User(name="Grace Hopper", email="grace@example.com")
        db_session.add(stranger)
        db_session.commit()
        make_subscription(db_session, utc(2024, 2, 10), user_id=stranger.id)

        body = client.get("/api/analytics/", headers=auth_headers).json()

        assert body == {"totalMonthlySpend": 0.0, "categoryBreakdown": [], "statusCounts": []}
