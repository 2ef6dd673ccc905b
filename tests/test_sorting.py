"""Tests for order_by parsing."""

from app.core.sorting import SUBSCRIPTION_SORT_FIELDS, parse_order_by

DEFAULT = ("created_at", "desc")


class TestParseOrderBy:
    def test_none_uses_default(self) -> None:
        assert parse_order_by(None, SUBSCRIPTION_SORT_FIELDS, DEFAULT) == DEFAULT

    def test_field_and_direction(self) -> None:
        assert parse_order_by("amount:desc", SUBSCRIPTION_SORT_FIELDS, DEFAULT) == (
            "amount",
            "desc",
        )

    def test_direction_defaults_to_ascending(self) -> None:
        assert parse_order_by("name", SUBSCRIPTION_SORT_FIELDS, DEFAULT) == ("name", "asc")

    def test_unknown_direction_is_ascending(self) -> None:
        assert parse_order_by("name:sideways", SUBSCRIPTION_SORT_FIELDS, DEFAULT) == (
            "name",
            "asc",
        )

    def test_unknown_field_uses_default(self) -> None:
        assert parse_order_by("user_id:asc", SUBSCRIPTION_SORT_FIELDS, DEFAULT) == DEFAULT
