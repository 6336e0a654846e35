from unittest import mock

import pytest

from bookgx_dashboard.config import CARD_PERFORMANCE, CARD_REVENUE_CHART, CARD_STATS_OVERVIEW
from bookgx_dashboard.exceptions import FetchError
from bookgx_dashboard.loaders.users import (
    User,
    clean_cards,
    default_cards_for_role,
    fetch_users,
    users_from_rows,
)


@pytest.mark.parametrize(
    "role, has_revenue, has_performance",
    [
        ("Admin", True, True),
        ("Branch Manager", True, False),
        ("Sales Officer", True, False),
        ("Artist Manager", True, False),
        ("Artist", False, False),
        ("Intern", False, False),
    ],
)
def test_default_cards_for_role(role, has_revenue, has_performance):
    cards = default_cards_for_role(role)
    assert CARD_STATS_OVERVIEW in cards
    assert (CARD_REVENUE_CHART in cards) is has_revenue
    assert (CARD_PERFORMANCE in cards) is has_performance


def test_clean_cards():
    assert clean_cards('"StatsOverview, RevenueChart",') == ["StatsOverview", "RevenueChart"]
    assert clean_cards("") == []


def test_users_from_rows():
    rows = [
        ["Sara", "Admin", "pw1", ""],
        ["Omar", "Artist", "pw2", "StatsOverview,RevenueChart"],
        ["", "Admin", "pw3"],
        ["Broken", "Admin"],
    ]
    users = users_from_rows(rows)
    assert [u.name for u in users] == ["Sara", "Omar"]
    assert users[0].can_view(CARD_PERFORMANCE)
    assert users[1].cards == ["StatsOverview", "RevenueChart"]


def test_password_not_in_repr():
    assert "secret" not in repr(User("Sara", "Admin", "secret"))


def test_fetch_users_skips_header():
    source = mock.Mock()
    source.fetch_text.return_value = "Name,Role,Password,Cards\nSara,Admin,pw1,\n"
    users = fetch_users(source)
    assert [(u.name, u.role, u.password) for u in users] == [("Sara", "Admin", "pw1")]


def test_fetch_users_failure_returns_empty():
    source = mock.Mock()
    source.fetch_text.side_effect = FetchError("offline")
    assert fetch_users(source) == []
