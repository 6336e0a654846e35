"""
Loader for the dashboard users sheet.

Columns are positional: Name, Role, Password, Cards. Cards is an optional
comma-separated list of dashboard cards; when blank the role's default set
from config.ROLE_CARDS applies.
"""

import logging
from dataclasses import dataclass, field

from ..config import BASE_CARDS, ROLE_CARDS
from ..exceptions import FetchError
from .csv_parser import parse_csv

logger = logging.getLogger(__name__)


@dataclass
class User:
    name: str
    role: str
    password: str = field(default="", repr=False)
    cards: list[str] = field(default_factory=list)

    def can_view(self, card: str) -> bool:
        return card in self.cards


def default_cards_for_role(role: str) -> list[str]:
    return list(ROLE_CARDS.get(role.strip().lower(), BASE_CARDS))


def clean_cards(raw: str) -> list[str]:
    """Split a cards cell, dropping quotes and empty entries."""
    return [c.strip() for c in raw.replace('"', "").split(",") if c.strip()]


def users_from_rows(rows: list[list[str]]) -> list[User]:
    """Build users from positional rows (header row already removed).

    Rows with fewer than three columns are skipped.
    """
    users = []
    for row in rows:
        if len(row) < 3:
            continue
        name, role, password = (v.strip() for v in row[:3])
        if not name:
            continue
        cards_cell = row[3].strip() if len(row) > 3 else ""
        cards = clean_cards(cards_cell) or default_cards_for_role(role)
        users.append(User(name=name, role=role, password=password, cards=cards))
    return users


def fetch_users(source) -> list[User]:
    """Fetch the users sheet through a CSV source.

    Returns an empty list when the sheet cannot be fetched; nobody can log in
    until it is reachable again.
    """
    try:
        text = source.fetch_text()
    except FetchError as exc:
        logger.warning("Could not load users sheet: %s", exc)
        return []

    rows = parse_csv(text, has_headers=False)
    users = users_from_rows(rows[1:])
    logger.info("Loaded %d users", len(users))
    return users
