"""
Per-letter roster discovery from the basketball-reference player index.
"""

import string
from dataclasses import dataclass
from typing import List

from bs4 import BeautifulSoup

from player_stats import ParseError

BASE_URL = "https://www.basketball-reference.com"


@dataclass(frozen=True)
class RosterEntry:
    name: str
    resource: str


def roster_url(letter: str) -> str:
    return f"{BASE_URL}/players/{letter}/"


def profile_url(resource: str) -> str:
    return f"{BASE_URL}{resource}"


def parse_roster(html: str) -> List[RosterEntry]:
    """Roster entries in document order from a /players/{letter}/ page."""
    soup = BeautifulSoup(html, 'html.parser')
    body = soup.select_one('#players > tbody')
    if body is None:
        raise ParseError("roster table '#players > tbody' not found")

    entries = []
    for cell in body.find_all('th'):
        link = cell.find('a', href=True)
        # Repeated header rows have no player link
        if link is None:
            continue
        entries.append(RosterEntry(name=link.get_text(strip=True), resource=link['href']))
    return entries


async def discover_roster(fetcher, letter: str) -> List[RosterEntry]:
    """Fetch and parse the roster for one letter. Raises FetchError or ParseError."""
    if len(letter) != 1 or letter not in string.ascii_lowercase:
        raise ValueError(f"letter must be a single lower-case a-z character, got {letter!r}")

    html = await fetcher.fetch(roster_url(letter))
    return parse_roster(html)
