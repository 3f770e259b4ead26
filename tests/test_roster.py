import pytest

from browser import FetchError
from player_stats import ParseError
from roster import RosterEntry, discover_roster, parse_roster, profile_url, roster_url
from tests.fakes import FakeFetcher, roster_page


def test_parse_roster_keeps_document_order_and_skips_header_rows():
    html = roster_page([
        ("Zaid Abdul-Aziz", "/players/a/abdulza01.html"),
        ("Alaa Abdelnaby", "/players/a/abdelal01.html"),
    ])

    assert parse_roster(html) == [
        RosterEntry("Zaid Abdul-Aziz", "/players/a/abdulza01.html"),
        RosterEntry("Alaa Abdelnaby", "/players/a/abdelal01.html"),
    ]


def test_parse_roster_ignores_header_cells_outside_tbody():
    html = roster_page([])
    assert parse_roster(html) == []


def test_parse_roster_without_table_raises():
    with pytest.raises(ParseError):
        parse_roster("<html><body><p>Page not found</p></body></html>")


def test_urls_use_resource_as_given():
    assert roster_url("a") == "https://www.basketball-reference.com/players/a/"
    assert profile_url("/players/a/abdelal01.html") == "https://www.basketball-reference.com/players/a/abdelal01.html"


@pytest.mark.asyncio
async def test_discover_roster_fetches_letter_index():
    fetcher = FakeFetcher({roster_url("b"): roster_page([("Charles Bassey", "/players/b/bassech01.html")])})

    entries = await discover_roster(fetcher, "b")

    assert entries == [RosterEntry("Charles Bassey", "/players/b/bassech01.html")]
    assert fetcher.requested == [roster_url("b")]


@pytest.mark.asyncio
async def test_discover_roster_propagates_fetch_error():
    with pytest.raises(FetchError):
        await discover_roster(FakeFetcher(), "x")


@pytest.mark.asyncio
@pytest.mark.parametrize("letter", ["A", "ab", "", "1"])
async def test_discover_roster_rejects_bad_letters(letter):
    fetcher = FakeFetcher()
    with pytest.raises(ValueError):
        await discover_roster(fetcher, letter)
    assert fetcher.requested == []
