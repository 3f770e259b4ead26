"""
Basketball-Reference Career Stats Scraper - PRODUCTION VERSION
Scrapes career stat highlights for every player on basketball-reference.com (a-z)

FEATURES:
- Roster discovery per surname letter (/players/{letter}/)
- Concurrent profile scraping, capped at MAX_CONCURRENT open pages
- Degraded rows (name only) instead of dropped players on profile failures
- Failed letters are skipped, the run continues with the next letter
- One CSV per letter in Data/ (A.csv ... Z.csv)
"""

import asyncio
import csv
import os
import string
import sys
import time
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from browser import DocumentFetcher, FetchError, USER_AGENT
from player_stats import ParseError, PlayerRecord, extract_fields, find_stats_panel
from roster import RosterEntry, discover_roster, profile_url

# =============================================================================
# CONFIGURATION
# =============================================================================

def parse_letters(raw: str) -> List[str]:
    """Lower-cased, de-duplicated a-z letters in alphabetical order."""
    return sorted({c for c in raw.lower() if c in string.ascii_lowercase})


def positive_int_env(name: str, default: int) -> int:
    value = int(os.getenv(name, str(default)))
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


LETTERS = parse_letters(os.getenv('SCRAPE_LETTERS', string.ascii_lowercase))  # Set by workflow matrix
OUTPUT_DIR = Path("Data")
TEST_MODE = os.getenv('TEST_MODE', 'false').lower() == 'true'
TEST_MODE_PLAYER_LIMIT = 10
MAX_CONCURRENT = positive_int_env('MAX_CONCURRENT', 8)
FETCH_TIMEOUT_MS = positive_int_env('FETCH_TIMEOUT_MS', 30000)

# =============================================================================
# DATA STRUCTURES
# =============================================================================

CSV_HEADERS = [
    "Player", "G", "PTS", "TRB", "AST",
    "FG(%)", "FG3(%)", "FT(%)", "eFG(%)", "PER", "WS"
]


class LetterState(Enum):
    IDLE = "idle"
    ROSTER_FETCHING = "roster_fetching"
    FANNING_OUT = "fanning_out"
    AGGREGATING = "aggregating"
    SORTED = "sorted"
    WRITTEN = "written"
    LETTER_FAILED = "letter_failed"


@dataclass
class LetterResult:
    letter: str
    state: LetterState = LetterState.IDLE
    players: List[PlayerRecord] = field(default_factory=list)
    error: Optional[Exception] = None
    path: Optional[Path] = None

    @property
    def failed(self) -> bool:
        return self.state is LetterState.LETTER_FAILED

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def format_stat(value) -> str:
    return "" if value is None else str(value)


def format_elapsed(seconds: float) -> str:
    """HH:MM:SS.CC"""
    whole, millis = divmod(int(round(seconds * 1000)), 1000)
    hours, remainder = divmod(whole, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis // 10:02d}"


def name_sort_key(name: str) -> str:
    """Accent- and case-insensitive key, so 'Álex' sorts with 'Alex'."""
    text = unicodedata.normalize('NFKD', name)
    return ''.join(ch for ch in text if not unicodedata.combining(ch)).casefold()


def sort_players(players: Iterable[PlayerRecord]) -> List[PlayerRecord]:
    return sorted(players, key=lambda p: name_sort_key(p.name))


def write_letter_csv(letter: str, players: List[PlayerRecord], output_dir: Path = OUTPUT_DIR) -> Path:
    """Write one letter's players to {output_dir}/{LETTER}.csv (overwrites)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    filename = output_dir / f"{letter.upper()}.csv"

    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        for player in players:
            writer.writerow([player.name] + [format_stat(v) for v in player.stat_values()])
    return filename

# =============================================================================
# PROFILE SCRAPING
# =============================================================================

async def fetch_player_record(fetcher, entry: RosterEntry) -> PlayerRecord:
    """
    Scrape one profile's career highlights.

    Never raises for fetch failures: the player comes back with name only so
    the letter's CSV still lists them.
    """
    record = PlayerRecord(name=entry.name, resource=entry.resource)

    try:
        html = await fetcher.fetch(profile_url(entry.resource))
    except FetchError as e:
        print(f"    ⚠️  {entry.name}: {e.reason} - stats left blank")
        return record

    record = record.with_stats(extract_fields(find_stats_panel(html)))
    print(f"    ✓ {record.name} " + " ".join(format_stat(v) for v in record.stat_values()))
    return record

# =============================================================================
# CONCURRENT SCRAPING
# =============================================================================

async def scrape_players(fetcher, entries: List[RosterEntry], max_concurrent: int = MAX_CONCURRENT) -> List[PlayerRecord]:
    """One task per entry, at most max_concurrent in flight. One record per entry, in entry order."""
    if max_concurrent < 1:
        raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
    semaphore = asyncio.Semaphore(max_concurrent)

    async def bounded(entry: RosterEntry) -> PlayerRecord:
        async with semaphore:
            return await fetch_player_record(fetcher, entry)

    results = await asyncio.gather(*(bounded(entry) for entry in entries), return_exceptions=True)

    players = []
    for entry, result in zip(entries, results):
        if isinstance(result, PlayerRecord):
            players.append(result)
        else:
            print(f"    ❌ {entry.name}: {result!r} - stats left blank")
            players.append(PlayerRecord(name=entry.name, resource=entry.resource))
    return players


async def process_letter(fetcher, letter: str, max_concurrent: int = MAX_CONCURRENT,
                         player_limit: Optional[int] = None) -> LetterResult:
    result = LetterResult(letter=letter)

    print(f"\n📋 Loading roster for '{letter.upper()}'...")
    result.state = LetterState.ROSTER_FETCHING
    try:
        entries = await discover_roster(fetcher, letter)
    except (FetchError, ParseError) as e:
        print(f"  ❌ Roster for '{letter.upper()}' failed: {e}")
        result.state = LetterState.LETTER_FAILED
        result.error = e
        return result

    print(f"  ✓ Found {len(entries)} players")
    if player_limit is not None and len(entries) > player_limit:
        entries = entries[:player_limit]
        print(f"  ℹ️  TEST MODE: Limited to {player_limit} players")

    result.state = LetterState.FANNING_OUT
    players = await scrape_players(fetcher, entries, max_concurrent)

    result.state = LetterState.AGGREGATING
    result.players = sort_players(players)
    result.state = LetterState.SORTED
    return result


async def scrape_letter(fetcher, letter: str, output_dir: Path = OUTPUT_DIR,
                        max_concurrent: int = MAX_CONCURRENT,
                        player_limit: Optional[int] = None) -> LetterResult:
    result = await process_letter(fetcher, letter, max_concurrent, player_limit)
    if result.failed:
        return result

    result.path = write_letter_csv(letter, result.players, output_dir)
    result.state = LetterState.WRITTEN
    print(f"  💾 Saved {len(result.players)} players to {result.path}")
    return result


async def run(fetcher, letters: Iterable[str], output_dir: Path = OUTPUT_DIR,
              max_concurrent: int = MAX_CONCURRENT,
              player_limit: Optional[int] = None) -> List[LetterResult]:
    """Letters are scraped strictly one after another."""
    results = []
    for letter in letters:
        print(f"\n{'='*80}")
        print(f"🏀 SCRAPING PLAYERS: {letter.upper()}")
        print(f"{'='*80}")
        results.append(await scrape_letter(fetcher, letter, output_dir, max_concurrent, player_limit))
    return results

# =============================================================================
# MAIN SCRAPER
# =============================================================================

async def main():
    started = time.perf_counter()

    print("\n" + "="*80)
    print("🏀 BASKETBALL-REFERENCE CAREER STATS SCRAPER - PRODUCTION")
    print("="*80)
    print(f"🔤 Letters: {''.join(LETTERS)}")
    print(f"🧪 Test Mode: {TEST_MODE}")
    print(f"⚡ Concurrency: {MAX_CONCURRENT}")
    print(f"⏱️  Fetch Timeout: {FETCH_TIMEOUT_MS}ms")
    print("="*80)

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    player_limit = TEST_MODE_PLAYER_LIMIT if TEST_MODE else None

    async with DocumentFetcher(user_agent=USER_AGENT, timeout_ms=FETCH_TIMEOUT_MS) as fetcher:
        results = await run(fetcher, LETTERS, OUTPUT_DIR, MAX_CONCURRENT, player_limit)

    written = [r for r in results if not r.failed]
    failed = [r.letter.upper() for r in results if r.failed]

    print(f"\n{'='*80}")
    print(f"✅ SCRAPING COMPLETE!")
    print(f"{'='*80}")
    print(f"📊 Total Players: {sum(len(r.players) for r in written)}")
    print(f"💾 Letters written: {len(written)}/{len(results)}")
    if failed:
        print(f"⚠️  Letters failed: {', '.join(failed)}")
    print(f"{'='*80}\n")

    print(f"RunTime {format_elapsed(time.perf_counter() - started)}")

    if results and not written:
        print("\n❌ CRITICAL: No letters scraped.")
        sys.exit(1)


def cli():
    try:
        asyncio.run(main())
    except Exception as e:
        print(f"\n❌ FATAL ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
