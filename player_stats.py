"""
Player career stat records and the stat highlight panel parser.

The "stats_pullout" panel on a basketball-reference profile looks like:

    <div class="stats_pullout">
        <div class="p1">
            <div>
                <h4 class="poptip" data-tip="Games">G</h4>
                <p></p>
                <p>256</p>
            </div>
            ...
        </div>
        <div class="p2"> ... </div>
        <div class="p3"> ... </div>
    </div>

Each labeled sub-panel carries its career value in the third child node.
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag

Number = Union[int, float]


class ParseError(Exception):
    """Expected page structure is missing."""


class FieldParseError(ValueError):
    """A stat value could not be read as its declared numeric type."""


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class PlayerRecord:
    name: str
    resource: str
    games: Optional[int] = None
    points: Optional[float] = None
    rebounds: Optional[float] = None
    assists: Optional[float] = None
    fg_pct: Optional[float] = None
    fg3_pct: Optional[float] = None
    ft_pct: Optional[float] = None
    efg_pct: Optional[float] = None
    per: Optional[float] = None
    win_shares: Optional[float] = None

    def with_stats(self, stats: Dict[str, Number]) -> "PlayerRecord":
        """Return a copy with the extracted stat fields applied."""
        return dataclasses.replace(self, **stats)

    def stat_values(self) -> Tuple[Optional[Number], ...]:
        return tuple(getattr(self, field_name) for field_name in STAT_FIELD_NAMES)


# =============================================================================
# VALUE PARSING
# =============================================================================

def parse_int(text: str) -> int:
    cleaned = text.strip().replace(',', '')
    try:
        return int(cleaned)
    except ValueError:
        raise FieldParseError(f"not an integer: {text!r}") from None


def parse_float(text: str) -> float:
    cleaned = text.strip()
    try:
        value = float(cleaned)
    except ValueError:
        raise FieldParseError(f"not a number: {text!r}") from None
    if not math.isfinite(value):
        raise FieldParseError(f"not a finite number: {text!r}")
    return value


# Panel label -> (PlayerRecord field, parser). Column order follows the CSV.
STAT_FIELDS: Dict[str, Tuple[str, Callable[[str], Number]]] = {
    "G": ("games", parse_int),
    "PTS": ("points", parse_float),
    "TRB": ("rebounds", parse_float),
    "AST": ("assists", parse_float),
    "FG%": ("fg_pct", parse_float),
    "FG3%": ("fg3_pct", parse_float),
    "FT%": ("ft_pct", parse_float),
    "eFG%": ("efg_pct", parse_float),
    "PER": ("per", parse_float),
    "WS": ("win_shares", parse_float),
}

STAT_FIELD_NAMES = tuple(field_name for field_name, _ in STAT_FIELDS.values())


def _validate_stat_fields():
    record_fields = [f.name for f in dataclasses.fields(PlayerRecord)]
    stat_fields = record_fields[2:]
    if list(STAT_FIELD_NAMES) != stat_fields:
        raise RuntimeError(
            f"STAT_FIELDS {list(STAT_FIELD_NAMES)} does not match PlayerRecord stats {stat_fields}"
        )


_validate_stat_fields()


# =============================================================================
# PANEL EXTRACTION
# =============================================================================

def find_stats_panel(html: str) -> Optional[Tag]:
    """First stats_pullout element in a profile page, or None."""
    soup = BeautifulSoup(html, 'html.parser')
    return soup.select_one('.stats_pullout')


def _sub_panel_label(sub_panel: Tag) -> Optional[str]:
    label = sub_panel.find('h4') or sub_panel.find('strong') or sub_panel.find('span')
    if label is None:
        return None
    return label.get_text(strip=True)


def extract_fields(panel: Optional[Tag]) -> Dict[str, Number]:
    """
    Map recognized highlight labels to parsed values.

    Unknown labels, missing value nodes and unparsable values are skipped, so
    the result holds exactly the fields that could be read.
    """
    stats: Dict[str, Number] = {}
    if panel is None:
        return stats

    for part in panel.select('div.p1, div.p2, div.p3'):
        for sub_panel in part.find_all('div'):
            label = _sub_panel_label(sub_panel)
            slot = STAT_FIELDS.get(label)
            if slot is None:
                continue

            value_node = sub_panel.select_one(':scope > p:nth-child(3)')
            if value_node is None:
                continue

            field_name, parser = slot
            try:
                stats[field_name] = parser(value_node.get_text())
            except FieldParseError:
                continue

    return stats
