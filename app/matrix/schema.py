"""
ChemSpot — Reaction Matrix Value Types

Every object here is immutable and owned by exactly one generation request.
A Grid is n rows of n optional cells; cells below the diagonal are always None
because mixing P2 into P5 is the same experiment as P5 into P2.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from content_bank.colors import RGB

INTRINSIC_KIND = "intrinsic"


@dataclass(frozen=True)
class Solution:
    """One labeled pipette: a dissolved cation + anion pair."""
    cation: str
    anion: str
    label: str                              # "P1".."PN", generation order
    intrinsic_color: Optional[str] = None   # Color of the solution on its own
    intrinsic_rgb: Optional[RGB] = None

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "cation": self.cation,
            "anion": self.anion,
            "intrinsic_color": self.intrinsic_color,
            "intrinsic_rgb": list(self.intrinsic_rgb) if self.intrinsic_rgb else None,
        }


@dataclass(frozen=True)
class GridCell:
    kind: str                   # OutcomeKind value, or "intrinsic" on the diagonal
    color: Optional[str] = None
    rgb: Optional[RGB] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "color": self.color,
            "rgb": list(self.rgb) if self.rgb else None,
        }


Grid = Tuple[Tuple[Optional[GridCell], ...], ...]


@dataclass(frozen=True)
class SearchStats:
    colored_count: int
    distinct_color_buckets: int

    def to_dict(self) -> dict:
        return {
            "colored_count": self.colored_count,
            "distinct_color_buckets": self.distinct_color_buckets,
        }


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of one coverage search.

    target / min_distinct_colors are the thresholds in effect when the search
    stopped, after any relaxation. note is set only for best-effort results.
    """
    solutions: Tuple[Solution, ...]
    grid: Grid
    stats: SearchStats
    accepted: bool
    attempts: int
    target: int
    min_distinct_colors: int
    note: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {
            "solutions": [s.to_dict() for s in self.solutions],
            "grid": [[cell.to_dict() if cell else None for cell in row] for row in self.grid],
            "stats": self.stats.to_dict(),
            "accepted": self.accepted,
            "attempts": self.attempts,
        }
        if self.note:
            payload["note"] = self.note
        return payload
