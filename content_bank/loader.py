"""
ChemSpot Reaction Table Loader — Singleton pattern for O(1) cation/anion lookup.
Loads the spot-test database (chemdb.json) into typed, read-only records.

The raw file mixes two sentinel keys into each cation's anion map:
    "selbst"  → color of the cation's solution on its own
    "flamme"  → flame-test color
They are split out into CationEntry.self_color / CationEntry.flame_test so
that iterating "all anions" never sees them.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Optional, List, Dict, Any, Mapping, Tuple

from content_bank.colors import RGB, color_name_to_rgb, is_valid_color_name

logger = logging.getLogger(__name__)

SELF_KEY = "selbst"
FLAME_KEY = "flamme"

_instance: Optional["ReactionTable"] = None


def get_reaction_table() -> "ReactionTable":
    """Get singleton ReactionTable instance."""
    global _instance
    if _instance is None:
        from app.config import REACTION_DB_PATH
        _instance = ReactionTable.from_file(REACTION_DB_PATH)
    return _instance


def _explicit_rgb(raw: Any) -> Optional[RGB]:
    """A raw [r, g, b] list of numbers, or None if absent or malformed."""
    if raw is None:
        return None
    if (
        isinstance(raw, (list, tuple))
        and len(raw) == 3
        and all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in raw)
    ):
        return tuple(int(c) for c in raw)
    logger.warning(f"Ignoring malformed rgb value: {raw!r}")
    return None


class OutcomeKind(str, Enum):
    PRECIPITATE = "ppt"
    OBSERVATION = "observation"
    NO_REACTION = "no-reaction"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> "OutcomeKind":
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class OutcomeRecord:
    """Stored result for one (cation, anion) cell of the table."""
    kind: OutcomeKind
    color: Optional[str] = None
    notes: Tuple[str, ...] = ()
    rgb: Optional[RGB] = None

    @property
    def is_colored(self) -> bool:
        return self.kind != OutcomeKind.NO_REACTION and self.rgb is not None


@dataclass(frozen=True)
class CationEntry:
    name: str
    reactions: Mapping[str, OutcomeRecord] = field(default_factory=dict)
    self_color: Optional[str] = None
    flame_test: Optional[str] = None


class ReactionTable:
    """
    Read-only spot-test table: cation → (anion → OutcomeRecord).

    Usage:
        table = get_reaction_table()
        record = table.lookup("Ag+", "Cl-")      # ppt, white
        table.intrinsic_color("Cu2+")            # "blue"
    """

    def __init__(self, data: Dict[str, Any]):
        self._vocab: List[str] = list(data.get("colorVocab") or [])
        self._aliases: Dict[str, List[str]] = dict(data.get("aliases") or {})
        self._intrinsic: Dict[str, str] = dict(data.get("intrinsicColors") or {})
        self._entries: Dict[str, CationEntry] = {}

        for cation, raw_map in (data.get("inorganic") or {}).items():
            if raw_map is None:
                raw_map = {}
            if not isinstance(raw_map, dict):
                logger.warning(f"Skipping malformed cation {cation}: {raw_map!r}")
                continue
            self._entries[cation] = self._build_entry(cation, raw_map)

        self._anions: List[str] = sorted({
            anion for entry in self._entries.values() for anion in entry.reactions
        })
        self._rank: Dict[str, int] = {cation: i for i, cation in enumerate(self._entries)}

    @classmethod
    def from_file(cls, path) -> "ReactionTable":
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load reaction table {path}: {e}")
            raise
        table = cls(data)
        logger.info(f"Loaded reaction table: {path.name} ({table.get_stats()})")
        return table

    # ─── Building ────────────────────────────────────────────────────────────

    def _build_entry(self, cation: str, raw_map: Dict[str, Any]) -> CationEntry:
        reactions: Dict[str, OutcomeRecord] = {}
        self_color = None
        flame_test = None

        for key, raw in raw_map.items():
            if not isinstance(raw, dict):
                logger.warning(f"Skipping malformed entry {cation}/{key}: {raw!r}")
                continue
            if key == SELF_KEY:
                self_color = raw.get("color") if self.is_valid_color(raw.get("color")) else None
            elif key == FLAME_KEY:
                flame_test = raw.get("color") if self.is_valid_color(raw.get("color")) else None
            else:
                reactions[key] = self._build_record(raw)

        return CationEntry(
            name=cation,
            reactions=MappingProxyType(reactions),
            self_color=self_color,
            flame_test=flame_test,
        )

    def _build_record(self, raw: Dict[str, Any]) -> OutcomeRecord:
        kind = OutcomeKind.parse(raw.get("type"))
        notes = raw.get("notes") or ()
        if isinstance(notes, (list, tuple)):
            notes = tuple(str(n) for n in notes)
        else:
            notes = (str(notes),)

        if kind == OutcomeKind.NO_REACTION:
            return OutcomeRecord(kind=kind, notes=notes)

        color = raw.get("color")
        rgb = _explicit_rgb(raw.get("rgb")) or self.color_to_rgb(color)

        return OutcomeRecord(
            kind=kind,
            color=color if self.is_valid_color(color) else None,
            notes=notes,
            rgb=rgb,
        )

    # ─── Colors ──────────────────────────────────────────────────────────────

    @property
    def color_vocab(self) -> List[str]:
        return list(self._vocab)

    def is_valid_color(self, name: Optional[str]) -> bool:
        return is_valid_color_name(name, self._vocab)

    def color_to_rgb(self, name: Optional[str]) -> Optional[RGB]:
        return color_name_to_rgb(name, self._vocab)

    # ─── Lookup ──────────────────────────────────────────────────────────────

    @property
    def cations(self) -> List[str]:
        return list(self._entries)

    @property
    def anions(self) -> List[str]:
        return list(self._anions)

    def cation_rank(self, cation: str) -> int:
        """Declaration order of a cation in the data file; unknown cations sort last."""
        return self._rank.get(cation, len(self._rank))

    def entry(self, cation: str) -> Optional[CationEntry]:
        return self._entries.get(cation)

    def lookup(self, cation: str, anion: str) -> Optional[OutcomeRecord]:
        """Outcome of cation + anion, or None if the table has no entry."""
        entry = self._entries.get(cation)
        if entry is None:
            return None
        return entry.reactions.get(anion)

    def intrinsic_color(self, cation: str, anion: Optional[str] = None) -> Optional[str]:
        """Color of a solution on its own: the cation's self color, else the named table."""
        entry = self._entries.get(cation)
        if entry and entry.self_color:
            return entry.self_color

        keys = [f"{cation}(aq)"]
        if anion:
            keys = [f"{cation}{anion}(aq)", f"{cation}{anion}"] + keys
        for key in keys:
            color = self._intrinsic.get(key)
            if self.is_valid_color(color):
                return color
        return None

    def flame_test(self, cation: str) -> Optional[str]:
        entry = self._entries.get(cation)
        return entry.flame_test if entry else None

    def aliases(self, name: str) -> List[str]:
        return list(self._aliases.get(name, []))

    def colored_outcome_count(self, cation: str) -> int:
        entry = self._entries.get(cation)
        if entry is None:
            return 0
        return sum(1 for record in entry.reactions.values() if record.is_colored)

    # ─── Listing ─────────────────────────────────────────────────────────────

    def all_pairs(self) -> List[Tuple[str, str, OutcomeRecord]]:
        """Every (cation, anion, record) in declaration order."""
        return [
            (cation, anion, record)
            for cation, entry in self._entries.items()
            for anion, record in entry.reactions.items()
        ]

    def list_by_color(self, color: str) -> List[Dict[str, Any]]:
        """Facts whose color matches, for grounding the tutor chat."""
        color = color.lower()
        facts = []
        for cation, anion, record in self.all_pairs():
            if record.color and record.color.lower() == color:
                fact = {"cation": cation, "anion": anion, "type": record.kind.value, "color": record.color}
                if record.notes:
                    fact["notes"] = list(record.notes)
                facts.append(fact)
        for cation, entry in self._entries.items():
            if entry.flame_test and entry.flame_test.lower() == color:
                facts.append({"cation": cation, "type": "flame", "color": entry.flame_test})
        return facts

    # ─── Stats ───────────────────────────────────────────────────────────────

    def get_stats(self) -> Dict[str, int]:
        pairs = self.all_pairs()
        return {
            "cations": len(self._entries),
            "anions": len(self._anions),
            "entries": len(pairs),
            "colored": sum(1 for _, _, record in pairs if record.is_colored),
        }
