"""
ChemSpot — Quiz Generator
Two modes, both straight table lookups:

    pair-to-color        "What happens when Ag+ mixes with Cl-?"
                         30% of the time (with traps on) the pair is a
                         no-reaction entry and the right answer is "no reaction".
    color-to-reactions   "List ALL reactions that give the color: yellow."
"""

import random
from typing import Optional

from app.config import NO_REACTION_ANSWERS, QUIZ_TRAP_PROBABILITY
from content_bank.loader import OutcomeKind, ReactionTable

PAIR_TO_COLOR = "pair-to-color"
COLOR_TO_REACTIONS = "color-to-reactions"
MODES = (PAIR_TO_COLOR, COLOR_TO_REACTIONS)


class UnknownQuizMode(ValueError):
    pass


class QuizUnavailable(RuntimeError):
    """The table has nothing to ask about in this mode."""


def pair_label(cation: str, anion: str) -> str:
    return f"{cation} + {anion}"


def _colored_pairs(table: ReactionTable) -> list:
    return [
        (cation, anion, record)
        for cation, anion, record in table.all_pairs()
        if record.kind != OutcomeKind.NO_REACTION and table.is_valid_color(record.color)
    ]


def pair_to_color(table: ReactionTable, traps: bool = True, rng: Optional[random.Random] = None) -> dict:
    rng = rng or random
    colored = _colored_pairs(table)
    no_react = [p for p in table.all_pairs() if p[2].kind == OutcomeKind.NO_REACTION]

    pick_trap = traps and no_react and rng.random() < QUIZ_TRAP_PROBABILITY
    pool = no_react if pick_trap else colored
    if not pool:
        raise QuizUnavailable("No colored reactions in the database.")
    cation, anion, record = rng.choice(pool)

    if record.kind == OutcomeKind.NO_REACTION:
        expected = {"type": OutcomeKind.NO_REACTION.value}
    else:
        expected = {"type": record.kind.value, "color": record.color}

    return {
        "mode": PAIR_TO_COLOR,
        "prompt": f"What happens when {cation} mixes with {anion}?",
        "cation": cation,
        "anion": anion,
        "expected": expected,
        "grading": {
            "accept": list(NO_REACTION_ANSWERS),
            "color_must_match": bool(expected.get("color")),
        },
    }


def reactions_by_color(table: ReactionTable) -> dict:
    """color → ["Ag+ + Cl-", ...] for every colored reaction."""
    by_color: dict = {}
    for cation, anion, record in _colored_pairs(table):
        by_color.setdefault(record.color, []).append(pair_label(cation, anion))
    return by_color


def color_to_reactions(table: ReactionTable, rng: Optional[random.Random] = None) -> dict:
    rng = rng or random
    by_color = reactions_by_color(table)
    if not by_color:
        raise QuizUnavailable("No colored reactions in the database.")
    color = rng.choice(sorted(by_color))

    return {
        "mode": COLOR_TO_REACTIONS,
        "prompt": f"List ALL reactions that give the color: {color}.",
        "color": color,
        "answers": by_color[color],
        "note": "Semi-correct if you miss any combinations.",
    }


def generate_question(
    table: ReactionTable,
    mode: str = PAIR_TO_COLOR,
    traps: bool = True,
    rng: Optional[random.Random] = None,
) -> dict:
    if mode not in MODES:
        raise UnknownQuizMode(f"Unknown mode: {mode}. Expected one of: {', '.join(MODES)}")
    if mode == PAIR_TO_COLOR:
        return pair_to_color(table, traps=traps, rng=rng)
    return color_to_reactions(table, rng=rng)
