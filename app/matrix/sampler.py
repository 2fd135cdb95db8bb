"""
ChemSpot — Solution Sampler
Picks N labeled pipettes for a realistic spot test.

Rules:
  - Each cation is used at most once; each anion is used at most once.
  - A pipette's own cation + anion must not react (it sits unreacted in its vial).
  - Cations that give many colored outcomes are drawn more often, so the
    resulting grid has something to look at. Every cation keeps weight ≥ 1.

Anion choice for a drawn cation, first non-empty set wins:
  1. anions the cation has no table entry for at all
  2. anions whose entry is an explicit no-reaction
  3. any unused anion (only with allow_reactive_fallback)
No anion at all → the cation is skipped. It has already left the pool.
"""

import logging
import random
from typing import Callable, List, Optional, Sequence, TypeVar

from app.config import MATRIX_ALLOW_REACTIVE_FALLBACK
from content_bank.loader import OutcomeKind, ReactionTable
from app.matrix.schema import Solution

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerationExhausted(Exception):
    """The cation pool ran out before N pipettes could be filled."""


def weighted_draw(
    items: Sequence[T],
    weight: Callable[[T], float],
    rng: Optional[random.Random] = None,
) -> int:
    """
    Index of one item drawn with probability proportional to weight(item).

    Cumulative draw: r is uniform in [0, total); weights are subtracted in
    order until r is no longer positive. The caller removes the item to draw
    without replacement.
    """
    if not items:
        raise ValueError("weighted_draw needs at least one item")
    rng = rng or random
    weights = [weight(item) for item in items]
    r = rng.random() * sum(weights)
    for idx, w in enumerate(weights):
        r -= w
        if r <= 0:
            return idx
    return len(items) - 1


def _uniform(_item) -> float:
    return 1.0


def cation_weight(table: ReactionTable, cation: str) -> int:
    return max(1, table.colored_outcome_count(cation))


def candidate_anions(
    table: ReactionTable,
    cation: str,
    used_anions: set,
    allow_reactive_fallback: bool = False,
) -> List[str]:
    """Anions this cation may be paired with, in the fallback order above."""
    entry = table.entry(cation)
    reactions = entry.reactions if entry else {}
    unused = [a for a in table.anions if a not in used_anions]

    free = [a for a in unused if a not in reactions]
    if free:
        return free

    inert = [a for a in unused if reactions[a].kind == OutcomeKind.NO_REACTION]
    if inert:
        return inert

    if allow_reactive_fallback:
        return unused
    return []


def sample_solutions(
    table: ReactionTable,
    n: int,
    rng: Optional[random.Random] = None,
    allow_reactive_fallback: bool = MATRIX_ALLOW_REACTIVE_FALLBACK,
) -> List[Solution]:
    """
    Draw n non-self-reacting pipettes.

    Raises:
        GenerationExhausted: the cation pool emptied before n were chosen.
    """
    rng = rng or random
    pool = table.cations
    used_anions: set = set()
    solutions: List[Solution] = []

    while len(solutions) < n and pool:
        idx = weighted_draw(pool, lambda c: cation_weight(table, c), rng)
        cation = pool.pop(idx)

        anions = candidate_anions(table, cation, used_anions, allow_reactive_fallback)
        if not anions:
            logger.debug(f"No usable anion left for {cation}, skipping")
            continue

        anion = anions[weighted_draw(anions, _uniform, rng)]
        used_anions.add(anion)

        color = table.intrinsic_color(cation, anion)
        solutions.append(Solution(
            cation=cation,
            anion=anion,
            label=f"P{len(solutions) + 1}",
            intrinsic_color=color,
            intrinsic_rgb=table.color_to_rgb(color),
        ))

    if len(solutions) < n:
        raise GenerationExhausted(
            f"Could only fill {len(solutions)} of {n} pipettes with non-reacting salts."
        )
    return solutions
