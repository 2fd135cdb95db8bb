"""
ChemSpot — Coverage Search
Keeps sampling pipette sets until the grid is colorful enough to teach from.

A grid is accepted when it has at least `target` colored cells AND at least
`min_distinct_colors` distinct color buckets. The bar only ever drops:
    attempt 60 → target = max(5, floor(target * 0.8))
    attempt 90 → min_distinct_colors = max(3, min_distinct_colors - 1)
After max_attempts the most colorful grid seen is returned with a note.
Nothing is seeded; every call is a fresh quiz.
"""

import logging
import math
import random
from typing import Optional

from app.config import (
    BEST_EFFORT_NOTE, COLOR_BUCKET_SIZE, MATRIX_MAX_ATTEMPTS,
    MATRIX_MIN_DISTINCT_COLORS, MATRIX_MIN_TARGET_COLORED, MATRIX_TARGET_FRACTION,
    MATRIX_RELAX_TARGET_AT, MATRIX_RELAX_TARGET_FACTOR, MATRIX_RELAX_TARGET_FLOOR,
    MATRIX_RELAX_DISTINCT_AT, MATRIX_RELAX_DISTINCT_FLOOR,
)
from content_bank.colors import WHITE
from content_bank.loader import OutcomeKind, ReactionTable
from app.matrix.grid import build_grid
from app.matrix.sampler import GenerationExhausted, sample_solutions
from app.matrix.schema import Grid, GridCell, SearchResult, SearchStats

logger = logging.getLogger(__name__)


class GenerationFailed(Exception):
    """No attempt in the whole budget produced a complete pipette set."""


def is_visibly_colored(cell: Optional[GridCell]) -> bool:
    """A cell a student can actually see: has a color, is not white, is not a no-reaction."""
    return (
        cell is not None
        and cell.rgb is not None
        and cell.kind != OutcomeKind.NO_REACTION.value
        and tuple(cell.rgb) != WHITE
    )


def color_bucket(rgb) -> tuple:
    """Coarse RGB bucket so near-identical shades count as one color. Halves round up."""
    return tuple(math.floor(c / COLOR_BUCKET_SIZE + 0.5) for c in rgb)


def score_grid(grid: Grid) -> SearchStats:
    colored = [cell for row in grid for cell in row if is_visibly_colored(cell)]
    buckets = {color_bucket(cell.rgb) for cell in colored}
    return SearchStats(colored_count=len(colored), distinct_color_buckets=len(buckets))


def initial_target(n: int, target_colored: Optional[int] = None) -> int:
    if target_colored is not None:
        return target_colored
    upper_cells = n * (n - 1) // 2
    return max(MATRIX_MIN_TARGET_COLORED, math.ceil(MATRIX_TARGET_FRACTION * upper_cells))


def search(
    table: ReactionTable,
    n: int,
    target_colored: Optional[int] = None,
    max_attempts: int = MATRIX_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> SearchResult:
    """
    Find a pipette set whose grid meets the coverage bar.

    Returns the first accepted grid, or the best one seen (by colored cell
    count) once the budget is spent.

    Raises:
        GenerationFailed: every attempt ran out of cations.
    """
    target = initial_target(n, target_colored)
    min_distinct = MATRIX_MIN_DISTINCT_COLORS
    best = None  # (solutions, grid, stats)

    for attempt in range(1, max_attempts + 1):
        if attempt == MATRIX_RELAX_TARGET_AT:
            target = max(MATRIX_RELAX_TARGET_FLOOR, math.floor(target * MATRIX_RELAX_TARGET_FACTOR))
            logger.debug(f"Relaxed colored target to {target}")
        if attempt == MATRIX_RELAX_DISTINCT_AT:
            min_distinct = max(MATRIX_RELAX_DISTINCT_FLOOR, min_distinct - 1)
            logger.debug(f"Relaxed distinct color target to {min_distinct}")

        try:
            solutions = sample_solutions(table, n, rng=rng)
        except GenerationExhausted as e:
            logger.debug(f"Attempt {attempt}: {e}")
            continue

        grid = build_grid(table, solutions)
        stats = score_grid(grid)

        if best is None or stats.colored_count > best[2].colored_count:
            best = (solutions, grid, stats)

        if stats.colored_count >= target and stats.distinct_color_buckets >= min_distinct:
            logger.info(f"Matrix accepted after {attempt} attempts: {stats}")
            return SearchResult(
                solutions=tuple(solutions),
                grid=grid,
                stats=stats,
                accepted=True,
                attempts=attempt,
                target=target,
                min_distinct_colors=min_distinct,
            )

    if best is None:
        logger.error(f"Matrix generation failed: no complete set of {n} in {max_attempts} attempts")
        raise GenerationFailed(
            f"Could not generate {n} non-reacting solutions in {max_attempts} attempts. "
            "Try fewer pipettes."
        )

    solutions, grid, stats = best
    logger.warning(
        f"Matrix target not met after {max_attempts} attempts "
        f"(target={target}, min_distinct={min_distinct}); returning best {stats}"
    )
    return SearchResult(
        solutions=tuple(solutions),
        grid=grid,
        stats=stats,
        accepted=False,
        attempts=max_attempts,
        target=target,
        min_distinct_colors=min_distinct,
        note=BEST_EFFORT_NOTE,
    )
