"""
ChemSpot — Grid Builder
Upper-triangular N×N outcome grid for a set of pipettes.
    diagonal      → the pipette's own color (or None if colorless)
    upper triangle → resolve(row pipette, column pipette)
    lower triangle → always None
"""

from typing import Optional, Sequence

from content_bank.loader import ReactionTable
from app.matrix.outcome import resolve
from app.matrix.schema import INTRINSIC_KIND, Grid, GridCell, Solution


def _cell(table: ReactionTable, a: Solution, b: Solution) -> Optional[GridCell]:
    record = resolve(table, a, b)
    if record is None:
        return None
    return GridCell(kind=record.kind.value, color=record.color, rgb=record.rgb)


def _diagonal(solution: Solution) -> Optional[GridCell]:
    if solution.intrinsic_rgb is None:
        return None
    return GridCell(kind=INTRINSIC_KIND, color=solution.intrinsic_color, rgb=solution.intrinsic_rgb)


def build_grid(table: ReactionTable, solutions: Sequence[Solution]) -> Grid:
    n = len(solutions)
    rows = []
    for i in range(n):
        row = []
        for j in range(n):
            if j < i:
                row.append(None)
            elif j == i:
                row.append(_diagonal(solutions[i]))
            else:
                row.append(_cell(table, solutions[i], solutions[j]))
        rows.append(tuple(row))
    return tuple(rows)
