"""
ChemSpot — Reaction Matrix Package

Generates realistic spot tests: N unknown pipettes and the grid of what
happens when each pair is mixed.
"""
from app.matrix.coverage import GenerationFailed, score_grid, search
from app.matrix.grid import build_grid
from app.matrix.outcome import resolve
from app.matrix.sampler import GenerationExhausted, sample_solutions, weighted_draw

__all__ = [
    "GenerationExhausted", "GenerationFailed", "build_grid", "resolve",
    "sample_solutions", "score_grid", "search", "weighted_draw",
]
