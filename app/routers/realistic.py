"""
ChemSpot — Realistic Spot Test Router
Generates N unknown pipettes and the grid of mixing outcomes, and grades
the student's guesses of what each pipette holds.

Stateless: every call is a fresh quiz. The answers travel with the response;
the grade endpoint takes them back from the client.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.config import MATRIX_DEFAULT_SOLUTIONS, MATRIX_MAX_SOLUTIONS, MATRIX_MIN_SOLUTIONS
from app.matrix.coverage import GenerationFailed, search
from app.tutor.grading import grade_solution_guess
from content_bank.loader import ReactionTable, get_reaction_table

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/realistic", tags=["realistic"])

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ─── Request/Response Models ─────────────────────────────────────────────────

class RealisticRequest(BaseModel):
    n: Any = None
    target_colored: Optional[int] = None


class PipetteAnswer(BaseModel):
    label: str
    cation: str
    anion: str


class PipetteGuess(BaseModel):
    cation: str = ""
    anion: str = ""


class GradeRequest(BaseModel):
    solutions: List[PipetteAnswer]
    guesses: Dict[str, PipetteGuess] = {}


# ─── Helpers ─────────────────────────────────────────────────────────────────

def clamp_solution_count(raw: Any) -> int:
    """
    Leading integer of raw, clamped to [5, 9].
    Missing, unparsable, or zero → the default of 7. Never rejects.
    """
    match = _LEADING_INT.match(str(raw)) if raw is not None else None
    n = int(match.group(1)) if match else 0
    if not n:
        n = MATRIX_DEFAULT_SOLUTIONS
    return min(max(n, MATRIX_MIN_SOLUTIONS), MATRIX_MAX_SOLUTIONS)


# ─── Endpoints ───────────────────────────────────────────────────────────────

@router.post("")
def generate_spot_test(req: RealisticRequest, table: ReactionTable = Depends(get_reaction_table)):
    n = clamp_solution_count(req.n)
    try:
        result = search(table, n, target_colored=req.target_colored)
    except GenerationFailed as e:
        logger.error(f"Realistic spot test failed for n={n}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_dict()


@router.post("/grade")
def grade_guesses(req: GradeRequest, table: ReactionTable = Depends(get_reaction_table)):
    results = {}
    for solution in req.solutions:
        guess = req.guesses.get(solution.label) or PipetteGuess()
        verdict = grade_solution_guess(
            guess.cation, guess.anion, solution.cation, solution.anion,
            cation_aliases=table.aliases(solution.cation),
            anion_aliases=table.aliases(solution.anion),
        )
        results[solution.label] = verdict.to_dict()
    correct = sum(1 for v in results.values() if v["correct"])
    return {"results": results, "correct_count": correct, "total": len(req.solutions)}
