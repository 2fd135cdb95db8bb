"""
ChemSpot — Quiz Router
New questions and deterministic grading for the two quiz modes.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.tutor.grading import grade_color_to_reactions, grade_pair_to_color
from app.tutor.quiz import (
    MODES, PAIR_TO_COLOR, QuizUnavailable, UnknownQuizMode, generate_question,
)
from content_bank.loader import ReactionTable, get_reaction_table

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/quiz", tags=["quiz"])


# ─── Request/Response Models ─────────────────────────────────────────────────

class QuizRequest(BaseModel):
    mode: str = PAIR_TO_COLOR
    traps: bool = True


class QuizGradeRequest(BaseModel):
    mode: str = PAIR_TO_COLOR
    answer: str = ""
    # pair-to-color
    expected: Optional[dict] = None
    accept: Optional[List[str]] = None
    # color-to-reactions
    answers: Optional[List[str]] = None


# ─── Endpoints ───────────────────────────────────────────────────────────────

@router.post("")
def new_question(req: QuizRequest, table: ReactionTable = Depends(get_reaction_table)):
    try:
        return generate_question(table, mode=req.mode, traps=req.traps)
    except UnknownQuizMode as e:
        raise HTTPException(status_code=400, detail=str(e))
    except QuizUnavailable as e:
        logger.error(f"Quiz failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/grade")
def grade_answer(req: QuizGradeRequest):
    if req.mode not in MODES:
        raise HTTPException(status_code=400, detail=f"Unknown mode: {req.mode}")
    if req.mode == PAIR_TO_COLOR:
        if req.expected is None:
            raise HTTPException(status_code=400, detail="expected is required for pair-to-color")
        verdict = grade_pair_to_color(req.answer, req.expected, req.accept)
    else:
        if req.answers is None:
            raise HTTPException(status_code=400, detail="answers is required for color-to-reactions")
        verdict = grade_color_to_reactions(req.answer, req.answers)
    return verdict.to_dict()
