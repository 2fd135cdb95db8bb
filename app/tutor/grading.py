"""
ChemSpot — Answer Grading
Deterministic. No LLM. Three verdicts:
    CORRECT       everything right
    SEMI_CORRECT  a list answer that misses combinations or adds extras,
                  but has at least one right
    INCORRECT     nothing right
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from app.config import NO_REACTION_ANSWERS

CORRECT = "CORRECT"
SEMI_CORRECT = "SEMI_CORRECT"
INCORRECT = "INCORRECT"


@dataclass
class Verdict:
    """Result of grading one answer."""
    correct: bool
    verdict: str
    diagnostic: str
    missing: List[str] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "verdict": self.verdict,
            "diagnostic": self.diagnostic,
            "missing": self.missing,
            "extra": self.extra,
        }


def _normalize(text: Optional[str]) -> str:
    return " ".join((text or "").strip().lower().split())


def _normalize_pair(text: str) -> str:
    """'Ag+  +  Cl-' → 'Ag+ + Cl-'. Case is kept: Co and CO are different things."""
    parts = [p.strip() for p in text.split(" + ")]
    return " + ".join(p for p in parts if p)


def grade_pair_to_color(
    answer: str,
    expected: dict,
    accept: Optional[Iterable[str]] = None,
) -> Verdict:
    a = _normalize(answer)

    if expected.get("type") == "no-reaction":
        accepted = {_normalize(s) for s in (accept or NO_REACTION_ANSWERS)}
        if a in accepted:
            return Verdict(True, CORRECT, "Correct — no reaction.")
        return Verdict(False, INCORRECT, "Incorrect — expected “no reaction”.")

    color = expected.get("color")
    if not color:
        return Verdict(False, INCORRECT, "No expected color set.")
    if a == _normalize(color):
        return Verdict(True, CORRECT, "Correct.")
    return Verdict(False, INCORRECT, f"Incorrect — expected color: {color}")


def grade_color_to_reactions(answer: str, answers: Iterable[str]) -> Verdict:
    """Grade a comma-separated list of 'cation + anion' pairs against the full set."""
    must = [_normalize_pair(x) for x in answers]
    given = [_normalize_pair(x) for x in (answer or "").split(",") if x.strip()]

    missing = [x for x in must if x not in given]
    extra = [x for x in given if x not in must]
    hits = len(must) - len(missing)

    if not missing and not extra:
        return Verdict(True, CORRECT, "Correct (all combinations)!")
    if hits == 0:
        return Verdict(False, INCORRECT, f"Incorrect — expected: {'; '.join(must)}", missing, extra)
    if not missing:
        diagnostic = f"Contains extras not in the database: {'; '.join(extra)}"
    elif not extra:
        diagnostic = f"Semi-correct — missing: {'; '.join(missing)}"
    else:
        diagnostic = f"Semi-correct — missing: {'; '.join(missing)}; extra: {'; '.join(extra)}"
    return Verdict(False, SEMI_CORRECT, diagnostic, missing, extra)


def _ion_matches(guess: Optional[str], ion: str, aliases: Iterable[str] = ()) -> bool:
    """Exact formula (case kept), or any listed name for the ion (case ignored)."""
    g = (guess or "").strip()
    if g == ion:
        return True
    return _normalize(g) in {_normalize(a) for a in aliases}


def grade_solution_guess(
    guess_cation: str,
    guess_anion: str,
    cation: str,
    anion: str,
    cation_aliases: Iterable[str] = (),
    anion_aliases: Iterable[str] = (),
) -> Verdict:
    """A pipette guess is right only if both ions match, by formula or by name."""
    cat_ok = _ion_matches(guess_cation, cation, cation_aliases)
    an_ok = _ion_matches(guess_anion, anion, anion_aliases)
    if cat_ok and an_ok:
        return Verdict(True, CORRECT, "Correct.")
    if cat_ok or an_ok:
        wrong = "anion" if cat_ok else "cation"
        return Verdict(False, SEMI_CORRECT, f"One ion is right; check the {wrong}.")
    if not (guess_cation or guess_anion):
        return Verdict(False, INCORRECT, "No guess yet.")
    return Verdict(False, INCORRECT, "Keep trying.")
