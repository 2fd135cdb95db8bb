"""
ChemSpot — Reaction Table Router
Read-only view of what the database knows: ion lists, colors, stats.
"""

from fastapi import APIRouter, Depends

from content_bank.loader import ReactionTable, get_reaction_table

router = APIRouter(prefix="/api/table", tags=["table"])


@router.get("")
def table_overview(table: ReactionTable = Depends(get_reaction_table)):
    return {
        "cations": table.cations,
        "anions": table.anions,
        "colors": table.color_vocab,
        "stats": table.get_stats(),
    }
