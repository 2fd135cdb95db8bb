"""
ChemSpot Content Bank — the spot-test reaction table (cation × anion → outcome).
Read-only. Every outcome is a lookup, never a computed reaction.
"""

from content_bank.loader import (
    CationEntry, OutcomeKind, OutcomeRecord, ReactionTable, get_reaction_table,
)

__all__ = ["CationEntry", "OutcomeKind", "OutcomeRecord", "ReactionTable", "get_reaction_table"]
