"""
ChemSpot — Outcome Resolver
What a student sees when two pipettes are mixed.

The table is indexed by (cation of one, anion of the other), so mixing A with
B checks both cross pairs:
    e1 = table[A.cation][B.anion]
    e2 = table[B.cation][A.anion]
Only one is reported. A colored outcome wins over an uncolored one. When both
or neither are colored, the pair whose cation is declared first in the data
file wins, so resolve(A, B) and resolve(B, A) always agree.
"""

from typing import Optional

from content_bank.loader import OutcomeRecord, ReactionTable
from app.matrix.schema import Solution


def resolve(table: ReactionTable, a: Solution, b: Solution) -> Optional[OutcomeRecord]:
    """
    Observable outcome of mixing a with b.

    Returns None when neither cross pair is in the table ("no visible
    result"), which is different from an explicit no-reaction record.
    Never used for the diagonal; a pipette's own color comes from
    Solution.intrinsic_color.
    """
    e1 = table.lookup(a.cation, b.anion)
    e2 = table.lookup(b.cation, a.anion)

    if e1 is None or e2 is None:
        return e1 if e1 is not None else e2

    if e1.is_colored != e2.is_colored:
        return e1 if e1.is_colored else e2

    key1 = (table.cation_rank(a.cation), b.anion)
    key2 = (table.cation_rank(b.cation), a.anion)
    return e1 if key1 <= key2 else e2
