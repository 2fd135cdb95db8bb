"""
Shared fixtures: small hand-built reaction tables with known properties,
plus the bundled spot-test database.
"""

import pytest

from content_bank.loader import ReactionTable, get_reaction_table


class FixedRng:
    """Stand-in for random.Random that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value

    def choice(self, seq):
        return seq[min(int(self.value * len(seq)), len(seq) - 1)]


@pytest.fixture
def fixed_rng():
    return FixedRng


@pytest.fixture
def bundled_table() -> ReactionTable:
    return get_reaction_table()


@pytest.fixture
def poor_table() -> ReactionTable:
    """Five cations, only three colored reactions in total. Sampling never dead-ends."""
    return ReactionTable({
        "inorganic": {
            "A+": {"b-": {"type": "ppt", "color": "red"}},
            "B+": {"c-": {"type": "ppt", "color": "blue"}},
            "C+": {"d-": {"type": "ppt", "color": "green"}},
            "D+": {"e-": {"type": "no-reaction"}},
            "E+": {
                "f-": {"type": "no-reaction"},
                "g-": {"type": "no-reaction"},
                "h-": {"type": "no-reaction"},
            },
        }
    })


@pytest.fixture
def tiny_table() -> ReactionTable:
    """Two cations: nothing can ever fill five pipettes."""
    return ReactionTable({
        "inorganic": {
            "X+": {"Y-": {"type": "no-reaction"}},
            "Z+": {"W-": {"type": "ppt", "color": "yellow"}},
        }
    })
