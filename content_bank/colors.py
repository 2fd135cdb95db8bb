"""
ChemSpot Color Vocabulary — named colors → approximate RGB.
Colors in the reaction table are always words. RGB exists only for swatches
and for counting distinct colors in a generated grid.
"""

import re
from typing import Iterable, Optional, Tuple

RGB = Tuple[int, int, int]

NAME_TO_RGB = {
    "white": (255, 255, 255),
    "off-white": (248, 248, 244),
    "cream": (245, 236, 200),
    "yellow": (255, 230, 0),
    "gold-yellow": (255, 204, 0),
    "orange": (255, 165, 0),
    "brick-red": (178, 34, 34),
    "brown": (120, 72, 0),
    "black": (0, 0, 0),
    "grey": (128, 128, 128),
    "gray": (128, 128, 128),
    "green": (0, 128, 0),
    "blue": (0, 102, 204),
    "deep-blue": (0, 51, 153),
    "violet": (138, 43, 226),
    "purple": (128, 0, 128),
    "pink": (255, 105, 180),
    "red": (220, 0, 0),
    "cyan": (0, 180, 200),
}

WHITE: RGB = NAME_TO_RGB["white"]

# Template leftover in hand-edited data files
PLACEHOLDER = "color"

# Color words a student might mention in chat (longest first so "brick-red" beats "red")
COLOR_MENTION_RE = re.compile(
    r"brick-red|white|yellow|orange|brown|black|grey|green|blue|purple|pink|red|violet",
    re.IGNORECASE,
)


def is_valid_color_name(name: Optional[str], vocab: Optional[Iterable[str]] = None) -> bool:
    """A color name is valid if it is in the vocabulary (when given) or has an RGB."""
    if not isinstance(name, str) or not name or name == PLACEHOLDER:
        return False
    if vocab:
        return name in vocab
    return name in NAME_TO_RGB


def color_name_to_rgb(name: Optional[str], vocab: Optional[Iterable[str]] = None) -> Optional[RGB]:
    """Resolve a color word to RGB. Unknown names resolve to None, never a guess."""
    if not is_valid_color_name(name, vocab):
        return None
    return NAME_TO_RGB.get(name)


def find_color_mention(text: Optional[str]) -> Optional[str]:
    match = COLOR_MENTION_RE.search(text or "")
    return match.group(0).lower() if match else None
