"""
ChemSpot — Configuration
All environment variables and constants. Single source of truth.
No other file reads os.environ directly.
"""

import os
from pathlib import Path

# Load .env file if present
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                os.environ.setdefault(key.strip(), value.strip())

# ─── Paths ───────────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent
REACTION_DB_PATH = Path(
    os.getenv("REACTION_DB_PATH", str(BASE_DIR / "content_bank" / "chemdb.json"))
)

# ─── API Keys ────────────────────────────────────────────────────────────────
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")

# ─── LLM Settings ────────────────────────────────────────────────────────────
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")
# Options: openai (only option for now)
LLM_MODEL = os.getenv("LLM_MODEL", os.getenv("OPENAI_MODEL", "gpt-4o-mini"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "600"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))

# ─── Chat ────────────────────────────────────────────────────────────────────
CHAT_FACTS_LIMIT = 40  # Facts preloaded when the student mentions a color

# ─── Realistic Spot Test (reaction matrix) ───────────────────────────────────
MATRIX_MIN_SOLUTIONS = int(os.getenv("MATRIX_MIN_SOLUTIONS", "5"))
MATRIX_MAX_SOLUTIONS = int(os.getenv("MATRIX_MAX_SOLUTIONS", "9"))
MATRIX_DEFAULT_SOLUTIONS = int(os.getenv("MATRIX_DEFAULT_SOLUTIONS", "7"))
MATRIX_MAX_ATTEMPTS = int(os.getenv("MATRIX_MAX_ATTEMPTS", "120"))
# Off: a pipette never holds a salt that reacts with itself.
MATRIX_ALLOW_REACTIVE_FALLBACK = (
    os.getenv("MATRIX_ALLOW_REACTIVE_FALLBACK", "false").lower() == "true"
)

# Acceptance bar for a generated grid
MATRIX_MIN_TARGET_COLORED = 6
MATRIX_TARGET_FRACTION = 0.25       # of the upper-triangle cells
MATRIX_MIN_DISTINCT_COLORS = 4

# Relaxation schedule (attempt numbers are 1-based)
MATRIX_RELAX_TARGET_AT = 60
MATRIX_RELAX_TARGET_FACTOR = 0.8
MATRIX_RELAX_TARGET_FLOOR = 5
MATRIX_RELAX_DISTINCT_AT = 90
MATRIX_RELAX_DISTINCT_FLOOR = 3

# Channel width for merging near-identical shades when counting colors
COLOR_BUCKET_SIZE = 24

BEST_EFFORT_NOTE = (
    "Best-effort set: the diversity target was not reached within the attempt "
    "budget, so this is the most colorful grid found."
)

# ─── Quiz ────────────────────────────────────────────────────────────────────
QUIZ_TRAP_PROBABILITY = 0.3
NO_REACTION_ANSWERS = ["no reaction", "no-reaction", "none", "—"]

# ─── CORS ────────────────────────────────────────────────────────────────────
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# ─── Logging ─────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
