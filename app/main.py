"""
ChemSpot — Main Application
FastAPI app. Mounts routers and CORS.
Reaction table is loaded once on startup and shared read-only by every request.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import CORS_ORIGINS, LOG_LEVEL
from content_bank.loader import get_reaction_table

logger = logging.getLogger("chemspot")

VERSION = "1.0.0"


# ─── Lifespan (startup/shutdown) ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: configure logging, load the reaction table."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    logger.info("Loading reaction table...")
    table = get_reaction_table()
    logger.info(f"Reaction table ready: {table.get_stats()}")

    logger.info(f"ChemSpot v{VERSION} ready")
    yield
    logger.info("Shutting down")


# ─── App ─────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="ChemSpot",
    description="Spot-test trainer: tutor chat, realistic reaction grids, quizzes",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
from app.routers import chat, quiz, realistic, table
app.include_router(realistic.router)
app.include_router(quiz.router)
app.include_router(chat.router)
app.include_router(table.router)


# Health check (both /health and /healthz)
@app.get("/health")
@app.get("/healthz")
async def health():
    return {"status": "ok", "version": VERSION}
