"""
ChemSpot — Tutor Chat Router
Ask-the-Tutor: one chat turn through the LLM, grounded on preloaded table facts.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.tutor.instruction_builder import build_chat_messages
from app.tutor.llm import get_llm
from content_bank.loader import ReactionTable, get_reaction_table

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/chat", tags=["chat"])


class ChatTurn(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    user: str
    history: List[ChatTurn] = []


class ChatResponse(BaseModel):
    text: str


@router.post("", response_model=ChatResponse)
async def chat(req: ChatRequest, table: ReactionTable = Depends(get_reaction_table)):
    messages = build_chat_messages(
        table, req.user, history=[turn.model_dump() for turn in req.history]
    )
    try:
        result = await get_llm().generate_async(messages)
    except Exception as e:
        logger.error(f"Chat failed: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Server error")
    return ChatResponse(text=result.text)
