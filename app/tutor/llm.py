"""
ChemSpot — LLM Abstraction Layer
Tutor chat is a pass-through to a hosted chat-completion model.
Python builds the messages (see instruction_builder); the model only writes words.
"""

import time
import logging
from typing import Protocol, Optional
from dataclasses import dataclass

from openai import AsyncOpenAI

from app.config import (
    OPENAI_API_KEY, LLM_MODEL, LLM_MAX_TOKENS, LLM_TEMPERATURE,
    LLM_PROVIDER,
)

logger = logging.getLogger(__name__)


@dataclass
class LLMResult:
    text: str
    latency_ms: int
    model: str
    usage: dict


class LLMProvider(Protocol):
    async def generate_async(self, messages: list[dict], **kwargs) -> LLMResult: ...


def _usage(response) -> dict:
    if response.usage is None:
        return {}
    return {
        "prompt_tokens": response.usage.prompt_tokens,
        "completion_tokens": response.usage.completion_tokens,
        "total_tokens": response.usage.total_tokens,
    }


# ─── OpenAI ──────────────────────────────────────────────────────────────────

class OpenAIChat:
    def __init__(self):
        self._async_client = AsyncOpenAI(api_key=OPENAI_API_KEY)

    async def generate_async(
        self,
        messages: list[dict],
        max_tokens: int = LLM_MAX_TOKENS,
        temperature: float = LLM_TEMPERATURE,
    ) -> LLMResult:
        start = time.perf_counter()
        try:
            response = await self._async_client.chat.completions.create(
                model=LLM_MODEL,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            elapsed = int((time.perf_counter() - start) * 1000)
            logger.error(f"LLM error after {elapsed}ms: {e}")
            raise
        return self._result(response, start)

    def _result(self, response, start: float) -> LLMResult:
        elapsed = int((time.perf_counter() - start) * 1000)
        content = response.choices[0].message.content
        usage = _usage(response)
        logger.info(f"LLM response: {elapsed}ms, {usage.get('total_tokens', '?')} tokens")
        return LLMResult(text=(content or "").strip(), latency_ms=elapsed, model=LLM_MODEL, usage=usage)


# ─── Provider Factory ────────────────────────────────────────────────────────

_providers = {
    "openai": OpenAIChat,
}

_instance: Optional[LLMProvider] = None


def get_llm() -> LLMProvider:
    """Get the configured LLM provider (singleton)."""
    global _instance
    if _instance is None:
        provider_cls = _providers.get(LLM_PROVIDER)
        if not provider_cls:
            raise ValueError(f"Unknown LLM provider: {LLM_PROVIDER}")
        _instance = provider_cls()
    return _instance
