"""
KitchenFlow - LLM Client.

Wraps OpenAI with Instructor for schema-validated structured outputs.
Every capability call goes through call_llm.

Calls are made once: no client-side retries and no timeout beyond the
HTTP layer's own.
"""

import logging
from typing import TypeVar

import instructor
from openai import AsyncOpenAI
from pydantic import BaseModel

from kitchenflow.config import settings

logger = logging.getLogger(__name__)

# Type variable for generic structured output
T = TypeVar("T", bound=BaseModel)

# Singleton client instance
_client: instructor.AsyncInstructor | None = None


def get_client() -> instructor.AsyncInstructor:
    """
    Get the Instructor-wrapped async OpenAI client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        if not settings.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY is not configured")
        openai_client = AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0)
        _client = instructor.from_openai(openai_client)

    return _client


async def call_llm(
    *,
    response_model: type[T],
    system_prompt: str,
    user_prompt: str,
) -> T:
    """
    Make a structured LLM call.

    Args:
        response_model: Pydantic model class for the response
        system_prompt: System message setting context
        user_prompt: User message with the actual request

    Returns:
        Instance of response_model
    """
    client = get_client()
    model = settings.llm_model

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_model=response_model,
            max_retries=1,
            temperature=settings.llm_temperature,
        )
    except Exception as e:
        logger.error(f"{response_model.__name__} call to {model} failed: {e}")
        raise

    logger.debug(f"{response_model.__name__} call to {model} succeeded")
    return response
