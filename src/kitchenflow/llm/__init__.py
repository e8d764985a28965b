"""
KitchenFlow - LLM Client.

Provides structured LLM calls via Instructor.
"""

from kitchenflow.llm.client import call_llm, get_client

__all__ = [
    "get_client",
    "call_llm",
]
