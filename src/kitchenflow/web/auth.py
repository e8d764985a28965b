"""
Authentication utilities for FastAPI routes.

Shared auth dependency used by the import routes.
"""

import logging

from fastapi import Depends, HTTPException, Header
from pydantic import BaseModel

from kitchenflow.db.client import SupabaseRecipeStore, get_authenticated_client, get_service_client

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Authenticated user info from Supabase JWT."""
    id: str
    email: str | None
    access_token: str


async def get_current_user(authorization: str = Header(None)) -> AuthenticatedUser:
    """
    Validate Supabase JWT and extract user info.

    Expects Authorization header: "Bearer <access_token>"
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization format")

    access_token = authorization[7:]

    try:
        client = get_service_client()
        user_response = client.auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Auth validation failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if not user_response or not user_response.user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = user_response.user
    return AuthenticatedUser(id=user.id, email=user.email, access_token=access_token)


def get_recipe_store(user: AuthenticatedUser = Depends(get_current_user)) -> SupabaseRecipeStore:
    """Recipe store scoped to the calling user."""
    return SupabaseRecipeStore(get_authenticated_client(user.access_token), user.id)
