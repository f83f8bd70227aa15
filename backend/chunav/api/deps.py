"""Shared API dependencies."""

from fastapi import Header, HTTPException


async def get_current_user_id(x_user_id: str | None = Header(None)) -> str:
    """Identify the caller from the id forwarded by the auth gateway."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()
