"""FastAPI dependency injection for API endpoints."""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status

from forms_manager.services.context import FormsContext, create_in_memory_context
from forms_manager.services.shared import Author

# Module-level context for dependency injection
_context: Optional[FormsContext] = None


def get_context() -> FormsContext:
    """Get the service context, falling back to an in-memory one."""
    global _context
    if _context is None:
        _context = create_in_memory_context()
    return _context


def set_context(ctx: FormsContext) -> None:
    """Set the service context (at startup or for testing)."""
    global _context
    _context = ctx


def reset_context() -> None:
    """Reset to the default context (for testing)."""
    global _context
    _context = None


def author_from_claims(user: Optional[Dict[str, Any]]) -> Author:
    """
    Author from the caller's token claims.

    The display name prefers ``given_name family_name`` over ``name``.
    """
    if not user or not user.get("oid") or not user.get("name"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Failed to get the author. User is undefined or has a malformed/missing oid/name.",
        )

    if user.get("given_name") and user.get("family_name"):
        display_name = f"{user['given_name']} {user['family_name']}"
    else:
        display_name = user["name"]

    return {"id": user["oid"], "displayName": display_name}


def get_author(request: Request) -> Author:
    """Author of the current request; claims are attached by the auth layer."""
    return author_from_claims(getattr(request.state, "user", None))
