"""User API module - profile endpoints."""
from backend.app.api.v1.user.profile import router as profile_router

__all__ = ["profile_router"]
