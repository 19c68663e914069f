"""API route modules."""

from pasteit.api.routes import admin, auth, health, pastes, users

__all__ = ["admin", "auth", "health", "pastes", "users"]
