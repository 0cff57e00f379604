"""API routers."""

from . import admin, health, projects

__all__ = ["admin", "health", "projects"]
