"""FastAPI integration for quarry builders."""

from quarry.api.routers import QueryRouter

__all__ = ["QueryRouter"]
