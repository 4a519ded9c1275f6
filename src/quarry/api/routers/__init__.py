from quarry.api.routers.query import QueryRouter

__all__ = ["QueryRouter"]
