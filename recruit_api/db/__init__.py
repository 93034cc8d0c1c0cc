"""Database package: engine lifecycle and SQL migrations."""

from recruit_api.db.base import dispose_engine, get_engine

__all__ = ["get_engine", "dispose_engine"]
