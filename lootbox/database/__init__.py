# lootbox/database/__init__.py
from .base import Base
from .session import Database

# register models on Base.metadata
from . import models  # noqa: E402,F401

__all__ = ["Base", "Database"]
