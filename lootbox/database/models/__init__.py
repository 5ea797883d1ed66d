from .user import User
from .content import Content, ContentType, RarityTier
from .unlock import UserUnlock
from .spin import UserSpin
from .app_config import AppConfig

__all__ = [
    "User",
    "Content",
    "ContentType",
    "RarityTier",
    "UserUnlock",
    "UserSpin",
    "AppConfig",
]
