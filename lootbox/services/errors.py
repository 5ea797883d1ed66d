# lootbox/services/errors.py
from __future__ import annotations

from datetime import datetime


class LootboxError(Exception):
    """Base class for every outcome the bot layer turns into a reply."""


class InvalidContentData(LootboxError):
    def __init__(self, content_id: int | None, field: str, value: object) -> None:
        self.content_id = content_id
        self.field = field
        self.value = value
        super().__init__(f"Content {content_id}: {field} is missing or not numeric ({value!r})")


class InvalidType(LootboxError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f'Invalid lootbox type {value!r}. Must be "movie" or "series"')


class DailyLimitReached(LootboxError):
    def __init__(self, *, reset_at: datetime, daily_limit: int) -> None:
        self.remaining = 0
        self.reset_at = reset_at
        self.daily_limit = daily_limit
        super().__init__(f"Daily spin limit reached ({daily_limit}); resets at {reset_at.isoformat()}")


class NoContentAvailable(LootboxError):
    def __init__(self, content_type: str, min_quality_score: int | None = None) -> None:
        self.content_type = content_type
        self.min_quality_score = min_quality_score
        if min_quality_score is None:
            msg = f"No {content_type} content available"
        else:
            msg = f"No {content_type} content with quality score >= {min_quality_score}"
        super().__init__(msg)


class PersistenceFailure(LootboxError):
    """A store read/write failed; the spin was rolled back as a whole."""


class UserNotFound(LootboxError):
    def __init__(self, user_ref: object) -> None:
        self.user_ref = user_ref
        super().__init__(f"User not found: {user_ref!r}")


class InvalidGrantAmount(LootboxError):
    def __init__(self, amount: object) -> None:
        self.amount = amount
        super().__init__(f"Amount must be a positive integer, got {amount!r}")


class InvalidSetting(LootboxError):
    pass


class InvalidTimezone(LootboxError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown timezone: {name!r}")
