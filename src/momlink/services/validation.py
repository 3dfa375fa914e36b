"""Input checks applied before any store call."""

from __future__ import annotations

from momlink.core.settings import settings
from momlink.services.errors import ValidationError


def check_content(content: str) -> str:
    """Validate a chat message body.

    Content must be between 1 and ``settings.message_max_length`` characters
    inclusive. Over-long content is rejected, never truncated.
    """
    if not isinstance(content, str):
        raise ValidationError("Message content must be text")
    if len(content) == 0:
        raise ValidationError("Message content must not be empty")
    if len(content) > settings.message_max_length:
        raise ValidationError(
            f"Message content must be at most {settings.message_max_length} characters"
        )
    return content


def check_limit(limit: int) -> int:
    """Validate a page size."""
    if limit <= 0:
        raise ValidationError("limit must be greater than zero")
    return limit
