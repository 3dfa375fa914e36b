"""Exception taxonomy shared by the service layer.

Services raise these; the API layer maps them onto HTTP responses in
``momlink.main``. Duplicate swipes, matches and memberships are deliberately
absent: they resolve to the already-satisfied outcome instead of an error.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class MomLinkError(Exception):
    """Base exception for all service-level failures."""


class ValidationError(MomLinkError):
    """Malformed input, rejected before any store call."""


class NotFoundError(MomLinkError):
    """A referenced profile, group, match or message does not exist."""


class UnauthorizedError(MomLinkError):
    """The actor is outside the permission scope of the action.

    Retrying without changing the request will fail the same way.
    """


class TransientStoreError(MomLinkError):
    """The relational store is unreachable or timed out.

    Every mutating operation in the service layer is idempotent, so a caller
    may retry safely.
    """


def store_call(func: Callable[P, R]) -> Callable[P, R]:
    """Translate connectivity failures from SQLAlchemy into TransientStoreError."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except (OperationalError, PoolTimeoutError) as exc:
            logger.warning("Store unavailable during %s: %s", func.__name__, exc)
            raise TransientStoreError("The data store is temporarily unavailable") from exc

    return wrapper
