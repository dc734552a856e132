"""Route outcomes: a value, a user-facing miss, or an upstream failure."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Union

from gateway.config import NOT_FOUND_MESSAGE

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised inside a fetch when the requested entity does not exist."""

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class NotFound:
    message: str = NOT_FOUND_MESSAGE


@dataclass(frozen=True)
class UpstreamFailure:
    error: Exception


Outcome = Union[Ok, NotFound, UpstreamFailure]


async def settle(pending: Awaitable[Any]) -> Outcome:
    """Await a fetch and classify how it ended."""
    try:
        return Ok(await pending)
    except NotFoundError as e:
        return NotFound(e.message)
    except Exception as e:
        logger.exception("Upstream call failed")
        return UpstreamFailure(e)
