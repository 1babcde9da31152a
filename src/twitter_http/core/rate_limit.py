"""
Rate limit snapshot parsed from response headers.
"""

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .request import HttpResponse

logger = logging.getLogger(__name__)

LIMIT_HEADER = "X-Rate-Limit-Limit"
REMAINING_HEADER = "X-Rate-Limit-Remaining"
RESET_HEADER = "X-Rate-Limit-Reset"


@dataclass(frozen=True)
class RateLimitStatus:
    """
    Rate limit metadata at the moment a response was received.

    Attributes:
        limit: Requests allowed in the current window
        remaining: Requests left in the current window
        reset_time_in_seconds: Epoch seconds when the window resets
        seconds_until_reset: Seconds from the snapshot until reset
    """

    limit: int
    remaining: int
    reset_time_in_seconds: int
    seconds_until_reset: int

    @classmethod
    def from_response(
        cls,
        response: "HttpResponse",
        now: Optional[float] = None,
    ) -> Optional["RateLimitStatus"]:
        """
        Build a snapshot from ``X-Rate-Limit-*`` headers.

        Args:
            response: Response carrying the headers
            now: Current epoch time in seconds (defaults to ``time.time()``)

        Returns:
            RateLimitStatus, or None when any header is missing or malformed
        """
        raw_limit = response.response_header(LIMIT_HEADER)
        raw_remaining = response.response_header(REMAINING_HEADER)
        raw_reset = response.response_header(RESET_HEADER)
        if raw_limit is None or raw_remaining is None or raw_reset is None:
            return None

        try:
            limit = int(raw_limit)
            remaining = int(raw_remaining)
            reset = int(raw_reset)
        except ValueError:
            logger.debug(
                "Malformed rate limit headers: limit=%r remaining=%r reset=%r",
                raw_limit, raw_remaining, raw_reset,
            )
            return None

        if now is None:
            now = time.time()
        return cls(
            limit=limit,
            remaining=remaining,
            reset_time_in_seconds=reset,
            seconds_until_reset=int(reset - now),
        )
