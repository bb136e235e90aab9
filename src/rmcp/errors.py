"""Exceptions raised while talking to Reddit."""
from __future__ import annotations

from typing import Optional


class RedditError(Exception):
    """Base class for every retrieval or normalization failure."""


class RequestFailed(RedditError):
    """Reddit answered with a non-2xx status, or the request never completed.

    ``status`` is ``None`` for transport failures (DNS, timeout, reset).
    """

    def __init__(self, status: Optional[int], reason: str, url: str = ""):
        self.status = status
        self.reason = reason
        self.url = url
        if status is None:
            message = f"Reddit request failed: {reason}"
        else:
            message = f"Reddit API error: {status} {reason}".rstrip()
        super().__init__(message)


class NotFound(RequestFailed):
    """The requested subreddit or post does not exist."""


class MalformedResponse(RedditError):
    """The payload does not have the listing shape we know how to read."""
