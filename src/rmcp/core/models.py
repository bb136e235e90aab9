"""Core data models for Reddit content."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Post:
    """A submission, either a self-post or a link."""

    id: str
    title: str
    author: str
    score: int
    url: str
    selftext: str
    permalink: str
    subreddit: str
    num_comments: int
    created_utc: float
    is_self: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Comment:
    """One node of a comment thread. ``replies`` keeps the order Reddit returned."""

    id: str
    author: str
    body: str
    score: int
    created_utc: float
    depth: int
    replies: tuple[Comment, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        root = self._fields_dict()
        stack = [(self, root)]
        while stack:
            node, out = stack.pop()
            for reply in node.replies:
                child = reply._fields_dict()
                out["replies"].append(child)
                stack.append((reply, child))
        return root

    def _fields_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author,
            "body": self.body,
            "score": self.score,
            "created_utc": self.created_utc,
            "depth": self.depth,
            "replies": [],
        }


@dataclass(frozen=True)
class SubredditInfo:
    """Metadata from a subreddit's about page."""

    name: str
    title: str
    description: str
    subscribers: int
    created_utc: float
    over18: bool
    url: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """One page of a listing plus the cursor for the next one."""

    items: tuple[T, ...]
    after: Optional[str] = None


@dataclass(frozen=True)
class PostWithComments:
    """A post together with its top-level comments."""

    post: Post
    comments: tuple[Comment, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "post": self.post.to_dict(),
            "comments": [c.to_dict() for c in self.comments],
        }
