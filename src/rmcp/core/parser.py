"""Parse Reddit listing JSON into Post/Comment/SubredditInfo data models.

Every Reddit response is built from the same two pieces:

- a *thing*: ``{"kind": "t3", "data": {...}}``
- a *listing*: ``{"kind": "Listing", "data": {"children": [thing, ...], "after": ..., "before": ...}}``

The envelope is validated strictly (a broken envelope raises
:class:`MalformedResponse`). Fields inside ``data`` are coerced leniently,
since Reddit omits or nulls them freely.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from rmcp.core.models import Comment, PaginatedResult, Post, PostWithComments, SubredditInfo
from rmcp.errors import MalformedResponse

COMMENT_KIND = "t1"
SUBREDDIT_KIND = "t5"


@dataclass(frozen=True)
class Thing:
    """A single typed child of a listing."""

    kind: str
    data: dict[str, Any]


@dataclass(frozen=True)
class Listing:
    """A parsed listing envelope."""

    children: tuple[Thing, ...] = ()
    after: Optional[str] = None
    before: Optional[str] = None


def is_listing(payload: Any) -> bool:
    """True if *payload* looks like a listing envelope."""
    return (
        isinstance(payload, dict)
        and isinstance(payload.get("data"), dict)
        and isinstance(payload["data"].get("children"), list)
    )


def parse_thing(payload: Any) -> Thing:
    """Parse ``{"kind": ..., "data": {...}}``. A missing ``data`` becomes ``{}``."""
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected an object, got {type(payload).__name__}")
    data = payload.get("data")
    return Thing(kind=_as_str(payload.get("kind")), data=data if isinstance(data, dict) else {})


def parse_listing(payload: Any) -> Listing:
    """Validate a listing envelope and split it into things and cursors."""
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected a listing object, got {type(payload).__name__}")
    data = payload.get("data")
    if not isinstance(data, dict):
        raise MalformedResponse("Listing has no 'data' object")
    children = data.get("children")
    if not isinstance(children, list):
        raise MalformedResponse("Listing 'data.children' is not a list")

    return Listing(
        children=tuple(parse_thing(child) for child in children if isinstance(child, dict)),
        after=_as_cursor(data.get("after")),
        before=_as_cursor(data.get("before")),
    )


def parse_post(data: dict[str, Any]) -> Post:
    """Build a Post from the ``data`` object of a ``t3`` thing."""
    return Post(
        id=_as_str(data.get("id")),
        title=_as_str(data.get("title")),
        author=_as_str(data.get("author")),
        score=_as_int(data.get("score")),
        url=_as_str(data.get("url")),
        selftext=_as_str(data.get("selftext")),
        permalink=_as_str(data.get("permalink")),
        subreddit=_as_str(data.get("subreddit")),
        num_comments=_as_int(data.get("num_comments")),
        created_utc=_as_float(data.get("created_utc")),
        is_self=_as_bool(data.get("is_self")),
    )


def parse_subreddit_info(data: dict[str, Any]) -> SubredditInfo:
    """Build SubredditInfo from the ``data`` object of a ``t5`` thing."""
    return SubredditInfo(
        name=_as_str(data.get("display_name")),
        title=_as_str(data.get("title")),
        description=_as_str(data.get("public_description")),
        subscribers=_as_int(data.get("subscribers")),
        created_utc=_as_float(data.get("created_utc")),
        over18=_as_bool(data.get("over18")),
        url=_as_str(data.get("url")),
    )


def parse_post_listing(payload: Any) -> PaginatedResult[Post]:
    """Parse a search or subreddit listing into a page of posts."""
    listing = parse_listing(payload)
    return PaginatedResult(
        items=tuple(parse_post(thing.data) for thing in listing.children),
        after=listing.after,
    )


@dataclass
class _Frame:
    data: dict[str, Any]
    pending: Iterator[Thing]
    out: list[Comment]
    replies: list[Comment] = field(default_factory=list)


def parse_comment_tree(things: Iterable[Thing]) -> tuple[Comment, ...]:
    """Rebuild the reply tree below a comment listing.

    Only ``t1`` things become comments; ``more`` placeholders and anything
    else are dropped at every level. The walk is post-order over an explicit
    stack: a Comment is built once all of its replies are.
    """
    roots: list[Comment] = []
    stack = [_Frame(data={}, pending=iter(things), out=roots, replies=roots)]

    while stack:
        frame = stack[-1]
        thing = next(frame.pending, None)
        if thing is None:
            stack.pop()
            if frame.replies is not roots:
                frame.out.append(_build_comment(frame.data, frame.replies))
            continue
        if thing.kind != COMMENT_KIND:
            continue
        stack.append(
            _Frame(data=thing.data, pending=iter(_reply_things(thing.data)), out=frame.replies)
        )

    return tuple(roots)


def parse_comments_response(payload: Any) -> PostWithComments:
    """Parse ``/r/{sub}/comments/{id}.json``.

    The response is a two-element array: ``[post listing, comment listing]``.
    """
    if not isinstance(payload, list) or len(payload) < 2:
        raise MalformedResponse(
            "Comments response must be a [post listing, comment listing] pair"
        )

    post_listing = parse_listing(payload[0])
    if not post_listing.children:
        raise MalformedResponse("Comments response has an empty post listing")
    post = parse_post(post_listing.children[0].data)

    comment_listing = parse_listing(payload[1])
    return PostWithComments(post=post, comments=parse_comment_tree(comment_listing.children))


def _reply_things(data: dict[str, Any]) -> tuple[Thing, ...]:
    # Reddit sends "" for a comment without replies
    replies = data.get("replies")
    if not is_listing(replies):
        return ()
    return parse_listing(replies).children


def _build_comment(data: dict[str, Any], replies: list[Comment]) -> Comment:
    return Comment(
        id=_as_str(data.get("id")),
        author=_as_str(data.get("author")),
        body=_as_str(data.get("body")),
        score=_as_int(data.get("score")),
        created_utc=_as_float(data.get("created_utc")),
        depth=_as_int(data.get("depth")),
        replies=tuple(replies),
    )


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_int(value: Any) -> int:
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return 0
    return 0


def _as_float(value: Any) -> float:
    if isinstance(value, (bool, int, float, str)):
        try:
            result = float(value)
        except (ValueError, OverflowError):
            return 0.0
        return result if math.isfinite(result) else 0.0
    return 0.0


def _as_bool(value: Any) -> bool:
    return bool(value)


def _as_cursor(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return _as_str(value)
