"""Render normalized Reddit data as markdown or JSON.

Each output format is a module exposing the same three functions
(``render_posts``, ``render_subreddit_info``, ``render_post_with_comments``);
the entry points below pick the module from a table.
"""
from __future__ import annotations

from enum import Enum
from types import ModuleType
from typing import Optional, Sequence, Union

from rmcp.core.models import Comment, Post, SubredditInfo
from rmcp.render import json_doc, markdown


class OutputFormat(str, Enum):
    """Supported output formats."""

    MD = "md"
    JSON = "json"


_RENDERERS: dict[OutputFormat, ModuleType] = {
    OutputFormat.MD: markdown,
    OutputFormat.JSON: json_doc,
}


def renderer_for(fmt: Union[OutputFormat, str]) -> ModuleType:
    """Return the renderer module for *fmt*.

    Raises
    ------
    ValueError
        If *fmt* is not ``"md"`` or ``"json"``.
    """
    try:
        return _RENDERERS[OutputFormat(fmt)]
    except ValueError:
        choices = ", ".join(f.value for f in OutputFormat)
        raise ValueError(f"Unknown format: {fmt!r}. Supported: {choices}.") from None


def format_posts(
    posts: Sequence[Post],
    fmt: Union[OutputFormat, str] = OutputFormat.MD,
    after: Optional[str] = None,
) -> str:
    """Render a page of posts, with the pagination cursor if there is one."""
    return renderer_for(fmt).render_posts(posts, after)


def format_subreddit_info(info: SubredditInfo, fmt: Union[OutputFormat, str] = OutputFormat.MD) -> str:
    return renderer_for(fmt).render_subreddit_info(info)


def format_post_with_comments(
    post: Post,
    comments: Sequence[Comment],
    fmt: Union[OutputFormat, str] = OutputFormat.MD,
) -> str:
    return renderer_for(fmt).render_post_with_comments(post, comments)


__all__ = [
    "OutputFormat",
    "format_post_with_comments",
    "format_posts",
    "format_subreddit_info",
    "renderer_for",
]
