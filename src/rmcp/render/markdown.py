"""Markdown rendering for posts, subreddits and comment threads."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from rmcp.core.models import Comment, Post, SubredditInfo

SITE_URL = "https://reddit.com"
SELFTEXT_LIMIT = 500
MAX_REPLIES = 3
DIVIDER = "---"
NO_POSTS = "No posts found."
NO_COMMENTS = "_No comments_"
NO_DESCRIPTION = "_No description_"
EPOCH_DATE = "1970-01-01"


def format_date(created_utc: float) -> str:
    """Unix seconds -> ``YYYY-MM-DD`` (UTC). Unrepresentable instants render as the epoch."""
    try:
        return datetime.fromtimestamp(created_utc, tz=timezone.utc).strftime("%Y-%m-%d")
    except (ValueError, OverflowError, OSError):
        return EPOCH_DATE


def render_post(post: Post) -> str:
    lines = [
        f"## {post.title}",
        "",
        f"**r/{post.subreddit}** | {post.score} points | {post.num_comments} comments"
        f" | by u/{post.author} | {format_date(post.created_utc)}",
        "",
    ]

    if post.is_self and post.selftext:
        excerpt = post.selftext[:SELFTEXT_LIMIT]
        if len(post.selftext) > SELFTEXT_LIMIT:
            excerpt += "..."
        lines.append(excerpt)
        lines.append("")
    elif not post.is_self:
        lines.append(f"Link: {post.url}")
        lines.append("")

    lines.append(f"[View on Reddit]({SITE_URL}{post.permalink})")
    return "\n".join(lines)


def render_posts(posts: Sequence[Post], after: Optional[str] = None) -> str:
    if not posts:
        return NO_POSTS

    text = f"\n\n{DIVIDER}\n\n".join(render_post(post) for post in posts)
    if after is not None:
        text += (
            f"\n\n{DIVIDER}\n\n"
            f'_There are more results. Call again with after="{after}" to get the next page._'
        )
    return text


def render_subreddit_info(info: SubredditInfo) -> str:
    return "\n".join([
        f"# r/{info.name}",
        "",
        f"**{info.title}**",
        "",
        info.description or NO_DESCRIPTION,
        "",
        f"- Subscribers: {info.subscribers:,}",
        f"- Created: {format_date(info.created_utc)}",
        f"- NSFW: {'Yes' if info.over18 else 'No'}",
        "",
        f"[Visit subreddit]({SITE_URL}{info.url})",
    ])


def render_comment(comment: Comment, depth: int = 0) -> str:
    """Render *comment* and up to three replies per level, indenting two spaces per level.

    Walks the thread with an explicit stack; thread depth is unbounded.
    """
    lines: list[str] = []
    stack: list[tuple[Comment, int]] = [(comment, depth)]
    while stack:
        node, level = stack.pop()
        indent = "  " * level
        lines.append(f"{indent}**u/{node.author}** | {node.score} points")
        lines.append("")
        lines.extend(indent + line for line in node.body.split("\n"))
        lines.append("")
        stack.extend((reply, level + 1) for reply in reversed(node.replies[:MAX_REPLIES]))
    return "\n".join(lines)


def render_post_with_comments(post: Post, comments: Sequence[Comment]) -> str:
    lines = [render_post(post), "", DIVIDER, "", "## Comments", ""]

    if not comments:
        lines.append(NO_COMMENTS)
    else:
        for comment in comments:
            lines.append(render_comment(comment))
            lines.append(DIVIDER)
            lines.append("")

    return "\n".join(lines)
