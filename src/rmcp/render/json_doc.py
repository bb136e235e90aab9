"""Lossless JSON rendering. No truncation, no date formatting."""
from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from rmcp.core.models import Comment, Post, PostWithComments, SubredditInfo


def dumps(document: Any) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def render_posts(posts: Sequence[Post], after: Optional[str] = None) -> str:
    return dumps({"posts": [post.to_dict() for post in posts], "after": after})


def render_subreddit_info(info: SubredditInfo) -> str:
    return dumps(info.to_dict())


def render_post_with_comments(post: Post, comments: Sequence[Comment]) -> str:
    return dumps(PostWithComments(post=post, comments=tuple(comments)).to_dict())
