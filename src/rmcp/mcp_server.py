"""MCP server exposing read-only Reddit browsing as tools."""
from __future__ import annotations

import logging
from typing import Any, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from rmcp import __version__
from rmcp.core.client import POST_SORTS, SEARCH_SORTS, TIME_FILTERS, RedditClient
from rmcp.render import OutputFormat, format_post_with_comments, format_posts, format_subreddit_info

logger = logging.getLogger(__name__)

LISTING_LIMIT = (1, 25)
COMMENT_LIMIT = (1, 50)

# ---------------------------------------------------------------------------
# Lazy singleton client
# ---------------------------------------------------------------------------

_client: RedditClient | None = None


def _get_client() -> RedditClient:
    """Return (or create) the shared :class:`RedditClient`.

    The client only carries configuration, so sharing it across calls
    shares no request state.
    """
    global _client  # noqa: PLW0603
    if _client is None:
        from rmcp.config import Settings

        _client = RedditClient(Settings.load())
    return _client


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

_FORMAT_PROP = {
    "type": "string",
    "description": "Output format: md (markdown) or json",
    "enum": [f.value for f in OutputFormat],
    "default": OutputFormat.MD.value,
}
_SUBREDDIT_PROP = {"type": "string", "description": "Subreddit name (without r/)"}
_AFTER_PROP = {"type": "string", "description": "Pagination cursor from previous response"}
_TIME_PROP = {
    "type": "string",
    "description": "Time filter for results",
    "enum": list(TIME_FILTERS),
    "default": "all",
}
_SEARCH_SORT_PROP = {
    "type": "string",
    "description": "Sort order",
    "enum": list(SEARCH_SORTS),
    "default": "relevance",
}


def _limit_prop(bounds: tuple[int, int], default: int, noun: str) -> dict[str, Any]:
    low, high = bounds
    return {
        "type": "integer",
        "description": f"Number of {noun} (max {high})",
        "minimum": low,
        "maximum": high,
        "default": default,
    }


SEARCH_TOOL = Tool(
    name="search",
    title="Search Reddit",
    description="Search Reddit globally for posts matching a query",
    inputSchema={
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query"},
            "limit": _limit_prop(LISTING_LIMIT, 5, "results"),
            "sort": _SEARCH_SORT_PROP,
            "time": _TIME_PROP,
            "after": _AFTER_PROP,
            "format": _FORMAT_PROP,
        },
        "required": ["query"],
    },
)

SUBREDDIT_INFO_TOOL = Tool(
    name="subreddit_info",
    title="Get Subreddit Info",
    description="Get information about a subreddit",
    inputSchema={
        "type": "object",
        "properties": {
            "subreddit": _SUBREDDIT_PROP,
            "format": _FORMAT_PROP,
        },
        "required": ["subreddit"],
    },
)

SUBREDDIT_POSTS_TOOL = Tool(
    name="subreddit_posts",
    title="Get Subreddit Posts",
    description="Get posts from a subreddit",
    inputSchema={
        "type": "object",
        "properties": {
            "subreddit": _SUBREDDIT_PROP,
            "limit": _limit_prop(LISTING_LIMIT, 5, "posts"),
            "sort": {
                "type": "string",
                "description": "Sort order",
                "enum": list(POST_SORTS),
                "default": "hot",
            },
            "time": {**_TIME_PROP, "description": "Time filter (only applies to top)"},
            "after": _AFTER_PROP,
            "format": _FORMAT_PROP,
        },
        "required": ["subreddit"],
    },
)

POST_COMMENTS_TOOL = Tool(
    name="post_comments",
    title="Get Post Comments",
    description="Get a post and its comments",
    inputSchema={
        "type": "object",
        "properties": {
            "subreddit": _SUBREDDIT_PROP,
            "post_id": {"type": "string", "description": "Post ID (the base36 ID from the URL)"},
            "limit": _limit_prop(COMMENT_LIMIT, 10, "top-level comments"),
            "format": _FORMAT_PROP,
        },
        "required": ["subreddit", "post_id"],
    },
)

SUBREDDIT_SEARCH_TOOL = Tool(
    name="subreddit_search",
    title="Search Subreddit",
    description="Search within a specific subreddit",
    inputSchema={
        "type": "object",
        "properties": {
            "subreddit": _SUBREDDIT_PROP,
            "query": {"type": "string", "description": "Search query"},
            "limit": _limit_prop(LISTING_LIMIT, 5, "results"),
            "sort": _SEARCH_SORT_PROP,
            "time": _TIME_PROP,
            "after": _AFTER_PROP,
            "format": _FORMAT_PROP,
        },
        "required": ["subreddit", "query"],
    },
)

TOOLS = [
    SEARCH_TOOL,
    SUBREDDIT_INFO_TOOL,
    SUBREDDIT_POSTS_TOOL,
    POST_COMMENTS_TOOL,
    SUBREDDIT_SEARCH_TOOL,
]


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def _required_str(arguments: dict[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{name}' is required and must be a non-empty string")
    return value


def _optional_str(arguments: dict[str, Any], name: str) -> Optional[str]:
    value = arguments.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{name}' must be a string")
    return value


def _choice(arguments: dict[str, Any], name: str, choices: tuple[str, ...], default: str) -> str:
    value = arguments.get(name, default)
    if value not in choices:
        raise ValueError(f"'{name}' must be one of: {', '.join(choices)} (got {value!r})")
    return value


def _limit(arguments: dict[str, Any], bounds: tuple[int, int], default: int) -> int:
    value = arguments.get("limit", default)
    # JSON numbers may arrive as 5.0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'limit' must be an integer (got {value!r})")
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"'limit' must be between {low} and {high} (got {value})")
    return value


def _format(arguments: dict[str, Any]) -> OutputFormat:
    value = _choice(arguments, "format", tuple(f.value for f in OutputFormat), OutputFormat.MD.value)
    return OutputFormat(value)


# ---------------------------------------------------------------------------
# Tool handlers
# ---------------------------------------------------------------------------


async def _handle_search(arguments: dict[str, Any]) -> list[TextContent]:
    """Handle the ``search`` tool call."""
    query = _required_str(arguments, "query")
    limit = _limit(arguments, LISTING_LIMIT, 5)
    sort = _choice(arguments, "sort", SEARCH_SORTS, "relevance")
    time = _choice(arguments, "time", TIME_FILTERS, "all")
    after = _optional_str(arguments, "after")
    fmt = _format(arguments)

    result = await _get_client().search(query, limit=limit, sort=sort, time=time, after=after)
    return [TextContent(type="text", text=format_posts(result.items, fmt, result.after))]


async def _handle_subreddit_info(arguments: dict[str, Any]) -> list[TextContent]:
    """Handle the ``subreddit_info`` tool call."""
    subreddit = _required_str(arguments, "subreddit")
    fmt = _format(arguments)

    info = await _get_client().get_subreddit_info(subreddit)
    return [TextContent(type="text", text=format_subreddit_info(info, fmt))]


async def _handle_subreddit_posts(arguments: dict[str, Any]) -> list[TextContent]:
    """Handle the ``subreddit_posts`` tool call."""
    subreddit = _required_str(arguments, "subreddit")
    limit = _limit(arguments, LISTING_LIMIT, 5)
    sort = _choice(arguments, "sort", POST_SORTS, "hot")
    time = _choice(arguments, "time", TIME_FILTERS, "all")
    after = _optional_str(arguments, "after")
    fmt = _format(arguments)

    result = await _get_client().get_subreddit_posts(
        subreddit, limit=limit, sort=sort, time=time, after=after
    )
    return [TextContent(type="text", text=format_posts(result.items, fmt, result.after))]


async def _handle_post_comments(arguments: dict[str, Any]) -> list[TextContent]:
    """Handle the ``post_comments`` tool call."""
    subreddit = _required_str(arguments, "subreddit")
    post_id = _required_str(arguments, "post_id")
    limit = _limit(arguments, COMMENT_LIMIT, 10)
    fmt = _format(arguments)

    thread = await _get_client().get_post_comments(subreddit, post_id, limit=limit)
    return [TextContent(type="text", text=format_post_with_comments(thread.post, thread.comments, fmt))]


async def _handle_subreddit_search(arguments: dict[str, Any]) -> list[TextContent]:
    """Handle the ``subreddit_search`` tool call."""
    subreddit = _required_str(arguments, "subreddit")
    query = _required_str(arguments, "query")
    limit = _limit(arguments, LISTING_LIMIT, 5)
    sort = _choice(arguments, "sort", SEARCH_SORTS, "relevance")
    time = _choice(arguments, "time", TIME_FILTERS, "all")
    after = _optional_str(arguments, "after")
    fmt = _format(arguments)

    result = await _get_client().search_subreddit(
        subreddit, query, limit=limit, sort=sort, time=time, after=after
    )
    return [TextContent(type="text", text=format_posts(result.items, fmt, result.after))]


_TOOL_HANDLERS = {
    "search": _handle_search,
    "subreddit_info": _handle_subreddit_info,
    "subreddit_posts": _handle_subreddit_posts,
    "post_comments": _handle_post_comments,
    "subreddit_search": _handle_subreddit_search,
}


async def dispatch(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    """Run the tool called *name*. Failures propagate to the caller."""
    handler = _TOOL_HANDLERS.get(name)
    if handler is None:
        raise ValueError(f"Unknown tool: {name}")
    logger.info("Tool call %s %s", name, arguments)
    return await handler(arguments or {})


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_server() -> Server:
    """Build and return a configured MCP :class:`Server`."""
    server = Server("reddit-mcp", version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        return await dispatch(name, arguments)

    return server


# ---------------------------------------------------------------------------
# Stdio runner
# ---------------------------------------------------------------------------


async def run_stdio() -> None:
    """Run the MCP server over stdio transport."""
    server = create_server()
    options = server.create_initialization_options()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, options)
