"""CLI entry point for reddit-mcp."""
from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

import typer

from rmcp import __version__
from rmcp.render import OutputFormat

app = typer.Typer(
    name="rmcp",
    help="Browse Reddit posts, subreddits and comment threads as markdown or JSON.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)


def version_callback(value: bool):
    if value:
        typer.echo(f"reddit-mcp {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    from rmcp.config import Settings

    level = "DEBUG" if verbose else Settings.load().log_level
    # stdout belongs to the MCP stdio transport
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )


@app.callback()
def main(
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
):
    """reddit-mcp: read-only Reddit access for tool-calling agents."""
    _configure_logging(verbose)


def _run(coro) -> str:
    """Run one client call, turning failures into a clean exit."""
    from rmcp.errors import RedditError

    try:
        return asyncio.run(coro)
    except (RedditError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _client():
    from rmcp.config import Settings
    from rmcp.core.client import RedditClient

    return RedditClient(Settings.load())


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    limit: int = typer.Option(5, "--limit", "-n", min=1, max=25, help="Number of results"),
    sort: str = typer.Option("relevance", "--sort", help="Sort: relevance, hot, top, new"),
    time: str = typer.Option("all", "--time", help="Time filter: hour, day, week, month, year, all"),
    after: Optional[str] = typer.Option(None, "--after", help="Pagination cursor from a previous page"),
    fmt: OutputFormat = typer.Option(OutputFormat.MD, "--format", "-f", help="Output format"),
):
    """Search all of Reddit for posts."""
    from rmcp.render import format_posts

    async def _go() -> str:
        result = await _client().search(query, limit=limit, sort=sort, time=time, after=after)
        return format_posts(result.items, fmt, result.after)

    typer.echo(_run(_go()))


@app.command()
def posts(
    subreddit: str = typer.Argument(..., help="Subreddit name (without r/)"),
    limit: int = typer.Option(5, "--limit", "-n", min=1, max=25, help="Number of posts"),
    sort: str = typer.Option("hot", "--sort", help="Sort: hot, new, top, rising"),
    time: str = typer.Option("all", "--time", help="Time filter (only applies to top)"),
    after: Optional[str] = typer.Option(None, "--after", help="Pagination cursor from a previous page"),
    fmt: OutputFormat = typer.Option(OutputFormat.MD, "--format", "-f", help="Output format"),
):
    """List posts from a subreddit."""
    from rmcp.render import format_posts

    async def _go() -> str:
        result = await _client().get_subreddit_posts(subreddit, limit=limit, sort=sort, time=time, after=after)
        return format_posts(result.items, fmt, result.after)

    typer.echo(_run(_go()))


@app.command()
def info(
    subreddit: str = typer.Argument(..., help="Subreddit name (without r/)"),
    fmt: OutputFormat = typer.Option(OutputFormat.MD, "--format", "-f", help="Output format"),
):
    """Show a subreddit's description and stats."""
    from rmcp.render import format_subreddit_info

    async def _go() -> str:
        return format_subreddit_info(await _client().get_subreddit_info(subreddit), fmt)

    typer.echo(_run(_go()))


@app.command()
def comments(
    subreddit: str = typer.Argument(..., help="Subreddit name (without r/)"),
    post_id: str = typer.Argument(..., help="Post ID (the base36 ID from the URL)"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=50, help="Number of top-level comments"),
    fmt: OutputFormat = typer.Option(OutputFormat.MD, "--format", "-f", help="Output format"),
):
    """Show a post and its comment thread."""
    from rmcp.render import format_post_with_comments

    async def _go() -> str:
        thread = await _client().get_post_comments(subreddit, post_id, limit=limit)
        return format_post_with_comments(thread.post, thread.comments, fmt)

    typer.echo(_run(_go()))


@app.command("subreddit-search")
def subreddit_search(
    subreddit: str = typer.Argument(..., help="Subreddit name (without r/)"),
    query: str = typer.Argument(..., help="Search query"),
    limit: int = typer.Option(5, "--limit", "-n", min=1, max=25, help="Number of results"),
    sort: str = typer.Option("relevance", "--sort", help="Sort: relevance, hot, top, new"),
    time: str = typer.Option("all", "--time", help="Time filter: hour, day, week, month, year, all"),
    after: Optional[str] = typer.Option(None, "--after", help="Pagination cursor from a previous page"),
    fmt: OutputFormat = typer.Option(OutputFormat.MD, "--format", "-f", help="Output format"),
):
    """Search for posts inside one subreddit."""
    from rmcp.render import format_posts

    async def _go() -> str:
        result = await _client().search_subreddit(
            subreddit, query, limit=limit, sort=sort, time=time, after=after
        )
        return format_posts(result.items, fmt, result.after)

    typer.echo(_run(_go()))


@app.command()
def serve(
    transport: str = typer.Option("stdio", "--transport", "-t", help="Transport: stdio"),
) -> None:
    """Start the MCP server."""
    from rmcp.mcp_server import run_stdio

    if transport == "stdio":
        logger.info("Starting reddit-mcp %s on stdio", __version__)
        asyncio.run(run_stdio())
    else:
        typer.echo(f"Transport '{transport}' not yet supported. Use 'stdio'.")
        raise typer.Exit(1)
