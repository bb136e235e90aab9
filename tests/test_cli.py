"""Tests for CLI commands."""
import json
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner


def _page():
    from rmcp.core.models import PaginatedResult, Post

    post = Post(
        id="abc", title="A title", author="someone", score=10, url="https://example.com",
        selftext="", permalink="/r/test/comments/abc/a_title/", subreddit="test",
        num_comments=4, created_utc=1700000000.0, is_self=False,
    )
    return PaginatedResult(items=(post,), after=None)


class TestCLI(unittest.TestCase):
    def test_version_flag(self):
        from rmcp import __version__
        from rmcp.cli import app

        runner = CliRunner()
        result = runner.invoke(app, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(f"reddit-mcp {__version__}", result.output)

    def test_search_prints_markdown(self):
        from rmcp.cli import app

        client = MagicMock()
        client.search = AsyncMock(return_value=_page())
        with patch("rmcp.cli._client", return_value=client):
            result = CliRunner().invoke(app, ["search", "python", "--limit", "3"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("## A title", result.output)
        client.search.assert_awaited_once_with("python", limit=3, sort="relevance", time="all", after=None)

    def test_posts_json_format(self):
        from rmcp.cli import app

        client = MagicMock()
        client.get_subreddit_posts = AsyncMock(return_value=_page())
        with patch("rmcp.cli._client", return_value=client):
            result = CliRunner().invoke(app, ["posts", "test", "--format", "json"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.stdout)["posts"][0]["id"], "abc")

    def test_limit_out_of_range(self):
        from rmcp.cli import app

        result = CliRunner().invoke(app, ["search", "python", "--limit", "26"])
        self.assertNotEqual(result.exit_code, 0)

    def test_reddit_error_exits_1(self):
        from rmcp.cli import app
        from rmcp.errors import NotFound

        client = MagicMock()
        client.get_subreddit_info = AsyncMock(side_effect=NotFound(404, "Subreddit not found: nope"))
        with patch("rmcp.cli._client", return_value=client):
            result = CliRunner().invoke(app, ["info", "nope"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Subreddit not found", result.output)

    def test_unsupported_transport(self):
        from rmcp.cli import app

        result = CliRunner().invoke(app, ["serve", "--transport", "sse"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not yet supported", result.output)


if __name__ == "__main__":
    unittest.main()
