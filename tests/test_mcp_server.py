"""Tests for the MCP tool layer (client is mocked, no network access needed)."""
import json
import unittest
from unittest.mock import AsyncMock, MagicMock, patch


def _post(**overrides):
    from rmcp.core.models import Post

    fields = dict(
        id="abc", title="A title", author="someone", score=10, url="https://example.com",
        selftext="", permalink="/r/test/comments/abc/a_title/", subreddit="test",
        num_comments=4, created_utc=1700000000.0, is_self=False,
    )
    fields.update(overrides)
    return Post(**fields)


def _mock_client():
    from rmcp.core.models import Comment, PaginatedResult, PostWithComments, SubredditInfo

    client = MagicMock()
    page = PaginatedResult(items=(_post(),), after="t3_next")
    client.search = AsyncMock(return_value=page)
    client.get_subreddit_posts = AsyncMock(return_value=page)
    client.search_subreddit = AsyncMock(return_value=PaginatedResult(items=()))
    client.get_subreddit_info = AsyncMock(return_value=SubredditInfo(
        name="test", title="Test", description="", subscribers=1000,
        created_utc=0, over18=False, url="/r/test/",
    ))
    reply = Comment(id="r", author="b", body="reply", score=1, created_utc=0.0, depth=1)
    top = Comment(id="c", author="a", body="top", score=2, created_utc=0.0, depth=0, replies=(reply,))
    client.get_post_comments = AsyncMock(return_value=PostWithComments(post=_post(), comments=(top,)))
    return client


class TestToolDefinitions(unittest.TestCase):
    def test_five_tools_registered(self):
        from rmcp.mcp_server import TOOLS

        self.assertEqual(
            [t.name for t in TOOLS],
            ["search", "subreddit_info", "subreddit_posts", "post_comments", "subreddit_search"],
        )

    def test_limit_ranges(self):
        from rmcp.mcp_server import POST_COMMENTS_TOOL, SEARCH_TOOL, SUBREDDIT_POSTS_TOOL

        for tool in (SEARCH_TOOL, SUBREDDIT_POSTS_TOOL):
            limit = tool.inputSchema["properties"]["limit"]
            self.assertEqual((limit["minimum"], limit["maximum"]), (1, 25))
        limit = POST_COMMENTS_TOOL.inputSchema["properties"]["limit"]
        self.assertEqual((limit["minimum"], limit["maximum"]), (1, 50))

    def test_every_tool_has_format_defaulting_to_markdown(self):
        from rmcp.mcp_server import TOOLS

        for tool in TOOLS:
            fmt = tool.inputSchema["properties"]["format"]
            self.assertEqual(fmt["enum"], ["md", "json"])
            self.assertEqual(fmt["default"], "md")

    def test_create_server(self):
        from mcp.server import Server

        from rmcp.mcp_server import create_server

        self.assertIsInstance(create_server(), Server)


class TestDispatch(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.client = _mock_client()
        patcher = patch("rmcp.mcp_server._get_client", return_value=self.client)
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_search_markdown_with_cursor(self):
        from rmcp.mcp_server import dispatch

        result = await dispatch("search", {"query": "python"})
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].type, "text")
        self.assertIn("## A title", result[0].text)
        self.assertIn("t3_next", result[0].text)
        self.client.search.assert_awaited_once_with(
            "python", limit=5, sort="relevance", time="all", after=None
        )

    async def test_subreddit_posts_json(self):
        from rmcp.mcp_server import dispatch

        result = await dispatch(
            "subreddit_posts",
            {"subreddit": "test", "limit": 25, "sort": "top", "time": "week", "after": "t3_a", "format": "json"},
        )
        doc = json.loads(result[0].text)
        self.assertEqual(doc["after"], "t3_next")
        self.assertEqual(doc["posts"][0]["id"], "abc")
        self.client.get_subreddit_posts.assert_awaited_once_with(
            "test", limit=25, sort="top", time="week", after="t3_a"
        )

    async def test_subreddit_info(self):
        from rmcp.mcp_server import dispatch

        result = await dispatch("subreddit_info", {"subreddit": "test"})
        self.assertIn("# r/test", result[0].text)
        self.assertIn("Subscribers: 1,000", result[0].text)

    async def test_post_comments(self):
        from rmcp.mcp_server import dispatch

        result = await dispatch("post_comments", {"subreddit": "test", "post_id": "abc", "limit": 50})
        self.assertIn("## Comments", result[0].text)
        self.assertIn("\n  **u/b** | 1 points", result[0].text)
        self.client.get_post_comments.assert_awaited_once_with("test", "abc", limit=50)

    async def test_subreddit_search_empty(self):
        from rmcp.mcp_server import dispatch

        result = await dispatch("subreddit_search", {"subreddit": "test", "query": "nothing"})
        self.assertEqual(result[0].text, "No posts found.")

    async def test_integral_float_limit_accepted(self):
        from rmcp.mcp_server import dispatch

        await dispatch("search", {"query": "python", "limit": 3.0})
        self.assertEqual(self.client.search.await_args.kwargs["limit"], 3)

    async def test_invalid_arguments_rejected_before_fetch(self):
        from rmcp.mcp_server import dispatch

        bad_calls = [
            ("search", {}),
            ("search", {"query": ""}),
            ("search", {"query": "x", "limit": 0}),
            ("search", {"query": "x", "limit": 26}),
            ("search", {"query": "x", "limit": "5"}),
            ("search", {"query": "x", "sort": "rising"}),
            ("search", {"query": "x", "format": "html"}),
            ("subreddit_posts", {"subreddit": "x", "sort": "relevance"}),
            ("post_comments", {"subreddit": "x", "post_id": "y", "limit": 51}),
            ("post_comments", {"subreddit": "x"}),
        ]
        for name, arguments in bad_calls:
            with self.subTest(name=name, arguments=arguments):
                with self.assertRaises(ValueError):
                    await dispatch(name, arguments)
        self.client.search.assert_not_called()
        self.client.get_subreddit_posts.assert_not_called()
        self.client.get_post_comments.assert_not_called()

    async def test_unknown_tool(self):
        from rmcp.mcp_server import dispatch

        with self.assertRaises(ValueError):
            await dispatch("vote", {})

    async def test_retrieval_failure_propagates(self):
        from rmcp.errors import RequestFailed
        from rmcp.mcp_server import dispatch

        self.client.search.side_effect = RequestFailed(503, "Service Unavailable")
        with self.assertRaises(RequestFailed):
            await dispatch("search", {"query": "x"})


class TestLazyClient(unittest.TestCase):
    def test_client_is_created_once(self):
        from rmcp import mcp_server

        with patch.object(mcp_server, "_client", None), patch("rmcp.mcp_server.RedditClient") as cls:
            first = mcp_server._get_client()
            second = mcp_server._get_client()
        self.assertIs(first, second)
        cls.assert_called_once()


if __name__ == "__main__":
    unittest.main()
