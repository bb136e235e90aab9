"""Read-only client for Reddit's public ``.json`` endpoints."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from rmcp.config import Settings
from rmcp.core.models import PaginatedResult, Post, PostWithComments, SubredditInfo
from rmcp.core.parser import (
    SUBREDDIT_KIND,
    parse_comments_response,
    parse_post_listing,
    parse_subreddit_info,
    parse_thing,
)
from rmcp.errors import MalformedResponse, NotFound, RequestFailed

logger = logging.getLogger(__name__)

SEARCH_SORTS = ("relevance", "hot", "top", "new")
POST_SORTS = ("hot", "new", "top", "rising")
TIME_FILTERS = ("hour", "day", "week", "month", "year", "all")


class RedditClient:
    """Fetches and normalizes Reddit listings.

    Holds nothing but its settings, so a single instance can serve any number
    of concurrent calls. Each call runs one blocking HTTP request in a worker
    thread and either returns a fully parsed result or raises.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings.load()
        self._base_url = self._settings.base_url.rstrip("/")

    async def search(
        self,
        query: str,
        limit: int = 5,
        sort: str = "relevance",
        time: str = "all",
        after: Optional[str] = None,
    ) -> PaginatedResult[Post]:
        """Search all of Reddit for posts matching *query*."""
        _check_choice("sort", sort, SEARCH_SORTS)
        _check_choice("time", time, TIME_FILTERS)
        params = {"q": query, "limit": limit, "sort": sort, "t": time}
        if after:
            params["after"] = after
        payload = await self._get_json("/search.json", params)
        return parse_post_listing(payload)

    async def get_subreddit_info(self, name: str) -> SubredditInfo:
        """Fetch a subreddit's about page."""
        path = f"/r/{_subreddit_path(name)}/about.json"
        payload = await self._get_json(path)

        # Unknown names are answered with a search listing instead of a 404
        thing = parse_thing(payload)
        if thing.kind != SUBREDDIT_KIND:
            logger.warning("No subreddit behind %s (got kind=%r)", path, thing.kind)
            raise NotFound(404, f"Subreddit not found: {name}", url=self._base_url + path)
        return parse_subreddit_info(thing.data)

    async def get_subreddit_posts(
        self,
        name: str,
        limit: int = 5,
        sort: str = "hot",
        time: str = "all",
        after: Optional[str] = None,
    ) -> PaginatedResult[Post]:
        """List a subreddit's posts. *time* only matters for ``sort="top"``."""
        _check_choice("sort", sort, POST_SORTS)
        _check_choice("time", time, TIME_FILTERS)
        params = {"limit": limit, "t": time}
        if after:
            params["after"] = after
        payload = await self._get_json(f"/r/{_subreddit_path(name)}/{sort}.json", params)
        return parse_post_listing(payload)

    async def get_post_comments(
        self,
        subreddit: str,
        post_id: str,
        limit: int = 20,
    ) -> PostWithComments:
        """Fetch a post and its comment tree."""
        path = f"/r/{_subreddit_path(subreddit)}/comments/{quote(post_id, safe='')}.json"
        payload = await self._get_json(path, {"limit": limit})
        return parse_comments_response(payload)

    async def search_subreddit(
        self,
        name: str,
        query: str,
        limit: int = 5,
        sort: str = "relevance",
        time: str = "all",
        after: Optional[str] = None,
    ) -> PaginatedResult[Post]:
        """Search for posts inside one subreddit."""
        _check_choice("sort", sort, SEARCH_SORTS)
        _check_choice("time", time, TIME_FILTERS)
        params = {"q": query, "restrict_sr": "on", "limit": limit, "sort": sort, "t": time}
        if after:
            params["after"] = after
        payload = await self._get_json(f"/r/{_subreddit_path(name)}/search.json", params)
        return parse_post_listing(payload)

    async def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await asyncio.to_thread(self._fetch, self._base_url + path, params or {})

    def _fetch(self, url: str, params: dict[str, Any]) -> Any:
        logger.debug("GET %s params=%s", url, params)
        try:
            response = requests.get(
                url,
                params=params,
                headers={"User-Agent": self._settings.user_agent},
                timeout=self._settings.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise RequestFailed(None, str(exc), url=url) from exc

        if response.status_code == 404:
            logger.warning("Reddit returned 404 for %s", url)
            raise NotFound(404, response.reason or "Not Found", url=url)
        if not 200 <= response.status_code < 300:
            logger.warning("Reddit returned %s for %s", response.status_code, url)
            raise RequestFailed(response.status_code, response.reason or "", url=url)

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(f"Response from {url} is not JSON") from exc


def _check_choice(name: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        msg = f"Invalid {name}: {value!r}. Expected one of: {', '.join(choices)}."
        raise ValueError(msg)


def _subreddit_path(name: str) -> str:
    """Strip an ``r/`` or ``/r/`` prefix and quote the rest for use in a URL path."""
    name = name.strip().lstrip("/")
    if name.lower().startswith("r/"):
        name = name[2:]
    name = name.strip("/")
    if not name:
        raise ValueError("Subreddit name must not be empty")
    return quote(name, safe="")
