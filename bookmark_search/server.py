"""MCP server exposing bookmark search tools."""
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from bookmark_search.bookmarks_store import read_bookmarks
from bookmark_search.config import get_config
from bookmark_search.models import Bookmark
from bookmark_search.pagination import paginate
from bookmark_search.query_parser import parse_query
from bookmark_search.relevance import (
    analyze_relevance_distribution,
    explain_relevance_score,
    sort_by_relevance,
)
from bookmark_search.search import QuerySearchEngine
from bookmark_search.tag_summary import bookmarks_with_any_tag, extract_tag_summary, filter_tags
from bookmark_search.user_agent import UNKNOWN, UserAgentInfo, format_user_agent_info


# Global state
_bookmarks_cache: Optional[List[Bookmark]] = None
_search_engine = QuerySearchEngine()


def load_bookmarks(store_path: Optional[Path] = None) -> List[Bookmark]:
    """Load bookmarks, using cache if available.

    Args:
        store_path: Optional path to the store file

    Returns:
        List of bookmarks (empty if the store could not be read)
    """
    global _bookmarks_cache

    if _bookmarks_cache is None:
        try:
            _bookmarks_cache = read_bookmarks(store_path)
        except FileNotFoundError as e:
            print(f"Warning: Could not find bookmark store: {e}", file=sys.stderr)
            _bookmarks_cache = []
        except Exception as e:
            print(f"Error loading bookmarks: {e}", file=sys.stderr)
            _bookmarks_cache = []

    return _bookmarks_cache


def reset_bookmarks_cache() -> None:
    """Forget loaded bookmarks so the next call re-reads the store."""
    global _bookmarks_cache
    _bookmarks_cache = None


def _text(text: str) -> List[TextContent]:
    return [TextContent(type="text", text=text)]


def _bookmark_entry(bookmark: Bookmark) -> dict:
    entry = bookmark.to_dict()
    if bookmark.browser or bookmark.os or bookmark.device:
        entry["saved_from"] = format_user_agent_info(UserAgentInfo(
            user_agent=bookmark.user_agent or "",
            browser=bookmark.browser or UNKNOWN,
            os=bookmark.os or UNKNOWN,
            device=bookmark.device or UNKNOWN,
        ))
    return entry


def _positive_int(arguments: Any, name: str, default: int) -> int:
    value = arguments.get(name, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"'{name}' must be a positive integer")
    return value


async def search_bookmarks_tool(query: str, page: int = 1, per_page: Optional[int] = None) -> List[TextContent]:
    """Tool handler for search_bookmarks.

    Args:
        query: Query in the search grammar (empty lists everything)
        page: 1-based page number
        per_page: Page size (defaults to config)

    Returns:
        List of TextContent with a JSON result page
    """
    bookmarks = load_bookmarks()

    if not bookmarks:
        return _text("No bookmarks available. Please check the bookmark store path.")

    result = _search_engine.filter(query, bookmarks)
    chunk = paginate(result.data, page, per_page or get_config().page_size)

    results = []
    for bookmark in chunk.items:
        entry = _bookmark_entry(bookmark)
        score = result.score_for(bookmark)
        if score is not None:
            entry["score"] = score
        results.append(entry)

    payload = {
        "query": result.query,
        "options": result.options.to_dict(),
        "total": chunk.total_items,
        "page": chunk.page,
        "total_pages": chunk.total_pages,
        "showing": [chunk.start_index, chunk.end_index],
        "results": results,
    }
    return _text(json.dumps(payload, indent=2))


async def parse_query_tool(query: str) -> List[TextContent]:
    """Tool handler for parse_query: show how a query is interpreted."""
    return _text(json.dumps(parse_query(query).to_dict(), indent=2))


async def list_tags_tool(search_text: str = "") -> List[TextContent]:
    """Tool handler for list_tags."""
    summary = filter_tags(extract_tag_summary(load_bookmarks()), search_text)
    if not summary:
        return _text("No tags found.")
    return _text(json.dumps([{"tag": info.tag, "count": info.count} for info in summary], indent=2))


async def relevant_bookmarks_tool(limit: int = 10, tags: Optional[List[str]] = None) -> List[TextContent]:
    """Tool handler for relevant_bookmarks: most used and recently visited first.

    Args:
        limit: Maximum number of bookmarks to return
        tags: Only consider bookmarks carrying at least one of these tags

    Returns:
        List of TextContent with collection stats and the ranked bookmarks
    """
    bookmarks = load_bookmarks()

    if not bookmarks:
        return _text("No bookmarks available. Please check the bookmark store path.")

    candidates = bookmarks_with_any_tag(bookmarks, tags or [])
    config = get_config().relevance
    ranked = sort_by_relevance(candidates, config)[:limit]
    results = [
        {**_bookmark_entry(bookmark), "relevance": explain_relevance_score(bookmark, config)}
        for bookmark in ranked
    ]
    payload = {
        "stats": asdict(analyze_relevance_distribution(candidates, config)),
        "results": results,
    }
    return _text(json.dumps(payload, indent=2))


def create_server() -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured Server instance
    """
    server = Server("bookmark-search-mcp")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name="search_bookmarks",
                description=(
                    "Search bookmarks. Bare words match any term; +word is required, "
                    "-word excludes, \"quoted phrases\" stay together. Filters: tag:x or #x, "
                    "device:x, os:x, browser:x, added:>30 (days), clicked:<7, clicked:=0 "
                    "(never clicked). Prefix a filter with - to negate it."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Search query"
                        },
                        "page": {
                            "type": "integer",
                            "description": "Page number, starting at 1"
                        },
                        "per_page": {
                            "type": "integer",
                            "description": "Results per page"
                        }
                    },
                    "required": ["query"]
                }
            ),
            Tool(
                name="parse_query",
                description="Show how a search query is split into required, optional, excluded terms and filters.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Search query to parse"
                        }
                    },
                    "required": ["query"]
                }
            ),
            Tool(
                name="list_tags",
                description="List bookmark tags with usage counts, most used first.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "filter": {
                            "type": "string",
                            "description": "Only tags containing this text"
                        }
                    }
                }
            ),
            Tool(
                name="relevant_bookmarks",
                description="List bookmarks ordered by usage: click count and how recently they were visited.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "limit": {
                            "type": "integer",
                            "description": "Maximum number of bookmarks to return"
                        },
                        "tags": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Only bookmarks with at least one of these tags"
                        }
                    }
                }
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Any) -> list[TextContent]:
        """Handle tool calls."""
        arguments = arguments or {}

        if name == "search_bookmarks":
            query = arguments.get("query")
            if query is None:
                return _text("Error: 'query' parameter is required")
            try:
                page = _positive_int(arguments, "page", 1)
                per_page = _positive_int(arguments, "per_page", get_config().page_size)
            except ValueError as e:
                return _text(f"Error: {e}")
            return await search_bookmarks_tool(str(query), page=page, per_page=per_page)
        elif name == "parse_query":
            return await parse_query_tool(str(arguments.get("query", "")))
        elif name == "list_tags":
            return await list_tags_tool(str(arguments.get("filter", "")))
        elif name == "relevant_bookmarks":
            try:
                limit = _positive_int(arguments, "limit", 10)
            except ValueError as e:
                return _text(f"Error: {e}")
            tags = arguments.get("tags") or []
            if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
                return _text("Error: 'tags' must be a list of strings")
            return await relevant_bookmarks_tool(limit, tags)
        else:
            raise ValueError(f"Unknown tool: {name}")

    return server


async def main():
    """Main entry point for the MCP server."""
    server = create_server()

    async with stdio_server() as (read_stream, write_stream):
        initialization_options = server.create_initialization_options()
        await server.run(read_stream, write_stream, initialization_options)
