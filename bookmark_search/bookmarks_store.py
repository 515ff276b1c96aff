"""Read-only loader for the bookmark store file.

The store is a JSON document, either the current shape::

    {"version": "2025-08-13", "bookmarks": [{"url": ..., "tags": [...], ...}]}

or the legacy shape, a bare list of bookmark objects that may use ``href``
instead of ``url``.
"""
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from bookmark_search.models import Bookmark
from bookmark_search.user_agent import UNKNOWN, parse_user_agent


# Default store location
DEFAULT_STORE_PATH = Path.home() / ".bookmarks-search" / "bookmarks.json"

DEFAULT_VERSION = "2025-08-13"


def get_store_path(store_path: Optional[Path] = None) -> Path:
    """Resolve the store path, falling back to config and then the default."""
    if store_path is not None:
        return store_path

    from bookmark_search.config import get_config
    return get_config().store_path or DEFAULT_STORE_PATH


def load_store_file(store_path: Optional[Path] = None) -> Any:
    """Load the raw store JSON.

    Args:
        store_path: Optional path to the store file

    Returns:
        Parsed JSON document

    Raises:
        FileNotFoundError: If the store file doesn't exist
        json.JSONDecodeError: If the store file is malformed
    """
    store_path = get_store_path(store_path)

    if not store_path.exists():
        raise FileNotFoundError(f"Bookmark store not found at {store_path}")

    with open(store_path, "r", encoding="utf-8") as f:
        return json.load(f)


def is_valid_url(url: Optional[str]) -> bool:
    """Check that a string is a usable http(s) URL.

    Scheme-less values that look like a domain (``example.com/page``) are
    accepted as if prefixed with ``https://``.
    """
    if not url or not isinstance(url, str) or not url.strip():
        return False

    url = url.strip()
    if " " in url:
        return False
    if ".." in url or url.startswith(".") or url.endswith("."):
        return False

    if "://" not in url:
        if "." in url and not url.startswith("/"):
            url = f"https://{url}"
        else:
            return False

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return False

    return parsed.scheme in ("http", "https") and bool(hostname)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch milliseconds into an aware datetime.

    Returns:
        UTC-aware datetime, or None if the value is missing or unparseable
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def bookmark_from_dict(item: Dict[str, Any]) -> Bookmark:
    """Build a Bookmark from one stored record.

    Device/OS/browser labels are derived from ``userAgent`` when the record
    has a user agent but no labels. A record with zero clicks never keeps a
    ``last`` timestamp.
    """
    url = item.get("url") or item.get("href") or ""

    clicked = item.get("clicked") or 0
    try:
        clicked = max(0, int(clicked))
    except (TypeError, ValueError):
        clicked = 0

    last = parse_timestamp(item.get("last")) if clicked > 0 else None

    tags = item.get("tags") or []
    if isinstance(tags, str):
        tags = tags.split()
    tags = tuple(str(tag) for tag in tags if str(tag).strip())

    user_agent = _optional_str(item.get("userAgent"))
    device = _optional_str(item.get("device"))
    os_name = _optional_str(item.get("os"))
    browser = _optional_str(item.get("browser"))

    if user_agent and not (device or os_name or browser):
        info = parse_user_agent(user_agent)
        device = info.device if info.device != UNKNOWN else None
        os_name = info.os if info.os != UNKNOWN else None
        browser = info.browser if info.browser != UNKNOWN else None

    return Bookmark(
        url=str(url),
        title=_optional_str(item.get("title")),
        description=_optional_str(item.get("description")),
        notes=_optional_str(item.get("notes")),
        tags=tags,
        added=parse_timestamp(item.get("added")),
        clicked=clicked,
        last=last,
        device=device,
        os=os_name,
        browser=browser,
        user_agent=user_agent,
    )


def extract_records(store_data: Any) -> Tuple[str, List[Dict[str, Any]]]:
    """Pull the version and raw record list out of either store shape.

    Raises:
        ValueError: If the document is neither a list nor a store object
    """
    if isinstance(store_data, list):
        return DEFAULT_VERSION, store_data

    if isinstance(store_data, dict) and isinstance(store_data.get("bookmarks"), list):
        return store_data.get("version") or DEFAULT_VERSION, store_data["bookmarks"]

    raise ValueError(
        "Invalid store format: expected a list of bookmarks or an object with a 'bookmarks' list"
    )


def clean_bookmarks(bookmarks: List[Bookmark]) -> Tuple[List[Bookmark], int, int]:
    """Drop bookmarks with invalid URLs and repeated URLs (first one wins).

    Returns:
        Tuple of (kept bookmarks, invalid count, duplicate count)
    """
    kept = []
    seen = set()
    invalid = 0
    duplicates = 0

    for bookmark in bookmarks:
        if not is_valid_url(bookmark.url):
            invalid += 1
            continue
        if bookmark.url in seen:
            duplicates += 1
            continue
        seen.add(bookmark.url)
        kept.append(bookmark)

    return kept, invalid, duplicates


def read_bookmarks(store_path: Optional[Path] = None) -> List[Bookmark]:
    """Read all usable bookmarks from the store file.

    Args:
        store_path: Optional path to the store file. If None, uses config/default.

    Returns:
        Bookmarks in stored order, without invalid or duplicate URLs

    Raises:
        FileNotFoundError: If the store file doesn't exist
        json.JSONDecodeError: If the store file is malformed
        ValueError: If the document has an unrecognized shape
    """
    store_data = load_store_file(store_path)
    _, records = extract_records(store_data)

    bookmarks = [bookmark_from_dict(item) for item in records if isinstance(item, dict)]
    skipped = len(records) - len(bookmarks)

    cleaned, invalid, duplicates = clean_bookmarks(bookmarks)

    if skipped:
        print(f"Skipped {skipped} non-object record(s) in bookmark store", file=sys.stderr)
    if invalid:
        print(f"Skipped {invalid} bookmark(s) with invalid URLs", file=sys.stderr)
    if duplicates:
        print(f"Skipped {duplicates} duplicate bookmark(s)", file=sys.stderr)

    return cleaned
