"""Shared fixtures for tests."""
import json

import pytest

from bookmark_search.models import Bookmark

from tests.helpers import days_ago


SAMPLE_STORE = {
    "version": "2025-08-13",
    "bookmarks": [
        {
            "url": "https://github.com/test/repo",
            "title": "Test Repository",
            "description": "A test repository",
            "tags": ["development", "github"],
            "notes": "Important project",
            "added": "2025-04-12T12:00:00.000Z",
            "clicked": 0,
            "last": None,
            "userAgent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
            "browser": "Chrome",
            "os": "Windows 10/11",
            "device": "Desktop"
        },
        {
            "url": "https://docs.react.dev",
            "title": "React Documentation",
            "description": "Official React docs",
            "tags": ["react", "documentation"],
            "notes": None,
            "added": "2025-02-21T12:00:00.000Z",
            "clicked": 5,
            "last": "2025-05-12T12:00:00.000Z",
            "userAgent": "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148"
        },
        {
            "url": "not a url",
            "title": "Broken",
            "tags": [],
            "added": "2025-01-01T00:00:00.000Z",
            "clicked": 0
        },
        {
            "url": "https://docs.react.dev",
            "title": "React Documentation (again)",
            "tags": [],
            "added": "2025-01-01T00:00:00.000Z",
            "clicked": 0
        }
    ]
}


@pytest.fixture
def sample_store_path(tmp_path):
    """Create a temporary bookmark store file with sample data."""
    store_file = tmp_path / "bookmarks.json"
    store_file.write_text(json.dumps(SAMPLE_STORE, indent=2))
    return store_file


@pytest.fixture
def usage_bookmarks():
    """Bookmarks with device labels and usage history, relative to NOW."""
    return [
        Bookmark(
            url="https://github.com/test/repo",
            title="Test Repository",
            description="A test repository",
            tags=("development", "github"),
            notes="Important project",
            added=days_ago(50),
            clicked=0,
            last=None,
            browser="Chrome",
            os="Windows 10/11",
            device="Desktop",
        ),
        Bookmark(
            url="https://docs.react.dev",
            title="React Documentation",
            description="Official React docs",
            tags=("react", "documentation"),
            added=days_ago(100),
            clicked=5,
            last=days_ago(20),
            browser="Safari",
            os="iOS 17.0",
            device="Mobile",
        ),
        Bookmark(
            url="https://stackoverflow.com/questions/12345",
            title="How to use React hooks",
            description="Stack Overflow question",
            tags=("react", "hooks"),
            added=days_ago(400),
            clicked=10,
            last=days_ago(350),
            browser="Firefox",
            os="macOS 10.15.7",
            device="Desktop",
        ),
    ]


@pytest.fixture
def tagged_bookmarks():
    """Bookmarks for include/exclude tag scenarios."""
    return [
        Bookmark(url="https://capitec1.com", title="Capitec Bank",
                 tags=("capitec", "bank", "finance"), added=days_ago(10)),
        Bookmark(url="https://capitec2.com", title="Capitec with NPR content",
                 tags=("capitec", "npr", "finance"), added=days_ago(10)),
        Bookmark(url="https://npr1.com", title="NPR News",
                 tags=("npr", "news"), added=days_ago(10)),
        Bookmark(url="https://capitec3.com", title="Pure Capitec",
                 tags=("capitec",), added=days_ago(10)),
    ]


@pytest.fixture
def fruit_bookmarks():
    """Bookmarks for free-text AND/OR scoring."""
    return [
        Bookmark(url="https://a.example", title="apple pie recipe"),
        Bookmark(url="https://b.example", title="banana bread"),
        Bookmark(url="https://c.example", title="cherry tart"),
        Bookmark(url="https://d.example", title="apple and banana smoothie"),
    ]
