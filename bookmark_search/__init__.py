"""Bookmark search: query filtering and ranking over a bookmark collection."""
