"""Configuration for the bookmark search MCP server."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from bookmark_search.relevance import RelevanceConfig


def relevance_config_from_env() -> RelevanceConfig:
    """Create usage-relevance settings from environment variables."""
    defaults = RelevanceConfig()
    return RelevanceConfig(
        click_weight=float(os.environ.get("BOOKMARKS_CLICK_WEIGHT", str(defaults.click_weight))),
        recency_weight=float(os.environ.get("BOOKMARKS_RECENCY_WEIGHT", str(defaults.recency_weight))),
        decay_threshold_days=float(os.environ.get("BOOKMARKS_DECAY_DAYS", str(defaults.decay_threshold_days))),
        new_item_threshold_days=float(os.environ.get("BOOKMARKS_NEW_ITEM_DAYS", str(defaults.new_item_threshold_days))),
    )


@dataclass
class Config:
    """Main configuration for the bookmark search MCP server."""
    relevance: RelevanceConfig = field(default_factory=RelevanceConfig)
    store_path: Optional[Path] = None  # None = use default
    page_size: int = 20

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        store_path_str = os.environ.get("BOOKMARKS_STORE_PATH")
        store_path = Path(store_path_str).expanduser() if store_path_str else None

        return cls(
            relevance=relevance_config_from_env(),
            store_path=store_path,
            page_size=int(os.environ.get("BOOKMARKS_PAGE_SIZE", "20")),
        )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global config instance.

    Returns:
        Config loaded from environment
    """
    global _config

    if _config is None:
        _config = Config.from_env()

    return _config
