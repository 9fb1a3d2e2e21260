"""Configuration helpers for the transcript indexer."""
from __future__ import annotations

from .settings import (
    AppConfig,
    CacheConfig,
    PipelineConfig,
    SearchConfig,
    StortingAPIConfig,
    load_config,
    resolve_config_path,
)

__all__ = [
    "AppConfig",
    "CacheConfig",
    "PipelineConfig",
    "SearchConfig",
    "StortingAPIConfig",
    "load_config",
    "resolve_config_path",
]
