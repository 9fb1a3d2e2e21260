"""Application configuration helpers for the transcript indexer."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, get_args, get_origin, get_type_hints


_DEFAULT_CONFIG_LOCATIONS = (
    Path("storting.json"),
    Path.home() / ".config" / "storting-transcripts" / "config.json",
)

_ENV_PREFIX = "STORTING_"


@dataclass(slots=True)
class StortingAPIConfig:
    """Configuration for the data.stortinget.no export API."""

    base_url: str = "https://data.stortinget.no"
    # the export API is known to hang now and then
    timeout: float = 30.0
    max_retries: int = 3
    user_agent: str = "storting-transcripts | https://www.holderdeord.no/"


@dataclass(slots=True)
class CacheConfig:
    """Location of the downloaded and converted transcripts."""

    data_dir: str = "data"


@dataclass(slots=True)
class SearchConfig:
    """Configuration for the Elasticsearch target index."""

    elasticsearch_url: str = "http://localhost:9200"
    index_name: str = "hdo-transcripts"
    create_index: bool = False


@dataclass(slots=True)
class PipelineConfig:
    """Which sessions to ingest and whether to ignore cached artifacts."""

    sessions: List[str] = field(default_factory=list)
    force: bool = False
    # list sessions again while keeping cached transcripts
    refresh_listings: bool = False


@dataclass(slots=True)
class AppConfig:
    """High level application configuration."""

    api: StortingAPIConfig = field(default_factory=StortingAPIConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)


_SECTIONS: Dict[str, Type[Any]] = {
    "api": StortingAPIConfig,
    "cache": CacheConfig,
    "search": SearchConfig,
    "pipeline": PipelineConfig,
}


def _load_from_env(prefix: str) -> Dict[str, Any]:
    """Load configuration entries for ``prefix`` from the environment."""

    data: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            normalized_key = key.removeprefix(prefix)
            data[normalized_key.lower()] = value
    return data


def _merge_dict(target: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    merged = target.copy()
    merged.update({k: v for k, v in updates.items() if v is not None})
    return merged


def _load_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf8") as fh:
        return json.load(fh)


T = TypeVar("T")


def _coerce_value(value: Any, annotation: Any) -> Any:
    """Best-effort conversion of ``value`` to match ``annotation``."""

    if value is None:
        return None

    origin = get_origin(annotation)
    if origin is list:
        (item_type,) = get_args(annotation) or (str,)
        if isinstance(value, str):
            items = [part.strip() for part in value.split(",") if part.strip()]
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            raise ValueError(f"Cannot convert {value!r} to list")
        return [_coerce_value(item, item_type) for item in items]

    target_type = origin or annotation

    if target_type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"true", "1", "yes", "y", "on"}:
                return True
            if normalized in {"false", "0", "no", "n", "off"}:
                return False
        if isinstance(value, (int, float)):
            return bool(value)
        raise ValueError(f"Cannot convert {value!r} to bool")

    if target_type is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, (float, str)):
            return int(float(value))
        raise ValueError(f"Cannot convert {value!r} to int")

    if target_type is float:
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            return float(value)
        raise ValueError(f"Cannot convert {value!r} to float")

    if target_type is str:
        if isinstance(value, str):
            return value
        return str(value)

    return value


def _dataclass_from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
    """Create dataclass ``cls`` while coercing ``data`` to the proper types."""

    kwargs: Dict[str, Any] = {}
    type_hints = get_type_hints(cls)
    for field_ in fields(cls):
        if field_.name not in data:
            continue
        try:
            annotation = type_hints.get(field_.name, field_.type)
            kwargs[field_.name] = _coerce_value(data[field_.name], annotation)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"Invalid value for {cls.__name__}.{field_.name}: {data[field_.name]!r}"
            ) from exc
    return cls(**kwargs)


def resolve_config_path(explicit_path: Optional[Path] = None) -> Path:
    """Return the effective configuration file path.

    If ``explicit_path`` is provided it is returned verbatim. Otherwise the
    default locations are checked in order and the first existing file is
    used; if none are present the last default path
    (``~/.config/storting-transcripts/config.json``) is returned.
    """

    if explicit_path:
        return explicit_path

    for candidate in _DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return _DEFAULT_CONFIG_LOCATIONS[-1]


def load_config(explicit_path: Optional[Path] = None) -> AppConfig:
    """Create the application configuration.

    Default values, an optional JSON configuration file and environment
    variables are combined into a single :class:`AppConfig`. Environment
    variable names use the format ``STORTING_SECTION_FIELD`` (e.g.
    ``STORTING_SEARCH_INDEX_NAME`` or ``STORTING_PIPELINE_SESSIONS=2022-2023,2023-2024``).
    """

    file_data = _load_config_file(resolve_config_path(explicit_path))

    sections: Dict[str, Any] = {}
    for name, cls in _SECTIONS.items():
        data = _merge_dict(asdict(cls()), file_data.get(name) or {})
        data = _merge_dict(data, _load_from_env(f"{_ENV_PREFIX}{name.upper()}_"))
        sections[name] = _dataclass_from_dict(cls, data)
    return AppConfig(**sections)


__all__ = [
    "AppConfig",
    "CacheConfig",
    "PipelineConfig",
    "SearchConfig",
    "StortingAPIConfig",
    "load_config",
    "resolve_config_path",
]
