from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from langreader.utils import load_config

DEFAULT_SPACE_MARKER = "\u00a0"

_SETTINGS_DEFAULTS: Dict[str, Any] = {
    "reader_space_marker": DEFAULT_SPACE_MARKER,
    "reader_expand_ellipsis": True,
    "reader_max_workers": 4,
    "reader_parallel_threshold": 8,
}

_ENVIRONMENT_KEYS: Dict[str, str] = {
    "reader_space_marker": "LANGREADER_SPACE_MARKER",
    "reader_expand_ellipsis": "LANGREADER_EXPAND_ELLIPSIS",
    "reader_max_workers": "LANGREADER_MAX_WORKERS",
    "reader_parallel_threshold": "LANGREADER_PARALLEL_THRESHOLD",
}


@dataclass(frozen=True)
class ReaderConfig:
    space_marker: str = DEFAULT_SPACE_MARKER
    expand_ellipsis: bool = True
    max_workers: int = 4
    parallel_threshold: int = 8


DEFAULT_READER_CONFIG = ReaderConfig()


@lru_cache(maxsize=1)
def _environment_defaults() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key, env_var in _ENVIRONMENT_KEYS.items():
        value = os.environ.get(env_var)
        if value is None or value == "":
            continue
        overrides[key] = value
    return overrides


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def _coerce_positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        coerced = int(value)
    except (TypeError, ValueError):
        return default
    return coerced if coerced > 0 else default


def _coerce_marker(value: Any, default: str) -> str:
    # An empty marker would let the renderer collapse whitespace tokens.
    if isinstance(value, str) and value:
        return value
    return default


def _coerce(key: str, raw_value: Any) -> Any:
    default = _SETTINGS_DEFAULTS[key]
    if isinstance(default, bool):
        return _coerce_bool(raw_value, default)
    if isinstance(default, int):
        return _coerce_positive_int(raw_value, default)
    return _coerce_marker(raw_value, default)


def _extract_settings(source: Mapping[str, Any]) -> Dict[str, Any]:
    env_defaults = _environment_defaults()
    extracted: Dict[str, Any] = {}
    for key, default in _SETTINGS_DEFAULTS.items():
        if key in source:
            raw_value = source.get(key)
        elif key in env_defaults:
            raw_value = env_defaults[key]
        else:
            raw_value = default
        extracted[key] = _coerce(key, raw_value)
    return extracted


@lru_cache(maxsize=1)
def _cached_settings() -> Dict[str, Any]:
    config = load_config() or {}
    return _extract_settings(config)


def get_runtime_settings() -> Dict[str, Any]:
    return dict(_cached_settings())


def clear_cached_settings() -> None:
    _cached_settings.cache_clear()
    _environment_defaults.cache_clear()


def apply_overrides(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in overrides.items():
        if key not in _SETTINGS_DEFAULTS:
            continue
        merged[key] = _coerce(key, value)
    return merged


def build_reader_config(
    *,
    settings: Optional[Mapping[str, Any]] = None,
) -> ReaderConfig:
    """Build a ReaderConfig from a settings mapping (runtime settings by default)."""

    values = settings if settings is not None else get_runtime_settings()
    return ReaderConfig(
        space_marker=_coerce("reader_space_marker", values.get("reader_space_marker", DEFAULT_SPACE_MARKER)),
        expand_ellipsis=_coerce("reader_expand_ellipsis", values.get("reader_expand_ellipsis", True)),
        max_workers=_coerce("reader_max_workers", values.get("reader_max_workers", 4)),
        parallel_threshold=_coerce("reader_parallel_threshold", values.get("reader_parallel_threshold", 8)),
    )
