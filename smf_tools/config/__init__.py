"""Decoder configuration loaded from a bundled JSON resource."""

from __future__ import annotations

import codecs
import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "smf_tools.json"
_SMF_CONFIG_CACHE: SmfConfig | None = None

_DEFAULT_SKIP_BLOCK_SIZE = 64 * 1024
_DEFAULT_TEXT_ENCODING = "latin-1"


@dataclass(frozen=True)
class SourceConfig:
    """Settings for the byte-source adapters."""

    skip_block_size: int


@dataclass(frozen=True)
class MetaConfig:
    """Settings used when interpreting meta-event payloads."""

    text_encoding: str


@dataclass(frozen=True)
class SmfConfig:
    """Structured configuration values for the decoder."""

    source: SourceConfig
    meta: MetaConfig


def get_smf_config() -> SmfConfig:
    """Return the cached decoder configuration."""

    global _SMF_CONFIG_CACHE
    if _SMF_CONFIG_CACHE is None:
        _SMF_CONFIG_CACHE = load_smf_config()
    return _SMF_CONFIG_CACHE


def reset_smf_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _SMF_CONFIG_CACHE
    _SMF_CONFIG_CACHE = None


def load_smf_config(path: str | Path | None = None) -> SmfConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    source_section = data.get("source") if isinstance(data, Mapping) else None
    meta_section = data.get("meta") if isinstance(data, Mapping) else None
    return SmfConfig(
        source=_parse_source_section(source_section),
        meta=_parse_meta_section(meta_section),
    )


def get_source_config() -> SourceConfig:
    return get_smf_config().source


def get_meta_config() -> MetaConfig:
    return get_smf_config().meta


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_source_section(section: Mapping[str, Any] | None) -> SourceConfig:
    if not isinstance(section, Mapping):
        return SourceConfig(skip_block_size=_DEFAULT_SKIP_BLOCK_SIZE)
    block_size = _coerce_positive_int(
        section.get("skip_block_size"), default=_DEFAULT_SKIP_BLOCK_SIZE
    )
    return SourceConfig(skip_block_size=block_size)


def _parse_meta_section(section: Mapping[str, Any] | None) -> MetaConfig:
    if not isinstance(section, Mapping):
        return MetaConfig(text_encoding=_DEFAULT_TEXT_ENCODING)
    encoding = _coerce_encoding(section.get("text_encoding"), default=_DEFAULT_TEXT_ENCODING)
    return MetaConfig(text_encoding=encoding)


def _coerce_positive_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(float(value))
        except ValueError:
            return default
    else:
        return default
    if candidate <= 0:
        return default
    return candidate


def _coerce_encoding(value: Any, *, default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    name = value.strip()
    try:
        codecs.lookup(name)
    except LookupError:
        return default
    return name


__all__ = [
    "MetaConfig",
    "SmfConfig",
    "SourceConfig",
    "get_meta_config",
    "get_smf_config",
    "get_source_config",
    "load_smf_config",
    "reset_smf_config_cache",
]
