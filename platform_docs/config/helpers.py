"""Utility helpers shared by the platform_docs configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import SiteConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_path(value: object | None, default: Path) -> Path:
    """Return ``value`` as a Path, falling back to ``default`` when unset."""
    text = _optional_str(value)
    return Path(text) if text else default


def _as_bool(value: object | None, *, key: str, default: bool) -> bool:
    """Return ``value`` as a bool, rejecting non-boolean YAML scalars."""
    match value:
        case None:
            return default
        case bool():
            return value
        case _:
            msg = f"'{key}' must be true or false, got {value!r}."
            raise SiteConfigError(msg)


def _as_mapping(value: object | None, *, key: str) -> typ.Mapping[str, typ.Any]:
    """Return ``value`` as a mapping, treating ``None`` as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _normalize_categories(value: str | list[object] | None) -> list[str]:
    """Normalize category definitions into a list of non-empty strings."""
    if isinstance(value, str):
        return [segment.strip() for segment in value.split(",") if segment.strip()]
    if isinstance(value, list):
        normalized: list[str] = []
        for segment in value:
            text = str(segment).strip()
            if text:
                normalized.append(text)
        return normalized
    return []


def _validate_repo(value: object | None) -> str | None:
    """Return an ``owner/name`` repository slug or raise when malformed."""
    repo = _optional_str(value)
    if repo is None:
        return None
    owner, _, name = repo.partition("/")
    if not owner or not name or "/" in name:
        msg = f"Repository '{repo}' must be in 'owner/name' form."
        raise SiteConfigError(msg)
    return repo


__all__ = [
    "_as_bool",
    "_as_mapping",
    "_as_path",
    "_normalize_categories",
    "_optional_str",
    "_validate_repo",
]
