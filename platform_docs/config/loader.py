"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from .helpers import (
    _as_bool,
    _as_mapping,
    _as_path,
    _normalize_categories,
    _optional_str,
    _validate_repo,
)
from .models import GitIdentity, ReferencesConfig, SiteConfig

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the pages tree and reference job.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``).

    Returns
    -------
    SiteConfig
        Parsed site configuration with defaults applied for every omitted
        field.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If a section has the wrong shape or a value is invalid (for example,
        a repository slug that is not ``owner/name``).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from platform_docs.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.references.base_branch  # doctest: +SKIP
    'main'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    defaults = SiteConfig()
    return SiteConfig(
        pages_dir=_as_path(raw.get("pages_dir"), defaults.pages_dir),
        route_manifest=_as_path(raw.get("route_manifest"), defaults.route_manifest),
        strict_platforms=_as_bool(
            raw.get("strict_platforms"),
            key="strict_platforms",
            default=defaults.strict_platforms,
        ),
        references=_build_references_config(
            _as_mapping(raw.get("references"), key="references")
        ),
        git=_build_git_identity(_as_mapping(raw.get("git"), key="git")),
    )


def _build_references_config(payload: typ.Mapping[str, typ.Any]) -> ReferencesConfig:
    """Build a ReferencesConfig from the ``references`` mapping."""
    base = ReferencesConfig()
    return ReferencesConfig(
        remote_url=_optional_str(payload.get("remote_url")),
        ref_path=_as_path(payload.get("ref_path"), base.ref_path),
        clean_path=_as_path(payload.get("clean_path"), base.clean_path),
        base_branch=_optional_str(payload.get("base_branch")) or base.base_branch,
        branch_prefix=_optional_str(payload.get("branch_prefix")) or base.branch_prefix,
        remote=_optional_str(payload.get("remote")) or base.remote,
        repo=_validate_repo(payload.get("repo")),
        categories=_normalize_categories(payload.get("categories")),
    )


def _build_git_identity(payload: typ.Mapping[str, typ.Any]) -> GitIdentity:
    """Build the commit author identity from the ``git`` mapping."""
    return GitIdentity(
        user_name=_optional_str(payload.get("user_name")),
        user_email=_optional_str(payload.get("user_email")),
    )


__all__ = ["load_site_config"]
