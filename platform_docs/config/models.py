"""Typed dataclasses describing platform_docs site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class GitIdentity:
    """Author identity used when committing generated files."""

    user_name: str | None = None
    user_email: str | None = None


@dc.dataclass(slots=True)
class ReferencesConfig:
    """Where the API reference document comes from and where it is written."""

    remote_url: str | None = None
    ref_path: Path = Path("src/directory/apiReferences/amplify-js.json")
    clean_path: Path = Path("src/directory/apiReferences/cleanReferences.json")
    base_branch: str = "main"
    branch_prefix: str = "update-ref-"
    remote: str = "origin"
    repo: str | None = None
    categories: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class SiteConfig:
    """Top-level configuration for route generation and reference updates."""

    pages_dir: Path = Path("src/pages")
    route_manifest: Path = Path("public/routes.json")
    strict_platforms: bool = False
    references: ReferencesConfig = dc.field(default_factory=ReferencesConfig)
    git: GitIdentity = dc.field(default_factory=GitIdentity)


__all__ = [
    "GitIdentity",
    "ReferencesConfig",
    "SiteConfig",
    "SiteConfigError",
]
