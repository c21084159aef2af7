"""Build the route manifest for platform-specific documentation pages.

This module walks the configured pages tree, finds every ``index.mdx`` that
sits below the ``[platform]`` dynamic segment, reads its ``meta`` export, and
records the static paths the site generator must pre-render. The manifest is
written as JSON (``public/routes.json`` by default) so the build, link
checkers, and sitemap tooling read the same route list.

Typical usage pairs the loader with a site config:

>>> from pathlib import Path
>>> from platform_docs.config import load_site_config
>>> from platform_docs.routes import RouteManifestBuilder
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> RouteManifestBuilder(site).run()  # doctest: +SKIP
PosixPath('public/routes.json')

:func:`check_pages` reuses the same discovery to report authoring mistakes
such as unknown platform identifiers or pages that declare no platforms.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import json
import typing as typ
from pathlib import Path, PurePosixPath

from ._constants import PAGE_FILENAME, PLATFORM_PARAM, PLATFORM_SEGMENT
from .meta import PageMetaError, load_page_meta
from .paths import get_static_paths
from .platforms import platform_title

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .meta import PageMeta


@dc.dataclass(slots=True)
class PageRoutes:
    """Resolved static routes for one platform-variant page."""

    source: str
    route: str
    meta: PageMeta

    @property
    def routes(self) -> list[str]:
        """Return the concrete URL of every pre-rendered platform variant."""
        return [
            self.route.replace(PLATFORM_SEGMENT, descriptor.platform, 1)
            for descriptor in get_static_paths(self.meta).paths
        ]

    def to_dict(self) -> dict[str, typ.Any]:
        static_paths = get_static_paths(self.meta).to_dict()
        return {
            "source": self.source,
            "route": self.route,
            "meta": self.meta.to_dict(),
            "paths": static_paths["paths"],
            "fallback": static_paths["fallback"],
            "routes": self.routes,
            "titles": {
                platform: platform_title(platform) for platform in self.meta.platforms
            },
        }


@dc.dataclass(slots=True)
class PageIssue:
    """An authoring problem found while checking a page."""

    source: str
    message: str
    severity: typ.Literal["error", "warning"] = "error"


def discover_pages(pages_dir: Path) -> list[Path]:
    """Return the ``index.mdx`` files below a ``[platform]`` segment, sorted."""
    if not pages_dir.is_dir():
        msg = f"Pages directory '{pages_dir}' not found."
        raise FileNotFoundError(msg)
    return sorted(
        path
        for path in pages_dir.rglob(PAGE_FILENAME)
        if PLATFORM_SEGMENT in path.relative_to(pages_dir).parts
    )


def route_template(relative_path: Path | str) -> str:
    """Return the URL template for a page file relative to the pages root.

    >>> route_template("[platform]/build-a-backend/auth/index.mdx")
    '/[platform]/build-a-backend/auth'
    """
    parts = PurePosixPath(relative_path).parts
    if parts and parts[-1] == PAGE_FILENAME:
        parts = parts[:-1]
    return "/" + "/".join(parts)


class RouteManifestBuilder:
    """Collect static routes for every platform page and write the manifest."""

    def __init__(self, site_config: SiteConfig, *, output: Path | None = None) -> None:
        """Initialize the builder.

        Parameters
        ----------
        site_config : SiteConfig
            Parsed configuration providing ``pages_dir`` and the default
            ``route_manifest`` output path.
        output : Path, optional
            Override for the manifest path.
        """
        self.site_config = site_config
        self.output = output or site_config.route_manifest

    def build(self) -> list[PageRoutes]:
        """Return resolved routes for each page that exports ``meta``.

        Raises
        ------
        PageMetaError
            If any page declares an unknown platform or lacks a title.
        """
        pages_dir = self.site_config.pages_dir
        entries: list[PageRoutes] = []
        for path in discover_pages(pages_dir):
            meta = load_page_meta(path)
            if meta is None:
                continue
            relative = path.relative_to(pages_dir).as_posix()
            entries.append(
                PageRoutes(source=relative, route=route_template(relative), meta=meta)
            )
        return entries

    def run(self, entries: list[PageRoutes] | None = None) -> Path:
        """Write the route manifest JSON and return its path.

        Parameters
        ----------
        entries : list[PageRoutes], optional
            Routes already resolved by :meth:`build`; the pages tree is
            scanned when omitted.
        """
        if entries is None:
            entries = self.build()
        payload = {
            "generated_at": dt.datetime.now(dt.UTC).isoformat(),
            "param": PLATFORM_PARAM,
            "pages": [entry.to_dict() for entry in entries],
        }
        self.output.parent.mkdir(parents=True, exist_ok=True)
        self.output.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        return self.output


def check_pages(site_config: SiteConfig, *, strict: bool | None = None) -> list[PageIssue]:
    """Report authoring problems across the platform pages tree.

    Unknown platforms and missing titles are errors. A page that declares no
    platforms has no reachable route; it is reported as a warning, or as an
    error when ``strict`` (defaulting to ``site_config.strict_platforms``) is
    enabled.
    """
    strict_mode = site_config.strict_platforms if strict is None else strict
    pages_dir = site_config.pages_dir
    issues: list[PageIssue] = []
    for path in discover_pages(pages_dir):
        relative = path.relative_to(pages_dir).as_posix()
        try:
            meta = load_page_meta(path)
        except PageMetaError as exc:
            issues.append(PageIssue(source=relative, message=str(exc)))
            continue
        if meta is None:
            issues.append(
                PageIssue(
                    source=relative,
                    message="Page has no meta export.",
                    severity="warning",
                )
            )
            continue
        if not meta.platforms:
            issues.append(
                PageIssue(
                    source=relative,
                    message="Page declares no platforms; no routes will be generated.",
                    severity="error" if strict_mode else "warning",
                )
            )
    return issues


__all__ = [
    "PageIssue",
    "PageRoutes",
    "RouteManifestBuilder",
    "check_pages",
    "discover_pages",
    "route_template",
]
