"""Resolve static paths and props for platform-specific documentation pages.

Pages that live under the ``[platform]`` route segment are pre-rendered once
per platform they declare. This module turns a page's platform list into the
route-enumeration contract the static site generator expects and, for each
resolved route, projects the active platform back into the page props.

Both operations are pure: they perform no I/O, hold no state, and return the
same result for the same input, so pages may be resolved in any order or in
parallel.

Examples
--------
>>> from platform_docs.meta import PageMeta
>>> from platform_docs.paths import get_static_paths, resolve_props
>>> meta = PageMeta(title="Auth", platforms=("javascript", "swift"))
>>> get_static_paths(meta).to_dict()
{'paths': [{'params': {'platform': 'javascript'}}, {'params': {'platform': 'swift'}}], 'fallback': False}
>>> resolve_props({"platform": "swift"}, meta).platform
'swift'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from ._constants import PLATFORM_PARAM
from .meta import PageMeta


@dc.dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A single pre-render target expressed as route parameters."""

    platform: str

    @property
    def params(self) -> dict[str, str]:
        """Return the dynamic segment mapping for this route."""
        return {PLATFORM_PARAM: self.platform}

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {"params": self.params}


@dc.dataclass(frozen=True, slots=True)
class StaticPaths:
    """Route enumeration handed to the site generator for one page.

    Attributes
    ----------
    paths : tuple[RouteDescriptor, ...]
        One descriptor per declared platform.
    fallback : bool
        Whether routes outside ``paths`` are generated on demand. The full set
        is always enumerated, so this is ``False``.
    """

    paths: tuple[RouteDescriptor, ...]
    fallback: bool = False

    def to_dict(self) -> dict[str, typ.Any]:
        return {
            "paths": [descriptor.to_dict() for descriptor in self.paths],
            "fallback": self.fallback,
        }


@dc.dataclass(frozen=True, slots=True)
class StaticProps:
    """Props passed to a page rendered for one platform."""

    platform: str
    meta: typ.Any

    def to_dict(self) -> dict[str, typ.Any]:
        meta = self.meta.to_dict() if isinstance(self.meta, PageMeta) else self.meta
        return {"props": {"platform": self.platform, "meta": meta}}


def enumerate_paths(platforms: cabc.Iterable[str]) -> list[RouteDescriptor]:
    """Return one route descriptor per distinct platform, in first-seen order.

    An empty ``platforms`` sequence yields an empty list; the page is then
    unreachable through the dynamic segment but this is not an error.
    """
    return [RouteDescriptor(platform) for platform in dict.fromkeys(platforms)]


def get_static_paths(source: PageMeta | cabc.Iterable[str]) -> StaticPaths:
    """Build the static paths contract for a page or a raw platform list."""
    platforms = source.platforms if isinstance(source, PageMeta) else source
    return StaticPaths(paths=tuple(enumerate_paths(platforms)), fallback=False)


def resolve_props(params: cabc.Mapping[str, str], meta: typ.Any) -> StaticProps:
    """Project the resolved route's platform and the page metadata into props.

    The platform is copied verbatim and not checked against the page's
    declared platforms; :func:`get_static_paths` only ever enumerates declared
    ones. ``meta`` is passed through as the same object.
    """
    return StaticProps(platform=params[PLATFORM_PARAM], meta=meta)


__all__ = [
    "RouteDescriptor",
    "StaticPaths",
    "StaticProps",
    "enumerate_paths",
    "get_static_paths",
    "resolve_props",
]
