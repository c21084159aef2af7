"""Supported platform identifiers for platform-specific documentation pages.

Example
-------
>>> from platform_docs.platforms import PLATFORMS, platform_title
>>> "flutter" in PLATFORMS
True
>>> platform_title("nextjs")
'Next.js'
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

PLATFORM_TITLES: dict[str, str] = {
    "android": "Android",
    "angular": "Angular",
    "flutter": "Flutter",
    "javascript": "JavaScript",
    "nextjs": "Next.js",
    "react": "React",
    "react-native": "React Native",
    "swift": "Swift (iOS)",
    "vue": "Vue",
}

PLATFORMS: frozenset[str] = frozenset(PLATFORM_TITLES)


def is_platform(value: object) -> bool:
    """Return ``True`` when ``value`` is a known platform identifier."""
    return isinstance(value, str) and value in PLATFORMS


def unknown_platforms(values: cabc.Iterable[str]) -> list[str]:
    """Return the entries of ``values`` that are not known identifiers, in order."""
    return [value for value in values if not is_platform(value)]


def platform_title(platform: str) -> str:
    """Return the display title for ``platform``, or the identifier itself."""
    return PLATFORM_TITLES.get(platform, platform)


__all__ = [
    "PLATFORMS",
    "PLATFORM_TITLES",
    "is_platform",
    "platform_title",
    "unknown_platforms",
]
