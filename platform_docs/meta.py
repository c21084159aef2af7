r"""Read page metadata out of MDX documentation pages.

Every content page exports a ``meta`` object next to its prose::

    export const meta = {
      title: 'Set up authentication',
      description: 'Add sign-in to your app.',
      platforms: ['javascript', 'react', 'swift']
    };

This module extracts the ``title``, ``description``, and ``platforms`` fields
from that export and returns them as an immutable :class:`PageMeta`. Platform
identifiers are validated against :data:`platform_docs.platforms.PLATFORMS`
so that the route enumeration downstream never sees an undeclared value.

Example
-------
>>> from platform_docs.meta import parse_meta
>>> meta = parse_meta("export const meta = {title: 'Auth', platforms: ['vue']};")
>>> meta.platforms
('vue',)
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

from .platforms import unknown_platforms

if typ.TYPE_CHECKING:
    from pathlib import Path

META_PATTERN = re.compile(r"export\s+const\s+meta\s*=\s*({[\s\S]*?});", re.MULTILINE)
# Either a string literal (optionally used as a key) or a bare ``key:``.
TOKEN_PATTERN = re.compile(
    r"(?P<string>(?P<quote>[\"'`])(?:\\.|(?!(?P=quote))[^\\])*(?P=quote))(?P<colon>\s*:)?"
    r"|(?<![\w$])(?P<key>[A-Za-z_$][\w$]*)\s*:",
    re.DOTALL,
)
ARRAY_VALUE_PATTERN = re.compile(
    r"\s*\[(?P<items>(?:[^\]\"'`]|\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'|`(?:\\.|[^`\\])*`)*)\]",
    re.DOTALL,
)
STRING_ITEM_PATTERN = re.compile(
    r"(?P<quote>[\"'`])(?P<value>(?:\\.|(?!(?P=quote))[^\\])*)(?P=quote)", re.DOTALL
)
STRING_VALUE_PATTERN = re.compile(r"\s*" + STRING_ITEM_PATTERN.pattern, re.DOTALL)
ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\n": ""}
META_FIELDS = ("title", "description", "platforms")


class PageMetaError(ValueError):
    """Raised when a page's ``meta`` export is missing fields or invalid."""


@dc.dataclass(frozen=True, slots=True)
class PageMeta:
    """Metadata declared by a documentation page.

    Attributes
    ----------
    title : str
        Page title shown in navigation and the document head.
    description : str
        Short summary used for display; may be empty.
    platforms : tuple[str, ...]
        Platform identifiers the page supports, in authoring order.
    """

    title: str
    description: str = ""
    platforms: tuple[str, ...] = ()

    @classmethod
    def from_mapping(
        cls, data: cabc.Mapping[str, typ.Any], *, source: Path | str | None = None
    ) -> PageMeta:
        """Build a validated :class:`PageMeta` from a plain mapping.

        Raises
        ------
        PageMetaError
            If ``title`` is missing or blank, ``platforms`` is not a list of
            strings, or any platform identifier is unknown.
        """
        location = f" in {source}" if source else ""
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            msg = f"Page meta{location} is missing a title."
            raise PageMetaError(msg)

        raw_platforms = data.get("platforms") or []
        if isinstance(raw_platforms, str) or not isinstance(
            raw_platforms, cabc.Sequence
        ):
            msg = f"Page meta{location} must declare platforms as a list."
            raise PageMetaError(msg)
        if not all(isinstance(item, str) for item in raw_platforms):
            msg = f"Page meta{location} lists non-string platforms."
            raise PageMetaError(msg)

        unknown = unknown_platforms(raw_platforms)
        if unknown:
            msg = f"Unknown platforms{location}: {', '.join(unknown)}"
            raise PageMetaError(msg)

        description = data.get("description") or ""
        return cls(
            title=title.strip(),
            description=str(description),
            platforms=tuple(raw_platforms),
        )

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-ready mapping of the metadata."""
        return {
            "title": self.title,
            "description": self.description,
            "platforms": list(self.platforms),
        }


def _unescape(value: str) -> str:
    return ESCAPE_PATTERN.sub(lambda m: ESCAPES.get(m.group(1), m.group(1)), value)


def _field_positions(body: str) -> dict[str, int]:
    """Map each field name to the offset where its value starts.

    String literals are consumed as whole tokens, so key-like text inside a
    value never counts as a field.
    """
    positions: dict[str, int] = {}
    for token in TOKEN_PATTERN.finditer(body):
        if token.group("key"):
            name = token.group("key")
        elif token.group("colon"):
            name = _unescape(token.group("string")[1:-1])
        else:
            continue
        positions.setdefault(name, token.end())
    return positions


def extract_meta_fields(text: str) -> dict[str, typ.Any] | None:
    """Return the raw ``title``/``description``/``platforms`` fields, if exported.

    Fields absent from the ``meta`` object are omitted from the result. Returns
    ``None`` when the text has no ``export const meta`` block at all. String
    values have their backslash escapes resolved. A ``platforms`` value that is
    a single string is returned as-is so validation can reject it.
    """
    match = META_PATTERN.search(text)
    if not match:
        return None
    body = match.group(1)

    fields: dict[str, typ.Any] = {}
    positions = _field_positions(body)
    for name in META_FIELDS:
        if name not in positions:
            continue
        start = positions[name]
        if name == "platforms" and (
            array := ARRAY_VALUE_PATTERN.match(body, start)
        ):
            fields[name] = [
                _unescape(item.group("value"))
                for item in STRING_ITEM_PATTERN.finditer(array.group("items"))
            ]
        elif value := STRING_VALUE_PATTERN.match(body, start):
            fields[name] = _unescape(value.group("value"))
    return fields


def parse_meta(text: str, *, source: Path | str | None = None) -> PageMeta | None:
    """Parse MDX ``text`` into a :class:`PageMeta`, or ``None`` without meta."""
    fields = extract_meta_fields(text)
    if fields is None:
        return None
    return PageMeta.from_mapping(fields, source=source)


def load_page_meta(path: Path) -> PageMeta | None:
    """Read the MDX page at ``path`` and return its metadata.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    PageMetaError
        If the page exports an invalid ``meta`` object.
    """
    if not path.exists():
        msg = f"Page '{path}' not found."
        raise FileNotFoundError(msg)
    return parse_meta(path.read_text(encoding="utf-8"), source=path)


__all__ = [
    "PageMeta",
    "PageMetaError",
    "extract_meta_fields",
    "load_page_meta",
    "parse_meta",
]
