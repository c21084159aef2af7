"""Unit tests for reading ``export const meta`` blocks out of MDX pages."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from platform_docs.meta import PageMeta, PageMetaError, load_page_meta, parse_meta

if typ.TYPE_CHECKING:
    from pathlib import Path


PAGE_SOURCE = dedent(
    """
    import { getCustomStaticPath } from '@/utils/getCustomStaticPath';

    export const meta = {
      title: 'Set up Amplify Auth',
      description: "Learn how to set up and connect your backend's auth resources.",
      platforms: [
        'android',
        'javascript',
        "react-native",
      ]
    };

    export const getStaticPaths = async () => {
      return getCustomStaticPath(meta.platforms);
    };

    # Set up Amplify Auth
    """
)


def test_parse_meta_extracts_fields() -> None:
    """Title, description, and platforms should be read from the meta export."""
    meta = parse_meta(PAGE_SOURCE)

    assert meta == PageMeta(
        title="Set up Amplify Auth",
        description="Learn how to set up and connect your backend's auth resources.",
        platforms=("android", "javascript", "react-native"),
    ), f"unexpected meta {meta!r}"


def test_parse_meta_returns_none_without_export() -> None:
    """Pages without a meta export are not platform pages."""
    assert parse_meta("# Just prose\n") is None


def test_parse_meta_defaults_missing_platforms_to_empty() -> None:
    """A meta export without platforms yields an empty platform tuple."""
    meta = parse_meta("export const meta = { title: 'Overview' };")

    assert meta is not None
    assert meta.platforms == (), f"expected no platforms, got {meta.platforms!r}"


def test_parse_meta_rejects_unknown_platforms() -> None:
    """Unknown identifiers are reported with their source."""
    text = "export const meta = { title: 'X', platforms: ['vue', 'cobol'] };"

    with pytest.raises(PageMetaError, match="cobol") as excinfo:
        parse_meta(text, source="pages/[platform]/x/index.mdx")

    assert "pages/[platform]/x/index.mdx" in str(excinfo.value)


def test_parse_meta_requires_title() -> None:
    """A missing title is an authoring error."""
    with pytest.raises(PageMetaError, match="missing a title"):
        parse_meta("export const meta = { platforms: ['vue'] };")


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "X", "platforms": "vue"},
        {"title": "X", "platforms": ["vue", 3]},
    ],
)
def test_from_mapping_rejects_malformed_platforms(payload: dict[str, typ.Any]) -> None:
    """Platforms must be a list of strings."""
    with pytest.raises(PageMetaError):
        PageMeta.from_mapping(payload)


def test_page_meta_is_immutable() -> None:
    """Metadata records cannot be mutated after creation."""
    meta = PageMeta(title="X", platforms=("vue",))

    with pytest.raises(AttributeError):
        meta.title = "Y"  # type: ignore[misc]


def test_load_page_meta_reads_file(tmp_path: Path) -> None:
    """Metadata should be read from an MDX file on disk."""
    page = tmp_path / "index.mdx"
    page.write_text(PAGE_SOURCE, encoding="utf-8")

    meta = load_page_meta(page)

    assert meta is not None
    assert meta.title == "Set up Amplify Auth"


def test_load_page_meta_missing_file(tmp_path: Path) -> None:
    """A missing page raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_page_meta(tmp_path / "missing.mdx")


def test_parse_meta_ignores_keys_inside_string_values() -> None:
    """Key-like text inside another field's value is not a field."""
    text = dedent(
        """
        export const meta = {
          title: 'X',
          description: 'Works on all platforms: [see list]',
          platforms: ['vue']
        };
        """
    )

    meta = parse_meta(text)

    assert meta is not None
    assert meta.platforms == ("vue",), f"unexpected platforms {meta.platforms!r}"
    assert meta.description == "Works on all platforms: [see list]"


def test_parse_meta_skips_title_text_in_description() -> None:
    """A description mentioning ``title:`` does not shadow the real title."""
    text = "export const meta = { description: 'Set title: here', title: 'Real' };"

    meta = parse_meta(text)

    assert meta is not None
    assert meta.title == "Real"


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        (r"'Don\'t panic'", "Don't panic"),
        (r'"Say \"hi\""', 'Say "hi"'),
        (r"'back\\slash'", "back\\slash"),
    ],
)
def test_parse_meta_resolves_escaped_quotes(literal: str, expected: str) -> None:
    """Escaped quotes stay part of the string value."""
    text = f"export const meta = {{ title: {literal}, platforms: ['vue'] }};"

    meta = parse_meta(text)

    assert meta is not None
    assert meta.title == expected
    assert meta.platforms == ("vue",)


def test_parse_meta_accepts_quoted_keys() -> None:
    """Keys written as string literals are read like bare keys."""
    text = "export const meta = { 'title': 'Quoted', \"platforms\": ['react'] };"

    meta = parse_meta(text)

    assert meta == PageMeta(title="Quoted", platforms=("react",))


def test_parse_meta_rejects_string_platforms() -> None:
    """A single string is not a platform list."""
    with pytest.raises(PageMetaError, match="as a list"):
        parse_meta("export const meta = { title: 'X', platforms: 'vue' };")
