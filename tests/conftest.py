"""Shared fixtures for platform_docs tests."""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest

WritePage = typ.Callable[..., Path]


def render_page(title: str, platforms: typ.Sequence[str] | None) -> str:
    """Return MDX source exporting ``meta`` with the given fields."""
    lines = ["export const meta = {", f"  title: '{title}',"]
    lines.append(f"  description: 'About {title.lower()}.',")
    if platforms is not None:
        quoted = ", ".join(f"'{platform}'" for platform in platforms)
        lines.append(f"  platforms: [{quoted}]")
    lines.append("};")
    return "\n".join(lines) + f"\n\n# {title}\n"


@pytest.fixture
def pages_dir(tmp_path: Path) -> Path:
    """Return an empty pages tree rooted in the test's temporary directory."""
    path = tmp_path / "src" / "pages"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def write_page(pages_dir: Path) -> WritePage:
    """Return a helper that writes ``index.mdx`` pages below ``pages_dir``."""

    def _write(
        route: str,
        *,
        title: str = "Page",
        platforms: typ.Sequence[str] | None = ("javascript",),
        source: str | None = None,
    ) -> Path:
        page = pages_dir / route / "index.mdx"
        page.parent.mkdir(parents=True, exist_ok=True)
        text = source if source is not None else render_page(title, platforms)
        page.write_text(dedent(text), encoding="utf-8")
        return page

    return _write


@pytest.fixture
def site_config_path(tmp_path: Path, pages_dir: Path) -> Path:
    """Write a site.yaml pointing at ``pages_dir`` and return its path."""
    config_path = tmp_path / "site.yaml"
    config_path.write_text(
        dedent(
            f"""
            pages_dir: {pages_dir}
            route_manifest: {tmp_path / "public" / "routes.json"}
            references:
              remote_url: https://references.example.invalid/amplify-js.json
              ref_path: src/directory/apiReferences/amplify-js.json
              clean_path: src/directory/apiReferences/cleanReferences.json
              repo: example/docs
              categories:
                - aws-amplify/auth
            git:
              user_name: docs-bot
              user_email: docs-bot@example.invalid
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    return config_path
