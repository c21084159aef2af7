"""Cyclopts CLI entrypoint for platform page routes and reference updates.

The ``docs`` console script defined here resolves the static paths and props
of platform-specific MDX pages, writes the route manifest for the whole pages
tree, checks pages for authoring mistakes, and runs the reference update job
that the ``update-references`` workflow triggers.

Examples
--------
Write the route manifest for the default configuration:

>>> from platform_docs.cli import main
>>> main()  # doctest: +SKIP

Print the static paths of a single page:

>>> from platform_docs.cli import app
>>> app(["paths", "src/pages/[platform]/start/index.mdx"])  # doctest: +SKIP
"""

from __future__ import annotations

import json
import os
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .config.helpers import _validate_repo
from .meta import PageMetaError, load_page_meta
from .paths import get_static_paths, resolve_props
from .references import ReferenceFetcher
from .routes import RouteManifestBuilder, check_pages
from .update import GitHubPullRequestClient, update_references

if typ.TYPE_CHECKING:
    from .meta import PageMeta

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="docs", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _require_meta(page: Path) -> PageMeta:
    meta = load_page_meta(page)
    if meta is None:
        msg = f"Page '{page}' has no meta export."
        raise PageMetaError(msg)
    return meta


@app.command(help="Print the static paths a platform page is pre-rendered for.")
def paths(page: Path) -> None:
    """Print ``{"paths": [...], "fallback": false}`` for ``page`` as JSON."""
    print(json.dumps(get_static_paths(_require_meta(page)).to_dict(), indent=2))


@app.command(help="Print the static props of a platform page for one platform.")
def props(
    page: Path,
    *,
    platform: typ.Annotated[str, Parameter(help="Platform identifier")],
) -> None:
    """Print ``{"props": {"platform": ..., "meta": ...}}`` for ``page`` as JSON."""
    meta = _require_meta(page)
    print(json.dumps(resolve_props({"platform": platform}, meta).to_dict(), indent=2))


@app.command(help="Write the route manifest for every platform page.")
def routes(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Override the manifest path", env_var="INPUT_OUTPUT"),
    ] = None,
) -> None:
    """Resolve static routes for the pages tree and write the manifest.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    output : Path or None, optional
        Manifest path; defaults to ``route_manifest`` from the config.
    """
    site_config = load_site_config(config)
    builder = RouteManifestBuilder(site_config, output=output)
    entries = builder.build()
    for entry in entries:
        print(f"{entry.route}: {len(entry.routes)} routes")
    manifest_path = builder.run(entries)
    print(f"wrote {_format_path(manifest_path)}")


@app.command(help="Report platform pages with invalid or empty metadata.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    strict: typ.Annotated[
        bool | None,
        Parameter(help="Treat pages without platforms as errors"),
    ] = None,
) -> None:
    """Print each page issue and exit non-zero when any error is found."""
    site_config = load_site_config(config)
    issues = check_pages(site_config, strict=strict)
    for issue in issues:
        print(f"{issue.severity}: {issue.source}: {issue.message}")
    if any(issue.severity == "error" for issue in issues):
        sys.exit(1)
    print("ok" if not issues else f"{len(issues)} warnings")


@app.command(
    name="update-references",
    help="Fetch and clean the API reference, then open a pull request.",
)
def update_references_command(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    remote_url: typ.Annotated[
        str | None, Parameter(help="Remote reference URL", env_var="REMOTE_REF")
    ] = None,
    ref_path: typ.Annotated[
        Path | None, Parameter(help="Raw reference output", env_var="REF_LOC")
    ] = None,
    clean_path: typ.Annotated[
        Path | None, Parameter(help="Cleaned reference output", env_var="CLEAN_LOC")
    ] = None,
    repo: typ.Annotated[
        str | None,
        Parameter(help="GitHub repository (owner/name)", env_var="GITHUB_REPOSITORY"),
    ] = None,
    git_user: typ.Annotated[
        str | None, Parameter(help="Commit author name", env_var="GH_USER")
    ] = None,
    git_email: typ.Annotated[
        str | None, Parameter(help="Commit author email", env_var="GH_EMAIL")
    ] = None,
    github_token: typ.Annotated[
        str | None,
        Parameter(
            help="Optional GitHub token (falls back to GITHUB_TOKEN)",
            env_var="INPUT_GITHUB_TOKEN",
        ),
    ] = None,
    push: typ.Annotated[
        bool, Parameter(help="Push the branch and open a pull request")
    ] = True,
    repo_root: typ.Annotated[
        Path, Parameter(help="Git working tree to update")
    ] = Path(),
) -> None:
    """Run the reference update job with CLI and environment overrides.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file.
    remote_url, ref_path, clean_path : optional
        Override ``references.remote_url``, ``ref_path`` and ``clean_path``;
        the workflow provides them as ``REMOTE_REF``, ``REF_LOC`` and
        ``CLEAN_LOC``.
    repo : str or None, optional
        Override ``references.repo``; GitHub Actions sets
        ``GITHUB_REPOSITORY``.
    git_user, git_email : str or None, optional
        Commit identity overrides (``GH_USER`` / ``GH_EMAIL``).
    github_token : str or None, optional
        Token used to open the pull request. Falls back to ``GITHUB_TOKEN``
        or ``GH_TOKEN``.
    push : bool, optional
        ``--no-push`` stops after the local commit.
    repo_root : Path, optional
        Working tree to write into; defaults to the current directory.
    """
    site_config = load_site_config(config)
    refs = site_config.references
    refs.remote_url = remote_url or refs.remote_url
    refs.ref_path = ref_path or refs.ref_path
    refs.clean_path = clean_path or refs.clean_path
    refs.repo = _validate_repo(repo) or refs.repo
    site_config.git.user_name = git_user or site_config.git.user_name
    site_config.git.user_email = git_email or site_config.git.user_email

    token = github_token or os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
    result = update_references(
        config=site_config,
        repo_root=repo_root,
        fetcher=ReferenceFetcher(),
        pr_client=GitHubPullRequestClient(token=token) if push else None,
        push=push,
    )
    print(f"wrote {_format_path(result.ref_path)}")
    print(f"wrote {_format_path(result.clean_path)}")
    if not result.changed:
        print(f"{result.branch}: references unchanged, nothing committed")
    elif result.pull_request_url:
        print(f"opened {result.pull_request_url}")
    else:
        print(f"{result.branch}: committed locally")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docs`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
