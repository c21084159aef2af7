"""Refresh the API reference files and propose them as a pull request.

This module powers the ``docs update-references`` command that the
``update-references`` repository-dispatch workflow runs. A single call to
:func:`update_references`:

* downloads the remote reference export named in ``site.yaml``;
* creates an ``update-ref-<unix seconds>`` branch;
* writes the raw export and its cleaned form, then stages both files;
* commits with the configured bot identity, pushes the branch, and opens a
  pull request against the base branch through the GitHub API.

Nothing is committed when the download matches what is already checked in.

Example
-------
.. code-block:: python

    from pathlib import Path
    from platform_docs.config import load_site_config
    from platform_docs.update import update_references

    config = load_site_config(Path("config/site.yaml"))
    result = update_references(config=config, repo_root=Path.cwd())
    print(result.pull_request_url)
"""

from __future__ import annotations

import dataclasses as dc
import os
import subprocess
import time
import typing as typ
from pathlib import Path

from github3 import GitHub
from github3 import exceptions as gh_exc

from ._constants import (
    PULL_REQUEST_BODY,
    PULL_REQUEST_TITLE_TEMPLATE,
    REFERENCE_COMMIT_MESSAGE,
)
from .config import SiteConfigError
from .references import (
    ReferenceFetcher,
    clean_references,
    load_reference_document,
    write_clean_references,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import GitIdentity, SiteConfig


class GitCommandError(RuntimeError):
    """Raised when a git invocation fails."""


class PullRequestError(RuntimeError):
    """Raised when the pull request cannot be opened."""


@dc.dataclass(slots=True)
class UpdateResult:
    """Outcome of a reference update run."""

    branch: str
    ref_path: Path
    clean_path: Path
    changed: bool = False
    pushed: bool = False
    pull_request_url: str | None = None


def run_git(args: list[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
    """Invoke git in ``cwd`` and raise :class:`GitCommandError` on failure."""
    try:
        return subprocess.run(  # noqa: S603
            ["git", *args],  # noqa: S607
            cwd=cwd,
            check=True,
            text=True,
            capture_output=True,
        )
    except FileNotFoundError as exc:
        msg = "git is required to update references"
        raise GitCommandError(msg) from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or exc.stdout or "").strip()
        msg = f"git {' '.join(args)} failed with exit code {exc.returncode}: {detail}"
        raise GitCommandError(msg) from exc


def has_staged_changes(*, cwd: Path) -> bool:
    """Return whether the index differs from ``HEAD``."""
    try:
        run_git(["diff", "--cached", "--quiet"], cwd=cwd)
    except GitCommandError as exc:
        cause = exc.__cause__
        if isinstance(cause, subprocess.CalledProcessError) and cause.returncode == 1:
            return True
        raise
    return False


class GitHubPullRequestClient:
    """Open pull requests through github3.py."""

    def __init__(self, *, token: str | None = None, github: GitHub | None = None) -> None:
        self._github = github or GitHub(token=token)

    def open(self, repo: str, *, title: str, base: str, head: str, body: str) -> str:
        """Open a pull request on ``owner/name`` and return its URL."""
        owner, _, name = repo.partition("/")
        try:
            repository = self._github.repository(owner, name)
        except gh_exc.GitHubException as exc:
            msg = f"Unable to load repository '{repo}': {exc}"
            raise PullRequestError(msg) from exc
        if repository is None:
            msg = f"Repository '{repo}' not found."
            raise PullRequestError(msg)

        try:
            pull = repository.create_pull(title=title, base=base, head=head, body=body)
        except gh_exc.GitHubException as exc:
            msg = f"Unable to open pull request for '{head}' on '{repo}': {exc}"
            raise PullRequestError(msg) from exc
        if pull is None:
            msg = f"GitHub did not create a pull request for '{head}' on '{repo}'."
            raise PullRequestError(msg)
        return str(pull.html_url)


def update_references(
    *,
    config: SiteConfig,
    repo_root: Path,
    fetcher: ReferenceFetcher | None = None,
    pr_client: GitHubPullRequestClient | None = None,
    push: bool = True,
    clock: cabc.Callable[[], float] = time.time,
) -> UpdateResult:
    """Fetch, clean, commit, and propose the API reference files.

    Parameters
    ----------
    config : SiteConfig
        Site configuration; ``config.references`` names the remote URL, the
        output files, the base branch, and the GitHub repository.
    repo_root : Path
        Git working tree the files are written into.
    fetcher : ReferenceFetcher, optional
        Downloader to use; a retrying fetcher is created when omitted.
    pr_client : GitHubPullRequestClient, optional
        Pull request client; one authenticated from ``GITHUB_TOKEN`` or
        ``GH_TOKEN`` is created when omitted.
    push : bool, optional
        When ``False`` the run stops after the local commit.
    clock : Callable[[], float], optional
        Source of the unix timestamp used in the branch name.

    Returns
    -------
    UpdateResult
        Branch name, written paths, and whether a commit, push, and pull
        request happened.

    Raises
    ------
    SiteConfigError
        If ``remote_url`` is unset, or ``repo`` is unset when pushing.
    ReferenceFetchError
        If the download fails or is not JSON.
    GitCommandError
        If any git step fails.
    PullRequestError
        If GitHub rejects the pull request.
    """
    refs = config.references
    if not refs.remote_url:
        msg = "references.remote_url must be set to update references."
        raise SiteConfigError(msg)
    if push and not refs.repo:
        msg = "references.repo must be set to open a pull request."
        raise SiteConfigError(msg)

    text = (fetcher or ReferenceFetcher()).fetch(refs.remote_url)
    document = load_reference_document(text)

    branch = f"{refs.branch_prefix}{int(clock())}"
    run_git(["checkout", "-b", branch], cwd=repo_root)

    ref_path = repo_root / refs.ref_path
    ref_path.parent.mkdir(parents=True, exist_ok=True)
    ref_path.write_text(text, encoding="utf-8")
    clean_path = write_clean_references(
        clean_references(document, refs.categories), repo_root / refs.clean_path
    )
    run_git(["add", str(refs.ref_path), str(refs.clean_path)], cwd=repo_root)

    result = UpdateResult(branch=branch, ref_path=ref_path, clean_path=clean_path)
    if not has_staged_changes(cwd=repo_root):
        return result

    run_git(
        [*_identity_args(config.git), "commit", "-m", REFERENCE_COMMIT_MESSAGE],
        cwd=repo_root,
    )
    result.changed = True
    if not push:
        return result

    run_git(["push", "-u", refs.remote, branch], cwd=repo_root)
    result.pushed = True

    client = pr_client or GitHubPullRequestClient(
        token=os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
    )
    result.pull_request_url = client.open(
        typ.cast("str", refs.repo),
        title=PULL_REQUEST_TITLE_TEMPLATE.format(branch=branch, base=refs.base_branch),
        base=refs.base_branch,
        head=branch,
        body=PULL_REQUEST_BODY,
    )
    return result


def _identity_args(identity: GitIdentity) -> list[str]:
    args: list[str] = []
    if identity.user_name:
        args += ["-c", f"user.name={identity.user_name}"]
    if identity.user_email:
        args += ["-c", f"user.email={identity.user_email}"]
    return args


__all__ = [
    "GitCommandError",
    "GitHubPullRequestClient",
    "PullRequestError",
    "UpdateResult",
    "has_staged_changes",
    "run_git",
    "update_references",
]
