from __future__ import annotations

import json
import subprocess
import typing as typ
from pathlib import Path
from types import SimpleNamespace

import pytest
from github3 import exceptions as gh_exc

from platform_docs import update
from platform_docs.config import SiteConfigError, load_site_config
from platform_docs.references import ReferenceFetchError

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

REFERENCE = {
    "id": 0,
    "name": "aws-amplify",
    "kind": 1,
    "children": [
        {
            "id": 1,
            "name": "aws-amplify/auth",
            "kind": 2,
            "children": [{"id": 10, "name": "signIn", "kind": 64}],
        }
    ],
}


class StubFetcher:
    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self.text = text if text is not None else json.dumps(REFERENCE)
        self.error = error
        self.urls: list[str] = []

    def fetch(self, url: str) -> str:
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.text


class StubPullRequests:
    def __init__(self) -> None:
        self.calls: list[dict[str, str]] = []

    def open(self, repo: str, *, title: str, base: str, head: str, body: str) -> str:
        self.calls.append(
            {"repo": repo, "title": title, "base": base, "head": head, "body": body}
        )
        return f"https://github.com/{repo}/pull/7"


def _fake_git(calls: list[list[str]], *, staged: bool = True):
    def fake_run(cmd: list[str], cwd: Path, check: bool, text: bool, capture_output: bool):
        calls.append(cmd)
        if cmd[1:] == ["diff", "--cached", "--quiet"] and staged:
            raise subprocess.CalledProcessError(returncode=1, cmd=cmd)
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    return fake_run


def test_update_references_commits_pushes_and_opens_pr(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, site_config_path: Path
) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(update.subprocess, "run", _fake_git(calls))
    config = load_site_config(site_config_path)
    fetcher = StubFetcher()
    pulls = StubPullRequests()

    result = update.update_references(
        config=config,
        repo_root=tmp_path,
        fetcher=fetcher,
        pr_client=pulls,
        clock=lambda: 1700000000.5,
    )

    assert fetcher.urls == ["https://references.example.invalid/amplify-js.json"]
    assert result.branch == "update-ref-1700000000"
    assert result.changed is True
    assert result.pushed is True
    assert result.pull_request_url == "https://github.com/example/docs/pull/7"

    git_args = [call[1:] for call in calls]
    assert git_args[0] == ["checkout", "-b", "update-ref-1700000000"]
    assert git_args[1] == [
        "add",
        "src/directory/apiReferences/amplify-js.json",
        "src/directory/apiReferences/cleanReferences.json",
    ]
    assert git_args[3] == [
        "-c",
        "user.name=docs-bot",
        "-c",
        "user.email=docs-bot@example.invalid",
        "commit",
        "-m",
        "updating references",
    ]
    assert git_args[4] == ["push", "-u", "origin", "update-ref-1700000000"]

    assert pulls.calls == [
        {
            "repo": "example/docs",
            "title": "Merge update-ref-1700000000 into main",
            "base": "main",
            "head": "update-ref-1700000000",
            "body": "Created by Github action",
        }
    ]

    raw = tmp_path / "src/directory/apiReferences/amplify-js.json"
    assert json.loads(raw.read_text(encoding="utf-8")) == REFERENCE
    cleaned = json.loads(result.clean_path.read_text(encoding="utf-8"))
    assert cleaned["categories"] == [1]
    assert cleaned["1"]["children"] == [10]


def test_update_references_skips_commit_when_unchanged(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, site_config_path: Path
) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(update.subprocess, "run", _fake_git(calls, staged=False))
    pulls = StubPullRequests()

    result = update.update_references(
        config=load_site_config(site_config_path),
        repo_root=tmp_path,
        fetcher=StubFetcher(),
        pr_client=pulls,
    )

    assert result.changed is False
    assert result.pull_request_url is None
    assert not any("commit" in call for call in calls)
    assert not any("push" in call for call in calls)
    assert pulls.calls == []


def test_update_references_without_push_stops_after_commit(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, site_config_path: Path
) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(update.subprocess, "run", _fake_git(calls))

    result = update.update_references(
        config=load_site_config(site_config_path),
        repo_root=tmp_path,
        fetcher=StubFetcher(),
        push=False,
    )

    assert result.changed is True
    assert result.pushed is False
    assert any("commit" in call for call in calls)
    assert not any("push" in call for call in calls)


def test_update_references_requires_remote_url(tmp_path: Path, site_config_path: Path) -> None:
    config = load_site_config(site_config_path)
    config.references.remote_url = None

    with pytest.raises(SiteConfigError, match="remote_url"):
        update.update_references(config=config, repo_root=tmp_path, fetcher=StubFetcher())


def test_update_references_fetch_failure_leaves_tree_untouched(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, site_config_path: Path
) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(update.subprocess, "run", _fake_git(calls))
    fetcher = StubFetcher(error=ReferenceFetchError("boom"))

    with pytest.raises(ReferenceFetchError):
        update.update_references(
            config=load_site_config(site_config_path),
            repo_root=tmp_path,
            fetcher=fetcher,
            pr_client=StubPullRequests(),
        )

    assert calls == []
    assert not (tmp_path / "src/directory").exists()


def test_run_git_wraps_failures(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], cwd: Path, check: bool, text: bool, capture_output: bool):
        raise subprocess.CalledProcessError(
            returncode=128, cmd=cmd, stderr="fatal: not a git repository"
        )

    monkeypatch.setattr(update.subprocess, "run", fake_run)

    with pytest.raises(update.GitCommandError, match="not a git repository"):
        update.run_git(["status"], cwd=tmp_path)
    with pytest.raises(update.GitCommandError):
        update.has_staged_changes(cwd=tmp_path)


def test_pull_request_client_opens_pull(mocker: MockerFixture) -> None:
    github = mocker.Mock()
    repository = github.repository.return_value
    repository.create_pull.return_value = SimpleNamespace(
        html_url="https://github.com/example/docs/pull/3"
    )

    client = update.GitHubPullRequestClient(github=github)
    url = client.open(
        "example/docs", title="Merge b into main", base="main", head="b", body="x"
    )

    assert url == "https://github.com/example/docs/pull/3"
    github.repository.assert_called_once_with("example", "docs")
    repository.create_pull.assert_called_once_with(
        title="Merge b into main", base="main", head="b", body="x"
    )


def test_pull_request_client_wraps_github_errors(mocker: MockerFixture) -> None:
    github = mocker.Mock()
    response = mocker.Mock(status_code=422)
    response.json.return_value = {"message": "Validation Failed"}
    github.repository.return_value.create_pull.side_effect = gh_exc.UnprocessableEntity(
        response
    )

    client = update.GitHubPullRequestClient(github=github)
    with pytest.raises(update.PullRequestError, match="Unable to open pull request"):
        client.open("example/docs", title="t", base="main", head="b", body="x")


def test_pull_request_client_missing_repository(mocker: MockerFixture) -> None:
    github = mocker.Mock()
    github.repository.return_value = None

    client = update.GitHubPullRequestClient(github=github)
    with pytest.raises(update.PullRequestError, match="not found"):
        client.open("example/docs", title="t", base="main", head="b", body="x")
