"""Tests for source reference URL construction."""

from __future__ import annotations

import pytest

from backend.app.models.git import GitDetails, GitType, normalize_repo_url, strip_scheme


def _github(path: str = "workflows/lobSTR/lobSTR-workflow.cwl", packed_id: str | None = None):
    return GitDetails(
        "https://github.com/common-workflow-language/workflows.git", "master", path, packed_id
    )


@pytest.mark.parametrize(
    ("repo_url", "expected"),
    [
        ("https://github.com/owner/repo.git", GitType.GITHUB),
        ("git@github.com:owner/repo.git", GitType.GITHUB),
        ("https://gitlab.com/owner/repo.git", GitType.GITLAB),
        ("https://bitbucket.org/owner/repo.git", GitType.BITBUCKET),
        ("https://git.example.org/owner/repo.git", GitType.GENERIC),
    ],
)
def test_git_type_is_derived_from_host(repo_url, expected):
    details = GitDetails(repo_url, "main", "wf.cwl")

    assert details.git_type is expected
    assert details.supports_raw_url is (expected is not GitType.GENERIC)


def test_normalize_repo_url_handles_ssh_and_ports():
    assert normalize_repo_url("git@github.com:owner/repo.git") == "github.com/owner/repo.git"
    assert normalize_repo_url("ssh://git.example.org:2222/owner/repo") == "git.example.org:2222/owner/repo"
    assert strip_scheme("https://github.com/owner/repo") == "github.com/owner/repo"


def test_github_urls():
    details = _github()

    assert details.canonical_url("abc123") == (
        "https://github.com/common-workflow-language/workflows/blob/abc123/"
        "workflows/lobSTR/lobSTR-workflow.cwl"
    )
    assert details.internal_url("abc123") == (
        "/workflows/github.com/common-workflow-language/workflows/blob/abc123/"
        "workflows/lobSTR/lobSTR-workflow.cwl"
    )
    assert details.raw_url("abc123") == (
        "https://raw.githubusercontent.com/common-workflow-language/workflows/abc123/"
        "workflows/lobSTR/lobSTR-workflow.cwl"
    )


def test_packed_workflow_urls_carry_fragment():
    details = _github(path="packed.cwl", packed_id="main")

    assert details.canonical_url("abc123").endswith("/blob/abc123/packed.cwl#main")
    assert details.internal_url("abc123").endswith("/blob/abc123/packed.cwl%23main")


def test_gitlab_and_bitbucket_urls():
    gitlab = GitDetails("https://gitlab.com/owner/repo.git", "main", "wf.cwl")
    bitbucket = GitDetails("https://bitbucket.org/owner/repo.git", "main", "wf.cwl")

    assert gitlab.raw_url("c1") == "https://gitlab.com/owner/repo/raw/c1/wf.cwl"
    assert bitbucket.raw_url("c1") == "https://bitbucket.org/owner/repo/raw/c1/wf.cwl"
    assert bitbucket.canonical_url("c1") == "https://bitbucket.org/owner/repo/src/c1/wf.cwl"
    assert bitbucket.internal_url("c1") == "/workflows/bitbucket.org/owner/repo.git/c1/wf.cwl"


def test_generic_urls_fall_back_to_repository():
    details = GitDetails("https://git.example.org/owner/repo.git", "main", "/")

    assert details.canonical_url("c1") == "https://git.example.org/owner/repo.git"
    assert details.raw_url("c1") == "https://git.example.org/owner/repo.git"
    assert details.internal_url("c1") == "/workflows/git.example.org/owner/repo.git/c1"


def test_dict_roundtrip_drops_empty_packed_id():
    details = GitDetails.from_dict(
        {"repo_url": "https://github.com/o/r.git", "branch": "main", "path": "wf.cwl", "packed_id": ""}
    )

    assert details.packed_id is None
    assert details.to_dict()["type"] == "github"


@pytest.mark.parametrize(
    ("repo_url", "expected"),
    [
        ("https://github.com/common-workflow-language/workflows.git", True),
        ("git@gitlab.com:group/project.git", True),
        ("https://github.com", False),
        ("https://github.com/", False),
        ("https://bitbucket.org/owner", False),
    ],
)
def test_has_repository_path(repo_url, expected):
    assert GitDetails(repo_url, "main", "wf.cwl").has_repository_path is expected
