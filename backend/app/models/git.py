"""Source references describing where a workflow was retrieved from."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_SSH_HOST_RE = re.compile(r"^([^/:]+):(?!\d+/)")


class GitType(str, enum.Enum):
    """Hosting systems with known URL conventions."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"
    GENERIC = "generic"


_HOSTS = {
    "github.com": GitType.GITHUB,
    "gitlab.com": GitType.GITLAB,
    "bitbucket.org": GitType.BITBUCKET,
}


def strip_scheme(url: str) -> str:
    """Return the URL without its ``scheme://`` prefix."""

    return _SCHEME_RE.sub("", url, count=1)


def normalize_repo_url(url: str) -> str:
    """Normalise HTTPS and SSH clone URLs to ``host/owner/repo[.git]``."""

    normalized = strip_scheme(url.strip())
    if normalized.startswith("git@"):
        normalized = normalized[len("git@"):]
    normalized = _SSH_HOST_RE.sub(r"\1/", normalized, count=1)
    return normalized.rstrip("/")


@dataclass(frozen=True)
class GitDetails:
    """Repository, branch and path of a workflow file.

    ``packed_id`` selects one workflow out of a packed CWL document.
    """

    repo_url: str
    branch: str
    path: str
    packed_id: str | None = None

    @property
    def normalized_repo_url(self) -> str:
        return normalize_repo_url(self.repo_url)

    @property
    def git_type(self) -> GitType:
        host = self.normalized_repo_url.split("/", 1)[0].lower()
        return _HOSTS.get(host, GitType.GENERIC)

    @property
    def supports_raw_url(self) -> bool:
        return self.git_type is not GitType.GENERIC

    def _hosted_repo(self) -> str:
        repo = self.normalized_repo_url
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        return repo

    @property
    def has_repository_path(self) -> bool:
        """Whether the URL names an ``owner/repo`` below its host."""

        _, _, repository = self._hosted_repo().partition("/")
        owner, _, name = repository.partition("/")
        return bool(owner and name)

    def canonical_url(self, commit_id: str) -> str:
        """Return the hosting page of the workflow file at ``commit_id``."""

        packed = f"#{self.packed_id}" if self.packed_id else ""
        git_type = self.git_type
        if git_type in (GitType.GITHUB, GitType.GITLAB):
            return f"https://{self._hosted_repo()}/blob/{commit_id}/{self.path}{packed}"
        if git_type is GitType.BITBUCKET:
            return f"https://{self._hosted_repo()}/src/{commit_id}/{self.path}{packed}"
        return self.repo_url

    def internal_url(self, commit_id: str) -> str:
        """Return the viewer URL of the workflow at ``commit_id``."""

        packed = f"%23{self.packed_id}" if self.packed_id else ""
        path_part = "" if self.path == "/" else f"/{self.path}"
        if self.git_type in (GitType.GITHUB, GitType.GITLAB):
            return f"/workflows/{self._hosted_repo()}/blob/{commit_id}{path_part}{packed}"
        return f"/workflows/{self.normalized_repo_url}/{commit_id}{path_part}{packed}"

    def raw_url(self, commit_id: str) -> str:
        """Return the URL serving the unrendered workflow file."""

        git_type = self.git_type
        if git_type is GitType.GITHUB:
            owner_repo = self._hosted_repo().partition("/")[2]
            return f"https://raw.githubusercontent.com/{owner_repo}/{commit_id}/{self.path}"
        if git_type in (GitType.GITLAB, GitType.BITBUCKET):
            return f"https://{self._hosted_repo()}/raw/{commit_id}/{self.path}"
        return self.repo_url

    def to_dict(self) -> dict[str, Any]:
        return {
            "repo_url": self.repo_url,
            "branch": self.branch,
            "path": self.path,
            "packed_id": self.packed_id,
            "type": self.git_type.value,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "GitDetails":
        return cls(
            repo_url=payload["repo_url"],
            branch=payload["branch"],
            path=payload["path"],
            packed_id=payload.get("packed_id") or None,
        )
