"""Common types and the client interface of git hosting providers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

PIPELINES_AS_CODE_WEBHOOK_INSECURE_SSL_ENV_VAR = "PAC_WEBHOOK_INSECURE_SSL"

_INSECURE_SSL_VALUES = frozenset({"1", "true", "True"})


def is_insecure_ssl() -> bool:
    """Tell whether webhooks should be set up with SSL verification disabled."""
    return os.environ.get(PIPELINES_AS_CODE_WEBHOOK_INSECURE_SSL_ENV_VAR, "") in _INSECURE_SSL_VALUES


@dataclass
class RepositoryFile:
    full_path: str
    content: bytes = b""


@dataclass
class MergeRequestData:
    """What a configuration merge request should contain."""

    commit_message: str = ""
    signed_off: bool = False
    branch_name: str = ""
    base_branch_name: str = ""
    title: str = ""
    text: str = ""
    author_name: str = ""
    author_email: str = ""
    files: list[RepositoryFile] = field(default_factory=list)


@dataclass(frozen=True)
class MergeRequest:
    id: int
    created_at: datetime | None
    web_url: str
    title: str


class GitProviderClient(Protocol):
    """Operations the build service needs from a git hosting provider."""

    def ensure_pac_merge_request(self, repo_url: str, data: MergeRequestData) -> str:
        """Create or update the configuration proposal; return its URL, or "" if not needed."""
        ...

    def undo_pac_merge_request(self, repo_url: str, data: MergeRequestData) -> str:
        """Create the configuration removal request; return its URL, or "" if not needed."""
        ...

    def find_unmerged_pac_merge_request(self, repo_url: str, data: MergeRequestData) -> MergeRequest | None:
        """Return the open configuration proposal, if any."""
        ...

    def setup_pac_webhook(self, repo_url: str, webhook_url: str, webhook_secret: str) -> None:
        """Create or update the webhook in the repository."""
        ...

    def delete_pac_webhook(self, repo_url: str, webhook_url: str) -> None:
        """Delete the webhook from the repository."""
        ...

    def get_default_branch(self, repo_url: str) -> str:
        """Return the name of the default branch."""
        ...

    def delete_branch(self, repo_url: str, branch_name: str) -> bool:
        """Delete a branch; return False if it did not exist."""
        ...

    def get_branch_sha(self, repo_url: str, branch_name: str) -> str:
        """Return the SHA of the top commit of the branch."""
        ...

    def is_file_exist(self, repo_url: str, branch_name: str, file_path: str) -> bool:
        """Tell whether the file exists in the branch."""
        ...

    def is_repository_public(self, repo_url: str) -> bool:
        """Tell whether the repository can be read without authentication."""
        ...

    def get_browse_repository_at_sha_link(self, repo_url: str, sha: str) -> str:
        """Return the web URL of the repository at the given SHA."""
        ...

    def get_configured_git_app_name(self) -> tuple[str, str]:
        """Return the configured application name and id."""
        ...