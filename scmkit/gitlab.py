"""Client for GitLab hosted repositories."""

from __future__ import annotations

_PROVIDER_NAME = "GitLab"


class GitlabAppsUnsupportedError(RuntimeError):
    """Raised when an application-based operation is asked of GitLab."""


class GitlabClient:
    """Talks to one GitLab instance on behalf of the build service."""

    def __init__(self, access_token: str = "", base_url: str = "") -> None:
        self.access_token = access_token
        self.base_url = base_url

    def get_browse_repository_at_sha_link(self, repo_url: str, sha: str) -> str:
        """Return the web URL of the repository tree at ``sha``."""
        return f"{repo_url.removesuffix('.git')}/-/tree/{sha}"

    def get_configured_git_app_name(self) -> tuple[str, str]:
        """GitLab has no applications, so this always raises an error."""
        message = f"{_PROVIDER_NAME} does not support applications"
        raise GitlabAppsUnsupportedError(message)