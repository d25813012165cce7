"""Client for GitHub hosted repositories."""

from __future__ import annotations

import posixpath
from datetime import datetime
from typing import Any

import requests

from .github_api import GithubApi, get_owner_and_repo_from_url
from .gitprovider import MergeRequest, MergeRequestData, RepositoryFile, is_insecure_ssl

WEBHOOK_CONTENT_TYPE = "json"
PAC_WEBHOOK_EVENTS = ("pull_request", "push", "issue_comment", "commit_comment")
PAC_CONFIG_DIRECTORY = ".tekton"


def default_webhook_config(webhook_url: str, webhook_secret: str) -> dict[str, Any]:
    """Return the webhook definition used for Pipelines as Code."""
    return {
        "events": list(PAC_WEBHOOK_EVENTS),
        "config": {
            "url": webhook_url,
            "content_type": WEBHOOK_CONTENT_TYPE,
            "secret": webhook_secret,
            "insecure_ssl": "1" if is_insecure_ssl() else "0",
        },
        "active": True,
    }


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GithubClient:
    """Performs the build service's operations on GitHub repositories."""

    def __init__(self, api: GithubApi | None = None) -> None:
        self.api = api or GithubApi()

    def _base_branch(self, owner: str, repository: str, data: MergeRequestData) -> str:
        if not data.base_branch_name:
            data.base_branch_name = self.api.get_default_branch(owner, repository)
        return data.base_branch_name

    def ensure_pac_merge_request(self, repo_url: str, data: MergeRequestData) -> str:
        """Create or update the configuration proposal; return its URL, or "" if not needed."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        base = self._base_branch(owner, repository, data)
        api = self.api

        if api.files_up_to_date(owner, repository, base, data.files):
            return ""

        if not api.branch_exists(owner, repository, data.branch_name):
            ref = api.create_branch(owner, repository, data.branch_name, base)
            api.add_commit_to_branch(
                owner, repository, data.author_name, data.author_email,
                data.commit_message, data.signed_off, data.files, ref,
            )
            return api.create_pull_request(
                owner, repository, data.branch_name, base, data.title, data.text
            )

        if not api.files_up_to_date(owner, repository, data.branch_name, data.files):
            ref = api.get_branch(owner, repository, data.branch_name)
            api.add_commit_to_branch(
                owner, repository, data.author_name, data.author_email,
                data.commit_message, data.signed_off, data.files, ref,
            )

        pr = api.find_pull_request(owner, repository, data.branch_name, base)
        if pr is not None:
            return pr.get("html_url", "")

        try:
            return api.create_pull_request(
                owner, repository, data.branch_name, base, data.title, data.text
            )
        except Exception as error:
            if "No commits between" in str(error):
                # The branch was merged earlier but not deleted; start over from a fresh branch.
                api.delete_branch(owner, repository, data.branch_name)
                return self.ensure_pac_merge_request(repo_url, data)
            return ""

    def undo_pac_merge_request(self, repo_url: str, data: MergeRequestData) -> str:
        """Create the configuration removal request; return its URL, or "" if not needed."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        base = self._base_branch(owner, repository, data)
        api = self.api

        existing = api.files_exist_in_directory(
            owner, repository, base, PAC_CONFIG_DIRECTORY, data.files
        )
        if not existing:
            return ""

        api.delete_branch(owner, repository, data.branch_name)
        ref = api.create_branch(owner, repository, data.branch_name, base)
        api.add_commit_to_branch(
            owner, repository, data.author_name, data.author_email,
            data.commit_message, data.signed_off, data.files, ref, delete=True,
        )
        return api.create_pull_request(
            owner, repository, data.branch_name, base, data.title, data.text
        )

    def find_unmerged_pac_merge_request(
        self, repo_url: str, data: MergeRequestData
    ) -> MergeRequest | None:
        """Return the open onboarding pull request from the branch into the base, if any."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        prs = self.api.list_pull_requests(
            owner, repository, f"{owner}:{data.branch_name}", data.base_branch_name
        )
        if not prs:
            return None
        pr = prs[0]
        return MergeRequest(
            id=pr["id"],
            created_at=_parse_time(pr.get("created_at")),
            web_url=pr["url"],
            title=pr["title"],
        )

    def setup_pac_webhook(self, repo_url: str, webhook_url: str, webhook_secret: str) -> None:
        """Create the webhook, or bring an existing one up to date."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        existing = self.api.get_webhook_by_target_url(owner, repository, webhook_url)
        default = default_webhook_config(webhook_url, webhook_secret)

        if existing is None:
            self.api.create_webhook(owner, repository, default)
            return

        # The secret cannot be read back, so it is always rewritten.
        config = existing.setdefault("config", {})
        config["secret"] = webhook_secret
        config["content_type"] = WEBHOOK_CONTENT_TYPE
        config["insecure_ssl"] = "1"

        events = existing.setdefault("events", [])
        events.extend(event for event in PAC_WEBHOOK_EVENTS if event not in events)

        if existing.get("active") != default["active"]:
            existing["active"] = default["active"]

        self.api.update_webhook(owner, repository, existing)

    def delete_pac_webhook(self, repo_url: str, webhook_url: str) -> None:
        """Delete the webhook delivering to ``webhook_url``, if it exists."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        existing = self.api.get_webhook_by_target_url(owner, repository, webhook_url)
        if existing is None:
            return
        self.api.delete_webhook(owner, repository, existing["id"])

    def get_default_branch(self, repo_url: str) -> str:
        """Return the name of the default branch."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        return self.api.get_default_branch(owner, repository)

    def delete_branch(self, repo_url: str, branch_name: str) -> bool:
        """Delete the branch; return False if it did not exist."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        return self.api.delete_branch(owner, repository, branch_name)

    def get_branch_sha(self, repo_url: str, branch_name: str) -> str:
        """Return the top commit SHA of the branch, or of the default branch if none is given."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        if not branch_name:
            branch_name = self.api.get_default_branch(owner, repository)
        ref = self.api.get_branch(owner, repository, branch_name)
        target = ref.get("object")
        if not target:
            raise RuntimeError("unexpected response while getting branch top commit SHA")
        return target.get("sha", "")

    def is_file_exist(self, repo_url: str, branch_name: str, file_path: str) -> bool:
        """Tell whether the file exists in the branch, or the default branch if none is given."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        if not branch_name:
            branch_name = self.api.get_default_branch(owner, repository)
        directory = posixpath.dirname(file_path) or "."
        found = self.api.files_exist_in_directory(
            owner, repository, branch_name, directory, [RepositoryFile(full_path=file_path)]
        )
        return bool(found)

    def is_repository_public(self, repo_url: str) -> bool:
        """Tell whether the repository can be read without authentication."""
        owner, repository = get_owner_and_repo_from_url(repo_url)
        info = self.api.get_repository_info(owner, repository)
        if info is None:
            # GitHub does not tell private from missing unless the user owns it.
            return False
        return not info.get("private", False)

    def get_browse_repository_at_sha_link(self, repo_url: str, sha: str) -> str:
        """Return the web URL of the repository at ``sha``."""
        parts = repo_url.removesuffix(".git").split("/")
        if len(parts) < 5:
            raise ValueError(f"cannot find owner and repository in URL {repo_url!r}")
        return f"https://{parts[2]}/{parts[3]}/{parts[4]}?rev={sha}"


def new_github_client(access_token: str) -> GithubClient:
    """Return a client authenticated with an access token."""
    session = requests.Session()
    session.headers["Authorization"] = f"token {access_token}"
    return GithubClient(GithubApi(session))


def new_github_client_with_basic_auth(username: str, password: str) -> GithubClient:
    """Return a client authenticated with a user name and password."""
    session = requests.Session()
    session.auth = (username.strip(), password.strip())
    return GithubClient(GithubApi(session))