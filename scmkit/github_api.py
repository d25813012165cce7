"""Low-level calls to the GitHub REST API used by the GitHub client."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from urllib.parse import quote

import requests

from .gitprovider import RepositoryFile

DEFAULT_API_URL = "https://api.github.com/"

_FILE_MODE = "100644"
_NO_SCOPES_INFO = "No scope is found from response header. Check it from GitHub settings."


class ErrorKind(str, Enum):
    """Permanent failures recognised in GitHub responses."""

    GITHUB_REACH_RATE_LIMIT = "GitHubReachRateLimit"
    GITHUB_TOKEN_UNAUTHORIZED = "GitHubTokenUnauthorized"
    GITHUB_NO_RESOURCE_TO_OPERATE_ON = "GitHubNoResourceToOperateOn"


class GitHostingError(Exception):
    """A recognised, permanent error reported by the git hosting service."""

    def __init__(self, kind: ErrorKind, cause: BaseException, extra_info: str = "") -> None:
        self.kind = kind
        self.cause = cause
        self.extra_info = extra_info
        super().__init__(kind, cause, extra_info)

    def __str__(self) -> str:
        text = f"{self.kind.value}: {self.cause}"
        if self.extra_info:
            text = f"{text} ({self.extra_info})"
        return text


def get_owner_and_repo_from_url(repo_url: str) -> tuple[str, str]:
    """Split ``https://host/owner/repository[.git]`` into owner and repository.

    Raises ValueError if the URL has too few parts.
    """
    parts = repo_url.removesuffix(".git").split("/")
    if len(parts) < 5:
        raise ValueError(f"cannot find owner and repository in URL {repo_url!r}")
    return parts[3], parts[4]


def _is_rate_limited(response: requests.Response) -> bool:
    return (
        response.status_code in (403, 429)
        and response.headers.get("X-RateLimit-Remaining") == "0"
    )


def refine_hosting_error(
    response: requests.Response | None, error: BaseException
) -> BaseException:
    """Turn a failed response into a GitHostingError where one applies.

    Returns ``error`` itself when nothing is recognised.
    """
    if response is None:
        return error
    if _is_rate_limited(response):
        return GitHostingError(ErrorKind.GITHUB_REACH_RATE_LIMIT, error)
    if response.status_code == 401:
        return GitHostingError(ErrorKind.GITHUB_TOKEN_UNAUTHORIZED, error)
    if response.status_code == 404:
        scopes = response.headers.get("X-OAuth-Scopes", "")
        if scopes:
            info = f"Scopes set to access token: {scopes}"
        else:
            info = _NO_SCOPES_INFO
        return GitHostingError(ErrorKind.GITHUB_NO_RESOURCE_TO_OPERATE_ON, error, info)
    return error


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("message"):
        message = str(body["message"])
        errors = body.get("errors")
        if isinstance(errors, list):
            details = [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors]
            message = "; ".join([message, *details])
        return message
    return response.text


def _branch_ref(branch: str) -> str:
    return "heads/" + quote(branch, safe="/")


class GithubApi:
    """Thin wrapper over the GitHub REST endpoints the build service needs."""

    def __init__(self, session: requests.Session | None = None, base_url: str = DEFAULT_API_URL) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.session.headers.setdefault("Accept", "application/vnd.github+json")

    # -- transport -----------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        return self.session.request(method, self.base_url + path, **kwargs)

    @staticmethod
    def _http_error(response: requests.Response) -> requests.HTTPError:
        request = response.request
        where = f"{request.method} {request.url}" if request is not None else "request"
        return requests.HTTPError(
            f"{where}: {response.status_code} {_error_message(response)}",
            response=response,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        response = self._send(method, path, **kwargs)
        if not response.ok:
            raise refine_hosting_error(response, self._http_error(response))
        return response

    @staticmethod
    def _repo(owner: str, repository: str) -> str:
        return f"repos/{quote(owner)}/{quote(repository)}"

    # -- branches ------------------------------------------------------------

    def branch_exists(self, owner: str, repository: str, branch: str) -> bool:
        """Tell whether the branch exists."""
        response = self._send("GET", f"{self._repo(owner, repository)}/git/ref/{_branch_ref(branch)}")
        if response.ok:
            return True
        error = self._http_error(response)
        if response.status_code == 401:
            raise GitHostingError(ErrorKind.GITHUB_TOKEN_UNAUTHORIZED, error)
        if response.status_code == 404:
            return False
        raise error

    def get_branch(self, owner: str, repository: str, branch: str) -> dict[str, Any]:
        """Return the git reference of the branch."""
        return self._request("GET", f"{self._repo(owner, repository)}/git/ref/{_branch_ref(branch)}").json()

    def create_branch(self, owner: str, repository: str, branch: str, base_branch: str) -> dict[str, Any]:
        """Create ``branch`` pointing at the top of ``base_branch``; return its reference."""
        base_ref = self.get_branch(owner, repository, base_branch)
        payload = {"ref": "refs/heads/" + branch, "sha": base_ref["object"]["sha"]}
        return self._request("POST", f"{self._repo(owner, repository)}/git/refs", json=payload).json()

    def delete_branch(self, owner: str, repository: str, branch: str) -> bool:
        """Delete the branch; return False if it did not exist."""
        response = self._send("DELETE", f"{self._repo(owner, repository)}/git/refs/{_branch_ref(branch)}")
        if response.ok:
            return True
        if response.status_code == 422:
            return False
        raise refine_hosting_error(response, self._http_error(response))

    def get_default_branch(self, owner: str, repository: str) -> str:
        """Return the name of the repository's default branch."""
        info = self._request("GET", self._repo(owner, repository)).json()
        if not info:
            raise RuntimeError("repository info is empty in GitHub API response")
        return info["default_branch"]

    # -- files ---------------------------------------------------------------

    def files_up_to_date(
        self, owner: str, repository: str, branch: str, files: list[RepositoryFile]
    ) -> bool:
        """Tell whether every file exists in the branch with exactly the given content."""
        for file in files:
            response = self._send(
                "GET",
                f"{self._repo(owner, repository)}/contents/{quote(file.full_path, safe='/')}",
                params={"ref": "refs/heads/" + branch},
                headers={"Accept": "application/vnd.github.raw"},
            )
            if not response.ok:
                error = self._http_error(response)
                if response.status_code == 404 or "no file named" in str(error):
                    return False
                raise refine_hosting_error(response, error)
            if response.content != file.content:
                return False
        return True

    def files_exist_in_directory(
        self,
        owner: str,
        repository: str,
        branch: str,
        directory_path: str,
        files: list[RepositoryFile],
    ) -> list[RepositoryFile]:
        """Return those of ``files`` that exist directly in the directory."""
        response = self._send(
            "GET",
            f"{self._repo(owner, repository)}/contents/{quote(directory_path, safe='/')}",
            params={"ref": "refs/heads/" + branch},
        )
        if not response.ok:
            error = self._http_error(response)
            if response.status_code == 401:
                raise GitHostingError(ErrorKind.GITHUB_TOKEN_UNAUTHORIZED, error)
            if response.status_code == 404:
                return []
            raise error

        entries = response.json()
        if not isinstance(entries, list):
            return []
        wanted = {f.full_path for f in files}
        return [
            RepositoryFile(full_path=entry["path"])
            for entry in entries
            if entry.get("type") == "file" and entry.get("path") in wanted
        ]

    # -- commits -------------------------------------------------------------

    def _post_tree(self, owner: str, repository: str, base_sha: str, entries: list[dict[str, Any]]) -> dict[str, Any]:
        payload = {"base_tree": base_sha, "tree": entries}
        return self._request("POST", f"{self._repo(owner, repository)}/git/trees", json=payload).json()

    def create_tree(
        self, owner: str, repository: str, base_sha: str, files: list[RepositoryFile]
    ) -> dict[str, Any]:
        """Create a tree on top of ``base_sha`` that writes the given files."""
        entries = [
            {
                "path": f.full_path,
                "mode": _FILE_MODE,
                "type": "blob",
                "content": f.content.decode("utf-8"),
            }
            for f in files
        ]
        return self._post_tree(owner, repository, base_sha, entries)

    def delete_from_tree(
        self, owner: str, repository: str, base_sha: str, files: list[RepositoryFile]
    ) -> dict[str, Any]:
        """Create a tree on top of ``base_sha`` that removes the given files."""
        entries = [
            {"path": f.full_path, "mode": _FILE_MODE, "type": "blob", "sha": None}
            for f in files
        ]
        return self._post_tree(owner, repository, base_sha, entries)

    def add_commit_to_branch(
        self,
        owner: str,
        repository: str,
        author_name: str,
        author_email: str,
        commit_message: str,
        signed_off: bool,
        files: list[RepositoryFile],
        branch: dict[str, Any],
        delete: bool = False,
    ) -> str:
        """Commit the files (or their removal) on top of the branch reference.

        ``branch`` is the reference as returned by get_branch or create_branch;
        its object SHA is moved to the new commit, whose SHA is returned.
        """
        repo = self._repo(owner, repository)
        head_sha = branch["object"]["sha"]
        parent = self._request("GET", f"{repo}/commits/{head_sha}").json()

        build_tree = self.delete_from_tree if delete else self.create_tree
        tree = build_tree(owner, repository, head_sha, files)

        if signed_off:
            commit_message = f"{commit_message}\nSigned-off-by: {author_name} <{author_email}>"

        commit = {
            "message": commit_message,
            "tree": tree["sha"],
            "parents": [parent["sha"]],
            "author": {
                "name": author_name,
                "email": author_email,
                "date": datetime.now(timezone.utc).isoformat(),
            },
        }
        new_commit = self._request("POST", f"{repo}/git/commits", json=commit).json()

        branch["object"]["sha"] = new_commit["sha"]
        ref_path = branch["ref"].removeprefix("refs/")
        self._request(
            "PATCH",
            f"{repo}/git/refs/{quote(ref_path, safe='/')}",
            json={"sha": new_commit["sha"], "force": False},
        )
        return new_commit["sha"]

    # -- pull requests -------------------------------------------------------

    def list_pull_requests(self, owner: str, repository: str, head: str, base: str) -> list[dict[str, Any]]:
        """List open pull requests with the given head (``owner:branch``) and base."""
        params = {"head": head, "base": base}
        return self._request("GET", f"{self._repo(owner, repository)}/pulls", params=params).json()

    def find_pull_request(
        self, owner: str, repository: str, branch_name: str, base_branch_name: str
    ) -> dict[str, Any] | None:
        """Return the single open pull request from the branch into the base, if any."""
        head = f"{owner}:{branch_name}"
        params = {"state": "open", "base": base_branch_name, "head": head, "per_page": 100}
        prs = self._request("GET", f"{self._repo(owner, repository)}/pulls", params=params).json()
        if not prs:
            return None
        if len(prs) == 1:
            return prs[0]
        raise RuntimeError(f"failed to find pull request by branch {head}: {len(prs)} matches found")

    def create_pull_request(
        self,
        owner: str,
        repository: str,
        branch_name: str,
        base_branch_name: str,
        title: str,
        text: str,
    ) -> str:
        """Open a pull request within the repository; return its web URL."""
        payload = {
            "title": title,
            "head": f"{owner}:{branch_name}",
            "base": base_branch_name,
            "body": text,
            "maintainer_can_modify": True,
        }
        pr = self._request("POST", f"{self._repo(owner, repository)}/pulls", json=payload).json()
        return pr.get("html_url", "")

    # -- webhooks ------------------------------------------------------------

    def get_webhook_by_target_url(
        self, owner: str, repository: str, webhook_target_url: str
    ) -> dict[str, Any] | None:
        """Return the webhook delivering to the URL, or None."""
        hooks = self._request(
            "GET", f"{self._repo(owner, repository)}/hooks", params={"per_page": 100}
        ).json()
        return next(
            (hook for hook in hooks if (hook.get("config") or {}).get("url") == webhook_target_url),
            None,
        )

    def create_webhook(self, owner: str, repository: str, webhook: dict[str, Any]) -> dict[str, Any]:
        """Create the webhook; return it as stored by GitHub."""
        return self._request("POST", f"{self._repo(owner, repository)}/hooks", json=webhook).json()

    def update_webhook(self, owner: str, repository: str, webhook: dict[str, Any]) -> dict[str, Any]:
        """Update the webhook identified by its ``id``."""
        return self._request(
            "PATCH", f"{self._repo(owner, repository)}/hooks/{webhook['id']}", json=webhook
        ).json()

    def delete_webhook(self, owner: str, repository: str, webhook_id: int) -> None:
        """Delete the webhook; only an unauthorised token is reported as an error."""
        response = self._send("DELETE", f"{self._repo(owner, repository)}/hooks/{webhook_id}")
        if response.status_code == 401:
            raise GitHostingError(ErrorKind.GITHUB_TOKEN_UNAUTHORIZED, self._http_error(response))

    # -- repository ----------------------------------------------------------

    def get_repository_info(self, owner: str, repository: str) -> dict[str, Any] | None:
        """Return repository information, or None if it is not found."""
        response = self._send("GET", self._repo(owner, repository))
        if response.ok:
            return response.json()
        if response.status_code == 404:
            return None
        raise self._http_error(response)