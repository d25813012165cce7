"""API endpoint URLs for source code hosting providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class APIEndpoint(ABC):
    """Knows how to build the REST API base URL for a provider host."""

    @abstractmethod
    def api_endpoint(self, host: str) -> str:
        """Return the API base URL for ``host``."""


class GithubAPIEndpoint(APIEndpoint):
    """API endpoint of GitHub and GitHub Enterprise hosts."""

    def api_endpoint(self, host: str) -> str:
        return f"https://api.{host}/"


class GitlabAPIEndpoint(APIEndpoint):
    """API endpoint of GitLab hosts."""

    def api_endpoint(self, host: str) -> str:
        return f"https://{host}/api/v4/"


class UnknownAPIEndpoint(APIEndpoint):
    """Endpoint of an unknown provider; it has no API URL."""

    def api_endpoint(self, host: str) -> str:
        return ""


_ENDPOINTS: dict[str, type[APIEndpoint]] = {
    "github": GithubAPIEndpoint,
    "gitlab": GitlabAPIEndpoint,
}


def build_api_endpoint(endpoint_type: str) -> APIEndpoint:
    """Return the endpoint object for the given provider type."""
    return _ENDPOINTS.get(endpoint_type, UnknownAPIEndpoint)()