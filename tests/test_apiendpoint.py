import pytest

from scmkit.apiendpoint import (
    GithubAPIEndpoint,
    GitlabAPIEndpoint,
    UnknownAPIEndpoint,
    build_api_endpoint,
)


@pytest.mark.parametrize(
    ("endpoint_type", "host", "expected"),
    [
        ("github", "github.com", "https://api.github.com/"),
        ("github", "github.umbrella.com", "https://api.github.umbrella.com/"),
        ("gitlab", "gitlab.com", "https://gitlab.com/api/v4/"),
        ("gitlab", "gitlab.umbrella.com", "https://gitlab.umbrella.com/api/v4/"),
        ("bibi", "bibi.umbrella.com", ""),
    ],
    ids=["github-saas", "github-on-prem", "gitlab-saas", "gitlab-on-prem", "unknown"],
)
def test_build_api_endpoint(endpoint_type, host, expected):
    assert build_api_endpoint(endpoint_type).api_endpoint(host) == expected


@pytest.mark.parametrize(
    ("endpoint_type", "cls"),
    [
        ("github", GithubAPIEndpoint),
        ("gitlab", GitlabAPIEndpoint),
        ("bitbucket", UnknownAPIEndpoint),
        ("", UnknownAPIEndpoint),
    ],
)
def test_build_api_endpoint_picks_class(endpoint_type, cls):
    endpoint = build_api_endpoint(endpoint_type)
    assert type(endpoint) is cls