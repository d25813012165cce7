import pytest

from scmkit.gitlab import GitlabClient

BASE_URL = "https://gitlab.cee.foo.com"
REVISION = "{{revision}}"
EXPECTED_ENDING = f"-/tree/{REVISION}"


@pytest.fixture
def client():
    return GitlabClient(access_token="", base_url=BASE_URL)


@pytest.mark.parametrize(
    ("repo_url", "expected"),
    [
        (f"{BASE_URL}/group/repo", f"{BASE_URL}/group/repo/{EXPECTED_ENDING}"),
        (
            f"{BASE_URL}/group/subgroup/repo",
            f"{BASE_URL}/group/subgroup/repo/{EXPECTED_ENDING}",
        ),
        (
            f"{BASE_URL}/group/subgroup/repo.git",
            f"{BASE_URL}/group/subgroup/repo/{EXPECTED_ENDING}",
        ),
    ],
    ids=["basic repository", "repository in a subgroup", "repository ending with .git"],
)
def test_get_browse_repository_at_sha_link(client, repo_url, expected):
    assert client.get_browse_repository_at_sha_link(repo_url, REVISION) == expected


def test_browse_link_with_concrete_sha(client):
    link = client.get_browse_repository_at_sha_link(f"{BASE_URL}/group/repo", "abc123")
    assert link == f"{BASE_URL}/group/repo/-/tree/abc123"


def test_browse_link_only_strips_trailing_git_suffix(client):
    link = client.get_browse_repository_at_sha_link(f"{BASE_URL}/group/repo.gitx", "abc")
    assert link == f"{BASE_URL}/group/repo.gitx/-/tree/abc"


def test_client_keeps_base_url(client):
    assert client.base_url == BASE_URL


def test_get_configured_git_app_name_is_unsupported(client):
    with pytest.raises(RuntimeError, match="GitLab does not support applications"):
        client.get_configured_git_app_name()