# scmkit

`scmkit` keeps a Pipelines as Code configuration in step with repositories
hosted on GitHub. It proposes the configuration as a pull request, proposes
its removal, finds an onboarding pull request that is still open, manages the
webhook that delivers repository events, and answers small questions about
branches, files and visibility. Alongside it come helpers for grouping
components by repository, choosing a webhook target URL and building API and
browse links.

Components, merge request data and files are dataclasses, and failures are
raised as exceptions.

## API endpoints

```python
from scmkit.apiendpoint import build_api_endpoint

build_api_endpoint("github").api_endpoint("github.com")
# 'https://api.github.com/'
build_api_endpoint("gitlab").api_endpoint("gitlab.com")
# 'https://gitlab.com/api/v4/'
build_api_endpoint("bitbucket").api_endpoint("bitbucket.org")
# ''
```

## Components

An `ScmComponent` ties a repository URL and a branch to a platform and a
namespace. `ScmComponent.create` drops a trailing `.git` and then a trailing
slash from the URL, and an empty revision becomes the placeholder branch
`$DEFAULTBRANCH` (`scmkit.scmcomponent.INTERNAL_DEFAULT_BRANCH`). A URL that
cannot be parsed raises `ValueError`.

```python
from scmkit.scmcomponent import (
    ScmComponent,
    component_repo_to_branches_map,
    host_to_component_map,
)

components = [
    ScmComponent.create("github", "https://github.com/org/app.git", "", "app", "team-a"),
    ScmComponent.create("github", "https://github.com/org/app", "release", "app-rel", "team-a"),
]

components[0].repository             # 'org/app'
components[0].repository_host        # 'github.com'
components[0].repository_url_string  # 'https://github.com/org/app'
component_repo_to_branches_map(components)
# {'org/app': ['$DEFAULTBRANCH', 'release']}
host_to_component_map(components)["github.com"]  # both components
```

`component_url_to_branches_map`, `namespace_to_component_map` and
`platform_to_component_map` group components the same way by URL,
namespace and platform, keeping the order in which they were given.

## Webhook targets

`ConfigWebhookURLLoader` chooses the webhook target for a repository URL by
the longest matching prefix; an empty-string key is the fallback, and with no
match at all the result is `""`.

```python
from scmkit.webhook import ConfigWebhookURLLoader, load_mapping_from_file

mapping = load_mapping_from_file("webhooks.json")
loader = ConfigWebhookURLLoader(mapping)
loader.load("https://github.com/org/app")
```

`load_mapping_from_file(path, file_reader=None)` reads the file with
`file_reader` when one is given, otherwise straight from disk. An empty path
yields an empty mapping, as does a file holding JSON `null`. Errors of the
reader propagate, and content that is not a JSON object of strings raises
`ValueError`.

## Working with GitHub

```python
from scmkit.github import new_github_client
from scmkit.gitprovider import MergeRequestData, RepositoryFile

client = new_github_client("token")

data = MergeRequestData(
    commit_message="Add Pipelines as Code configuration",
    signed_off=True,
    branch_name="appstudio-app",
    title="Add build pipeline",
    text="Pipelines as Code configuration proposal",
    author_name="builder",
    author_email="builder@example.com",
    files=[RepositoryFile(full_path=".tekton/app-push.yaml", content=b"kind: PipelineRun\n")],
)

url = client.ensure_pac_merge_request("https://github.com/org/app", data)
# '' when the base branch already holds exactly these files
```

When `base_branch_name` is empty, the repository's default branch is looked
up and stored in `data`. `ensure_pac_merge_request` creates the branch and a
commit when the branch is missing, adds a commit when the branch content is
out of date, and returns the URL of an existing open pull request or of a new
one. With `signed_off`, a `Signed-off-by:` line is appended to the commit
message. If GitHub refuses a new pull request with "No commits between", the
stale branch is deleted and the whole procedure starts again; any other
refusal to open the pull request yields `""`.

`undo_pac_merge_request` looks for the files in `.tekton` on the base branch,
and if any are there, recreates the branch with a commit deleting them and
opens a pull request. `find_unmerged_pac_merge_request` returns a
`MergeRequest` for the first open pull request from `owner:branch_name` into
`base_branch_name`, or `None`.

Webhooks:

```python
client.setup_pac_webhook("https://github.com/org/app", "https://hooks.example.com/", "secret")
client.delete_pac_webhook("https://github.com/org/app", "https://hooks.example.com/")
```

A webhook is identified by its target URL. A new one is created from
`scmkit.github.default_webhook_config`: the `pull_request`, `push`,
`issue_comment` and `commit_comment` events, JSON content, active, and SSL
verification on unless the environment variable `PAC_WEBHOOK_INSECURE_SSL`
is `1`, `true` or `True` (see `scmkit.gitprovider.is_insecure_ssl`). An
existing webhook always gets the new secret, JSON content, `insecure_ssl`
set to `"1"`, any missing events added, and is made active.

Other questions the client answers: `get_default_branch`, `delete_branch`
(`False` if the branch did not exist), `get_branch_sha` and `is_file_exist`
(both fall back to the default branch when given an empty branch name),
`is_repository_public` (`False` when GitHub reports the repository as not
found) and `get_browse_repository_at_sha_link`.

To authenticate with a user name and password instead of a token:

```python
from scmkit.github import new_github_client_with_basic_auth

password = "password"
client = new_github_client_with_basic_auth("builder", password)
```

Both constructors wrap a `scmkit.github_api.GithubApi`, the thin layer over
the REST endpoints; `GithubClient(GithubApi(session, base_url))` points a
client at another API URL or a prepared `requests.Session`.

## GitLab

`scmkit.gitlab.GitlabClient` builds browse links:

```python
from scmkit.gitlab import GitlabClient

GitlabClient().get_browse_repository_at_sha_link("https://gitlab.com/group/repo.git", "abc123")
# 'https://gitlab.com/group/repo/-/tree/abc123'
```

`get_configured_git_app_name` always raises `GitlabAppsUnsupportedError`,
since GitLab has no applications.

## Errors

Failures that call for action by the user are raised as
`scmkit.github_api.GitHostingError`, whose `kind` is an `ErrorKind`:

- `GITHUB_REACH_RATE_LIMIT` — a 403 or 429 response with no requests remaining;
- `GITHUB_TOKEN_UNAUTHORIZED` — a 401 response;
- `GITHUB_NO_RESOURCE_TO_OPERATE_ON` — a 404 response; `extra_info` lists the
  token's scopes when GitHub reports them.

Other failed responses raise `requests.HTTPError`; a malformed repository URL
raises `ValueError`, and an unexpected response (several matching pull
requests, a branch without a commit) raises `RuntimeError`. Deleting a
webhook reports only an unauthorised token.

## Credentials and logging

`scmkit.credentials` holds `BasicAuthCredentials` and `SSHCredentials`, the
`BasicAuthCredentialsProvider` and `SSHCredentialsProvider` protocols, and
`FunctionCredentialsProvider`, which turns a plain function of a component
into a basic-auth provider. `scmkit.logs.ActionLogValue` holds the values of
the `action` log field.

## Utilities

`scmkit.sequences.filter_items` keeps the items a predicate accepts, and
`common_prefix_length` counts how many leading items two sequences share:

```python
from scmkit.sequences import common_prefix_length

common_prefix_length(["a", "b", "c"], ["a", "b", "d"])  # 2
common_prefix_length(["a", "b", "c"], ["b", "a", "c"])  # 0
```

## What the package does not do

- The GitLab client only builds browse links; it does not create merge
  requests, manage webhooks or branches, or read files. Only the GitHub
  client implements the full `scmkit.gitprovider.GitProviderClient` protocol
  apart from `get_configured_git_app_name`.
- There is no authentication as a GitHub App and no factory that picks a
  client from stored secret data; clients are built from a token or a user
  name and password.
- Credentials are not looked up anywhere; the providers are interfaces to be
  implemented by the caller.
- There is no command-line program and no server.