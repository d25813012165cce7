"""A component's source repository and helpers to group components."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar
from urllib.parse import SplitResult, urlsplit

INTERNAL_DEFAULT_BRANCH = "$DEFAULTBRANCH"

_SCHEME_EXTRA_CHARS = set("+-.")

T = TypeVar("T")


def _has_scheme(raw: str) -> bool:
    """Tell whether ``raw`` starts with a valid URL scheme; raise on an empty one."""
    for index, char in enumerate(raw):
        if char.isascii() and char.isalpha():
            continue
        if char.isascii() and (char.isdigit() or char in _SCHEME_EXTRA_CHARS):
            if index == 0:
                return False
            continue
        if char == ":":
            if index == 0:
                raise ValueError(f"missing protocol scheme in URL {raw!r}")
            return True
        return False
    return False


def _parse_url(raw: str) -> SplitResult:
    without_fragment = raw.split("#", 1)[0]
    rest = without_fragment.split("?", 1)[0]
    if not _has_scheme(rest) and rest and not rest.startswith("/"):
        first_segment = rest.split("/", 1)[0]
        if ":" in first_segment:
            raise ValueError(f"first path segment in URL cannot contain colon: {raw!r}")
    return urlsplit(raw)


@dataclass(frozen=True)
class ScmComponent:
    """A component together with the repository and branch it builds from."""

    platform: str
    repository_url: SplitResult
    branch: str
    component_name: str
    namespace_name: str

    @classmethod
    def create(
        cls,
        platform: str,
        repository_url: str,
        revision: str,
        component_name: str,
        namespace_name: str,
    ) -> ScmComponent:
        """Build a component, normalising the URL and defaulting the branch.

        Raises ValueError if the repository URL cannot be parsed.
        """
        trimmed = repository_url.removesuffix(".git").removesuffix("/")
        parsed = _parse_url(trimmed)
        return cls(
            platform=platform,
            repository_url=parsed,
            branch=revision or INTERNAL_DEFAULT_BRANCH,
            component_name=component_name,
            namespace_name=namespace_name,
        )

    @property
    def repository(self) -> str:
        """Repository path without surrounding slashes, e.g. ``org/repo``."""
        return self.repository_url.path.strip("/")

    @property
    def repository_url_string(self) -> str:
        return self.repository_url.geturl()

    @property
    def repository_host(self) -> str:
        """Host, with port if any, of the repository URL."""
        return self.repository_url.netloc.rpartition("@")[2]


def _group(items: Iterable[ScmComponent], key: Callable[[ScmComponent], str],
           value: Callable[[ScmComponent], T]) -> dict[str, list[T]]:
    grouped: defaultdict[str, list[T]] = defaultdict(list)
    for item in items:
        grouped[key(item)].append(value(item))
    return dict(grouped)


def component_url_to_branches_map(components: Iterable[ScmComponent]) -> dict[str, list[str]]:
    """Map each repository URL to the branches of its components."""
    return _group(components, lambda c: c.repository_url_string, lambda c: c.branch)


def component_repo_to_branches_map(components: Iterable[ScmComponent]) -> dict[str, list[str]]:
    """Map each repository path to the branches of its components."""
    return _group(components, lambda c: c.repository, lambda c: c.branch)


def namespace_to_component_map(components: Iterable[ScmComponent]) -> dict[str, list[ScmComponent]]:
    """Group components by namespace."""
    return _group(components, lambda c: c.namespace_name, lambda c: c)


def platform_to_component_map(components: Iterable[ScmComponent]) -> dict[str, list[ScmComponent]]:
    """Group components by platform."""
    return _group(components, lambda c: c.platform, lambda c: c)


def host_to_component_map(components: Iterable[ScmComponent]) -> dict[str, list[ScmComponent]]:
    """Group components by repository host."""
    return _group(components, lambda c: c.repository_host, lambda c: c)