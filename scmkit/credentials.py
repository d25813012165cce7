"""Credentials for accessing source code repositories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .scmcomponent import ScmComponent

SCM_CREDENTIALS_SECRET_LABEL = "appstudio.redhat.com/credentials"
SCM_SECRET_HOSTNAME_LABEL = "appstudio.redhat.com/scm.host"
SCM_SECRET_REPOSITORY_ANNOTATION = "appstudio.redhat.com/scm.repository"


@dataclass(frozen=True)
class BasicAuthCredentials:
    username: str
    password: str


@dataclass(frozen=True)
class SSHCredentials:
    private_key: bytes


class BasicAuthCredentialsProvider(Protocol):
    """Something that can find basic-auth credentials for a component."""

    def get_basic_auth_credentials(self, component: ScmComponent) -> BasicAuthCredentials:
        """Return the credentials for ``component``."""
        ...


class SSHCredentialsProvider(Protocol):
    """Something that can find SSH credentials for a component."""

    def get_ssh_credentials(self, component: ScmComponent) -> SSHCredentials:
        """Return the SSH credentials for ``component``."""
        ...


class FunctionCredentialsProvider:
    """Adapts a plain function into a basic-auth credentials provider."""

    def __init__(self, func: Callable[[ScmComponent], BasicAuthCredentials]) -> None:
        self._func = func

    def get_basic_auth_credentials(self, component: ScmComponent) -> BasicAuthCredentials:
        return self._func(component)