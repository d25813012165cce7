"""Selection of the webhook target URL for a repository."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol

log = logging.getLogger("webhook")

FileReader = Callable[[str], bytes]


class WebhookURLLoader(Protocol):
    def load(self, repository_url: str) -> str:
        """Return the webhook target URL for the repository."""
        ...


class ConfigWebhookURLLoader:
    """Picks a target URL from a prefix-to-target mapping."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = dict(mapping)

    def load(self, repository_url: str) -> str:
        """Return the target of the longest prefix of ``repository_url``.

        The empty-string key, if present, serves as the default.
        """
        longest = 0
        matched = ""
        for prefix, target in self._mapping.items():
            if repository_url.startswith(prefix) and len(prefix) > longest:
                longest = len(prefix)
                matched = target
        if not matched:
            matched = self._mapping.get("", matched)
        return matched


def _read_file(path: str) -> bytes:
    return Path(path).read_bytes()


def load_mapping_from_file(path: str, file_reader: FileReader | None = None) -> dict[str, str]:
    """Load a prefix-to-target mapping from a JSON file.

    An empty path yields an empty mapping. Errors of the reader propagate;
    malformed content raises ValueError.
    """
    if not path:
        log.info("Webhook config was not provided")
        return {}

    content = (file_reader or _read_file)(path)
    mapping = json.loads(content)
    if mapping is None:
        mapping = {}
    if not isinstance(mapping, dict) or not all(
        isinstance(value, str) for value in mapping.values()
    ):
        raise ValueError("webhook config must be a JSON object of strings")

    log.info("Using webhook config %s", mapping)
    return mapping