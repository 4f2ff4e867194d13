"""npm registry metadata client."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import requests
from jsonschema import Draft202012Validator

from .config import DEFAULT_FETCH_TIMEOUT, DEFAULT_REGISTRY_URL
from .models import RegistryMetadata

USER_AGENT = "npm-age-gate (+https://registry.npmjs.org)"

METADATA_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["dist-tags", "versions", "time"],
    "properties": {
        "dist-tags": {
            "type": "object",
            "required": ["latest"],
            "properties": {"latest": {"type": "string", "minLength": 1}},
        },
        "versions": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {"time": {"type": "string"}},
            },
        },
        "time": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
    },
}

_VALIDATOR = Draft202012Validator(METADATA_SCHEMA)


class RegistryError(RuntimeError):
    """Base error for failures while reading package metadata."""


class FetchError(RegistryError):
    """Raised when the registry cannot be reached or answers with an error status."""


class ParseError(RegistryError):
    """Raised when the registry response is not valid package metadata."""


def package_url(base_url: str, package_name: str) -> str:
    """Return the metadata URL for a package; scoped names keep their ``@``."""
    return f"{base_url.rstrip('/')}/{quote(package_name, safe='@')}"


def parse_metadata(package_name: str, payload: Any) -> RegistryMetadata:
    """Shape-check a decoded registry document and build the snapshot."""
    errors = sorted(_VALIDATOR.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if errors:
        first = errors[0]
        pointer = "/".join(str(p) for p in first.path)
        raise ParseError(
            f"Unexpected metadata for {package_name} at {pointer or '<root>'}: {first.message}"
        )
    return RegistryMetadata.from_payload(package_name, payload)


class RegistryClient:
    """Fetch per-package metadata from an npm-compatible registry.

    Every call is a fresh round trip: no caching and no retries.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_metadata(self, package_name: str) -> RegistryMetadata:
        url = package_url(self.base_url, package_name)
        try:
            response = self._session.get(
                url,
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch metadata for {package_name}: {exc}") from exc

        if response.status_code != 200:
            raise FetchError(
                f"Unexpected status code {response.status_code} fetching {package_name}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(f"Invalid JSON in metadata for {package_name}: {exc}") from exc

        return parse_metadata(package_name, payload)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> RegistryClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
