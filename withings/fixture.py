"""Fixture client: serves canned response envelopes (no HTTP, no signing).

Envelopes go through the same interpreter and converters as live responses,
so vendor errors and unknown codes behave exactly as they would live.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from withings.client import BaseClient
from withings.request_builder import ApiRequest
from withings.response import interpret_response


class FixtureClient(BaseClient):
    """Fixture-mode client: answers each (resource, action) with a stored envelope."""

    def __init__(self, responses: Mapping[tuple[str, str], dict[str, Any]]) -> None:
        self._responses = dict(responses)
        self.requests: list[ApiRequest] = []

    @classmethod
    def from_directory(cls, fixture_dir: str | Path) -> "FixtureClient":
        """Load `{resource}_{action}.json` envelopes from a directory."""
        responses: dict[tuple[str, str], dict[str, Any]] = {}
        for path in sorted(Path(fixture_dir).glob("*_*.json")):
            resource, _, action = path.stem.partition("_")
            responses[(resource, action)] = json.loads(path.read_text())
        return cls(responses)

    def execute(
        self, resource: str, action: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        self.requests.append(ApiRequest(resource, action, dict(params or {})))
        envelope = self._responses.get((resource, action))
        if envelope is None:
            raise KeyError(f"No fixture response for {resource}/{action}")
        return interpret_response(200, envelope, json.dumps(envelope))
