"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings that keep tests away from real infrastructure
    - Settings/logging isolation between tests
    - GraphQL fixtures: remote schema SDL and a recording fetcher
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from typing import Any

import pytest

from remote_gateway.core.settings import clear_all_caches
from remote_gateway.features.graphql.projection import RemoteRequest
from remote_gateway.infra.logging import clear_log_context

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("REMOTE_URL", "http://remote.test/graphql")
os.environ.setdefault("LOG_JSON", "false")


# ============================================================================
# Isolation Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_settings_and_log_context():
    """Reload settings from the environment and start with an empty log context."""
    clear_all_caches()
    clear_log_context()
    yield
    clear_all_caches()
    clear_log_context()


# ============================================================================
# GraphQL Fixtures
# ============================================================================

REMOTE_SDL = """
type User {
  id: ID!
  name: String
}

type Query {
  hello: String
  hello2: String
  greet(word: String!): String
  user(id: ID!): User
}

type Mutation {
  createUser(name: String!): User
  deleteUser(id: ID!): Boolean
}
"""


class RecordingFetcher:
    """Fetcher double that records every request it is called with.

    Args:
        data: Response data, or a callable building it from the request.
        error: Exception raised instead of responding.
        sync: Respond synchronously instead of returning a coroutine.
        gate: Event the async response waits on before completing.
    """

    def __init__(
        self,
        data: dict[str, Any] | Callable[[RemoteRequest], dict[str, Any]] | None = None,
        error: BaseException | None = None,
        sync: bool = False,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.data = data
        self.error = error
        self.sync = sync
        self.gate = gate
        self.requests: list[RemoteRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: RemoteRequest) -> Any:
        self.requests.append(request)
        if self.sync:
            return self._respond(request)
        return self._respond_later(request)

    async def _respond_later(self, request: RemoteRequest) -> dict[str, Any]:
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        return self._respond(request)

    def _respond(self, request: RemoteRequest) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        data = self.data(request) if callable(self.data) else self.data
        return {"data": data}


@pytest.fixture
def remote_sdl() -> str:
    """SDL of the remote source used across GraphQL tests."""
    return REMOTE_SDL


@pytest.fixture
def make_fetcher() -> Callable[..., RecordingFetcher]:
    """Factory for RecordingFetcher instances."""
    return RecordingFetcher
