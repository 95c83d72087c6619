"""Unit-test fixtures wiring handlers to fake backends."""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio

from tests.helpers.fake_services import (
    FakeServices,
    RecordingReporter,
    make_dependencies,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    import httpx

    from gitpoap_bot.handlers import HandlerDependencies


@pytest.fixture
def services() -> FakeServices:
    """Return fresh fake GitHub, claims and Slack backends."""
    return FakeServices()


@pytest.fixture
def reporter() -> RecordingReporter:
    """Return an error reporter that records every report."""
    return RecordingReporter()


@pytest_asyncio.fixture
async def http_client(
    services: FakeServices,
) -> cabc.AsyncIterator[httpx.AsyncClient]:
    """Yield an async client routed through the fake backends."""
    client = services.client()
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def deps(
    http_client: httpx.AsyncClient, reporter: RecordingReporter
) -> HandlerDependencies:
    """Return handler dependencies wired to the fakes."""
    return make_dependencies(http_client, reporter=reporter)
