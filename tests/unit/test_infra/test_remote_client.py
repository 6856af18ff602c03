"""Tests for the remote GraphQL HTTP client."""
from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
from graphql import build_schema, get_introspection_query, graphql_sync, parse

from remote_gateway.core.exceptions import RemoteFetchError
from remote_gateway.core.settings import RemoteSettings
from remote_gateway.features.graphql.context import GraphQLContext
from remote_gateway.features.graphql.projection import RemoteRequest
from remote_gateway.infra.external import RemoteGraphQLClient

REMOTE_URL = "http://remote.test/graphql"


class _Recorder:
    """MockTransport handler answering with a fixed response."""

    def __init__(self, response=None, raises=None):
        self.response = response or httpx.Response(200, json={"data": {"hello": "7"}})
        self.raises = raises
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises is not None:
            raise self.raises
        return self.response

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


def _client(handler, url=REMOTE_URL, **kwargs) -> RemoteGraphQLClient:
    return RemoteGraphQLClient(url, transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.unit
class TestFetcherCall:
    @pytest.mark.asyncio
    async def test_posts_printed_operation(self):
        handler = _Recorder()
        request = RemoteRequest(
            document=parse("query Greeting($word: String!) { greet(word: $word) }"),
            variables={"word": "hi"},
            operation_name="Greeting",
        )

        async with _client(handler) as client:
            result = await client(request)

        assert result == {"data": {"hello": "7"}}
        sent = handler.requests[0]
        assert sent.method == "POST"
        assert sent.url.path == "/graphql"
        payload = handler.last_payload
        assert parse(payload["query"]).definitions[0].name.value == "Greeting"
        assert payload["variables"] == {"word": "hi"}
        assert payload["operationName"] == "Greeting"

    @pytest.mark.asyncio
    async def test_anonymous_operation_has_no_operation_name(self):
        handler = _Recorder()

        async with _client(handler) as client:
            await client(RemoteRequest(document=parse("{ hello }")))

        assert "operationName" not in handler.last_payload
        assert handler.last_payload["variables"] == {}

    @pytest.mark.asyncio
    async def test_url_path_and_query_kept(self):
        handler = _Recorder()

        async with _client(handler, url="http://remote.test/api/graphql?tenant=a") as client:
            await client.execute("{ hello }")

        sent = handler.requests[0]
        assert sent.url.host == "remote.test"
        assert sent.url.path == "/api/graphql"
        assert sent.url.params["tenant"] == "a"

    @pytest.mark.asyncio
    async def test_forwards_configured_headers_from_context(self):
        handler = _Recorder()
        incoming = SimpleNamespace(headers={"authorization": "Bearer t", "cookie": "session=1"})
        context = GraphQLContext(request=incoming, correlation_id="corr-1")

        async with _client(handler) as client:
            await client(RemoteRequest(document=parse("{ hello }"), context=context))

        sent = handler.requests[0]
        assert sent.headers["authorization"] == "Bearer t"
        assert sent.headers["x-correlation-id"] == "corr-1"
        assert "cookie" not in sent.headers

    @pytest.mark.asyncio
    async def test_mapping_context(self):
        handler = _Recorder()
        context = {"request": SimpleNamespace(headers={"x-tenant": "acme"}), "correlation_id": "c"}

        async with _client(handler, forward_headers=["X-Tenant"]) as client:
            await client(RemoteRequest(document=parse("{ hello }"), context=context))

        sent = handler.requests[0]
        assert sent.headers["x-tenant"] == "acme"
        assert "authorization" not in sent.headers

    @pytest.mark.asyncio
    async def test_context_without_request(self):
        handler = _Recorder()

        async with _client(handler) as client:
            await client(RemoteRequest(document=parse("{ hello }"), context={}))

        assert "x-correlation-id" not in handler.requests[0].headers

    @pytest.mark.asyncio
    async def test_partial_data_returned(self):
        body = {"data": {"hello": "7", "hello2": None}, "errors": [{"message": "hello2 failed"}]}
        handler = _Recorder(httpx.Response(200, json=body))

        async with _client(handler) as client:
            assert await client.execute("{ hello hello2 }") == body


@pytest.mark.unit
class TestErrorMapping:
    @pytest.mark.asyncio
    async def test_http_error_status(self):
        handler = _Recorder(httpx.Response(503, text="unavailable"))

        async with _client(handler) as client:
            with pytest.raises(RemoteFetchError) as exc_info:
                await client.execute("{ hello }")

        assert exc_info.value.upstream_status == 503
        assert exc_info.value.status_code == 502
        assert exc_info.value.extra["upstream_status"] == 503

    @pytest.mark.asyncio
    async def test_connection_error(self):
        handler = _Recorder(raises=httpx.ConnectError("connection refused"))

        async with _client(handler) as client:
            with pytest.raises(RemoteFetchError) as exc_info:
                await client.execute("{ hello }")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.upstream_status is None

    @pytest.mark.asyncio
    async def test_timeout(self):
        handler = _Recorder(raises=httpx.ReadTimeout("too slow"))

        async with _client(handler, timeout=2.0) as client:
            with pytest.raises(RemoteFetchError, match="timed out"):
                await client.execute("{ hello }")

    @pytest.mark.asyncio
    async def test_body_not_json(self):
        handler = _Recorder(httpx.Response(200, text="<html>oops</html>"))

        async with _client(handler) as client:
            with pytest.raises(RemoteFetchError, match="not JSON"):
                await client.execute("{ hello }")

    @pytest.mark.asyncio
    async def test_body_not_graphql_result(self):
        handler = _Recorder(httpx.Response(200, json={"status": "ok"}))

        async with _client(handler) as client:
            with pytest.raises(RemoteFetchError, match="not a GraphQL result"):
                await client.execute("{ hello }")

    @pytest.mark.asyncio
    async def test_errors_without_data(self):
        errors = [{"message": "permission denied"}]
        handler = _Recorder(httpx.Response(200, json={"errors": errors}))

        async with _client(handler) as client:
            with pytest.raises(RemoteFetchError) as exc_info:
                await client.execute("{ hello }")

        assert exc_info.value.detail == "Remote GraphQL error: permission denied"
        assert exc_info.value.errors == errors
        assert exc_info.value.instance == REMOTE_URL

    @pytest.mark.asyncio
    async def test_failed_request_is_not_retried(self):
        handler = _Recorder(httpx.Response(500))

        async with _client(handler) as client:
            with pytest.raises(RemoteFetchError):
                await client.execute("{ hello }")

        assert len(handler.requests) == 1


@pytest.mark.unit
class TestSchemaIntrospection:
    @pytest.mark.asyncio
    async def test_fetch_schema(self, remote_sdl):
        introspection = graphql_sync(
            build_schema(remote_sdl), get_introspection_query(descriptions=True)
        ).data
        handler = _Recorder(httpx.Response(200, json={"data": introspection}))

        async with _client(handler) as client:
            schema = await client.fetch_schema()

        assert set(schema.query_type.fields) == {"hello", "hello2", "greet", "user"}
        assert set(schema.mutation_type.fields) == {"createUser", "deleteUser"}
        assert "__schema" in handler.last_payload["query"]


@pytest.mark.unit
class TestFromSettings:
    def test_settings_applied(self):
        settings = RemoteSettings(
            url="http://upstream.test/gql",
            timeout=5,
            headers={"x-api-key": "secret"},
            forward_headers=["Authorization", " X-Tenant "],
        )

        client = RemoteGraphQLClient.from_settings(settings)

        assert client.url == "http://upstream.test/gql"
        assert client.path == "/gql"
        assert client.timeout == 5
        assert client.forward_headers == ("authorization", "x-tenant")
        assert client.client.headers["x-api-key"] == "secret"

    def test_defaults_from_environment(self):
        client = RemoteGraphQLClient.from_settings()

        assert client.url == "http://remote.test/graphql"
        assert client.forward_headers == ("authorization",)

    @pytest.mark.asyncio
    async def test_static_headers_sent(self):
        handler = _Recorder()
        settings = RemoteSettings(url=REMOTE_URL, headers={"x-api-key": "secret"})

        async with RemoteGraphQLClient.from_settings(
            settings, transport=httpx.MockTransport(handler)
        ) as client:
            await client.execute("{ hello }")

        assert handler.requests[0].headers["x-api-key"] == "secret"
