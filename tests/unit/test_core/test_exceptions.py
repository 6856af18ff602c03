"""Tests for the gateway's exception hierarchy."""
from __future__ import annotations

import pytest

from remote_gateway.core.exceptions import (
    AppException,
    ExecutionStoreError,
    RemoteFetchError,
    ResolverBindingError,
    SchemaRootError,
)


@pytest.mark.unit
class TestAppException:
    def test_attributes(self):
        exc = AppException(
            status_code=404,
            detail="Not here",
            type="missing",
            instance="/graphql",
            extra={"id": 1},
        )

        assert exc.status_code == 404
        assert exc.detail == "Not here"
        assert exc.type == "missing"
        assert exc.title == "Not Found"
        assert exc.instance == "/graphql"
        assert exc.extra == {"id": 1}
        assert str(exc) == "Not here"

    @pytest.mark.parametrize(
        ("status_code", "title"),
        [(502, "Bad Gateway"), (503, "Service Unavailable"), (418, "Error")],
    )
    def test_default_titles(self, status_code, title):
        assert AppException(status_code=status_code, detail="x").title == title

    def test_explicit_title(self):
        assert AppException(status_code=500, detail="x", title="Custom").title == "Custom"


@pytest.mark.unit
class TestGatewayExceptions:
    @pytest.mark.parametrize(
        ("exc", "status_code", "type_"),
        [
            (SchemaRootError(root="query"), 500, "schema-root-missing"),
            (ResolverBindingError("Query", "hello"), 500, "resolver-binding-failed"),
            (ExecutionStoreError("no store"), 500, "execution-store-unavailable"),
            (RemoteFetchError("down"), 502, "remote-fetch-failed"),
        ],
    )
    def test_problem_fields(self, exc, status_code, type_):
        assert isinstance(exc, AppException)
        assert exc.status_code == status_code
        assert exc.type == type_

    def test_schema_root_error_message(self):
        exc = SchemaRootError(root="query")

        assert exc.detail == "Schema has no query root type"
        assert exc.extra == {"root": "query"}

    def test_resolver_binding_error_for_type(self):
        exc = ResolverBindingError("String")

        assert "not an object type" in exc.detail
        assert exc.extra["field_name"] is None

    def test_remote_fetch_error_details(self):
        errors = [{"message": "denied"}]
        exc = RemoteFetchError("Remote GraphQL error: denied", upstream_status=200, errors=errors)

        assert exc.upstream_status == 200
        assert exc.errors == errors
        assert exc.extra == {"upstream_status": 200, "errors": errors}

    def test_remote_fetch_error_minimal(self):
        exc = RemoteFetchError("down")

        assert exc.upstream_status is None
        assert exc.errors == []
        assert exc.extra == {}
