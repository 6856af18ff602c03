"""Per-execution coalescing of remote top-level fields.

Every top-level field the gateway forwards to the remote source is resolved
through the same resolver. The first of them to run in an execution creates
a ``RemoteExecution`` in the execution store (the GraphQL context by
default) and starts the one upstream fetch for the whole operation; every
other field of that execution finds the instance and waits for the same
result, then reads its own response key out of it.

Precondition: one operation per execution store. The operation sent
upstream is the one seen by the first resolver; a store shared by two
concurrent operations would serve both from the first one's response
(this is logged as a warning, not corrected).
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
import time
from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

from remote_gateway.core.exceptions import ExecutionStoreError
from remote_gateway.features.graphql.projection import (
    RemoteRequest,
    capture_request,
    project_field,
)
from remote_gateway.infra.metrics.prometheus import (
    remote_coalesced_fields_total,
    remote_fetch_duration_seconds,
    remote_fetches_total,
)

if TYPE_CHECKING:
    from graphql import GraphQLFieldResolver, GraphQLResolveInfo, OperationDefinitionNode

    from remote_gateway.features.graphql.transforms import RequestTransform

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("graphql", "1.0.0")

__all__ = [
    "STORE_SLOT",
    "ExecutionStoreGetter",
    "Fetcher",
    "RemoteExecution",
    "default_store",
    "get_remote_execution",
]

Fetcher = Callable[[RemoteRequest], Any]
ExecutionStoreGetter = Callable[[Any], Any]

# Key (mapping stores) or attribute name (object stores) of the slot
STORE_SLOT = "remote_execution"

# Guards create-if-absent on store slots
_slot_lock = threading.Lock()


def default_store(context: Any) -> Any:
    """The execution context itself is the execution store."""
    return context


class _Settled:
    """Outcome of a fetch that completed synchronously."""

    __slots__ = ("error", "response")

    def __init__(self, response: Any = None, error: BaseException | None = None) -> None:
        self.response = response
        self.error = error


class RemoteExecution:
    """Single upstream fetch shared by all remote fields of one execution.

    The fetch starts synchronously inside the first ``resolve`` call, before
    that resolver returns, so sibling fields scheduled right after it always
    find the started fetch. The outcome cell is assigned once and never
    replaced: no re-fetch, no retry.

    An awaitable returned by the fetcher is shared through an asyncio task;
    a plain response settles the cell immediately, in which case resolvers
    return (or raise) synchronously.
    """

    def __init__(self, fetcher: Fetcher, transform: RequestTransform) -> None:
        self.fetcher = fetcher
        self.transform = transform
        self._outcome: asyncio.Future[Any] | _Settled | None = None
        self._operation: OperationDefinitionNode | None = None
        self._lock = threading.Lock()

    @property
    def started(self) -> bool:
        """Whether the upstream fetch has been started."""
        return self._outcome is not None

    def resolve(self, _root: Any, info: GraphQLResolveInfo, **_args: Any) -> Any:
        """Resolve one top-level field from the shared upstream response."""
        outcome = self._get_or_start(info)
        key = info.path.key
        if isinstance(outcome, _Settled):
            if outcome.error is not None:
                raise outcome.error
            return project_field(outcome.response, key)
        return self._project(outcome, key)

    @classmethod
    def make_resolver(
        cls,
        fetcher: Fetcher,
        transform: RequestTransform,
        get_store: ExecutionStoreGetter = default_store,
    ) -> GraphQLFieldResolver:
        """Build the field resolver shared by every remote top-level field."""

        def resolve_remote_field(root: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
            store = get_store(info.context)
            execution = get_remote_execution(store, lambda: cls(fetcher, transform))
            return execution.resolve(root, info, **args)

        return resolve_remote_field

    def _get_or_start(self, info: GraphQLResolveInfo) -> asyncio.Future[Any] | _Settled:
        with self._lock:
            outcome = self._outcome
            if outcome is None:
                self._operation = info.operation
                self._outcome = outcome = self._start_fetch(info)
                return outcome

        operation_type = info.operation.operation.value
        if info.operation is not self._operation:
            logger.warning(
                "Field belongs to a different operation than the remote fetch of its execution",
                extra={"field": info.path.key, "operation_type": operation_type},
            )
        remote_coalesced_fields_total.labels(operation_type=operation_type).inc()
        logger.debug("Coalesced field into remote fetch", extra={"field": info.path.key})
        return outcome

    def _start_fetch(self, info: GraphQLResolveInfo) -> asyncio.Future[Any] | _Settled:
        operation_type = info.operation.operation.value
        request = capture_request(info)
        logger.debug(
            "Starting remote fetch",
            extra={
                "operation_type": operation_type,
                "operation_name": request.operation_name,
                "field": info.path.key,
            },
        )

        span = tracer.start_span(
            "graphql.remote.fetch",
            kind=trace.SpanKind.CLIENT,
            attributes={
                "graphql.operation.type": operation_type,
                "graphql.operation.name": request.operation_name or "anonymous",
            },
        )
        started = time.perf_counter()
        try:
            with trace.use_span(span, end_on_exit=False):
                request = replace(self.transform.transform_request(request), context=info.context)
                result = self.fetcher(request)
        except Exception as exc:
            self._finish(span, operation_type, started, exc)
            return _Settled(error=exc)

        if inspect.isawaitable(result):
            return asyncio.ensure_future(self._track(result, span, operation_type, started))

        self._finish(span, operation_type, started, None)
        return _Settled(response=result)

    async def _track(
        self,
        awaitable: Awaitable[Any],
        span: trace.Span,
        operation_type: str,
        started: float,
    ) -> Any:
        error: BaseException | None = None
        try:
            with trace.use_span(span, end_on_exit=False):
                return await awaitable
        except BaseException as exc:
            error = exc
            raise
        finally:
            self._finish(span, operation_type, started, error)

    @staticmethod
    async def _project(outcome: asyncio.Future[Any], key: str) -> Any:
        # Shielded: a cancelled field must not cancel its siblings' fetch
        response = await asyncio.shield(outcome)
        return project_field(response, key)

    @staticmethod
    def _finish(
        span: trace.Span,
        operation_type: str,
        started: float,
        error: BaseException | None,
    ) -> None:
        duration = time.perf_counter() - started
        status = "success" if error is None else "error"
        remote_fetches_total.labels(operation_type=operation_type, status=status).inc()
        remote_fetch_duration_seconds.labels(operation_type=operation_type).observe(duration)
        span.end()

        if error is None:
            logger.debug(
                "Remote fetch completed",
                extra={"operation_type": operation_type, "duration_ms": duration * 1000},
            )
        else:
            logger.error(
                "Remote fetch failed",
                exc_info=error,
                extra={"operation_type": operation_type, "duration_ms": duration * 1000},
            )


def get_remote_execution(
    store: Any,
    factory: Callable[[], RemoteExecution] | None = None,
) -> RemoteExecution | None:
    """Return the store's ``RemoteExecution``, creating it with ``factory`` if absent.

    Args:
        store: Execution store; a mutable mapping or an object accepting
            the ``remote_execution`` attribute.
        factory: Builds the instance when the slot is empty. Without it the
            lookup is read-only.

    Raises:
        ExecutionStoreError: If the store cannot hold the slot.
    """
    if store is None:
        msg = "No execution store: pass a context_value to the GraphQL execution"
        raise ExecutionStoreError(msg)

    execution = _read_slot(store)
    if execution is not None or factory is None:
        return execution

    with _slot_lock:
        execution = _read_slot(store)
        if execution is None:
            execution = factory()
            _write_slot(store, execution)
    return execution


def _read_slot(store: Any) -> RemoteExecution | None:
    if isinstance(store, MutableMapping):
        return store.get(STORE_SLOT)
    return getattr(store, STORE_SLOT, None)


def _write_slot(store: Any, execution: RemoteExecution) -> None:
    if isinstance(store, MutableMapping):
        store[STORE_SLOT] = execution
        return
    try:
        setattr(store, STORE_SLOT, execution)
    except AttributeError as exc:
        msg = f"Execution store {type(store).__name__} cannot hold {STORE_SLOT!r}"
        raise ExecutionStoreError(msg, extra={"store_type": type(store).__name__}) from exc
