"""Request transforms applied before an operation is sent upstream.

The gateway's schema can hold fields the remote source does not know
about (local fields merged next to remote ones). ``FilterToSchema``
rewrites a captured operation so that it only selects what the remote
schema defines, and only declares and sends the variables still used.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Protocol

from graphql import DocumentNode, FragmentDefinitionNode
from graphql.language import REMOVE, SKIP, Visitor, visit
from graphql.utilities import TypeInfo, TypeInfoVisitor, separate_operations

if TYPE_CHECKING:
    from graphql import GraphQLSchema

    from remote_gateway.features.graphql.projection import RemoteRequest

logger = logging.getLogger(__name__)

__all__ = ["FilterToSchema", "RequestTransform"]


class RequestTransform(Protocol):
    """Pure, synchronous rewrite of a captured request."""

    def transform_request(self, request: RemoteRequest) -> RemoteRequest: ...


class FilterToSchema:
    """Filter a request down to what ``schema`` can execute.

    Removes:
    - fields, directives and arguments the schema does not define
    - fields and inline fragments left with an empty selection set
    - fragments on unknown types or left empty, their spreads, and
      unreachable fragments
    - variable definitions (and values) no longer referenced

    Example:
        >>> transform = FilterToSchema(remote_schema)
        >>> request = transform.transform_request(request)
    """

    def __init__(self, schema: GraphQLSchema) -> None:
        self.schema = schema

    def transform_request(self, request: RemoteRequest) -> RemoteRequest:
        document = self._filter_document(request.document)
        used_variables = _collect_variables(document)
        document = visit(document, _UnusedVariableRemover(used_variables))

        dropped = set(request.variables) - used_variables
        if dropped:
            logger.debug(
                "Dropped variables unused by remote document",
                extra={"variables": sorted(dropped)},
            )

        variables: dict[str, Any] = {
            name: value for name, value in request.variables.items() if name in used_variables
        }
        return replace(request, document=document, variables=variables)

    def _filter_document(self, document: DocumentNode) -> DocumentNode:
        invalid_fragments = {
            definition.name.value
            for definition in document.definitions
            if isinstance(definition, FragmentDefinitionNode)
            and self.schema.get_type(definition.type_condition.name.value) is None
        }
        # Fragments emptied by one pass are invalid, along with their spreads
        while True:
            type_info = TypeInfo(self.schema)
            filtered = visit(
                document,
                TypeInfoVisitor(type_info, _SchemaFilter(self.schema, type_info, invalid_fragments)),
            )
            emptied = {
                definition.name.value
                for definition in filtered.definitions
                if isinstance(definition, FragmentDefinitionNode)
                and not definition.selection_set.selections
            }
            if not emptied:
                break
            invalid_fragments |= emptied
        # One operation per request, so the single separated document is it
        separated = separate_operations(filtered)
        return next(iter(separated.values()), filtered)


class _SchemaFilter(Visitor):
    def __init__(
        self,
        schema: GraphQLSchema,
        type_info: TypeInfo,
        invalid_fragments: set[str],
    ) -> None:
        super().__init__()
        self.schema = schema
        self.type_info = type_info
        self.invalid_fragments = invalid_fragments

    def enter_fragment_definition(self, node, *_args):
        if node.name.value in self.invalid_fragments:
            return REMOVE
        return None

    def enter_fragment_spread(self, node, *_args):
        if node.name.value in self.invalid_fragments:
            return REMOVE
        return None

    def enter_inline_fragment(self, node, *_args):
        condition = node.type_condition
        if condition is not None and self.schema.get_type(condition.name.value) is None:
            return REMOVE
        return None

    def leave_inline_fragment(self, node, *_args):
        if not node.selection_set.selections:
            return REMOVE
        return None

    def enter_field(self, node, *_args):
        if self.type_info.get_field_def() is None:
            return REMOVE
        return None

    def leave_field(self, node, *_args):
        if node.selection_set is not None and not node.selection_set.selections:
            return REMOVE
        return None

    def enter_directive(self, node, *_args):
        if self.type_info.get_directive() is None:
            return REMOVE
        return None

    def enter_argument(self, node, *_args):
        if self.type_info.get_argument() is None:
            return REMOVE
        return None


class _VariableCollector(Visitor):
    def __init__(self) -> None:
        super().__init__()
        self.names: set[str] = set()

    def enter_variable_definition(self, *_args):
        return SKIP

    def enter_variable(self, node, *_args):
        self.names.add(node.name.value)


class _UnusedVariableRemover(Visitor):
    def __init__(self, used: set[str]) -> None:
        super().__init__()
        self.used = used

    def enter_variable_definition(self, node, *_args):
        if node.variable.name.value not in self.used:
            return REMOVE
        return SKIP


def _collect_variables(document: DocumentNode) -> set[str]:
    collector = _VariableCollector()
    visit(document, collector)
    return collector.names
