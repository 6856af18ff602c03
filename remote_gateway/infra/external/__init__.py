"""External service clients.

HTTP clients for interacting with external services.
All clients inherit from BaseHTTPClient and provide typed interfaces.
"""

from remote_gateway.infra.external.base_client import BaseHTTPClient
from remote_gateway.infra.external.remote_graphql import RemoteGraphQLClient

__all__ = [
    "BaseHTTPClient",
    "RemoteGraphQLClient",
]
