"""Remote GraphQL gateway with per-operation request coalescing."""

__version__ = "0.1.0"
