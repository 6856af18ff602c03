"""Infrastructure: logging, metrics and external clients."""
