"""Core infrastructure: configuration, exceptions and cancellation."""
