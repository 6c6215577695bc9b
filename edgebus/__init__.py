"""Message envelopes, bus configuration, option builders and a Redis Pub/Sub transport."""

__version__ = "3.0.0"

__all__ = ["goredis", "interface", "options", "types"]