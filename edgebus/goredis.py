"""Redis Pub/Sub transport used by the Redis message client."""

from __future__ import annotations

import abc
import threading
from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit

import redis

from edgebus.types import MessageEnvelope

DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379

# Identifier asking Redis streams for only the messages that arrive after connecting.
LATEST_STREAM_MESSAGE = "$"

_DELIVERY_TYPES = frozenset({"message", "pmessage"})


class RedisClient(abc.ABC):
    """Low-level operations needed to exchange envelopes through Redis Pub/Sub."""

    @abc.abstractmethod
    def send(self, topic: str, message: MessageEnvelope) -> None:
        """Publish ``message`` to ``topic``."""

    @abc.abstractmethod
    def receive(self, topic: str) -> MessageEnvelope:
        """Block until the next message matching ``topic`` arrives and return it."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release subscriptions and connections."""


RedisClientCreator = Callable[[str, str], "RedisClient | None"]


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


class RedisPubSubClient(RedisClient):
    """A :class:`RedisClient` backed by a redis-py connection.

    Each topic gets its own pattern subscription, created on first receive
    and reused afterwards.
    """

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self._subscriptions: dict[str, Any] = {}
        self._lock = threading.Lock()

    def send(self, topic: str, message: MessageEnvelope) -> None:
        """Publish the JSON encoding of ``message`` to ``topic``."""
        self.connection.publish(topic, message.to_json())

    def receive(self, topic: str) -> MessageEnvelope:
        """Wait for the next message on the ``topic`` pattern and decode it."""
        subscription = self._subscription(topic)
        for item in subscription.listen():
            if item.get("type") not in _DELIVERY_TYPES:
                continue
            try:
                envelope = MessageEnvelope._from_json(item["data"])
            except ValueError as exc:
                raise ValueError(f"unable to unmarshal payload: {exc}") from exc
            envelope.received_topic = _text(item["channel"])
            return envelope
        raise ConnectionError(f"subscription for '{topic}' is closed")

    def close(self) -> None:
        """Close every subscription, then the underlying connection."""
        with self._lock:
            for subscription in self._subscriptions.values():
                try:
                    subscription.close()
                except Exception:  # noqa: BLE001 - closing is best effort
                    pass
            self.connection.close()

    def _subscription(self, topic: str) -> Any:
        with self._lock:
            subscription = self._subscriptions.get(topic)
            if subscription is None:
                subscription = self.connection.pubsub()
                subscription.psubscribe(topic)
                self._subscriptions[topic] = subscription
            return subscription


def _database_number(path: str) -> int:
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return 0
    if len(segments) > 1:
        raise ValueError(f"invalid redis URL path: {path}")
    try:
        return int(segments[0])
    except ValueError as exc:
        raise ValueError(f"invalid redis database number: {segments[0]!r}") from exc


def create_redis_pubsub_client(redis_server_url: str, password: str) -> RedisPubSubClient:
    """Create a client for a ``redis://`` or ``rediss://`` URL.

    The connection is opened lazily; only the URL is checked here.
    """
    parts = urlsplit(redis_server_url)
    if parts.scheme not in ("redis", "rediss"):
        raise ValueError(f"invalid redis URL scheme: {parts.scheme!r}")
    host = parts.hostname or DEFAULT_REDIS_HOST
    port = parts.port
    if port is None:
        port = DEFAULT_REDIS_PORT
    db = _database_number(parts.path)

    connection = redis.Redis(
        host=host,
        port=port,
        db=db,
        password=password or None,
        ssl=parts.scheme == "rediss",
    )
    return RedisPubSubClient(connection)