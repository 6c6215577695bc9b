"""The publish/subscribe client contract shared by all message bus backends."""

from __future__ import annotations

import abc
import queue
from collections.abc import Sequence

from edgebus.types import MessageEnvelope, TopicChannel


class MessageClient(abc.ABC):
    """A client that publishes envelopes to topics and subscribes to them.

    Used as a context manager it connects on entry and disconnects on exit.
    """

    @abc.abstractmethod
    def connect(self) -> None:
        """Connect to the configured broker, raising on failure."""

    @abc.abstractmethod
    def publish(self, message: MessageEnvelope, topic: str) -> None:
        """Send ``message`` to ``topic``."""

    @abc.abstractmethod
    def subscribe(
        self, topics: Sequence[TopicChannel], message_errors: "queue.Queue[Exception]"
    ) -> None:
        """Start delivering messages for each topic to its queue.

        Errors met while receiving are put on ``message_errors``; errors in
        setting up the subscription are raised.
        """

    @abc.abstractmethod
    def disconnect(self) -> None:
        """Close all connections to the broker."""

    def __enter__(self) -> MessageClient:
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()