import pytest
import redis.connection

from edgebus.goredis import RedisPubSubClient, create_redis_pubsub_client
from edgebus.types import MessageEnvelope


class FakePubSub:
    def __init__(self, items):
        self.items = items
        self.patterns = []
        self.closed = False

    def psubscribe(self, pattern):
        self.patterns.append(pattern)

    def listen(self):
        while self.items:
            yield self.items.pop(0)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, items=()):
        self.items = list(items)
        self.published = []
        self.pubsubs = []
        self.closed = False

    def publish(self, channel, data):
        self.published.append((channel, data))
        return 1

    def pubsub(self):
        subscription = FakePubSub(self.items)
        self.pubsubs.append(subscription)
        return subscription

    def close(self):
        self.closed = True


def _envelope():
    return MessageEnvelope(
        correlation_id="12345",
        api_version="v2",
        payload=b"test-message",
        content_type="application/json",
        query_params={"foo": "bar"},
    )


def test_send_publishes_json_encoding():
    connection = FakeConnection()
    client = RedisPubSubClient(connection)
    message = _envelope()

    client.send("edgex.events", message)

    assert connection.published == [("edgex.events", message.to_json())]


def test_receive_decodes_message_and_sets_channel():
    message = _envelope()
    items = [
        {"type": "psubscribe", "pattern": None, "channel": b"edgex.*", "data": 1},
        {
            "type": "pmessage",
            "pattern": b"edgex.*",
            "channel": b"edgex.events",
            "data": message.to_json().encode("utf-8"),
        },
    ]
    connection = FakeConnection(items)
    client = RedisPubSubClient(connection)

    received = client.receive("edgex.*")

    assert received.received_topic == "edgex.events"
    assert received.correlation_id == message.correlation_id
    assert received.payload == message.payload
    assert received.query_params == message.query_params
    assert connection.pubsubs[0].patterns == ["edgex.*"]


def test_receive_reuses_subscription_per_topic():
    message = _envelope()
    item = {"type": "message", "pattern": None, "channel": "topic", "data": message.to_json()}
    connection = FakeConnection([item, dict(item)])
    client = RedisPubSubClient(connection)

    first = client.receive("topic")
    second = client.receive("topic")

    assert first == second
    assert len(connection.pubsubs) == 1


def test_receive_invalid_payload_raises():
    items = [{"type": "pmessage", "pattern": b"t", "channel": b"t", "data": b"not json"}]
    client = RedisPubSubClient(FakeConnection(items))

    with pytest.raises(ValueError, match="unable to unmarshal payload"):
        client.receive("t")


def test_receive_on_closed_subscription_raises():
    client = RedisPubSubClient(FakeConnection())

    with pytest.raises(ConnectionError):
        client.receive("t")


def test_close_closes_subscriptions_and_connection():
    message = _envelope()
    items = [{"type": "pmessage", "pattern": b"t", "channel": b"t", "data": message.to_json()}]
    connection = FakeConnection(items)
    client = RedisPubSubClient(connection)
    client.receive("t")

    client.close()

    assert connection.closed is True
    assert all(subscription.closed for subscription in connection.pubsubs)


def test_create_sets_connection_options():
    password = "password"
    client = create_redis_pubsub_client("redis://localhost:6380/2", password)

    kwargs = client.connection.connection_pool.connection_kwargs
    assert kwargs["host"] == "localhost"
    assert kwargs["port"] == 6380
    assert kwargs["db"] == 2
    assert kwargs["password"] == password


def test_create_uses_tls_for_rediss():
    client = create_redis_pubsub_client("rediss://localhost:6379", "")

    assert client.connection.connection_pool.connection_class is redis.connection.SSLConnection


@pytest.mark.parametrize(
    "url",
    [
        "!@#://!@#$:-1",
        "tcp://localhost:6379",
        "redis://localhost:6379/abc",
        "redis://localhost:6379/1/2",
    ],
)
def test_create_rejects_invalid_urls(url):
    with pytest.raises(ValueError):
        create_redis_pubsub_client(url, "")