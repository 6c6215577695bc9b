# edgebus

Building blocks for a publish/subscribe message bus: a standard message
envelope with JSON encoding and validation, bus configuration types,
builders for backend options, the client interface that backends implement,
and a Redis Pub/Sub transport.

## Installation

```
pip install edgebus
```

For running the test suite:

```
pip install "edgebus[test]"
pytest
```

## Modules

- `edgebus.types` – data types and envelope constructors.
- `edgebus.interface` – the `MessageClient` abstract base class.
- `edgebus.options` – builders for the `optional` settings map.
- `edgebus.goredis` – the Redis Pub/Sub transport.

## Types

- `HostInfo(host, port, protocol)` – where the broker lives.
  `get_host_url()` returns `<protocol>://<host>:<port>`, using `tcp` when no
  protocol is set. `is_host_info_empty()` is true when the host is empty or
  the port is 0.
- `MessageBusConfig(broker, type, optional)` – a `HostInfo`, the bus type
  name and a dictionary of string settings for a particular backend.
- `MessageEnvelope` – payload bytes plus `received_topic`, `correlation_id`,
  `api_version`, `request_id`, `error_code`, `content_type` and
  `query_params`. `to_json()` encodes it as compact JSON with the payload in
  base64.
- `TopicChannel(topic, messages)` – a topic and the `queue.Queue` that
  received envelopes for it are meant to be put on.

## Building envelopes

```python
from edgebus.types import (
    CONTENT_TYPE_JSON,
    CORRELATION_ID,
    new_message_envelope,
    new_message_envelope_for_request,
    new_message_envelope_for_response,
    new_message_envelope_from_json,
    new_message_envelope_with_error,
)

# Correlation id and content type taken from a context mapping.
event = new_message_envelope(b"{}", {CORRELATION_ID: "fa1def22-96de-4d44-8811-00333438c8e3"})

# A JSON request with fresh UUIDs for request and correlation id.
request = new_message_envelope_for_request(b'{"data": "myData"}', {"foo": "bar"})

# A response; both ids must be UUIDs and the content type must not be empty.
reply = new_message_envelope_for_response(
    b"{}", request.request_id, request.correlation_id, CONTENT_TYPE_JSON
)

# An envelope with error_code 1 and the message as a text/plain payload.
failure = new_message_envelope_with_error(request.request_id, "error: something failed")

decoded = new_message_envelope_from_json(request.to_json())
```

`new_message_envelope_from_json` requires API version `v2`, a UUID request
id and content type `application/json`. An empty correlation id is replaced
with a new UUID; one that is present but not a UUID is rejected. Every
failure raises `ValueError`.

## Option builders

`MqttOptionalConfigurationBuilder` and `RedisOptionalConfigurationBuilder`
fill the `MessageBusConfig.optional` dictionary with the right key names,
writing booleans as `true`/`false` and integers as decimal strings:

```python
from edgebus.options import MqttOptionalConfigurationBuilder, RedisOptionalConfigurationBuilder

mqtt_optional = (
    MqttOptionalConfigurationBuilder()
    .client_id("my-service")
    .qos(1)
    .keep_alive(10)
    .retained(False)
    .build()
)
# {"ClientId": "my-service", "Qos": "1", "KeepAlive": "10", "Retained": "false"}

password = "password"
redis_optional = RedisOptionalConfigurationBuilder().password(password).build()
```

## The client interface

`MessageClient` declares `connect()`, `publish(message, topic)`,
`subscribe(topics, message_errors)` and `disconnect()`. Used as a context
manager it calls `connect()` on entry and `disconnect()` on exit. Subclass
it to write a backend.

## Redis Pub/Sub transport

`create_redis_pubsub_client(redis_server_url, password)` accepts a
`redis://` or `rediss://` URL (host defaults to `localhost`, port to 6379, a
path such as `/2` selects the database) and returns a `RedisPubSubClient`.
No connection is made until the client is first used.

```python
from edgebus.goredis import create_redis_pubsub_client
from edgebus.types import MessageEnvelope

password = "password"
transport = create_redis_pubsub_client("redis://localhost:6379", password=password)

transport.send("edgex.events.device1", MessageEnvelope(payload=b"hello"))

# Blocks until a message on a channel matching the pattern arrives.
received = transport.receive("edgex.events.*")
print(received.received_topic, received.payload)

transport.close()
```

`send` publishes the envelope's JSON. `receive` keeps one pattern
subscription per topic, decodes the next message and sets `received_topic`
to the channel it came on; undecodable data raises `ValueError`. `close`
closes every subscription and then the connection. Topics are passed to
Redis exactly as given, so they use Redis's own `.` separator and `*`
wildcard.

`RedisClient` is the abstract base of this transport (`send`, `receive`,
`close`), for writing stand-ins in tests.

## What this package does not do

- There is no ready-made `MessageClient` implementation. `RedisPubSubClient`
  is a transport: it does not run background subscriptions, feed
  `TopicChannel` queues or report errors on an error queue.
- There is no function that picks a backend from `MessageBusConfig.type`.
- Topics written with `/` and `#` are not converted to Redis form.
- There is no MQTT client; the MQTT builder only produces the settings map.
- TLS certificate options are not read from the configuration.