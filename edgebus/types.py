"""Core message bus data types: broker host info, message envelopes and configuration."""

from __future__ import annotations

import base64
import binascii
import json
import queue
import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

API_VERSION = "v2"
CORRELATION_ID = "X-Correlation-ID"
CONTENT_TYPE = "Content-Type"
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_TEXT = "text/plain"

DEFAULT_MSG_PROTOCOL = "tcp"

_HEX32 = re.compile(r"[0-9a-fA-F]{32}")

_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

# JSON member name -> attribute name, in wire order.
_JSON_FIELDS = {
    "ReceivedTopic": "received_topic",
    "CorrelationID": "correlation_id",
    "ApiVersion": "api_version",
    "RequestID": "request_id",
    "ErrorCode": "error_code",
    "Payload": "payload",
    "ContentType": "content_type",
    "QueryParams": "query_params",
}
_FOLDED_FIELDS = {name.lower(): (name, attr) for name, attr in _JSON_FIELDS.items()}


def _parse_uuid(text: str) -> uuid.UUID:
    """Parse a UUID in the standard, braced, URN or bare-hex form."""
    length = len(text)
    if length == 45:
        if text[:9].lower() != "urn:uuid:":
            raise ValueError(f"invalid urn prefix: {text[:9]!r}")
        text = text[9:]
    elif length == 38:
        if text[0] != "{" or text[-1] != "}":
            raise ValueError("invalid bracketed UUID format")
        text = text[1:-1]
    elif length == 32:
        if not _HEX32.fullmatch(text):
            raise ValueError("invalid UUID format")
        return uuid.UUID(hex=text)
    elif length != 36:
        raise ValueError(f"invalid UUID length: {length}")

    if any(text[pos] != "-" for pos in (8, 13, 18, 23)):
        raise ValueError("invalid UUID format")
    digits = text[0:8] + text[9:13] + text[14:18] + text[19:23] + text[24:]
    if not _HEX32.fullmatch(digits):
        raise ValueError("invalid UUID format")
    return uuid.UUID(hex=digits)


def _new_uuid() -> str:
    return str(uuid.uuid4())


@dataclass
class HostInfo:
    """Location of a broker, rendered as ``<protocol>://<host>:<port>``."""

    host: str = ""
    port: int = 0
    protocol: str = ""

    def get_host_url(self) -> str:
        """Return the full URL, defaulting the protocol to tcp."""
        protocol = self.protocol or DEFAULT_MSG_PROTOCOL
        return f"{protocol}://{self.host}:{self.port}"

    def is_host_info_empty(self) -> bool:
        """Return True when host or port has not been set."""
        return not self.host or self.port == 0


@dataclass
class MessageEnvelope:
    """A message payload together with its routing and request attributes."""

    received_topic: str = ""
    correlation_id: str = ""
    api_version: str = ""
    request_id: str = ""
    error_code: int = 0
    payload: bytes = b""
    content_type: str = ""
    query_params: dict[str, str] = field(default_factory=dict)

    def to_json(self) -> str:
        """Encode the envelope as compact JSON with a base64 payload."""
        document = {
            "ReceivedTopic": self.received_topic,
            "CorrelationID": self.correlation_id,
            "ApiVersion": self.api_version,
            "RequestID": self.request_id,
            "ErrorCode": self.error_code,
            "Payload": base64.b64encode(bytes(self.payload)).decode("ascii"),
            "ContentType": self.content_type,
            "QueryParams": dict(sorted(self.query_params.items())),
        }
        text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
        return text.translate(_HTML_ESCAPES)

    @classmethod
    def _from_json(cls, message: bytes | str) -> MessageEnvelope:
        """Decode JSON into an envelope without validating its contents."""
        decoded = json.loads(message)
        if decoded is None:
            return cls()
        if not isinstance(decoded, dict):
            raise ValueError(
                f"cannot unmarshal {type(decoded).__name__} into a message envelope"
            )
        values: dict[str, Any] = {}
        for key, value in decoded.items():
            match = _FOLDED_FIELDS.get(key.lower())
            if match is None or value is None:
                continue
            name, attr = match
            values[attr] = _decode_field(name, value)
        return cls(**values)


def _decode_field(name: str, value: Any) -> Any:
    if name == "ErrorCode":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"cannot unmarshal {value!r} into field {name} of type int")
        return value
    if name == "Payload":
        if not isinstance(value, str):
            raise ValueError(f"cannot unmarshal {value!r} into field {name} of type bytes")
        try:
            return base64.b64decode(value.replace("\r", "").replace("\n", ""), validate=True)
        except binascii.Error as exc:
            raise ValueError(f"illegal base64 data in field {name}: {exc}") from exc
    if name == "QueryParams":
        if not isinstance(value, dict):
            raise ValueError(f"cannot unmarshal {value!r} into field {name} of type map")
        params: dict[str, str] = {}
        for key, item in value.items():
            if item is None:
                item = ""
            elif not isinstance(item, str):
                raise ValueError(f"cannot unmarshal {item!r} into field {name} value of type string")
            params[key] = item
        return params
    if not isinstance(value, str):
        raise ValueError(f"cannot unmarshal {value!r} into field {name} of type string")
    return value


@dataclass
class TopicChannel:
    """A subscription topic and the queue its messages are delivered to."""

    topic: str = ""
    messages: "queue.Queue[MessageEnvelope]" = field(default_factory=queue.Queue)


@dataclass
class MessageBusConfig:
    """Settings needed to connect to a message bus."""

    broker: HostInfo = field(default_factory=HostInfo)
    type: str = ""
    optional: dict[str, str] = field(default_factory=dict)


def _from_context(context: Mapping[str, Any] | None, key: str) -> str:
    if not context:
        return ""
    value = context.get(key)
    return value if isinstance(value, str) else ""


def new_message_envelope(payload: bytes, context: Mapping[str, Any] | None) -> MessageEnvelope:
    """Create an envelope taking correlation id and content type from ``context``."""
    return MessageEnvelope(
        api_version=API_VERSION,
        correlation_id=_from_context(context, CORRELATION_ID),
        content_type=_from_context(context, CONTENT_TYPE),
        payload=payload,
        query_params={},
    )


def new_message_envelope_for_request(
    payload: bytes, query_params: dict[str, str] | None
) -> MessageEnvelope:
    """Create a JSON request envelope with fresh request and correlation ids."""
    return MessageEnvelope(
        correlation_id=_new_uuid(),
        api_version=API_VERSION,
        request_id=_new_uuid(),
        error_code=0,
        payload=payload,
        content_type=CONTENT_TYPE_JSON,
        query_params=query_params if query_params else {},
    )


def new_message_envelope_for_response(
    payload: bytes, request_id: str, correlation_id: str, content_type: str
) -> MessageEnvelope:
    """Create a response envelope; ids must be UUIDs and content type non-empty."""
    _parse_uuid(request_id)
    _parse_uuid(correlation_id)
    if not content_type:
        raise ValueError("ContentType is empty")
    return MessageEnvelope(
        correlation_id=correlation_id,
        api_version=API_VERSION,
        request_id=request_id,
        error_code=0,
        payload=payload,
        content_type=content_type,
        query_params={},
    )


def new_message_envelope_from_json(message: bytes | str) -> MessageEnvelope:
    """Decode and validate a JSON request envelope."""
    envelope = MessageEnvelope._from_json(message)

    if envelope.api_version != API_VERSION:
        raise ValueError("api version 'v2' is required")

    try:
        _parse_uuid(envelope.request_id)
    except ValueError as exc:
        raise ValueError(f"error parsing RequestID: {exc}") from exc

    try:
        _parse_uuid(envelope.correlation_id)
    except ValueError as exc:
        if envelope.correlation_id:
            raise ValueError(f"error parsing CorrelationID: {exc}") from exc
        envelope.correlation_id = _new_uuid()

    if envelope.content_type != CONTENT_TYPE_JSON:
        raise ValueError("ContentType is not application/json")

    return envelope


def new_message_envelope_with_error(request_id: str, error_message: str) -> MessageEnvelope:
    """Create an envelope flagged with error code 1 carrying ``error_message``."""
    return MessageEnvelope(
        correlation_id=_new_uuid(),
        api_version=API_VERSION,
        request_id=request_id,
        error_code=1,
        payload=error_message.encode("utf-8"),
        content_type=CONTENT_TYPE_TEXT,
        query_params={},
    )