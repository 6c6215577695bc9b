"""Builders for the optional, string-valued message bus configuration."""

from __future__ import annotations

AUTO_RECONNECT = "AutoReconnect"
CLEAN_SESSION = "CleanSession"
CERT_FILE = "CertFile"
CERT_PEM_BLOCK = "CertPEMBlock"
CLIENT_ID = "ClientId"
CONNECT_TIMEOUT = "ConnectTimeout"
KEEP_ALIVE = "KeepAlive"
KEY_PEM_BLOCK = "KeyPEMBlock"
KEY_FILE = "KeyFile"
PASSWORD = "Password"
QOS = "Qos"
RETAINED = "Retained"
SKIP_CERT_VERIFY = "SkipCertVerify"
USERNAME = "Username"
CA_FILE = "CaFile"
CA_PEM_BLOCK = "CaPEMBlock"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _format_int(value: int) -> str:
    return str(int(value))


class MqttOptionalConfigurationBuilder:
    """Collects typed MQTT options into the string map used as ``optional``."""

    def __init__(self) -> None:
        self._options: dict[str, str] = {}

    def build(self) -> dict[str, str]:
        """Return the option map built so far."""
        return self._options

    def _set(self, key: str, value: str) -> MqttOptionalConfigurationBuilder:
        self._options[key] = value
        return self

    def auto_reconnect(self, auto_reconnect: bool) -> MqttOptionalConfigurationBuilder:
        return self._set(AUTO_RECONNECT, _format_bool(auto_reconnect))

    def clean_session(self, clean_session: bool) -> MqttOptionalConfigurationBuilder:
        return self._set(CLEAN_SESSION, _format_bool(clean_session))

    def cert_file(self, cert_file: str) -> MqttOptionalConfigurationBuilder:
        return self._set(CERT_FILE, cert_file)

    def cert_pem_block(self, cert_pem_block: str) -> MqttOptionalConfigurationBuilder:
        return self._set(CERT_PEM_BLOCK, cert_pem_block)

    def client_id(self, client_id: str) -> MqttOptionalConfigurationBuilder:
        return self._set(CLIENT_ID, client_id)

    def connect_timeout(self, connection_timeout: int) -> MqttOptionalConfigurationBuilder:
        """Set the connection timeout in seconds."""
        return self._set(CONNECT_TIMEOUT, _format_int(connection_timeout))

    def keep_alive(self, keep_alive: int) -> MqttOptionalConfigurationBuilder:
        """Set the keep-alive interval in seconds."""
        return self._set(KEEP_ALIVE, _format_int(keep_alive))

    def key_pem_block(self, key_pem_block: str) -> MqttOptionalConfigurationBuilder:
        return self._set(KEY_PEM_BLOCK, key_pem_block)

    def key_file(self, file_location: str) -> MqttOptionalConfigurationBuilder:
        return self._set(KEY_FILE, file_location)

    def password(self, password: str) -> MqttOptionalConfigurationBuilder:
        return self._set(PASSWORD, password)

    def qos(self, qos: int) -> MqttOptionalConfigurationBuilder:
        return self._set(QOS, _format_int(qos))

    def retained(self, retained: bool) -> MqttOptionalConfigurationBuilder:
        return self._set(RETAINED, _format_bool(retained))

    def skip_cert_verify(self, skip_cert_verify: bool) -> MqttOptionalConfigurationBuilder:
        return self._set(SKIP_CERT_VERIFY, _format_bool(skip_cert_verify))

    def username(self, username: str) -> MqttOptionalConfigurationBuilder:
        return self._set(USERNAME, username)


class RedisOptionalConfigurationBuilder:
    """Collects Redis options into the string map used as ``optional``."""

    def __init__(self) -> None:
        self._options: dict[str, str] = {}

    def build(self) -> dict[str, str]:
        """Return the option map built so far."""
        return self._options

    def password(self, password: str) -> RedisOptionalConfigurationBuilder:
        self._options[PASSWORD] = password
        return self