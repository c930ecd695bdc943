"""MQTT publisher and subscriber endpoints with logging of broker events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import msgpack
import paho.mqtt.client as mqtt

from rpimocap.settings import MQTTSettings, logger

LOG_INFO = 0x01
LOG_NOTICE = 0x02
LOG_WARNING = 0x04
LOG_ERR = 0x08
LOG_DEBUG = 0x10
LOG_SUBSCRIBE = 0x20
LOG_UNSUBSCRIBE = 0x40

_LEVELS = {
    LOG_DEBUG: logging.DEBUG,
    LOG_INFO: logging.INFO,
    LOG_NOTICE: logging.INFO,
    LOG_SUBSCRIBE: logging.INFO,
    LOG_UNSUBSCRIBE: logging.INFO,
    LOG_WARNING: logging.WARNING,
    LOG_ERR: logging.CRITICAL,
}


def log_level_for(mosquitto_level: int) -> int:
    """Python logging level for a broker client log level; unknown levels are debug."""
    return _LEVELS.get(mosquitto_level, logging.DEBUG)


def _make_client(client_id: str) -> Any:
    api_version = getattr(mqtt, "CallbackAPIVersion", None)
    if api_version is not None:
        return mqtt.Client(api_version.VERSION2, client_id=client_id)
    return mqtt.Client(client_id=client_id)


def _describe(code: Any) -> str:
    if isinstance(code, int) and not isinstance(code, bool):
        return mqtt.error_string(code)
    return str(code)


def _is_failure(code: Any) -> bool:
    failure = getattr(code, "is_failure", None)
    if failure is not None:
        return bool(failure)
    return code != 0


def _default_encoder(data: Any) -> bytes:
    return msgpack.packb(data, use_single_float=True)


class _Endpoint:
    """Common connection handling of publishers and subscribers."""

    def __init__(self, client_name: str, topic: str, settings: MQTTSettings | None, client: Any) -> None:
        self.client_name = client_name
        self.topic = topic
        self.settings = settings if settings is not None else MQTTSettings()
        self.running = False
        self._client = client if client is not None else _make_client(client_name)
        self._client.on_connect = self._handle_connect
        self._client.on_disconnect = self._handle_disconnect
        self._client.on_log = self._handle_log
        self._start()

    def _start(self) -> None:
        try:
            self._client.connect_async(self.settings.ip_address, self.settings.port)
        except ValueError:
            logger.debug("%s the input parameters were invalid", self.client_name)
            return
        except OSError as exc:
            logger.critical("%s %s", self.client_name, exc)
            return
        self._client.loop_start()
        self.running = True

    def _handle_connect(self, *args: Any) -> None:
        code = args[3] if len(args) > 3 else 0
        if _is_failure(code):
            logger.critical("%s %s", self.client_name, _describe(code))

    def _handle_disconnect(self, *args: Any) -> None:
        code = args[3] if len(args) >= 5 else args[-1]
        logger.critical("%s %s", self.client_name, _describe(code))

    def _handle_log(self, client: Any, userdata: Any, level: int, text: str) -> None:
        logger.log(log_level_for(level), "%s %s", self.client_name, text)

    def _shutdown(self) -> None:
        self._client.disconnect()
        if self.running:
            self._client.loop_stop()
            self.running = False

    def close(self) -> None:
        """Disconnect from the broker and stop the network loop."""
        self._shutdown()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class MQTTPublisher(_Endpoint):
    """Publishes encoded data to one topic."""

    def __init__(
        self,
        client_name: str,
        topic: str,
        settings: MQTTSettings | None = None,
        encoder: Callable[[Any], bytes] | None = None,
        client: Any = None,
    ) -> None:
        self._encoder = encoder if encoder is not None else _default_encoder
        super().__init__(client_name, topic, settings, client)

    def publish(self, data: Any) -> None:
        """Encode data and publish it with the configured quality of service."""
        payload = self._encoder(data)
        self._client.publish(self.topic, payload, qos=int(self.settings.qos), retain=False)

    def close(self) -> None:
        """Disconnect from the broker and stop the network loop."""
        self._shutdown()


class MQTTSubscriber(_Endpoint):
    """Subscribes to one topic and hands every payload to its listeners."""

    def __init__(
        self,
        client_name: str,
        topic: str,
        settings: MQTTSettings | None = None,
        on_message: Callable[[bytes], None] | None = None,
        client: Any = None,
    ) -> None:
        self.listeners: list[Callable[[bytes], None]] = [on_message] if on_message is not None else []
        super().__init__(client_name, topic, settings, client)
        self._client.on_message = self._handle_message

    def _handle_connect(self, *args: Any) -> None:
        self._client.subscribe(self.topic, qos=int(self.settings.qos))

    def _handle_message(self, client: Any, userdata: Any, message: Any) -> None:
        payload = bytes(message.payload)
        for listener in list(self.listeners):
            listener(payload)

    def close(self) -> None:
        """Disconnect from the broker and stop the network loop."""
        self._shutdown()