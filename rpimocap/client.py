"""Camera client: detects markers on trigger and publishes them over MQTT."""

from __future__ import annotations

import json
import logging
import uuid as _uuid
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from rpimocap.camera import Intrinsics
from rpimocap.cameras import Camera
from rpimocap.discovery import ServiceInfo
from rpimocap.markers import DetectorParams, MarkerDetector
from rpimocap.mqtt import MQTTPublisher, MQTTSubscriber
from rpimocap.serialization import pack_points
from rpimocap.settings import MQTTSettings
from rpimocap.topics import TRIGGER, pixels, uuid_string

logger = logging.getLogger(__name__)

MQTT_SERVICE_TYPE = "_mqtt._tcp"
CLIENT_SERVICE_TYPE = "_rpimocap._tcp"
CLIENT_SERVICE_PORT = 5000
_ID_KEY = "ID"

PublisherFactory = Callable[[str, str, MQTTSettings, Callable[[Any], bytes]], Any]
SubscriberFactory = Callable[[str, str, MQTTSettings, Callable[[bytes], Any]], Any]


def _default_publisher(name: str, topic: str, settings: MQTTSettings, encoder) -> MQTTPublisher:
    return MQTTPublisher(name, topic, settings, encoder=encoder)


def _default_subscriber(name: str, topic: str, settings: MQTTSettings, on_message) -> MQTTSubscriber:
    return MQTTSubscriber(name, topic, settings, on_message=on_message)


def find_mqtt_service(services: Iterable[ServiceInfo]) -> ServiceInfo | None:
    """First MQTT broker among the discovered services, or None."""
    return next((service for service in services if service.type == MQTT_SERVICE_TYPE), None)


def service_description(client_id: _uuid.UUID | str, params: Intrinsics) -> str:
    """Compact JSON announced with the client service: its id and camera parameters."""
    data = {"id": uuid_string(client_id), "camParams": params.to_dict()}
    return json.dumps(data, separators=(",", ":"))


def persistent_client_id(path: str | Path) -> _uuid.UUID:
    """Client id stored in a settings file, created and saved on first use."""
    settings_path = Path(path)
    data: dict[str, Any] = {}
    try:
        loaded = json.loads(settings_path.read_text(encoding="utf-8"))
        if isinstance(loaded, dict):
            data = loaded
    except (OSError, ValueError):
        pass

    client_id = None
    stored = data.get(_ID_KEY)
    if isinstance(stored, str):
        try:
            client_id = _uuid.UUID(stored)
        except ValueError:
            client_id = None
    if client_id is None:
        client_id = _uuid.uuid4()

    data[_ID_KEY] = "{" + str(client_id) + "}"
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(data, indent=4), encoding="utf-8")
    return client_id


class Client:
    """Listens on the trigger topic and publishes detected marker centres."""

    def __init__(
        self,
        camera: Camera,
        params: Intrinsics,
        client_id: _uuid.UUID | str,
        services: Iterable[ServiceInfo] = (),
        settings: MQTTSettings | None = None,
        publisher_factory: PublisherFactory | None = None,
        subscriber_factory: SubscriberFactory | None = None,
    ) -> None:
        self.camera = camera
        self.id = client_id if isinstance(client_id, _uuid.UUID) else _uuid.UUID(str(client_id))
        self.detector = MarkerDetector(DetectorParams())
        self.settings = settings if settings is not None else MQTTSettings()
        self._publisher_factory = publisher_factory or _default_publisher
        self._subscriber_factory = subscriber_factory or _default_subscriber
        self.trigger_subscriber: Any = None
        self.point_publisher: Any = None

        id_text = uuid_string(self.id)
        self.service_name = "RPIMoCap-Client-" + id_text
        self.service_type = CLIENT_SERVICE_TYPE
        self.service_port = CLIENT_SERVICE_PORT
        self.description = service_description(self.id, params)

        self.use_services(services)
        self.init_mqtt()

    def camera_trigger(self, payload: bytes | None = None) -> list[tuple[float, float]] | None:
        """Capture an image, detect markers and publish them; None if the camera cannot open."""
        if not self.camera.opened and not self.camera.open():
            logger.critical("cannot open camera")
            return None

        image = self.camera.pull_data()
        if getattr(image, "size", 0) == 0:
            logger.debug("empty image from camera")

        points = self.detector.detect_markers(image)
        if self.point_publisher is None:
            raise RuntimeError("MQTT is not initialized")
        self.point_publisher.publish(points)
        return points

    def use_services(self, services: Iterable[ServiceInfo]) -> bool:
        """Take the broker address from discovered services; return whether one was used."""
        if self.is_mqtt_initialized():
            return False
        service = find_mqtt_service(services)
        if service is None:
            logger.warning("no MQTT service available on local network")
            return False
        self.settings.ip_address = str(service.ip_address) if service.ip_address is not None else ""
        self.settings.port = service.port
        return True

    def is_mqtt_initialized(self) -> bool:
        return self.trigger_subscriber is not None

    def init_mqtt(self) -> None:
        """Create the trigger subscriber and the points publisher once."""
        if self.is_mqtt_initialized():
            return
        id_text = uuid_string(self.id)
        self.trigger_subscriber = self._subscriber_factory(
            "triggersub-" + id_text, TRIGGER, self.settings, self.camera_trigger
        )
        self.point_publisher = self._publisher_factory(
            "pointspub-" + id_text, pixels(self.id), self.settings, pack_points
        )

    def close(self) -> None:
        """Close the MQTT endpoints."""
        for endpoint in (self.trigger_subscriber, self.point_publisher):
            if endpoint is not None:
                endpoint.close()
        self.trigger_subscriber = None
        self.point_publisher = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()