"""Connection settings for the MQTT broker."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger("rpimocap.mqtt")


class MQTTQoS(enum.IntEnum):
    """MQTT delivery guarantee."""

    AT_MOST_ONCE = 0
    AT_LEAST_ONCE = 1
    EXACTLY_ONCE = 2


@dataclass
class MQTTSettings:
    """Broker address, port and quality of service."""

    ip_address: str = "127.0.0.1"
    port: int = 1883
    qos: MQTTQoS = MQTTQoS.EXACTLY_ONCE