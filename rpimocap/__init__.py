"""Motion capture client: marker detection, camera simulation, MQTT messaging and service parsing."""

__version__ = "0.1.0"