"""Parsing of resolved zeroconf services from avahi-browse parsable output."""

from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass

_SHORT_MIN = -32768
_SHORT_MAX = 32767


class IPVersion(enum.Enum):
    """Network layer protocol of a service."""

    IPV4 = "IPv4"
    IPV6 = "IPv6"
    ANY = "any"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ServiceInfo:
    """One resolved service announced on the local network."""

    interface: str = ""
    ip_version: IPVersion = IPVersion.UNKNOWN
    type: str = ""
    domain: str = ""
    ip_address: ipaddress.IPv4Address | ipaddress.IPv6Address | None = None
    port: int = -1
    description: str = ""


def _to_short(text: str) -> int:
    try:
        value = int(text.strip(), 10)
    except ValueError:
        return 0
    return value if _SHORT_MIN <= value <= _SHORT_MAX else 0


def _to_address(text: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(text.strip())
    except ValueError:
        return None


def parse_services(output: str, search_ip_version: IPVersion) -> list[ServiceInfo]:
    """Resolved services from ``avahi-browse -atpr`` output that match the IP version.

    Only resolved entries (lines starting with ``=``) are considered. The
    surrounding quotes of the description are removed; entries with too few
    fields are skipped.
    """
    services = []
    for line in output.split("\n"):
        if not line:
            continue
        fields = line.split(";")
        if fields[0] != "=" or len(fields) < 10:
            continue

        service_version = IPVersion.IPV4 if fields[2] == "IPv4" else IPVersion.IPV6
        if search_ip_version not in (service_version, IPVersion.ANY):
            continue

        description = fields[9]
        if len(description) > 1:
            description = description[1:-1]

        services.append(
            ServiceInfo(
                interface=fields[1],
                ip_version=search_ip_version,
                type=fields[4],
                domain=fields[5],
                ip_address=_to_address(fields[7]),
                port=_to_short(fields[8]),
                description=description,
            )
        )
    return services