"""Discovery of the host's internal IPv4 address."""

from __future__ import annotations

import ipaddress
import socket

import psutil


class InternalIpNotFoundError(LookupError):
    """Raised when the host has no non-loopback IPv4 address."""

    def __init__(self, message: str = "cannot find internal ip") -> None:
        super().__init__(message)


def get_internal_ip() -> str:
    """Return the first IPv4 address of an interface that is not loopback."""
    for addresses in psutil.net_if_addrs().values():
        for address in addresses:
            if address.family != socket.AF_INET:
                continue
            try:
                ip = ipaddress.IPv4Address(address.address)
            except ValueError:
                continue
            if not ip.is_loopback:
                return str(ip)
    raise InternalIpNotFoundError()