"""Resolution of the trace target to an IPv4 destination."""

from __future__ import annotations

import socket
from dataclasses import dataclass

DEFAULT_PORT = 33434


class ResolveError(OSError):
    """Raised when a target cannot be resolved to an IPv4 address."""


@dataclass
class Network:
    """Destination of the probes."""

    target_ip: str
    dest_ip_bin: bytes
    dest_port: int = DEFAULT_PORT
    hostname: str | None = None

    @property
    def dest_ip(self) -> str:
        return socket.inet_ntoa(self.dest_ip_bin)

    @property
    def dest_addr(self) -> tuple[str, int]:
        return self.address_for_port(self.dest_port)

    def address_for_port(self, port: int) -> tuple[str, int]:
        """Socket address of the destination at ``port``, wrapped to 16 bits."""
        return (self.dest_ip, port & 0xFFFF)


def _lookup_ipv4(target: str) -> str:
    try:
        results = socket.getaddrinfo(target, None, socket.AF_INET, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as exc:
        reason = getattr(exc, "strerror", None) or str(exc)
        raise ResolveError(f"getaddrinfo() failed: {reason}") from exc
    if not results:
        raise ResolveError("getaddrinfo() failed: no address")
    return results[0][4][0]


def _is_ipv4_literal(text: str) -> bool:
    try:
        socket.inet_pton(socket.AF_INET, text)
    except (OSError, ValueError):
        return False
    return True


def resolve_destination(target: str) -> str:
    """Return ``target`` if it is an IPv4 address, else its first IPv4 address."""
    if _is_ipv4_literal(target):
        return target
    try:
        return _lookup_ipv4(target)
    except ResolveError as exc:
        raise ResolveError("Failed to resolve the target address") from exc


def create_network(target_ip: str) -> Network:
    """Build the probe destination for ``target_ip``."""
    address = _lookup_ipv4(target_ip)
    return Network(
        target_ip=target_ip,
        dest_ip_bin=socket.inet_aton(address),
        dest_port=DEFAULT_PORT,
    )