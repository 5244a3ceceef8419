"""Creation of the probe and reply sockets."""

from __future__ import annotations

import socket


class SocketSetupError(OSError):
    """Raised when a socket cannot be created or configured."""


def set_ttl(sock: socket.socket, ttl: int) -> None:
    """Set the IP time-to-live of outgoing packets on ``sock``."""
    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)
    except OSError as exc:
        raise SocketSetupError(f"setsockopt(IP_TTL) failed: {exc}") from exc


def create_udp_socket(ttl: int) -> socket.socket:
    """Open a UDP socket whose packets carry ``ttl``."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    except OSError as exc:
        raise SocketSetupError(f"Failed to create UDP socket: {exc}") from exc
    try:
        set_ttl(sock, ttl)
    except SocketSetupError:
        sock.close()
        raise
    return sock


def create_icmp_socket() -> socket.socket:
    """Open a raw ICMP socket; this needs elevated privileges."""
    try:
        return socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
    except OSError as exc:
        raise SocketSetupError(
            f"Failed to create ICMP socket (need root privileges): {exc}"
        ) from exc