"""Sending UDP probes and reading the ICMP replies they provoke."""

from __future__ import annotations

import select
import socket
import time
from dataclasses import dataclass

from .headers import PAYLOAD_SIZE, IcmpHeader, IcmpType, IpHeader
from .resolver import Network

RECV_BUFFER_SIZE = 512

_ANSWERS = (IcmpType.TIME_EXCEEDED, IcmpType.DEST_UNREACH)


@dataclass(frozen=True)
class ProbeReply:
    """An ICMP answer to one probe."""

    address: str
    rtt_ms: float
    icmp_type: IcmpType

    @property
    def reached(self) -> bool:
        """True when the reply came from the destination itself."""
        return self.icmp_type == IcmpType.DEST_UNREACH


def probe_port(start_port: int, ttl: int, seq: int) -> int:
    """Destination port of probe ``seq`` at hop ``ttl``."""
    return start_port + ttl + seq


def send_udp_probe(
    sock: socket.socket, network: Network, start_port: int, seq: int, ttl: int
) -> int:
    """Send a one-byte probe; return the destination port it went to.

    Raises ``OSError`` when the datagram cannot be sent.
    """
    port = probe_port(start_port, ttl, seq)
    sock.sendto(bytes(PAYLOAD_SIZE), network.address_for_port(port))
    return port


def classify_packet(packet: bytes) -> IcmpType | None:
    """Return the ICMP type of a raw IPv4 packet if it answers a probe."""
    try:
        ip_header = IpHeader.from_bytes(packet)
        icmp_header = IcmpHeader.from_bytes(packet[ip_header.header_length():])
    except ValueError:
        return None
    try:
        kind = IcmpType(icmp_header.type)
    except ValueError:
        return None
    return kind if kind in _ANSWERS else None


def recv_icmp_reply(
    sock: socket.socket, start: float, timeout_ms: int
) -> ProbeReply | None:
    """Wait up to ``timeout_ms`` for an answer to a probe sent at ``start``.

    ``start`` is a ``time.monotonic()`` reading. Returns ``None`` on timeout
    or when the packet received is not an answer to a probe.
    """
    if timeout_ms < 0:
        return None
    ready, _, _ = select.select([sock], [], [], timeout_ms / 1000.0)
    if not ready:
        return None
    packet, sender = sock.recvfrom(RECV_BUFFER_SIZE)
    rtt_ms = (time.monotonic() - start) * 1000.0
    kind = classify_packet(packet)
    if kind is None:
        return None
    return ProbeReply(address=sender[0], rtt_ms=rtt_ms, icmp_type=kind)