"""The hop-by-hop trace loop and its output."""

from __future__ import annotations

import socket
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, TextIO

from .options import TraceOptions
from .probe import recv_icmp_reply, send_udp_probe
from .resolver import Network, create_network
from .sockets import create_icmp_socket, create_udp_socket, set_ttl

PACKET_SIZE = 60


def _reverse_lookup(address: str) -> str:
    try:
        return socket.gethostbyaddr(address)[0] or address
    except (OSError, UnicodeError):
        return address


@dataclass
class HopResult:
    """What one TTL step found: the replying router and each probe's time."""

    ttl: int
    address: str | None = None
    host: str | None = None
    rtts: list[float | None] = field(default_factory=list)

    def received(self) -> bool:
        """True when at least one probe at this hop was answered."""
        return self.address is not None


def format_header(hostname: str, target_ip: str, max_ttl: int) -> str:
    """The first output line of a trace."""
    return (
        f"traceroute to {hostname} ({target_ip}), {max_ttl} hops max, "
        f"{PACKET_SIZE} byte packets"
    )


def format_hop(hop: HopResult, resolve_names: bool) -> str:
    """One output line for ``hop``, without the line break."""
    parts = [f"{hop.ttl:2d}  "]
    if hop.received():
        if resolve_names and hop.host is not None and hop.host != hop.address:
            parts.append(f"{hop.host} ({hop.address})  ")
        else:
            parts.append(f"{hop.address}  ")
        parts.extend("* " if rtt is None else f"{rtt:.3f} ms  " for rtt in hop.rtts)
    else:
        parts.extend("* " for _ in hop.rtts)
    return "".join(parts)


class Traceroute:
    """A trace towards one destination, owning its two sockets."""

    def __init__(
        self,
        target_ip: str,
        options: TraceOptions,
        hostname: str | None = None,
        *,
        network: Network | None = None,
        udp_socket: socket.socket | None = None,
        icmp_socket: socket.socket | None = None,
        reverse_lookup: Callable[[str], str] | None = None,
    ) -> None:
        self.options = options
        self.current_ttl = 1
        self.destination_reached = False
        self._reverse_lookup = reverse_lookup or _reverse_lookup
        self.udp_socket = udp_socket or create_udp_socket(self.current_ttl)
        try:
            self.icmp_socket = icmp_socket or create_icmp_socket()
            self.network = network or create_network(target_ip)
        except BaseException:
            self.udp_socket.close()
            if icmp_socket is None and hasattr(self, "icmp_socket"):
                self.icmp_socket.close()
            raise
        self.network.hostname = hostname if hostname is not None else options.target

    def trace_hop(self, ttl: int) -> HopResult:
        """Send the probes for ``ttl`` and collect their answers."""
        self.current_ttl = ttl
        set_ttl(self.udp_socket, ttl)
        hop = HopResult(ttl=ttl)
        for seq in range(self.options.query_count):
            start = time.monotonic()
            try:
                send_udp_probe(
                    self.udp_socket, self.network, self.options.start_port, seq, ttl
                )
                reply = recv_icmp_reply(self.icmp_socket, start, self.options.timeout)
            except OSError:
                reply = None
            if reply is None:
                hop.rtts.append(None)
                continue
            if reply.reached:
                self.destination_reached = True
            if hop.address is None:
                hop.address = reply.address
                hop.host = (
                    self._reverse_lookup(reply.address)
                    if self.options.resolve_names
                    else reply.address
                )
            hop.rtts.append(reply.rtt_ms)
        return hop

    def run(self, out: TextIO | None = None) -> list[HopResult]:
        """Trace until the destination answers or the hop limit is hit."""
        out = out if out is not None else sys.stdout
        hostname = self.network.hostname or self.network.target_ip
        out.write(
            format_header(hostname, self.network.target_ip, self.options.max_ttl) + "\n"
        )
        hops = []
        for ttl in range(1, self.options.max_ttl + 1):
            hop = self.trace_hop(ttl)
            hops.append(hop)
            out.write(format_hop(hop, self.options.resolve_names) + "\n")
            out.flush()
            if hop.received() and self.destination_reached:
                break
        return hops

    def close(self) -> None:
        """Close both sockets."""
        self.udp_socket.close()
        self.icmp_socket.close()

    def __enter__(self) -> "Traceroute":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()