"""Wire formats of the IPv4, ICMP and UDP headers."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from enum import IntEnum

PAYLOAD_SIZE = 1


class IcmpType(IntEnum):
    """ICMP message types the tracer cares about."""

    ECHO_REPLY = 0
    DEST_UNREACH = 3
    TIME_EXCEEDED = 11


def _unpack(layout: struct.Struct, data: bytes, name: str) -> tuple:
    if len(data) < layout.size:
        raise ValueError(
            f"{name} needs {layout.size} bytes, got {len(data)}"
        )
    return layout.unpack_from(data)


@dataclass
class IpHeader:
    """IPv4 header (RFC 791); addresses are 32-bit integers."""

    version_ihl: int
    tos: int
    total_length: int
    id: int
    frag_offset: int
    ttl: int
    protocol: int
    checksum: int
    src_ip: int
    dest_ip: int

    _LAYOUT = struct.Struct("!BBHHHBBHII")

    @classmethod
    def from_bytes(cls, data: bytes) -> "IpHeader":
        """Decode the first 20 bytes of ``data``."""
        return cls(*_unpack(cls._LAYOUT, bytes(data), "IPv4 header"))

    def to_bytes(self) -> bytes:
        return self._LAYOUT.pack(
            self.version_ihl,
            self.tos,
            self.total_length,
            self.id,
            self.frag_offset,
            self.ttl,
            self.protocol,
            self.checksum,
            self.src_ip,
            self.dest_ip,
        )

    def version(self) -> int:
        """IP version from the high nibble."""
        return self.version_ihl >> 4

    def header_length(self) -> int:
        """Header length in bytes, from the low nibble."""
        return (self.version_ihl & 0x0F) * 4

    @property
    def source(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(self.src_ip)

    @property
    def destination(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(self.dest_ip)


@dataclass
class IcmpHeader:
    """ICMP header (RFC 792), echo layout."""

    type: int
    code: int
    checksum: int
    identifier: int
    sequence: int

    _LAYOUT = struct.Struct("!BBHHH")

    @classmethod
    def from_bytes(cls, data: bytes) -> "IcmpHeader":
        """Decode the first 8 bytes of ``data``."""
        return cls(*_unpack(cls._LAYOUT, bytes(data), "ICMP header"))

    def to_bytes(self) -> bytes:
        return self._LAYOUT.pack(
            self.type, self.code, self.checksum, self.identifier, self.sequence
        )


@dataclass
class UdpHeader:
    """UDP header (RFC 768)."""

    src_port: int
    dest_port: int
    length: int
    checksum: int

    _LAYOUT = struct.Struct("!HHHH")

    @classmethod
    def from_bytes(cls, data: bytes) -> "UdpHeader":
        """Decode the first 8 bytes of ``data``."""
        return cls(*_unpack(cls._LAYOUT, bytes(data), "UDP header"))

    def to_bytes(self) -> bytes:
        return self._LAYOUT.pack(
            self.src_port, self.dest_port, self.length, self.checksum
        )


IP_HEADER_SIZE = IpHeader._LAYOUT.size
ICMP_HEADER_SIZE = IcmpHeader._LAYOUT.size
UDP_HEADER_SIZE = UdpHeader._LAYOUT.size