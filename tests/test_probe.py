import socket
import time

import pytest

from hoptrace.headers import IcmpHeader, IcmpType, IpHeader
from hoptrace.probe import (
    ProbeReply,
    classify_packet,
    probe_port,
    recv_icmp_reply,
    send_udp_probe,
)
from hoptrace.resolver import Network


def _packet(icmp_type, ihl=5):
    ip = IpHeader(
        version_ihl=0x40 | ihl,
        tos=0,
        total_length=20 + 8,
        id=1,
        frag_offset=0,
        ttl=64,
        protocol=1,
        checksum=0,
        src_ip=0x7F000001,
        dest_ip=0x7F000001,
    )
    options = bytes((ihl - 5) * 4)
    icmp = IcmpHeader(type=icmp_type, code=0, checksum=0, identifier=0, sequence=0)
    return ip.to_bytes() + options + icmp.to_bytes()


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    yield sock
    sock.close()


@pytest.fixture
def sender():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    yield sock
    sock.close()


def _loopback():
    return Network(target_ip="127.0.0.1", dest_ip_bin=socket.inet_aton("127.0.0.1"))


def test_probe_port_default_first_probe():
    assert probe_port(33434, 1, 0) == 33435


@pytest.mark.parametrize("seq", [0, 1, 5])
def test_probe_port_grows_with_sequence_and_ttl(seq):
    base = probe_port(40000, 3, seq)
    assert probe_port(40000, 3, seq + 1) == base + 1
    assert probe_port(40000, 4, seq) == base + 1


def test_classify_time_exceeded():
    assert classify_packet(_packet(11)) is IcmpType.TIME_EXCEEDED


def test_classify_destination_unreachable():
    assert classify_packet(_packet(3)) is IcmpType.DEST_UNREACH


@pytest.mark.parametrize("kind", [0, 8, 5])
def test_classify_other_types_are_ignored(kind):
    assert classify_packet(_packet(kind)) is None


def test_classify_respects_ip_options():
    assert classify_packet(_packet(11, ihl=6)) is IcmpType.TIME_EXCEEDED


def test_classify_short_packet():
    assert classify_packet(b"\x45\x00") is None


def test_send_udp_probe_hits_expected_port(receiver, sender):
    port = receiver.getsockname()[1]
    ttl, seq = 2, 1
    sent_port = send_udp_probe(sender, _loopback(), port - ttl - seq, seq, ttl)
    assert sent_port == port
    receiver.settimeout(2)
    data, _ = receiver.recvfrom(16)
    assert data == b"\x00"


def test_recv_reply_time_exceeded(receiver, sender):
    start = time.monotonic()
    sender.sendto(_packet(11), receiver.getsockname())
    reply = recv_icmp_reply(receiver, start, 1000)
    assert isinstance(reply, ProbeReply)
    assert reply.address == "127.0.0.1"
    assert reply.icmp_type is IcmpType.TIME_EXCEEDED
    assert reply.reached is False
    assert reply.rtt_ms >= 0


def test_recv_reply_destination_reached(receiver, sender):
    start = time.monotonic()
    sender.sendto(_packet(3), receiver.getsockname())
    reply = recv_icmp_reply(receiver, start, 1000)
    assert reply.reached is True


def test_recv_reply_ignores_unrelated_packet(receiver, sender):
    sender.sendto(_packet(0), receiver.getsockname())
    assert recv_icmp_reply(receiver, time.monotonic(), 1000) is None


def test_recv_reply_times_out(receiver):
    assert recv_icmp_reply(receiver, time.monotonic(), 20) is None


def test_recv_reply_negative_timeout(receiver, sender):
    sender.sendto(_packet(11), receiver.getsockname())
    assert recv_icmp_reply(receiver, time.monotonic(), -1) is None