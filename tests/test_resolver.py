import socket
from unittest import mock

import pytest

from hoptrace.resolver import Network, ResolveError, create_network, resolve_destination


def _answer(address):
    return [(socket.AF_INET, socket.SOCK_DGRAM, 17, "", (address, 0))]


def test_ip_literal_is_returned_unchanged():
    with mock.patch("socket.getaddrinfo") as lookup:
        assert resolve_destination("10.1.2.3") == "10.1.2.3"
    lookup.assert_not_called()


def test_hostname_is_looked_up():
    with mock.patch("socket.getaddrinfo", return_value=_answer("192.0.2.7")) as lookup:
        assert resolve_destination("example.com") == "192.0.2.7"
    assert lookup.call_args == mock.call(
        "example.com", None, socket.AF_INET, socket.SOCK_DGRAM
    )


def test_first_result_wins():
    answers = _answer("192.0.2.1") + _answer("192.0.2.2")
    with mock.patch("socket.getaddrinfo", return_value=answers):
        assert resolve_destination("example.com") == "192.0.2.1"


def test_unresolvable_hostname():
    error = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
    with mock.patch("socket.getaddrinfo", side_effect=error):
        with pytest.raises(ResolveError, match="Failed to resolve the target address"):
            resolve_destination("nowhere.example.com")


def test_create_network_from_literal():
    network = create_network("10.0.0.1")
    assert network.target_ip == "10.0.0.1"
    assert network.dest_ip_bin == bytes([10, 0, 0, 1])
    assert network.dest_port == 33434
    assert network.dest_addr == ("10.0.0.1", 33434)
    assert network.hostname is None


def test_create_network_failure():
    error = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
    with mock.patch("socket.getaddrinfo", side_effect=error):
        with pytest.raises(ResolveError, match="getaddrinfo\\(\\) failed"):
            create_network("nowhere.example.com")


def test_address_for_port():
    network = Network(target_ip="host", dest_ip_bin=socket.inet_aton("192.0.2.9"))
    assert network.address_for_port(33500) == ("192.0.2.9", 33500)


def test_address_for_port_wraps_to_sixteen_bits():
    network = Network(target_ip="host", dest_ip_bin=socket.inet_aton("192.0.2.9"))
    assert network.address_for_port(65536 + 5) == network.address_for_port(5)