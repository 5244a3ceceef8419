# hoptrace

hoptrace shows the routers that packets pass through on their way to an IPv4
host. It sends UDP probes with a rising TTL and listens on a raw socket for
ICMP "time exceeded" and "destination unreachable" replies. For each hop it
prints the address that answered and the round-trip time of every probe.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

hoptrace listens on a raw ICMP socket, so it needs root privileges or the
`CAP_NET_RAW` capability.

```
sudo hoptrace [options] <target_ip_or_hostname>
```

| Option         | Meaning                                                 | Default |
|----------------|---------------------------------------------------------|---------|
| `--help`       | Show the help message and exit (first argument only).   |         |
| `-m <ttl>`     | Maximum number of hops (max TTL).                       | 30      |
| `-q <count>`   | Number of probes sent per hop.                          | 3       |
| `-t <timeout>` | Time to wait for each probe's reply, in milliseconds.   | 1000    |
| `-p <port>`    | Starting destination port.                              | 33434   |
| `-n`           | Print numeric addresses only; no reverse DNS lookups.   |         |

The target must be the last argument and must not start with `-`. Numeric
option values are read like C's `atoi`: the leading integer is used, and a
value with no leading integer counts as 0. Probe `seq` at hop `ttl` goes to
port `start_port + ttl + seq`.

Example:

```
$ sudo hoptrace -m 5 -q 2 example.com
traceroute to example.com (192.0.2.10), 5 hops max, 60 byte packets
 1  router.lan (192.168.1.1)  0.512 ms  0.431 ms  
 2  10.0.0.1  4.201 ms  * 
 3  * * 
 ...
```

A hop shows `*` for every probe that got no answer within the timeout. The
trace stops once a hop is answered with "destination unreachable" or the
maximum TTL is reached. The command exits with status 0 on success and 1 when
the arguments are wrong, the target cannot be resolved, the sockets cannot be
opened, or the trace fails.

## Library use

- `hoptrace.options.parse_options(argv)` turns an argument list (without the
  program name) into a `TraceOptions` dataclass, or raises `OptionError`.
- `hoptrace.resolver.resolve_destination(target)` returns an IPv4 address
  string; `create_network(target_ip)` builds a `Network` with
  `address_for_port(port)`. Both raise `ResolveError`.
- `hoptrace.sockets` opens the sockets: `create_udp_socket(ttl)`,
  `create_icmp_socket()` and `set_ttl(sock, ttl)`, raising `SocketSetupError`.
- `hoptrace.headers` parses and builds `IpHeader`, `IcmpHeader` and
  `UdpHeader` with `from_bytes` and `to_bytes`; `IcmpType` names the ICMP types.
- `hoptrace.probe` sends probes (`send_udp_probe`, `probe_port`), reads replies
  (`recv_icmp_reply`, returning a `ProbeReply` or `None`) and reports whether a
  raw IPv4 packet is a time-exceeded or destination-unreachable message
  (`classify_packet`).
- `hoptrace.tracer.Traceroute` runs a trace with `run(out)` or one hop at a
  time with `trace_hop(ttl)`, returning `HopResult` objects. It is a context
  manager that closes its sockets. `format_header` and `format_hop` produce
  the output lines.
- `hoptrace.cli.main(argv=None)` is the command; `help_text` and `print_help`
  give its help message.

## Limitations

- IPv4 only, with UDP probes only; there are no ICMP-echo or TCP probes.
- A reply is not matched against the probe that caused it: any ICMP time
  exceeded or destination unreachable packet that arrives on the raw socket
  within the timeout is taken as the answer.
- Only the first answering address of a hop is shown.