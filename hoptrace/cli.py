"""Command-line entry point."""

from __future__ import annotations

import os
import sys

from .options import OptionError, parse_options
from .resolver import ResolveError, resolve_destination
from .tracer import Traceroute


def help_text(program_name: str) -> str:
    """The text shown for ``--help``."""
    return (
        f"Usage: {program_name} [options] <target_ip_or_hostname>\n\n"
        "Options:\n"
        "  --help           Show this help message and exit.\n"
        "  -m <ttl>         Set maximum number of hops (max TTL).\n"
        "  -q <count>       Set number of queries per hop.\n"
        "  -t <timeout>     Set timeout per probe in milliseconds.\n"
        "  -p <port>        Set starting destination port (default: 33434).\n"
        "  -n               Do not resolve IP addresses to their domain names.\n"
    )


def print_help(program_name: str) -> None:
    """Print the help text to standard output."""
    sys.stdout.write(help_text(program_name))


def main(argv: list[str] | None = None) -> int:
    """Run a trace from command-line arguments; return the exit status."""
    program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "hoptrace"
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        print(f"Usage: {program} <target_ip_or_hostname>", file=sys.stderr)
        return 1
    if args[0] == "--help":
        print_help(program)
        return 0

    try:
        options = parse_options(args)
    except OptionError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        target_ip = resolve_destination(options.target)
    except ResolveError:
        print("Failed to resolve the target address", file=sys.stderr)
        return 1

    try:
        tracer = Traceroute(target_ip, options, options.target)
    except OSError as exc:
        print(exc, file=sys.stderr)
        print("Failed to initialize traceroute.", file=sys.stderr)
        return 1

    with tracer:
        try:
            tracer.run()
        except OSError as exc:
            print(exc, file=sys.stderr)
            print("Traceroute failed.", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())