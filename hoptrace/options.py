"""Command-line option parsing for the tracer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

DEFAULT_MAX_TTL = 30
DEFAULT_QUERY_COUNT = 3
DEFAULT_TIMEOUT_MS = 1000
DEFAULT_START_PORT = 33434

_INT_OPTIONS = {
    "-m": "max_ttl",
    "-q": "query_count",
    "-t": "timeout",
    "-p": "start_port",
}

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


class OptionError(ValueError):
    """Raised when the command line cannot be understood."""


@dataclass
class TraceOptions:
    """Settings for one trace run."""

    target: str
    max_ttl: int = DEFAULT_MAX_TTL
    query_count: int = DEFAULT_QUERY_COUNT
    timeout: int = DEFAULT_TIMEOUT_MS
    start_port: int = DEFAULT_START_PORT
    resolve_names: bool = True


def _leading_int(text: str) -> int:
    """Read the leading integer of ``text``; 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_options(argv: Iterable[str]) -> TraceOptions:
    """Parse arguments (without the program name) into ``TraceOptions``.

    The target must be the last argument and must not start with ``-``.
    ``--help`` is ignored here; the caller handles it.
    """
    args = list(argv)
    last = len(args) - 1
    values: dict[str, object] = {}
    target: str | None = None

    items = enumerate(args)
    for index, arg in items:
        if arg == "--help":
            continue
        if arg in _INT_OPTIONS and index < last:
            _, value = next(items)
            values[_INT_OPTIONS[arg]] = _leading_int(value)
        elif arg == "-n":
            values["resolve_names"] = False
        elif not arg.startswith("-") and index == last:
            target = arg
        else:
            raise OptionError(f"Unknown or malformed option: {arg}")

    if target is None:
        raise OptionError("Error: No target specified.")

    return TraceOptions(target=target, **values)