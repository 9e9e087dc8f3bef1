from __future__ import annotations

import re
from typing import Any

_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_HOST = re.compile(r"^[A-Za-z0-9.\-]+(:\d{1,5})?$|^\[[0-9A-Fa-f:.]+\](:\d{1,5})?$")


def _parse_int(value: Any, *, default: int, name: str) -> int:
    try:
        return int(str(value if value not in (None, "") else default).strip())
    except ValueError as exc:
        msg = f"{name} must be a valid integer"
        raise ValueError(msg) from exc


def _parse_seconds(value: Any, *, default: float, name: str) -> float:
    try:
        parsed = float(str(value if value not in (None, "") else default).strip())
    except ValueError as exc:
        msg = f"{name} must be a valid number of seconds"
        raise ValueError(msg) from exc
    if parsed != parsed:  # NaN
        msg = f"{name} must be a valid number of seconds"
        raise ValueError(msg)
    return parsed


def _normalize_canonical_host(value: Any) -> str | None:
    """Validate a bare ``host[:port]`` value; empty means "no rewrite"."""
    if value is None:
        return None
    host = str(value).strip()
    if not host:
        return None
    if "://" in host or "/" in host or any(ch.isspace() for ch in host):
        msg = "Canonical host must be a bare host name, optionally with a port"
        raise ValueError(msg)
    if not _HOST.match(host):
        msg = f"Canonical host contains invalid characters: {host!r}"
        raise ValueError(msg)
    return host.lower()


def _parse_request_headers(value: Any) -> dict[str, str]:
    """Accept a mapping or ``Name: value`` lines (one header per line)."""
    if value in (None, ""):
        return {}

    pairs: list[tuple[str, Any]]
    if isinstance(value, dict):
        pairs = list(value.items())
    else:
        pairs = []
        for raw_line in str(value).splitlines():
            line = raw_line.strip()
            if not line:
                continue
            name, sep, header_value = line.partition(":")
            if not sep:
                msg = f"Invalid header line (expected 'Name: value'): {line!r}"
                raise ValueError(msg)
            pairs.append((name, header_value))

    headers: dict[str, str] = {}
    for name, header_value in pairs:
        name = str(name).strip()
        if not _HEADER_NAME.match(name):
            msg = f"Invalid header name: {name!r}"
            raise ValueError(msg)
        text = str(header_value).strip()
        if "\n" in text or "\r" in text:
            msg = f"Header {name} contains line breaks"
            raise ValueError(msg)
        headers[name] = text
    return headers
