from __future__ import annotations

import logging
from urllib.parse import SplitResult, urlsplit

logger = logging.getLogger(__name__)

# Warm requests only ever go to the web origin.
_ALLOWED_SCHEMES: frozenset[str] = frozenset(["http", "https"])


def _validate_url_input(url: str) -> None:
    """Validate a URL before it is used as a warm target.

    Raises:
        ValueError: If URL is empty, too long or contains control characters

    """
    if not url:
        msg = "URL cannot be empty"
        raise ValueError(msg)
    if not isinstance(url, str):
        msg = "URL must be a string"
        raise ValueError(msg)
    if len(url) > 2048:  # RFC 2616 limit
        msg = "URL too long"
        raise ValueError(msg)
    if "\x00" in url:
        msg = "URL contains null bytes"
        raise ValueError(msg)
    if any(ord(char) < 32 for char in url):
        msg = "URL contains control characters"
        raise ValueError(msg)


def _split_web_url(url: str) -> SplitResult:
    """Split an http(s) URL that names a host.

    Raises:
        ValueError: If the URL is invalid, has no host, or is not http(s)

    """
    _validate_url_input(url)
    parts = urlsplit(url)
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        msg = (
            f"Unsupported URL scheme: {parts.scheme or '<none>'}. "
            "Only http and https are allowed."
        )
        raise ValueError(msg)
    if not parts.netloc:
        msg = "Invalid URL: missing hostname"
        raise ValueError(msg)
    return parts


def rewrite_host(url: str, host: str) -> str:
    """Point ``url`` at ``host``, keeping scheme, path, query and fragment.

    Upstream URL generation may embed an internal host name (load balancer,
    embed domain); edge cache keys only match real traffic on the public host.

    >>> rewrite_host("http://10.0.0.5/wiki/foo?x=1", "example.org")
    'http://example.org/wiki/foo?x=1'
    >>> rewrite_host("https://cdn.internal/a#frag", "example.org")
    'https://example.org/a#frag'

    Raises:
        ValueError: If the URL is invalid, has no host, or is not http(s)

    """
    if not host:
        msg = "Host to rewrite to cannot be empty"
        raise ValueError(msg)

    parts = _split_web_url(url)
    scheme = parts.scheme.lower()

    rewritten = f"{scheme}://{host}{parts.path}"
    if parts.query:
        rewritten += f"?{parts.query}"
    if parts.fragment:
        rewritten += f"#{parts.fragment}"

    logger.debug("rewrite_host", extra={"url": url[:200], "rewritten": rewritten[:200]})
    return rewritten


def resolve_warm_url(url: str, canonical_host: str | None) -> str:
    """Return the URL to request: rewritten when a canonical host is set, else verbatim."""
    if not canonical_host:
        _split_web_url(url)
        return url
    return rewrite_host(url, canonical_host)


__all__ = ["resolve_warm_url", "rewrite_host"]
