"""
URL Validator - Keep feed retrieval off internal networks.

Feed URLs are user-supplied, so before the server fetches one it checks that
the URL is http(s) and does not point at loopback, private, link-local or
cloud metadata addresses.
"""

import ipaddress
import socket
from urllib.parse import urlparse


class UnsafeURLError(ValueError):
    """Raised when a URL must not be fetched by the server."""

    pass


ALLOWED_SCHEMES = {"http", "https"}

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "ip6-localhost",
    "ip6-loopback",
    "metadata",
    "metadata.google.internal",
}

BLOCKED_SUFFIXES = (".local", ".internal", ".localhost")


def is_ip_blocked(ip_str: str) -> bool:
    """Check if an IP address is not publicly routable."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )


def validate_url(url: str, resolve_dns: bool = True) -> str:
    """
    Validate a feed URL before fetching it.

    Args:
        url: The URL to validate
        resolve_dns: Whether to resolve the hostname and check its addresses

    Returns:
        The URL, unchanged

    Raises:
        UnsafeURLError: If the URL fails validation
    """
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError as e:
        raise UnsafeURLError(f"Invalid URL format: {e}")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise UnsafeURLError(f"URL scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not hostname:
        raise UnsafeURLError("URL must include a hostname")

    hostname = hostname.lower()
    if hostname in BLOCKED_HOSTNAMES or hostname.endswith(BLOCKED_SUFFIXES):
        raise UnsafeURLError(f"Access to '{hostname}' is not allowed")

    if is_ip_blocked(hostname):
        raise UnsafeURLError(f"Access to IP address '{hostname}' is not allowed")

    if resolve_dns:
        try:
            addrinfo = socket.getaddrinfo(hostname, port or 80, proto=socket.IPPROTO_TCP)
        except socket.gaierror:
            # Unresolvable hosts fail at fetch time with a clearer error
            return url
        except ValueError as e:
            # Raised by the idna codec for empty or over-long labels
            raise UnsafeURLError(f"Invalid hostname '{hostname}': {e}")
        for _, _, _, _, sockaddr in addrinfo:
            if is_ip_blocked(sockaddr[0]):
                raise UnsafeURLError(
                    f"Hostname '{hostname}' resolves to blocked IP address '{sockaddr[0]}'"
                )

    return url
