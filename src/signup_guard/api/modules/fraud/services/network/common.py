from collections.abc import Mapping
from ipaddress import ip_address

from fastapi import Request

FORWARDED_IP_HEADERS = ("cf-connecting-ip", "x-forwarded-for", "x-real-ip")


def normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {str(k).lower(): str(v) for k, v in headers.items()}


def normalize_ip(value: str | None) -> str | None:
    if not value:
        return None

    candidate = value.split(",", 1)[0].strip()
    try:
        return str(ip_address(candidate))
    except ValueError:
        return None


def public_ip(value: str | None) -> str | None:
    """Like ``normalize_ip`` but drops private, loopback and reserved addresses."""
    ip = normalize_ip(value)
    if ip is None or not ip_address(ip).is_global:
        return None
    return ip


class RequestIpResolver:
    """Picks the caller's address from an incoming HTTP request.

    Forwarding headers are only honoured when the service sits behind a
    trusted proxy. Private, loopback and reserved addresses resolve to ``None``
    so the external lookup chain runs instead.
    """

    def __init__(self, trust_forwarded_ip: bool = False):
        self._trust_forwarded_ip = trust_forwarded_ip

    def resolve_headers(
        self,
        headers: Mapping[str, str] | None,
        peer_host: str | None,
    ) -> str | None:
        normalized = normalize_headers(headers)
        if self._trust_forwarded_ip:
            for header in FORWARDED_IP_HEADERS:
                ip = public_ip(normalized.get(header))
                if ip:
                    return ip
        return public_ip(peer_host)

    def get_request_ip(self, request: Request) -> str | None:
        peer_host = request.client.host if request.client else None
        return self.resolve_headers(request.headers, peer_host)


__all__ = (
    "FORWARDED_IP_HEADERS",
    "RequestIpResolver",
    "normalize_headers",
    "normalize_ip",
    "public_ip",
)
