"""Client address derivation and counter key construction."""

from __future__ import annotations

import ipaddress
import logging

from fastapi import Request

DEFAULT_CLIENT_IP_HEADER = "cf-connecting-ip"
UNKNOWN_CLIENT = "unknown"

logger = logging.getLogger("hitcount.request")


def parse_ip(raw: str | None) -> str | None:
    """Return the normalized IP address in ``raw``, or None if it is not one."""

    if raw is None:
        return None
    candidate = raw.strip()
    if not candidate:
        return None
    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        return None


def client_ip(request: Request, *, header: str = DEFAULT_CLIENT_IP_HEADER) -> str:
    """
    Return the address a request is attributed to.

    The proxy-supplied header wins when it carries a valid IP address. Anything
    else falls back to the transport peer.
    """

    raw = request.headers.get(header) if header else None
    forwarded = parse_ip(raw)
    if forwarded is not None:
        return forwarded
    if raw:
        logger.debug("client_ip_header_ignored header=%s value=%r", header, raw)
    return request.client.host if request.client else UNKNOWN_CLIENT


def counter_key(ip: str, path: str) -> str:
    return f"{ip}:{path}"
