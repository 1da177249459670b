"""Run the Hitcount API server."""

from __future__ import annotations

import argparse
import ipaddress
import logging

import uvicorn

from hitcount.config import get_settings
from hitcount.main import app

server_logger = logging.getLogger("hitcount.server")


def parse_address(value: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6]:port``) into its parts."""

    host, sep, port_text = value.rpartition(":")
    if not sep or not host:
        raise argparse.ArgumentTypeError(f"Invalid address: {value!r}")
    host = host.strip("[]")
    try:
        ipaddress.ip_address(host)
        port = int(port_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid address: {value!r}") from exc
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"Invalid port in address: {value!r}")
    return host, port


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Count requests per client address and path")
    parser.add_argument(
        "-a",
        "--address",
        type=parse_address,
        default=settings.listen_address,
        help="Listen address as host:port (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    host, port = args.address
    server_logger.info("listening address=%s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
