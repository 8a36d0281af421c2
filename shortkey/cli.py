#!/usr/bin/env python3
"""
Command-line client for a running shortkey service.

Usage:
    shortkey-cli register <url>
    shortkey-cli resolve <key>
"""

import argparse
import json
import socket
import sys
from typing import Optional
from urllib.parse import quote

import httpx

from shortkey.line_server.protocol import KEY_REPLY_PREFIX


class ShortkeyCLI:
    """Talks to both front ends of a shortkey service."""

    def __init__(
        self,
        host: str = "localhost",
        socket_port: int = 1337,
        http_port: int = 8080,
        timeout: float = 5.0,
    ):
        self.host = host
        self.socket_port = socket_port
        self.http_port = http_port
        self.timeout = timeout

    def send_line(self, line: str) -> str:
        """Send one request line and return the server's full reply."""
        with socket.create_connection((self.host, self.socket_port), timeout=self.timeout) as conn:
            conn.sendall(line.encode("utf-8") + b"\n")
            chunks = []
            while True:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks).decode("utf-8", errors="replace")

    def lookup(self, key: str) -> Optional[str]:
        """Return the redirect target for ``key``, or None if unknown."""
        # The key must stay a single path segment.
        url = f"http://{self.host}:{self.http_port}/{quote(key, safe='')}"
        response = httpx.get(url, follow_redirects=False, timeout=self.timeout)
        if response.status_code == httpx.codes.FOUND:
            return response.headers.get("location")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        raise httpx.HTTPError(f"Unexpected status {response.status_code} from {url}")

    def register(self, url: str) -> int:
        """Register a URL."""
        try:
            reply = self.send_line(url)
        except OSError as e:
            print(json.dumps({
                "success": False,
                "error": f"Cannot reach registration server: {e}"
            }, indent=2), file=sys.stderr)
            return 1

        if reply.startswith(KEY_REPLY_PREFIX):
            key = reply[len(KEY_REPLY_PREFIX):].strip()
            print(json.dumps({
                "success": True,
                "key": key,
                "url": url,
            }, indent=2))
            return 0

        print(json.dumps({
            "success": False,
            "error": reply.strip(),
        }, indent=2), file=sys.stderr)
        return 1

    def resolve(self, key: str) -> int:
        """Look up a key."""
        try:
            url = self.lookup(key)
        except httpx.HTTPError as e:
            print(json.dumps({
                "success": False,
                "error": f"Error: {e}"
            }, indent=2), file=sys.stderr)
            return 1

        if url is None:
            print(json.dumps({
                "success": False,
                "error": f"Key '{key}' not found"
            }, indent=2), file=sys.stderr)
            return 1

        print(json.dumps({
            "success": True,
            "key": key,
            "url": url,
        }, indent=2))
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortkey-cli",
        description="shortkey client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Register a URL
  %(prog)s register https://example.com/long/url

  # Find where a key points
  %(prog)s resolve k3xq9a
        """
    )

    parser.add_argument("--host", default="localhost", help="Service host (default: localhost)")
    parser.add_argument("--socket-port", type=int, default=1337, help="Registration port (default: 1337)")
    parser.add_argument("--http-port", type=int, default=8080, help="HTTP port (default: 8080)")
    parser.add_argument("--timeout", type=float, default=5.0, help="Network timeout in seconds")

    subparsers = parser.add_subparsers(dest="command", required=True)

    register_parser = subparsers.add_parser("register", help="Register a URL")
    register_parser.add_argument("url", help="URL to register")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a key")
    resolve_parser.add_argument("key", help="Key to resolve")

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    cli = ShortkeyCLI(
        host=args.host,
        socket_port=args.socket_port,
        http_port=args.http_port,
        timeout=args.timeout,
    )

    if args.command == "register":
        return cli.register(args.url)
    return cli.resolve(args.key)


if __name__ == "__main__":
    sys.exit(main())
