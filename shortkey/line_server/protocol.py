"""Line protocol for registering URLs.

One request per connection: the client sends a URL terminated by a newline
and the server answers with one of a few fixed replies, then hangs up::

    $ echo https://example.com | nc localhost 1337
    key is k3xq9a
"""

import logging
from typing import BinaryIO, Optional

from ..lib.common.validators import is_valid_request_uri
from ..lib.keygen import KeySpaceExhaustedError
from ..lib.store import URLStore


EMPTY_INPUT_REPLY = "Don't send empty spaces!"
INVALID_URL_REPLY = "Not a valid URL! "
KEY_SPACE_EXHAUSTED_REPLY = "No keys left, try again later!"
KEY_REPLY_PREFIX = "key is "

logger = logging.getLogger(__name__)


def read_request_line(stream: BinaryIO) -> str:
    """Read one request line from ``stream``.

    Reads up to and including the first newline, or everything up to EOF if
    the peer never sends one. The line ending (``\\n`` or ``\\r\\n``) is
    removed.
    """
    line = stream.readline().decode("utf-8", errors="replace")
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def format_key_reply(key: str) -> str:
    return f"{KEY_REPLY_PREFIX}{key}\n"


def handle_line(store: URLStore, line: str, log: Optional[logging.Logger] = None) -> str:
    """Turn one request line into a reply, registering the URL if valid.

    Args:
        store: Store to register into
        line: Request line without its line ending
        log: Optional logger

    Returns:
        Reply text to send back to the client
    """
    log = log or logger

    if not line.strip():
        log.info("Rejected empty registration")
        return EMPTY_INPUT_REPLY

    is_valid, error = is_valid_request_uri(line)
    if not is_valid:
        log.info(f"Rejected {line!r}: {error}")
        return INVALID_URL_REPLY + line

    try:
        key = store.register(line)
    except KeySpaceExhaustedError as e:
        log.error(f"Could not register {line!r}: {e}")
        return KEY_SPACE_EXHAUSTED_REPLY

    return format_key_reply(key)
