"""Line-based TCP front end for registering URLs."""

from .protocol import (
    EMPTY_INPUT_REPLY,
    INVALID_URL_REPLY,
    KEY_REPLY_PREFIX,
    KEY_SPACE_EXHAUSTED_REPLY,
    handle_line,
    read_request_line,
)
from .server import RegistrationServer

__all__ = [
    "EMPTY_INPUT_REPLY",
    "INVALID_URL_REPLY",
    "KEY_REPLY_PREFIX",
    "KEY_SPACE_EXHAUSTED_REPLY",
    "RegistrationServer",
    "handle_line",
    "read_request_line",
]
