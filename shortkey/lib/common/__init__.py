"""Common utilities for shortkey."""

from .validators import InvalidURIError, RequestURI, is_valid_request_uri, parse_request_uri
from .logging_config import setup_logging, get_logger

__all__ = [
    "InvalidURIError",
    "RequestURI",
    "is_valid_request_uri",
    "parse_request_uri",
    "setup_logging",
    "get_logger",
]
