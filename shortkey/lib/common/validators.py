"""Validation utilities for shortkey.

Registration accepts anything that could appear as the target of an HTTP
request line: an absolute URI (``https://example.com/x``), an opaque URI
(``mailto:someone@example.com``), an absolute path (``/docs``) or ``*``.
The checks are purely syntactic; nothing is resolved or fetched.
"""

import re
import string
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit


_HEX_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

_USERINFO_CHARS = frozenset(string.ascii_letters + string.digits + "-._:~!$&'()*+,;=%@")

_HOST_CHARS = frozenset(string.ascii_letters + string.digits + "-_.~!$&'()*+,;=:[]<>\"%")


class InvalidURIError(ValueError):
    """Raised when a string is not a well-formed request URI."""

    def __init__(self, uri: str, reason: str):
        super().__init__(f"{reason}: {uri!r}")
        self.uri = uri
        self.reason = reason


@dataclass(frozen=True)
class RequestURI:
    """Components of a parsed request URI."""

    scheme: str = ""
    userinfo: Optional[str] = None
    host: Optional[str] = None
    path: str = ""
    opaque: str = ""
    query: Optional[str] = None

    @property
    def is_absolute(self) -> bool:
        return bool(self.scheme)


def _check_escapes(raw: str, component: str, name: str) -> None:
    if _HEX_ESCAPE.search(component):
        raise InvalidURIError(raw, f"invalid percent escape in {name}")


def _valid_optional_port(port: str) -> bool:
    if port == "":
        return True
    return port.startswith(":") and all(c in string.digits for c in port[1:])


def _check_host(raw: str, host: str) -> None:
    if host.startswith("["):
        end = host.rfind("]")
        if end < 0:
            raise InvalidURIError(raw, "missing ']' in host")
        port = host[end + 1:]
    else:
        colon = host.rfind(":")
        port = host[colon:] if colon >= 0 else ""
    if not _valid_optional_port(port):
        raise InvalidURIError(raw, f"invalid port {port!r} after host")

    for i, char in enumerate(host):
        if not char.isascii():
            continue
        if char not in _HOST_CHARS:
            raise InvalidURIError(raw, f"invalid character {char!r} in host name")
        if char == "%":
            escape = host[i:i + 3]
            if not re.fullmatch(r"%[0-9A-Fa-f]{2}", escape):
                raise InvalidURIError(raw, "invalid percent escape in host")
            # Only non-ASCII bytes and a literal percent may be escaped.
            if int(escape[1:], 16) < 0x80 and escape != "%25":
                raise InvalidURIError(raw, f"invalid escape {escape!r} in host")


def _parse_authority(raw: str, netloc: str) -> Tuple[Optional[str], str]:
    userinfo, at, host = netloc.rpartition("@")
    if at:
        if any(c not in _USERINFO_CHARS for c in userinfo):
            raise InvalidURIError(raw, "invalid userinfo")
        _check_escapes(raw, userinfo, "userinfo")
    _check_host(raw, host)
    return (userinfo if at else None), host


def parse_request_uri(raw: str) -> RequestURI:
    """Parse ``raw`` as the target of an HTTP request.

    Splitting is left to :func:`urllib.parse.urlsplit`, which is lenient;
    the stricter request-line rules (control characters, host characters,
    ports, percent escapes) are checked on the pieces it returns.

    Args:
        raw: Candidate URI, exactly as received

    Returns:
        The parsed components

    Raises:
        InvalidURIError: If ``raw`` is not a well-formed request URI
    """
    if not raw:
        raise InvalidURIError(raw, "empty URI")
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in raw):
        raise InvalidURIError(raw, "invalid control character in URI")
    if raw == "*":
        return RequestURI(path="*")
    if raw.startswith(":"):
        raise InvalidURIError(raw, "missing protocol scheme")

    if raw.startswith("/"):
        # No scheme, so a leading "//" is part of the path, not an authority.
        path, sep, query = raw.partition("?")
        _check_escapes(raw, path, "path")
        return RequestURI(path=path, query=query if sep else None)

    # urlsplit strips leading blanks before looking for a scheme.
    if raw[0] == " ":
        raise InvalidURIError(raw, "invalid URI for request")

    try:
        parts = urlsplit(raw, allow_fragments=False)
    except ValueError as e:
        raise InvalidURIError(raw, str(e)) from e

    if not parts.scheme:
        raise InvalidURIError(raw, "invalid URI for request")

    query = parts.query if "?" in raw else None
    has_authority = raw[len(parts.scheme) + 1:].startswith("//")

    if not has_authority and not parts.path.startswith("/"):
        return RequestURI(scheme=parts.scheme, opaque=parts.path, query=query)

    userinfo = host = None
    if has_authority:
        # Fragments are not split off, so the authority runs up to the first "/".
        if parts.path.startswith("#"):
            raise InvalidURIError(raw, "invalid character '#' in host name")
        userinfo, host = _parse_authority(raw, parts.netloc)

    _check_escapes(raw, parts.path, "path")
    return RequestURI(
        scheme=parts.scheme,
        userinfo=userinfo,
        host=host,
        path=parts.path,
        query=query,
    )


def is_valid_request_uri(uri: str) -> Tuple[bool, str]:
    """Validate a request URI.

    Args:
        uri: The URI to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(uri, str):
        return False, "URI must be a string"
    try:
        parse_request_uri(uri)
    except InvalidURIError as e:
        return False, e.reason
    return True, ""
