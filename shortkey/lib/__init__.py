"""Core logic for shortkey."""

from .keygen import KeyGenerator, KeySpaceExhaustedError
from .store import URLStore

__all__ = ["KeyGenerator", "KeySpaceExhaustedError", "URLStore"]
