"""shortkey: register URLs over a line protocol, resolve them over HTTP."""

from .lib import KeyGenerator, KeySpaceExhaustedError, URLStore

__version__ = "1.0.0"

__all__ = ["KeyGenerator", "KeySpaceExhaustedError", "URLStore", "__version__"]
