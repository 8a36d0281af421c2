"""Thread-safe key to URL registry shared by both front ends."""

import logging
import threading
from typing import Dict, Optional

from .keygen import KeyGenerator


class URLStore:
    """In-memory mapping from generated keys to URLs.

    A single lock guards both the mapping and the generator's record of
    issued keys, so every ``register`` and ``resolve`` is serialized no
    matter which front end (or how many threads) calls it.
    """

    def __init__(
        self,
        key_generator: Optional[KeyGenerator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize URL store.

        Args:
            key_generator: Generator for new keys (6-char keys if not given)
            logger: Optional logger
        """
        self.key_generator = key_generator or KeyGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self._endpoints: Dict[str, str] = {}
        self._lock = threading.Lock()

    def register(self, url: str) -> str:
        """Store ``url`` under a freshly generated key.

        The URL is stored as given; validation belongs to the caller.

        Args:
            url: URL to store

        Returns:
            The new key

        Raises:
            KeySpaceExhaustedError: If the generator could not find a free key
        """
        with self._lock:
            key = self.key_generator.generate()
            self._endpoints[key] = url
        self.logger.debug(f"Registered {key} -> {url}")
        return key

    def resolve(self, key: str) -> Optional[str]:
        """Look up the URL stored under ``key``.

        Args:
            key: Key to look up

        Returns:
            The stored URL, or None if the key is unknown
        """
        with self._lock:
            return self._endpoints.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)
