"""Short key generation."""

import random
import string
from typing import Optional, Set


class KeySpaceExhaustedError(RuntimeError):
    """Raised when no unused key was found within the attempt limit."""

    def __init__(self, attempts: int):
        super().__init__(f"No unused key found after {attempts} attempts")
        self.attempts = attempts


class KeyGenerator:
    """Generate random keys that are never handed out twice.

    The generator remembers every key it has issued. It is not thread-safe;
    callers sharing one instance must serialize calls to :meth:`generate`.
    """

    # Lowercase letters and the digits 1-9 (no zero)
    ALPHABET = string.ascii_lowercase + "123456789"

    def __init__(
        self,
        length: int = 6,
        max_attempts: int = 100,
        rng: Optional[random.Random] = None,
    ):
        """Initialize key generator.

        Args:
            length: Number of characters in each key
            max_attempts: Draws allowed per call before giving up
            rng: Random source (a fresh ``random.Random`` if not given)
        """
        if length < 1:
            raise ValueError("Key length must be at least 1")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.length = length
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()
        self._issued: Set[str] = set()

    def generate(self) -> str:
        """Generate and record a key not issued before.

        Returns:
            A fresh key

        Raises:
            KeySpaceExhaustedError: If every draw collided with an issued key
        """
        for _ in range(self.max_attempts):
            key = "".join(self._rng.choices(self.ALPHABET, k=self.length))
            if key not in self._issued:
                self._issued.add(key)
                return key
        raise KeySpaceExhaustedError(self.max_attempts)

    def is_issued(self, key: str) -> bool:
        return key in self._issued

    @property
    def issued_count(self) -> int:
        return len(self._issued)

    @classmethod
    def is_valid_format(cls, key: str, length: Optional[int] = None) -> bool:
        """Check whether ``key`` could have come from a generator.

        Args:
            key: Key to check
            length: Expected length, if it should be checked too

        Returns:
            True if every character is in the alphabet
        """
        if not key:
            return False
        if length is not None and len(key) != length:
            return False
        return all(c in cls.ALPHABET for c in key)
