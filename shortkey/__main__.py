"""Allow ``python -m shortkey``."""

from .app import main

main()
