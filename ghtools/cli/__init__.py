"""Command-line front-ends for ghtools.

Each module exposes a `main(argv=None)` registered as a console script.
"""

from .api import main

__all__ = ["main"]
