"""gouse: toggle Go's 'declared and not used' errors with fake usages."""

from gouse.engine import Toggler, toggle

__version__ = "0.1.0"

__all__ = [
    "Toggler",
    "__version__",
    "toggle",
]
