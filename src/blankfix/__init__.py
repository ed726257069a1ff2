"""blankfix — find and safely repair blank-screen defects in front-end source trees."""

from blankfix._version import __version__
from blankfix.fix.engine import RepairEngine
from blankfix.scanner.retry import RetryController

__all__ = [
    "__version__",
    "RepairEngine",
    "RetryController",
]
