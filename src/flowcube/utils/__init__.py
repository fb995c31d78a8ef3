"""Utility modules for flowcube."""

from flowcube.utils.logger import SessionLogger
from flowcube.utils.display import StatusDisplay

__all__ = [
    "SessionLogger",
    "StatusDisplay",
]
