"""Pattern detection over activation state."""

from .patterns import PatternDetector

__all__ = ["PatternDetector"]
