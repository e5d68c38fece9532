"""Anonymous group presence and accommodation sharing for resort visitors."""

__version__ = "1.0.0"
