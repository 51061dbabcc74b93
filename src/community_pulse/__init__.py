"""Community Pulse - social-signal sentiment and theme aggregation."""

__version__ = "0.1.0"
