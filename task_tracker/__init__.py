"""Personal task tracker: task resource API and client task store."""

__version__ = "0.1.0"
