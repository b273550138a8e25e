"""Builder/founder matching marketplace workflow engine."""

__version__ = "0.1.0"
