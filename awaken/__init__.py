"""Calendar-driven meeting alarm with an HTTP check-in endpoint."""

__version__ = "0.1.0"