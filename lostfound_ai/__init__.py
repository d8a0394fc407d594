"""Lost & Found item matching."""

__version__ = "1.0.0"
