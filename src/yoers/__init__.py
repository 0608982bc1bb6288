"""Editing core for the yoers text editor."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "render",
    "runtime",
    "view",
    "window",
]

__version__ = "0.1.0"
