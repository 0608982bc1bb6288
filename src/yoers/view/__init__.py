"""Views: caret, selection and scroll state over shared buffers."""

from .view import Direction, View

__all__ = ["Direction", "View"]
