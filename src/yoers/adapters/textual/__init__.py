"""Textual terminal backend for the editor loop."""

from .backend import Cell, CellCanvas, TextualBackend, translate_key

__all__ = ["Cell", "CellCanvas", "TextualBackend", "translate_key"]
