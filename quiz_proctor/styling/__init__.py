"""Styling module for the QuizProctor student client."""

from .color_palette import ColorPalette, Theme
from .styles import Styles

__all__ = ["ColorPalette", "Styles", "Theme"]
