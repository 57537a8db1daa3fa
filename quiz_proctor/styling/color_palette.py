"""Color palette for the student client supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the proctored quiz window."""

    TEXT_PRIMARY = ThemeColors(light="#000000", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#666666", dark="#AAAAAA")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")

    BORDER_PRIMARY = ThemeColors(light="#CCCCCC", dark="#444444")

    BUTTON_PRIMARY_BG = ThemeColors(light="#0078D4", dark="#0078D4")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#FFFFFF")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F0F0F0", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E0E0E0", dark="#4A4A4A")

    # Proctoring feedback
    WARNING_BG = ThemeColors(light="#FEF3C7", dark="#78350F")
    WARNING_TEXT = ThemeColors(light="#92400E", dark="#FDE68A")
    DANGER_BG = ThemeColors(light="#EF4444", dark="#B91C1C")
    DANGER_TEXT = ThemeColors(light="#FFFFFF", dark="#FFFFFF")
    SUCCESS_TEXT = ThemeColors(light="#15803D", dark="#4ADE80")
