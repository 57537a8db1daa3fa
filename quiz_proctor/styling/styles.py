"""Centralized styles for the student client."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QDialog {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:default {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
            }}
            QLineEdit, QComboBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_secondary_text_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.TEXT_SECONDARY.get(theme)};"

    @staticmethod
    def get_timer_style(warning: bool, theme: Theme = Theme.LIGHT) -> str:
        base = "padding: 2px 6px; border-radius: 4px; font-size: 14pt;"
        if not warning:
            return base
        return (
            base
            + f" color: {ColorPalette.DANGER_TEXT.get(theme)};"
            + f" background-color: {ColorPalette.DANGER_BG.get(theme)};"
        )

    @staticmethod
    def get_violation_banner_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"padding: 6px; border-radius: 4px;"
            f" color: {ColorPalette.WARNING_TEXT.get(theme)};"
            f" background-color: {ColorPalette.WARNING_BG.get(theme)};"
        )

    @staticmethod
    def get_result_style(passed: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.SUCCESS_TEXT if passed else ColorPalette.DANGER_BG
        return f"font-size: 18pt; font-weight: bold; color: {color.get(theme)};"
