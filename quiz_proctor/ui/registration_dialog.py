"""Registration form shown before a proctored attempt starts."""

from __future__ import annotations

from PySide6.QtGui import QDoubleValidator
from PySide6.QtWidgets import (
    QButtonGroup,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from quiz_proctor.constants.ui_constants import (
    CHOICE_PLACEHOLDER,
    REGISTRATION_TITLE,
    START_BUTTON,
)
from quiz_proctor.core.models import FieldType, FormField
from quiz_proctor.ui.dialog_helpers import show_warning


class RegistrationDialog(QDialog):
    """Builds one input per form field and collects the values."""

    def __init__(self, title: str, form_fields: list[FormField], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(f"{REGISTRATION_TITLE}: {title}")
        self._form_fields = form_fields
        self._readers: dict[str, callable] = {}
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        form = QFormLayout()
        for form_field in self._form_fields:
            label = form_field.name + (" *" if form_field.required else "")
            form.addRow(QLabel(label, self), self._build_input(form_field))
        layout.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, self)
        buttons.button(QDialogButtonBox.Ok).setText(START_BUTTON)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _build_input(self, form_field: FormField) -> QWidget:
        if form_field.field_type == FieldType.DROPDOWN:
            combo = QComboBox(self)
            combo.addItem(CHOICE_PLACEHOLDER, "")
            for option in form_field.options:
                combo.addItem(option, option)
            self._readers[form_field.name] = lambda: combo.currentData() or ""
            return combo

        if form_field.field_type == FieldType.RADIO:
            container = QWidget(self)
            row = QHBoxLayout(container)
            row.setContentsMargins(0, 0, 0, 0)
            group = QButtonGroup(container)
            for option in form_field.options:
                button = QRadioButton(option, container)
                group.addButton(button)
                row.addWidget(button)
            self._readers[form_field.name] = (
                lambda: group.checkedButton().text() if group.checkedButton() else ""
            )
            return container

        line_edit = QLineEdit(self)
        if form_field.field_type == FieldType.NUMBER:
            line_edit.setValidator(QDoubleValidator(line_edit))
        elif form_field.field_type == FieldType.EMAIL:
            line_edit.setPlaceholderText("name@example.com")
        self._readers[form_field.name] = lambda: line_edit.text().strip()
        return line_edit

    def values(self) -> dict[str, str]:
        return {name: read() for name, read in self._readers.items()}

    def accept(self) -> None:
        values = self.values()
        missing = [f.name for f in self._form_fields if f.required and not values.get(f.name)]
        if missing:
            show_warning(self, REGISTRATION_TITLE, "Please fill in: " + ", ".join(missing))
            return
        super().accept()
