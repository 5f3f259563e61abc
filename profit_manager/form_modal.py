"""Text entry modal screen for menu items, expenses and order notes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

FormValues = dict[str, str]


@dataclass(frozen=True)
class FormField:
    key: str
    label: str
    required: bool = False


class FormModal(ModalScreen[FormValues | None]):
    """Prompt for one or more text fields. Dismisses with the values, or None on cancel."""

    CSS = """
    FormModal {
        align: center middle;
        background: $background 60%;
    }

    #form-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #form-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #form-fields {
        color: white;
        margin-bottom: 1;
    }

    #form-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #form-help {
        color: #dddddd;
    }
    """

    MAX_LENGTH = 60

    def __init__(
        self,
        title: str,
        fields: list[FormField],
        initial: Mapping[str, str] | None = None,
        validate: Callable[[FormValues], str | None] | None = None,
    ) -> None:
        super().__init__()
        self.title_text = title
        self.fields = fields
        self.values: FormValues = {form_field.key: "" for form_field in fields}
        for key, value in (initial or {}).items():
            if key in self.values:
                self.values[key] = value
        self.validator = validate
        self.cursor_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="form-dialog"):
            yield Static(self.title_text, id="form-title")
            yield Static(id="form-fields")
            yield Static(id="form-error")
            yield Static("Type to edit. ↑/↓ field. Enter confirm. Backspace delete. Esc cancel.", id="form-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key in {"up", "down"}:
            delta = -1 if event.key == "up" else 1
            self.cursor_index = (self.cursor_index + delta) % len(self.fields)
            self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            key = self._current_key()
            if self.values[key]:
                self.values[key] = self.values[key][:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            key = self._current_key()
            if len(self.values[key]) < self.MAX_LENGTH:
                self.values[key] += event.character
            self.error = ""
            self._refresh_content()
            event.stop()
            return

        # Ignore all other keys while the form is open.
        event.stop()

    def _current_key(self) -> str:
        return self.fields[self.cursor_index].key

    def _confirm(self) -> None:
        values = {key: value.strip() for key, value in self.values.items()}
        for index, form_field in enumerate(self.fields):
            if form_field.required and not values[form_field.key]:
                self.error = f"{form_field.label} is required."
                self.cursor_index = index
                self._refresh_content()
                return

        if self.validator is not None:
            error = self.validator(values)
            if error:
                self.error = error
                self._refresh_content()
                return

        self.dismiss(values)

    def _refresh_content(self) -> None:
        fields_widget = self.query_one("#form-fields", Static)
        error_widget = self.query_one("#form-error", Static)

        content = Text(style="white")
        for idx, form_field in enumerate(self.fields):
            if idx > 0:
                content.append("\n")
            is_current = idx == self.cursor_index
            pointer = "➤ " if is_current else "  "
            marker = "*" if form_field.required else " "
            value = self.values[form_field.key]
            cursor = "|" if is_current else ""
            content.append(f"{pointer}{form_field.label}{marker}: ", style="bold white" if is_current else "white")
            content.append(f"{value}{cursor}")

        fields_widget.update(content)
        error_widget.update(self.error or "")
