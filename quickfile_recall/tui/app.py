"""Minimal Textual app hosting the recall picker"""

from typing import Optional, Sequence

from textual.app import App

from quickfile_recall.core.models import RecallItem
from quickfile_recall.history.recall import PICKER_PLACEHOLDER
from quickfile_recall.tui.dialogs import RecallPickerDialog


class RecallPickerApp(App[Optional[RecallItem]]):
    """Shows the picker and exits with the chosen item (or None)."""

    TITLE = "QuickFile Recall"

    def __init__(self, items: Sequence[RecallItem], placeholder: str = PICKER_PLACEHOLDER):
        super().__init__()
        self.items = list(items)
        self.placeholder = placeholder

    def on_mount(self) -> None:
        self.push_screen(RecallPickerDialog(self.items, self.placeholder), callback=self.exit)
