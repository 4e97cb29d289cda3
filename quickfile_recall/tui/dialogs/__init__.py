"""TUI dialogs."""

from quickfile_recall.tui.dialogs.recall_picker_dialog import RecallPickerDialog

__all__ = ["RecallPickerDialog"]
