"""Recall Picker Dialog for TUI - search and choose a file from history"""

from typing import List, Optional, Sequence

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from quickfile_recall.core.models import RecallItem
from quickfile_recall.history.recall import PICKER_PLACEHOLDER
from quickfile_recall.utils.fuzzy import fuzzy_match


class RecallPickerDialog(ModalScreen[Optional[RecallItem]]):
    """Modal picker over recall items.

    Typing filters the list with a fuzzy match over label, relative path and
    timestamp. Order is kept as given (most recent first). Enter opens the
    highlighted item, Escape dismisses with None.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("up", "cursor_up", "Up", show=False),
        Binding("down", "cursor_down", "Down", show=False),
    ]

    DEFAULT_CSS = """
    RecallPickerDialog {
        align: center middle;
    }
    #recall_picker {
        width: 80%;
        height: 80%;
        border: round $accent;
        padding: 0 1;
    }
    #recall_items {
        height: 1fr;
    }
    """

    def __init__(
        self,
        items: Sequence[RecallItem],
        placeholder: str = PICKER_PLACEHOLDER,
        heading: str = "Open Previous File",
    ):
        """Initialize recall picker.

        Args:
            items: Rows to offer, most recent first.
            placeholder: Placeholder text of the search input.
            heading: Text shown above the search input.
        """
        super().__init__()
        self.items: List[RecallItem] = list(items)
        self.placeholder = placeholder
        self.heading = heading
        self.filtered_items: List[RecallItem] = list(self.items)

    def compose(self) -> ComposeResult:
        with Vertical(id="recall_picker"):
            yield Label(self.heading)
            yield Input(placeholder=self.placeholder, id="recall_search")
            yield OptionList(*self._options(), id="recall_items")
            yield Static("Enter to open, Escape to cancel")

    def on_mount(self) -> None:
        self.query_one(Input).focus()
        self._highlight_first()

    def filter_items(self, query: str) -> None:
        """Filter items by a fuzzy search query.

        Args:
            query: Search string; empty shows every item.
        """
        self.filtered_items = [
            item
            for item in self.items
            if fuzzy_match(query, (item.label, item.description, item.detail)) is not None
        ]

        if self.is_mounted:
            option_list = self.query_one(OptionList)
            option_list.clear_options()
            option_list.add_options(self._options())
            self._highlight_first()

    def selected_item(self) -> Optional[RecallItem]:
        """Currently highlighted item, if any."""
        if not self.filtered_items:
            return None
        if not self.is_mounted:
            return self.filtered_items[0]

        highlighted = self.query_one(OptionList).highlighted
        if highlighted is None or highlighted >= len(self.filtered_items):
            return None
        return self.filtered_items[highlighted]

    def on_input_changed(self, event: Input.Changed) -> None:
        self.filter_items(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.action_select()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_index < len(self.filtered_items):
            self.dismiss(self.filtered_items[event.option_index])

    def action_select(self) -> None:
        item = self.selected_item()
        if item is not None:
            self.dismiss(item)

    def action_cancel(self) -> None:
        self.dismiss(None)

    def action_cursor_up(self) -> None:
        self.query_one(OptionList).action_cursor_up()

    def action_cursor_down(self) -> None:
        self.query_one(OptionList).action_cursor_down()

    def _options(self) -> List[Option]:
        return [
            Option(
                Text.assemble(
                    (item.label, "bold"),
                    "  ",
                    (item.description, "dim"),
                    "\n",
                    (item.detail, "italic dim"),
                )
            )
            for item in self.filtered_items
        ]

    def _highlight_first(self) -> None:
        if self.filtered_items:
            self.query_one(OptionList).highlighted = 0
