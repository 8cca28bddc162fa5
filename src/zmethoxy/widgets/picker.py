"""Interactive picker over the directory history."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Input, Label, ListItem, ListView, Static

from zmethoxy.utils.history import HistoryRecord, HistoryStore


def _record_label(record: HistoryRecord, index: int) -> Text:
    """Build a Rich label for a history entry."""
    label = Text()
    label.append(f"{index + 1:>2} ", style="bold #ae81ff")
    label.append(f"{record.times_used:>4} ", style="#fd971f")
    path = PurePosixPath(record.directory_path)
    parent = str(path.parent)
    name = path.name
    if name and parent != record.directory_path:
        label.append(parent.rstrip("/") + "/", style="#a6e22e")
    label.append(name or record.directory_path, style="bold #e6db74")
    return label


class PickerApp(App[str | None]):
    """Filterable list of history entries, best match first."""

    TITLE = "z-methoxy"

    DEFAULT_CSS = """
    PickerApp {
        background: #272822;
    }
    PickerApp > Vertical {
        height: auto;
        max-height: 100%;
        color: #f8f8f2;
        padding: 0 1;
    }
    PickerApp #pick-title {
        text-style: bold;
        color: #fd971f;
    }
    PickerApp #pick-empty {
        margin: 1 0;
        color: #75715e;
        display: none;
    }
    PickerApp ListView {
        height: auto;
        max-height: 20;
        margin: 1 0;
        background: #272822;
    }
    PickerApp ListView > ListItem {
        height: 1;
        padding: 0 1;
    }
    PickerApp #pick-hint {
        color: #75715e;
    }
    """

    BINDINGS = [
        ("down", "cursor_down", "Down"),
        ("ctrl+n", "cursor_down", "Down"),
        ("up", "cursor_up", "Up"),
        ("ctrl+p", "cursor_up", "Up"),
        ("escape", "cancel", "Cancel"),
        ("ctrl+c", "cancel", "Cancel"),
    ]

    def __init__(self, store: HistoryStore, tokens: Sequence[str], now: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self._store = store
        self._tokens = list(tokens)
        self._now = now

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Frecent Directories", id="pick-title")
            yield Input(placeholder="Filter tokens", id="pick-filter")
            yield Static("No matching directories.", id="pick-empty")
            yield ListView(id="pick-list")
            hint = Text()
            hint.append("↑/↓", style="bold #66d9ef")
            hint.append(" nav  ", style="#75715e")
            hint.append("Enter", style="bold #66d9ef")
            hint.append(" jump  ", style="#75715e")
            hint.append("Esc", style="bold #66d9ef")
            hint.append(" cancel", style="#75715e")
            yield Static(hint, id="pick-hint")

    async def on_mount(self) -> None:
        await self._refresh_candidates("")
        self.query_one("#pick-filter", Input).focus()

    def candidates(self, filter_text: str) -> list[HistoryRecord]:
        tokens = self._tokens + filter_text.split()
        return [record for record, _ in self._store.ranked(tokens, self._now)]

    async def _refresh_candidates(self, filter_text: str) -> None:
        records = self.candidates(filter_text)
        lv = self.query_one("#pick-list", ListView)
        await lv.clear()
        await lv.extend(
            ListItem(Label(_record_label(record, i)), name=record.directory_path)
            for i, record in enumerate(records)
        )
        self.query_one("#pick-empty", Static).display = not records
        if records:
            lv.index = 0

    @on(Input.Changed, "#pick-filter")
    async def _on_filter_changed(self, event: Input.Changed) -> None:
        await self._refresh_candidates(event.value)

    @on(Input.Submitted, "#pick-filter")
    def _on_filter_submitted(self, event: Input.Submitted) -> None:
        self.action_select_entry()

    @on(ListView.Selected, "#pick-list")
    def _on_list_selected(self, event: ListView.Selected) -> None:
        self.action_select_entry()

    def action_cursor_down(self) -> None:
        self.query_one("#pick-list", ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#pick-list", ListView).action_cursor_up()

    def action_select_entry(self) -> None:
        lv = self.query_one("#pick-list", ListView)
        if lv.highlighted_child is None:
            return
        self.exit(lv.highlighted_child.name or None)

    def action_cancel(self) -> None:
        self.exit(None)
