#!/usr/bin/env python3
"""RepRing TUI — daily reps and fasting timer powered by Textual."""

from __future__ import annotations

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Grid, Horizontal, Vertical
from textual.logging import TextualHandler
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    ProgressBar,
    Static,
)

from core import (
    DAY_NAMES,
    GOAL,
    FastingError,
    FastTicker,
    SetCountResult,
    Tracker,
    configure_logging,
    format_duration_short,
    init_workspace,
    load_settings,
    open_tracker,
    workspace_root,
)
from core.tracker import QUICK_ADD_AMOUNTS, UNDO_STEP


CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#reps-pane {
    width: 3fr;
    padding: 1 2;
}

#fast-pane {
    width: 2fr;
    padding: 1 2;
    border-left: tall $primary-background-darken-2;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 0 0 1 0;
}

#progress-info, #fast-status {
    height: auto;
    margin: 0 0 1 0;
}

#quick-add, #month-nav, #fast-controls {
    height: auto;
    margin: 1 0 0 0;
}

#quick-add Button, #month-nav Button {
    min-width: 6;
    margin: 0 1 0 0;
}

#month-label {
    width: 1fr;
    content-align: center middle;
    padding: 1 0;
}

#calendar-grid {
    grid-size: 7;
    grid-gutter: 0 1;
    height: auto;
    margin: 1 0 0 0;
}

.day-name {
    text-align: center;
    color: $text-muted;
}

.day {
    min-width: 4;
    width: 100%;
}

.day.active {
    background: $warning-darken-2;
}

.day.done {
    background: $success-darken-1;
}

.day.today {
    text-style: bold underline;
}

.day.selected {
    border: tall $accent;
}

#fast-elapsed {
    text-style: bold;
    height: auto;
    margin: 1 0;
}

#retro-input {
    width: 1fr;
}

#fast-history {
    height: 1fr;
    margin: 1 0 0 0;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class DayButton(Button):
    """A calendar day; pressing it selects the date."""

    def __init__(self, day_str: str, label: str, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.day_str = day_str


# ── Main app ───────────────────────────────────────────────────


class RepRingApp(App):
    """RepRing — daily reps and fasting timer."""

    TITLE = "RepRing"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("left_square_bracket", "prev_month", "Prev month"),
        Binding("right_square_bracket", "next_month", "Next month"),
        Binding("t", "return_today", "Today"),
        Binding("u", "undo", "Undo"),
        Binding("s", "start_fast", "Start fast"),
        Binding("e", "end_fast", "End fast"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, tracker: Tracker) -> None:
        super().__init__()
        self._tracker = tracker
        self._ticker: FastTicker | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Daily reps", classes="section-title"),
                Static(id="progress-info"),
                ProgressBar(total=GOAL, show_eta=False, id="reps-bar"),
                Horizontal(
                    *[Button(f"+{n}", name=str(n), classes="quick") for n in QUICK_ADD_AMOUNTS],
                    Button(f"Undo −{UNDO_STEP}", id="undo", variant="warning"),
                    id="quick-add",
                ),
                Input(placeholder="custom amount, Enter to add", id="custom-input"),
                Horizontal(
                    Button("‹", id="prev-month"),
                    Label(id="month-label"),
                    Button("›", id="next-month"),
                    Button("Today", id="today"),
                    id="month-nav",
                ),
                Grid(id="calendar-grid"),
                id="reps-pane",
            ),
            Vertical(
                Label("Fasting", classes="section-title"),
                Static(id="fast-status"),
                Static(id="fast-elapsed"),
                ProgressBar(total=100, show_eta=False, id="fast-bar"),
                Horizontal(
                    Button("Start now", id="fast-start", variant="primary"),
                    Input(placeholder="started at YYYY-MM-DD HH:MM", id="retro-input"),
                    Button("Start at", id="fast-retro"),
                    id="fast-controls",
                ),
                Button("End fast", id="fast-end", variant="error"),
                DataTable(id="fast-history"),
                id="fast-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    async def on_mount(self) -> None:
        table: DataTable = self.query_one("#fast-history", DataTable)
        table.add_columns("Started", "Duration")
        self._ticker = FastTicker(self.set_interval, self._tick)
        await self._refresh_reps()
        self._refresh_fasting()

    # ── Reps panel ─────────────────────────────────────────────

    async def _refresh_reps(self) -> None:
        s = self._tracker.summary()
        when = "Today" if s["isToday"] else s["date"]
        self.query_one("#progress-info", Static).update(
            f"[b]{s['count']}[/b] / {s['goal']}  ·  {s['message']}\nSelected day: {when}"
        )
        self.query_one("#reps-bar", ProgressBar).update(progress=min(s["count"], GOAL))
        self.sub_title = f"🔥 {s['streak']}  ·  {s['total']:,} total"

        for button in self.query(".quick"):
            button.disabled = not s["controlsEnabled"]
        self.query_one("#custom-input", Input).disabled = not s["controlsEnabled"]
        self.query_one("#undo", Button).disabled = not s["undoEnabled"]
        self.query_one("#today", Button).display = not s["isToday"]

        await self._render_calendar()

    async def _render_calendar(self) -> None:
        self.query_one("#month-label", Label).update(self._tracker.calendar_label())
        grid = self.query_one("#calendar-grid", Grid)
        await grid.remove_children()

        cells: list[Static | Button] = [Static(name, classes="day-name") for name in DAY_NAMES]
        for cell in self._tracker.calendar():
            if cell.is_blank:
                cells.append(Static("", classes="day blank"))
                continue
            classes = ["day", cell.status]
            if cell.is_selected:
                classes.append("selected")
            if cell.is_today:
                classes.append("today")
            button = DayButton(cell.date, str(cell.day), classes=" ".join(classes))
            button.tooltip = f"{cell.date} • {cell.count} reps"
            cells.append(button)
        await grid.mount_all(cells)

    async def _after_change(self, result: SetCountResult | None) -> None:
        if result is SetCountResult.GOAL_REACHED:
            self.notify(f"{GOAL} reps done!", title="Goal complete", severity="information")
        await self._refresh_reps()

    @on(Button.Pressed, ".quick")
    async def _on_quick_add(self, event: Button.Pressed) -> None:
        await self._after_change(self._tracker.add(int(event.button.name or 0)))

    @on(Button.Pressed, "#undo")
    async def _on_undo(self) -> None:
        await self.action_undo()

    @on(Input.Submitted, "#custom-input")
    async def _on_custom_add(self, event: Input.Submitted) -> None:
        result = self._tracker.add_custom(event.value)
        if result is not None:
            event.input.value = ""
        await self._after_change(result)

    @on(Button.Pressed, ".day")
    async def _on_day_selected(self, event: Button.Pressed) -> None:
        if isinstance(event.button, DayButton):
            self._tracker.select_date(event.button.day_str)
            await self._refresh_reps()

    @on(Button.Pressed, "#prev-month")
    async def _on_prev_month(self) -> None:
        await self.action_prev_month()

    @on(Button.Pressed, "#next-month")
    async def _on_next_month(self) -> None:
        await self.action_next_month()

    @on(Button.Pressed, "#today")
    async def _on_today(self) -> None:
        await self.action_return_today()

    async def action_undo(self) -> None:
        await self._after_change(self._tracker.undo())

    async def action_prev_month(self) -> None:
        self._tracker.shift_month(-1)
        await self._render_calendar()

    async def action_next_month(self) -> None:
        self._tracker.shift_month(1)
        await self._render_calendar()

    async def action_return_today(self) -> None:
        self._tracker.return_to_today()
        await self._refresh_reps()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    # ── Fasting panel ──────────────────────────────────────────

    def _tick(self) -> None:
        f = self._tracker.fasting_summary()
        if not f["fasting"]:
            return
        self.query_one("#fast-elapsed", Static).update(f"{f['elapsed']}  (goal {f['goalHours']:g}h)")
        self.query_one("#fast-bar", ProgressBar).update(progress=round(f["progress"] * 100, 1))

    def _refresh_fasting(self) -> None:
        f = self._tracker.fasting_summary()
        status = f["status"]
        if f["fasting"]:
            status += f"\nStarted: {f['startTime'][:16].replace('T', ' ')}"
        self.query_one("#fast-status", Static).update(status)

        self.query_one("#fast-controls").display = not f["fasting"]
        self.query_one("#fast-end", Button).display = f["fasting"]
        self.query_one("#fast-elapsed", Static).display = f["fasting"]
        self.query_one("#fast-bar", ProgressBar).display = f["fasting"]

        table: DataTable = self.query_one("#fast-history", DataTable)
        table.clear()
        for h in f["history"]:
            table.add_row(h["startTime"][:16].replace("T", " "), h["label"])

        if self._ticker is not None:
            self._ticker.sync(f["fasting"])

    def _start_fast(self, raw: str | None = None) -> None:
        try:
            if raw:
                self._tracker.start_fast_from_input(raw)
            else:
                self._tracker.start_fast()
        except FastingError as e:
            self.notify(str(e), title="Cannot start fast", severity="error")
            return
        self.query_one("#retro-input", Input).value = ""
        self._refresh_fasting()

    @on(Button.Pressed, "#fast-start")
    def _on_fast_start(self) -> None:
        self._start_fast()

    @on(Button.Pressed, "#fast-retro")
    def _on_fast_retro(self) -> None:
        raw = self.query_one("#retro-input", Input).value.strip()
        if raw:
            self._start_fast(raw)

    @on(Input.Submitted, "#retro-input")
    def _on_retro_submitted(self, event: Input.Submitted) -> None:
        if event.value.strip():
            self._start_fast(event.value.strip())

    @on(Button.Pressed, "#fast-end")
    def _on_fast_end(self) -> None:
        self.action_end_fast()

    def action_start_fast(self) -> None:
        if not self._tracker.fasting.is_fasting:
            self._start_fast()

    def action_end_fast(self) -> None:
        record = self._tracker.end_fast()
        if record is not None:
            self.notify(f"Fast logged: {format_duration_short(record.duration_ms)}", title="Fast ended")
        self._refresh_fasting()

    def on_unmount(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = init_workspace(workspace_root())
    configure_logging(load_settings(root).log_level, TextualHandler())
    app = RepRingApp(open_tracker(root))
    app.run()


if __name__ == "__main__":
    main()
