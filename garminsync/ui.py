"""Terminal dashboard that shows sync progress while it runs."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .progress import StreamProgress, SyncProgress

_SPARK_BLOCKS = "▁▂▃▄▅▆▇█"
_FRAME_SECONDS = 0.2
_FINAL_PAUSE_SECONDS = 1.0


@dataclass
class Theme:
    """Colours used by the dashboard."""

    activities: str = "cyan"
    gpx: str = "blue"
    health: str = "green"
    performance: str = "magenta"
    error: str = "red"
    success: str = "green"
    border: str = "bright_black"
    title: str = "white"
    dim: str = "grey70"


def _sparkline(data: Sequence[int], width: int) -> str:
    values = list(data)[-width:] if width > 0 else []
    if not values:
        return ""
    peak = max(values)
    if peak <= 0:
        return " " * len(values)
    top = len(_SPARK_BLOCKS) - 1
    return "".join(
        " " if value <= 0 else _SPARK_BLOCKS[min(top, round(value / peak * top))]
        for value in values
    )


class SyncUI:
    """Builds the dashboard for a shared :class:`SyncProgress`."""

    def __init__(self, progress: SyncProgress, theme: Theme | None = None) -> None:
        self.progress = progress
        self.theme = theme if theme is not None else Theme()

    def render(self) -> RenderableType:
        """Return the whole dashboard as one renderable."""
        return Group(
            self._header(),
            *self._gauges(),
            self._stats(),
            self._latest(),
        )

    def _panel(self, body: RenderableType, title: Text | str | None = None) -> Panel:
        return Panel(body, title=title, title_align="left", border_style=self.theme.border)

    def _header(self) -> Panel:
        body = Text.assemble(
            ("  Profile: ", self.theme.dim),
            (self.progress.profile_name, Style(color=self.theme.title, bold=True)),
            "    ",
            (self.progress.date_range, self.theme.dim),
        )
        title = Text(" Garmin Sync ", style=Style(color=self.theme.title, bold=True))
        return self._panel(body, title)

    def _gauges(self) -> list[Panel]:
        colours = (
            self.theme.activities,
            self.theme.gpx,
            self.theme.health,
            self.theme.performance,
        )
        return [
            self._gauge(stream, colour)
            for stream, colour in zip(self.progress.streams, colours)
        ]

    def gauge_label(self, stream: StreamProgress) -> str:
        """Return the text shown on a stream's progress bar."""
        total = stream.total
        completed = stream.completed
        failed = stream.failed
        percent = stream.percent()
        if total == 0:
            return "waiting..."
        if failed > 0:
            return f"{completed}/{total} ({failed} failed) {percent}%"
        return f"{completed}/{total} {percent}%"

    def _gauge(self, stream: StreamProgress, colour: str) -> Panel:
        row = Table.grid(expand=True, padding=(0, 1))
        row.add_column(ratio=1)
        row.add_column(no_wrap=True)
        bar = ProgressBar(
            total=100,
            completed=stream.percent(),
            complete_style=colour,
            finished_style=colour,
            style="bright_black",
        )
        label = Text(self.gauge_label(stream), style=Style(color="white", bold=True))
        row.add_row(bar, label)
        title = Text(f" {stream.name} ", style=Style(color=colour, bold=True))
        return self._panel(row, title)

    def _stats(self) -> Table:
        history = list(self.progress.rate_history)
        spark = Text(_sparkline(history, len(history)), style=self.theme.success)

        errors = self.progress.total_failed()
        error_colour = self.theme.error if errors > 0 else self.theme.success
        text = Text.assemble(
            ("  Rate: ", self.theme.dim),
            (f"{self.progress.requests_per_minute()} req/min", self.theme.title),
            "  ",
            ("Elapsed: ", self.theme.dim),
            (self.progress.elapsed_str(), self.theme.title),
            "\n",
            ("  ETA: ", self.theme.dim),
            (self.progress.eta_str(), self.theme.title),
            "  ",
            ("Errors: ", self.theme.dim),
            (str(errors), error_colour),
        )

        grid = Table.grid(expand=True)
        grid.add_column(ratio=1)
        grid.add_column(ratio=1)
        grid.add_row(self._panel(spark, " Rate "), self._panel(text, " Stats "))
        return grid

    def latest_item(self) -> str:
        """Return the last item of the latest stream that has reported one."""
        for stream in reversed(self.progress.streams):
            if stream.last_item:
                return f"{stream.name}: {stream.last_item}"
        return "Waiting for tasks..."

    def _latest(self) -> Panel:
        body = Text.assemble(
            ("  [Latest] ", self.theme.dim),
            (self.latest_item(), self.theme.title),
        )
        return self._panel(body)


async def run_tui(progress: SyncProgress, console: Console | None = None) -> None:
    """Redraw the dashboard until the sync completes or the user interrupts."""
    console = console if console is not None else Console()
    ui = SyncUI(progress)
    with Live(
        ui.render(),
        console=console,
        screen=console.is_terminal,
        auto_refresh=False,
    ) as live:
        try:
            while True:
                live.update(ui.render(), refresh=True)
                progress.update_rate_history()
                if progress.is_complete():
                    # Leave the final state on screen for a moment.
                    await asyncio.sleep(_FINAL_PAUSE_SECONDS)
                    break
                await asyncio.sleep(_FRAME_SECONDS)
        except KeyboardInterrupt:
            pass
        live.update(ui.render())