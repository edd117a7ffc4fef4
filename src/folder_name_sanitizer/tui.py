"""Interactive TUI for folder-name-sanitizer."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import ClassVar

from rich.markup import escape
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    ProgressBar,
    RichLog,
    Static,
    Switch,
)
from textual.widgets.data_table import RowKey

from .errors import SanitizationFailedError, SanitizerError
from .renamer import RenameResult
from .sanitizer import sanitize_name_with_issues
from .service import ProcessingSummary, sanitize_directory


class TUIReporter:
    """Forwards service events from the worker thread to the app."""

    def __init__(self, app: SanitizerApp) -> None:
        self.app: SanitizerApp = app

    def report_progress(self, current: int, total: int, name: str) -> None:
        self.app.call_from_thread(self.app.update_progress, current, total, name)

    def report_error(self, error: Exception) -> None:
        self.app.call_from_thread(self.app.write_log, f"[red]Error:[/red] {escape(str(error))}")

    def report_complete(self, summary: ProcessingSummary) -> None:
        pass


class SanitizerApp(App[int]):
    """Interactive TUI for previewing and applying folder name sanitization."""

    TITLE = "Folder Name Sanitizer"  # pyright: ignore[reportUnannotatedClassAttribute]

    CSS: ClassVar[str] = """
    #settings-bar {
        height: auto;
        padding: 1 2;
        background: $surface;
        align: left middle;
    }

    #settings-bar Label {
        padding: 0 1;
    }

    #settings-bar Input {
        width: 12;
    }

    #settings-bar Switch {
        margin: 0 1;
    }

    #settings-bar Button {
        margin: 0 1;
    }

    #content-area {
        height: 1fr;
    }

    #rename-table {
        width: 2fr;
    }

    #detail-panel {
        width: 1fr;
        border-left: solid $accent;
        padding: 1 2;
        overflow-y: auto;
    }

    #detail-header {
        text-style: bold;
        margin-bottom: 1;
    }

    #detail-content {
        height: auto;
    }

    #status-area {
        height: 12;
        border-top: solid $accent;
    }

    #progress {
        padding: 0 2;
    }

    #log-output {
        height: 1fr;
    }
    """

    BINDINGS = [  # pyright: ignore[reportUnannotatedClassAttribute]
        Binding("q", "quit", "Quit"),
        Binding("r", "rescan", "Re-scan"),
        Binding("a", "apply", "Apply Renames"),
    ]

    def __init__(self, root: Path) -> None:
        super().__init__()
        self.root: Path = root  # pyright: ignore[reportUnannotatedClassAttribute]
        self.current_summary: ProcessingSummary | None = None
        self.row_results: dict[RowKey, RenameResult] = {}

    def compose(self) -> ComposeResult:  # pyright: ignore[reportImplicitOverride]
        yield Header()
        with Vertical():
            with Horizontal(id="settings-bar"):
                yield Label("Max depth:")
                yield Input(id="max-depth", value="0", type="integer")
                yield Label("Follow symlinks:")
                yield Switch(id="follow-symlinks", value=False)
                yield Button("Re-scan", id="rescan-btn", variant="default")
                yield Button("Apply Renames", id="apply-btn", variant="warning", disabled=True)
            with Horizontal(id="content-area"):
                yield DataTable(id="rename-table", cursor_type="row")
                with Vertical(id="detail-panel"):
                    yield Static("Select a row to see details", id="detail-header")
                    yield Static("", id="detail-content")
            with Vertical(id="status-area"):
                yield ProgressBar(id="progress", show_eta=False)
                yield RichLog(id="log-output", max_lines=200, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        table: DataTable[str] = self.query_one(  # pyright: ignore[reportUnknownVariableType]
            "#rename-table", DataTable
        )
        table.add_columns("Original Name", "Renamed To", "Directory", "Status")
        self.action_rescan()

    def write_log(self, message: str) -> None:
        self.query_one("#log-output", RichLog).write(message)

    def update_progress(self, current: int, total: int, name: str) -> None:
        self.query_one("#progress", ProgressBar).update(total=total, progress=current)
        self.sub_title = f"[{current}/{total}] {name}"

    def _read_settings(self) -> tuple[int, bool] | None:
        """Read and validate settings from widgets. Returns None on validation error."""
        max_depth_input = self.query_one("#max-depth", Input)
        try:
            max_depth = int(max_depth_input.value) if max_depth_input.value else 0
        except ValueError:
            self.write_log("[red]Error:[/red] Max depth must be an integer.")
            return None
        if max_depth < 0:
            self.write_log("[red]Error:[/red] Max depth must not be negative.")
            return None

        follow_symlinks = self.query_one("#follow-symlinks", Switch).value
        return max_depth, follow_symlinks

    def action_rescan(self) -> None:
        settings = self._read_settings()
        if settings is None:
            return
        max_depth, follow_symlinks = settings

        self.query_one("#rename-table", DataTable).loading = True
        self.query_one("#apply-btn", Button).disabled = True
        self.run_pass(True, max_depth, follow_symlinks)

    def action_apply(self) -> None:
        if self.current_summary is None or self.current_summary.renamed == 0:
            self.write_log("Nothing to apply.")
            return
        settings = self._read_settings()
        if settings is None:
            return
        max_depth, follow_symlinks = settings

        self.query_one("#apply-btn", Button).disabled = True
        self.query_one("#rescan-btn", Button).disabled = True
        self.run_pass(False, max_depth, follow_symlinks)

    @work(exclusive=True, thread=True)
    def run_pass(self, simulate_only: bool, max_depth: int, follow_symlinks: bool) -> None:
        try:
            summary = sanitize_directory(
                self.root,
                simulate_only=simulate_only,
                reporter=TUIReporter(self),
                max_depth=max_depth,
                follow_symlinks=follow_symlinks,
            )
        except SanitizationFailedError as exc:
            summary = exc.summary
        except SanitizerError as exc:
            self.call_from_thread(self._show_fatal_error, exc)
            return

        if simulate_only:
            self.call_from_thread(self._populate_table, summary)
        else:
            self.call_from_thread(self._show_apply_results, summary)

    def _show_fatal_error(self, error: SanitizerError) -> None:
        self.query_one("#rename-table", DataTable).loading = False
        self.query_one("#rescan-btn", Button).disabled = False
        self.write_log(f"[red]Error:[/red] {escape(str(error))}")

    def _populate_table(self, summary: ProcessingSummary) -> None:
        self.current_summary = summary
        table: DataTable[str] = self.query_one(  # pyright: ignore[reportUnknownVariableType]
            "#rename-table", DataTable
        )
        table.clear()
        self.row_results.clear()

        for result in summary.results:
            if not result.was_renamed and result.failure is None:
                continue
            try:
                rel_dir = str(result.original_path.parent.relative_to(self.root))
            except ValueError:
                rel_dir = str(result.original_path.parent)
            row_key = table.add_row(  # pyright: ignore[reportUnknownMemberType]
                result.original_name,
                result.final_name,
                rel_dir if rel_dir != "." else "(root)",
                "error" if result.failure is not None else "pending",
            )
            self.row_results[row_key] = result

        table.loading = False
        self.query_one("#apply-btn", Button).disabled = summary.renamed == 0

        header = self.query_one("#detail-header", Static)
        content = self.query_one("#detail-content", Static)
        header.update("Select a row to see details")
        content.update("")

        self.write_log(
            f"Scanned {summary.total_found} folders under {escape(str(self.root))}, "
            f"{summary.renamed} renames needed."
        )
        for warning in summary.warnings:
            self.write_log(f"[yellow]Warning:[/yellow] {escape(warning)}")

    def _show_apply_results(self, summary: ProcessingSummary) -> None:
        for result in summary.results:
            if result.failure is not None:
                self.write_log(
                    f"[red]FAIL[/red] {escape(result.original_name)}: "
                    f"{escape(result.error_message or '')}"
                )
            elif result.was_renamed:
                self.write_log(
                    f"[green]OK[/green] {escape(result.original_name)} -> "
                    f"{escape(result.final_name)}"
                )
        self.write_log(
            f"\nDone: {summary.renamed} renamed, {summary.errored} errors "
            f"in {summary.elapsed.total_seconds():.2f}s."
        )

        self.query_one("#apply-btn", Button).disabled = True
        self.query_one("#rescan-btn", Button).disabled = False
        self.current_summary = None

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        result = self.row_results.get(event.row_key)
        if result is None:
            return
        header = self.query_one("#detail-header", Static)
        content = self.query_one("#detail-content", Static)
        header.update(escape(f"[dir] {result.original_name}"))
        sanitized, issues = sanitize_name_with_issues(result.original_name)
        lines = [
            f"Source:      {result.original_path}",
            f"Destination: {result.final_path}",
            "",
            "Issues:",
        ]
        if issues:
            for issue in issues:
                lines.append(f"  - {issue}")
        else:
            lines.append("  (none)")
        if result.was_renamed and result.final_name != sanitized:
            lines.append("  - Name collision resolved with a numbered suffix")
        if result.error_message:
            lines.extend(["", f"Error: {result.error_message}"])
        content.update(escape("\n".join(lines)))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "rescan-btn":
            self.action_rescan()
        elif event.button.id == "apply-btn":
            self.action_apply()


def tui_main(argv: list[str] | None = None) -> int:
    """CLI entry point for the TUI."""
    parser = argparse.ArgumentParser(
        prog="folder-name-sanitizer-tui",
        description="Interactive TUI for sanitizing folder names for Windows.",
    )
    parser.add_argument("path", type=Path, help="Root directory to scan.")
    args = parser.parse_args(argv)

    root: Path = args.path.resolve()
    if not root.is_dir():
        print(f"Error: '{args.path}' is not a directory.", file=sys.stderr)
        return 1

    app = SanitizerApp(root=root)
    result = app.run()
    return result if result is not None else 0
