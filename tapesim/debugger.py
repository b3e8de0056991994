"""
Textual TUI debugger for the tape machine.

Step-by-step debugger that runs the 2-state machine and displays the tape
window, registers, transition table and a trace of applied transitions.

Usage:
    python -m tapesim.debugger
    python -m tapesim.debugger --run
    python -m tapesim.debugger --tape-length 9 --max-steps 20
"""

from __future__ import annotations

import argparse
import sys
import threading

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.widgets import Static, RichLog, Footer
from textual import work

from tapesim.host import MachineHost
from tapesim.machine import TapeMachine, OutOfBounds, TAPE_LENGTH, DEFAULT_MAX_STEPS
from tapesim.transitions import (
    STATES, SYMBOLS, S_HALT, STATE_NAMES, SYMBOL_NAMES, MOVE_NAMES,
)


def _esc(text: str) -> str:
    """Escape Rich markup characters in text."""
    return text.replace("[", "\\[")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def format_tape(machine: TapeMachine, radius: int = 16) -> str:
    """Two lines: cell indices every 5 cells, then cells with the head marked."""
    head = machine.head_position()
    lo = max(head - radius, 0)
    hi = min(head + radius + 1, len(machine.tape))
    cells = machine.tape_segment(lo, hi)

    ruler = []
    row = []
    for i, cell in enumerate(cells, start=lo):
        ruler.append("|" if i % 5 == 0 else " ")
        row.append(f"[bold reverse]{cell}[/bold reverse]" if i == head else str(cell))
    return f"{lo:3d} {''.join(ruler)}\n    {''.join(row)}"


def format_state(machine: TapeMachine) -> str:
    state_name = STATE_NAMES.get(machine.current_state(), f"?({machine.current_state()})")
    s = machine.stats()
    return (
        f"[bold]State:[/bold] {state_name}    [bold]Step:[/bold] {s['steps']}\n"
        f"[bold]Head:[/bold] {s['head']} / {len(machine.tape)}\n"
        f"[bold]Ones:[/bold] {s['ones']}\n"
        f"[bold]ROM:[/bold] {s['rom_reads']}  "
        f"[bold]Tape:[/bold] {s['tape_reads']}R/{s['tape_writes']}W\n"
        f"[bold]Halted:[/bold] {'yes' if machine.is_halted() else 'no'}"
    )


def format_table(machine: TapeMachine) -> str:
    """Transition table, with the row about to fire highlighted."""
    state = machine.current_state()
    symbol = None
    if state != S_HALT:
        symbol = machine.tape.read(machine.head_position())

    lines = ["state  read   write  move  next"]
    for s in STATES:
        if s == S_HALT:
            continue
        for sym in SYMBOLS:
            entry = machine.lookup(s, sym)
            if entry is None:
                continue
            write, move, next_state = entry
            line = (f"{STATE_NAMES[s]:<6} {SYMBOL_NAMES[sym]:<6} "
                    f"{SYMBOL_NAMES[write]:<6} {MOVE_NAMES[move]:<5} {STATE_NAMES[next_state]}")
            if s == state and sym == symbol:
                line = f"[bold reverse]{line}[/bold reverse]"
            lines.append(line)
    return "\n".join(lines)


def format_record(rec: dict) -> str:
    return (f"#{rec['step']:<4} {rec['state']}@{rec['head']} "
            f"read {rec['read']} write {rec['write']} "
            f"move {MOVE_NAMES[rec['move']]} -> {rec['next']}")


# ---------------------------------------------------------------------------
# CSS
# ---------------------------------------------------------------------------

DEBUGGER_CSS = """
Screen {
    layout: grid;
    grid-size: 2 3;
    grid-columns: 1fr 1fr;
    grid-rows: auto 1fr auto;
}

.panel {
    border: solid $accent;
    border-title-align: left;
    overflow-y: auto;
    height: 100%;
}

#tape-panel  { column-span: 2; height: 6; }
#state-panel { column-span: 1; }
#table-panel { column-span: 1; }
#trace-panel { column-span: 2; height: 12; }

Footer {
    column-span: 2;
}
"""


# ---------------------------------------------------------------------------
# Panel widgets
# ---------------------------------------------------------------------------

class TapePanel(ScrollableContainer):
    """Tape cells around the head."""
    BORDER_TITLE = "Tape"

    def compose(self) -> ComposeResult:
        yield Static("", id="tape-content")


class StatePanel(ScrollableContainer):
    """Machine state: registers, counters."""
    BORDER_TITLE = "Machine State"

    def compose(self) -> ComposeResult:
        yield Static("", id="state-content")


class TablePanel(ScrollableContainer):
    """Transition ROM contents."""
    BORDER_TITLE = "Transitions"

    def compose(self) -> ComposeResult:
        yield Static("", id="table-content")


class TracePanel(ScrollableContainer):
    """Applied transitions."""
    BORDER_TITLE = "Trace"

    def compose(self) -> ComposeResult:
        yield RichLog(id="trace-log", markup=True, wrap=True)


# ---------------------------------------------------------------------------
# Main debugger app
# ---------------------------------------------------------------------------

class TapeDebugger(App):
    """Textual TUI debugger for the tape machine."""

    CSS = DEBUGGER_CSS
    TITLE = "Tape Machine Debugger"

    BINDINGS = [
        Binding("s", "step_1", "Step"),
        Binding("space", "step_1", "Step", show=False),
        Binding("n", "step_10", "x10"),
        Binding("r", "run_to_end", "Run"),
        Binding("x", "reset", "Reset"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, host: MachineHost, max_steps: int = DEFAULT_MAX_STEPS,
                 auto_run: bool = False):
        super().__init__()
        self.host = host
        self.max_steps = max_steps
        self.auto_run = auto_run
        self.log_lines: list[str] = []
        # Held by whoever is mutating the machine: a key action or the run worker.
        self.machine_lock = threading.Lock()

    def compose(self) -> ComposeResult:
        yield TapePanel(id="tape-panel", classes="panel")
        yield StatePanel(id="state-panel", classes="panel")
        yield TablePanel(id="table-panel", classes="panel")
        yield TracePanel(id="trace-panel", classes="panel")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_panels()
        if self.auto_run:
            self.action_run_to_end()

    # -------------------------------------------------------------------
    # Panel refresh
    # -------------------------------------------------------------------

    def refresh_panels(self) -> None:
        m = self.host.machine
        self.query_one("#tape-content", Static).update(format_tape(m))
        self.query_one("#state-content", Static).update(format_state(m))
        self.query_one("#table-content", Static).update(format_table(m))

    def _log(self, line: str) -> None:
        self.log_lines.append(line)
        self.query_one("#trace-log", RichLog).write(line)

    def _log_records(self, records: list[dict]) -> None:
        for rec in records:
            self._log(_esc(format_record(rec)))
        if self.host.machine.is_halted():
            self._log(f"[green]Halted after {self.host.machine.steps_taken()} steps[/green]")

    # -------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------

    def _report_error(self, err: Exception) -> None:
        """Show an error in the trace panel."""
        self._log(f"[red]\\[ERROR] {_esc(str(err))}[/red]")
        self.refresh_panels()

    def _do_steps(self, count: int) -> None:
        if not self.machine_lock.acquire(blocking=False):
            self._log("[yellow]busy: run in progress[/yellow]")
            return
        try:
            records = self.host.trace(count)
        except OutOfBounds as e:
            self._log_records(e.records)
            self._report_error(e)
            return
        finally:
            self.machine_lock.release()
        self._log_records(records)
        self.refresh_panels()

    def action_step_1(self) -> None:
        self._do_steps(1)

    def action_step_10(self) -> None:
        self._do_steps(10)

    def action_reset(self) -> None:
        if not self.machine_lock.acquire(blocking=False):
            self._log("[yellow]busy: run in progress[/yellow]")
            return
        try:
            self.host.reset()
        finally:
            self.machine_lock.release()
        self._log("reset")
        self.refresh_panels()

    @work(thread=True, group="run")
    def action_run_to_end(self) -> None:
        """Run to halt or budget in a background thread."""
        if not self.machine_lock.acquire(blocking=False):
            self.call_from_thread(self._log, "[yellow]busy: run in progress[/yellow]")
            return
        try:
            self._run_locked()
        finally:
            self.machine_lock.release()
        self.call_from_thread(self.refresh_panels)

    def _run_locked(self) -> None:
        m = self.host.machine
        remaining = self.max_steps
        while remaining > 0 and not m.is_halted():
            try:
                records = self.host.trace(min(remaining, 50))
            except OutOfBounds as e:
                self.call_from_thread(self._log_records, e.records)
                self.call_from_thread(self._report_error, e)
                return
            if not records:
                break
            remaining -= len(records)
            self.call_from_thread(self._log_records, records)
            self.call_from_thread(self.refresh_panels)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(
        description="Tape machine TUI debugger",
        prog="python -m tapesim.debugger",
    )
    parser.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS,
                        help="Step budget for the run action")
    parser.add_argument("--tape-length", type=int, default=TAPE_LENGTH,
                        help="Number of tape cells")
    parser.add_argument("--run", action="store_true",
                        help="Run to completion immediately (auto-run mode)")
    args = parser.parse_args()

    try:
        host = MachineHost(tape_length=args.tape_length)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = TapeDebugger(host, max_steps=args.max_steps, auto_run=args.run)
    app.run()


if __name__ == "__main__":
    main()
