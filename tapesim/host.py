"""
MachineHost - high-level interface to the tape machine.

Runs a machine against a step budget, records per-transition traces, and
decodes machine state into readable strings and result dicts.
"""

from __future__ import annotations

from .machine import TapeMachine, OutOfBounds, TAPE_LENGTH, DEFAULT_MAX_STEPS
from .transitions import STATE_NAMES, S_HALT


class MachineHost:
    """High-level interface to a TapeMachine.

    Args:
        table: Optional transition table. Defaults to the fixed 2-state table.
        tape_length: Number of tape cells.
    """

    def __init__(self, table: dict | None = None, tape_length: int = TAPE_LENGTH):
        self.machine = TapeMachine(table, tape_length)

    def reset(self):
        self.machine.reset()

    # -------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------

    def eval(self, max_steps: int = DEFAULT_MAX_STEPS) -> dict:
        """
        Run the machine against a step budget.

        Returns dict with halt status, step count, decoded state, tape window
        and stats. A head overrun is reported under "error" rather than raised.
        """
        error = None
        try:
            self.machine.run(max_steps)
        except OutOfBounds as e:
            error = str(e)

        m = self.machine
        return {
            "ok": error is None and m.is_halted(),
            "halted": m.is_halted(),
            "steps": m.steps_taken(),
            "state": self.state_name(),
            "head": m.head_position(),
            "tape": self.render_tape(),
            "error": error,
            "stats": m.stats(),
        }

    def trace(self, max_steps: int = DEFAULT_MAX_STEPS) -> list[dict]:
        """
        Step one transition at a time, recording each applied transition.

        On OutOfBounds the records of the transitions already applied in this
        call are attached to the error as `records` before it propagates.
        """
        m = self.machine
        records = []
        for _ in range(max(max_steps, 0)):
            if m.is_halted():
                break
            state = m.current_state()
            head = m.head_position()
            read = m.tape.read(head)
            write, move, next_state = m.lookup(state, read)
            try:
                m.step()
            except OutOfBounds as e:
                e.records = records
                raise
            records.append({
                "step": m.steps_taken(),
                "state": STATE_NAMES[state],
                "head": head,
                "read": read,
                "write": write,
                "move": move,
                "next": STATE_NAMES[next_state],
            })
        return records

    # -------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------

    def state_name(self) -> str:
        return STATE_NAMES.get(self.machine.current_state(), "?")

    def render_tape(self, radius: int = 8) -> str:
        """Tape cells around the head, head cell in brackets."""
        m = self.machine
        head = m.head_position()
        lo = max(head - radius, 0)
        cells = m.tape_segment(lo, head + radius + 1)
        parts = []
        for i, cell in enumerate(cells, start=lo):
            parts.append(f"[{cell}]" if i == head else str(cell))
        return "".join(parts)

    def summary(self) -> str:
        m = self.machine
        status = "halted" if m.current_state() == S_HALT else f"in state {self.state_name()}"
        return f"{status} after {m.steps_taken()} steps, head at {m.head_position()}"
