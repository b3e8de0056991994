"""
Tape machine - clocked single-tape automaton over a binary alphabet.

Models the hardware: a transition EEPROM, a fixed-length tape RAM, head and
state registers, and a step counter. One call to step() is one clock cycle
and applies at most one transition.
"""

from __future__ import annotations

from .chips import EEPROM, Register, TapeRAM, OutOfBounds
from .transitions import (
    ROM_ADDR_BITS, ROM_DATA_BITS, S_A, S_HALT, SYM_ONE,
    build_transition_rom, rom_address, unpack_transition,
)

__all__ = ["TapeMachine", "OutOfBounds", "TAPE_LENGTH", "DEFAULT_MAX_STEPS"]

TAPE_LENGTH = 100
DEFAULT_MAX_STEPS = 100


class TapeMachine:
    """Step-bounded simulator for a 2-state/2-symbol machine."""

    STATE_BITS = 2

    def __init__(self, table: dict | None = None, tape_length: int = TAPE_LENGTH):
        # --- Chips ---
        self.rom = EEPROM(ROM_ADDR_BITS, ROM_DATA_BITS, build_transition_rom(table))
        self.tape = TapeRAM(tape_length)

        # --- Registers ---
        self.head = Register(tape_length.bit_length())
        self.state = Register(self.STATE_BITS)

        self.steps = 0
        self.reset()

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def reset(self):
        """Blank tape, head at the midpoint, state A, zero steps."""
        self.tape.clear()
        self.head.load(len(self.tape) // 2)
        self.state.load(S_A)
        self.steps = 0
        self.reset_counters()

    def reset_counters(self):
        self.tape_reads = 0
        self.tape_writes = 0
        self.rom_reads = 0

    # -------------------------------------------------------------------
    # Transition lookup
    # -------------------------------------------------------------------

    def lookup(self, state: int, symbol: int) -> tuple[int, int, int] | None:
        """Decoded ROM entry (write, move, next_state) for a pair."""
        return unpack_transition(self.rom.read(rom_address(state, symbol)))

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------

    def step(self):
        """
        Apply one transition.

        A halted machine is left untouched. Raises OutOfBounds, without
        modifying the tape, head, state or step count, when the move would
        take the head off the tape.
        """
        s = self.state.value
        if s == S_HALT:
            return

        head = self.head.value
        symbol = self.tape.read(head)
        entry = self.lookup(s, symbol)
        if entry is None:
            raise RuntimeError(f"no transition for state {s}, symbol {symbol}")
        write, move, next_state = entry

        new_head = head + move
        self.tape.check(new_head)

        self.tape.write(head, write)
        self.head.load(new_head)
        self.state.load(next_state)
        self.steps += 1

        self.tape_reads += 1
        self.tape_writes += 1
        self.rom_reads += 1

    def run(self, max_steps: int = DEFAULT_MAX_STEPS) -> int:
        """Step until Halt or `max_steps` transitions. Returns total steps."""
        i = 0
        while i < max_steps:
            if self.state.value == S_HALT:
                break
            self.step()
            i += 1
        return self.steps

    # -------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------

    def is_halted(self) -> bool:
        return self.state.value == S_HALT

    def steps_taken(self) -> int:
        return self.steps

    def current_state(self) -> int:
        return self.state.value

    def head_position(self) -> int:
        return self.head.value

    def tape_contents(self) -> list[int]:
        return list(self.tape.cells)

    def tape_segment(self, lo: int, hi: int) -> list[int]:
        """Cells lo..hi-1, clipped to the tape."""
        lo = max(lo, 0)
        hi = min(hi, len(self.tape))
        return list(self.tape.cells[lo:hi])

    def ones_count(self) -> int:
        return sum(1 for cell in self.tape.cells if cell == SYM_ONE)

    def stats(self) -> dict:
        return {
            "steps": self.steps,
            "tape_reads": self.tape_reads,
            "tape_writes": self.tape_writes,
            "rom_reads": self.rom_reads,
            "ones": self.ones_count(),
            "head": self.head.value,
        }

    def stats_summary(self) -> str:
        s = self.stats()
        return (
            f"Steps: {s['steps']}\n"
            f"ROM reads: {s['rom_reads']}\n"
            f"Tape: {s['tape_reads']}R/{s['tape_writes']}W "
            f"({s['ones']} ones)\n"
            f"Head: {s['head']}"
        )
