"""
Transition ROM builder for the tape machine.

Defines the tape alphabet, the control states and head moves, the fixed
2-state table, and packs a table into a flat byte array suitable for EEPROM.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Alphabet, states, moves
# ---------------------------------------------------------------------------

SYM_ZERO = 0
SYM_ONE  = 1
SYMBOLS  = (SYM_ZERO, SYM_ONE)

S_A    = 0
S_B    = 1
S_HALT = 2
STATES = (S_A, S_B, S_HALT)

MOVE_LEFT  = -1
MOVE_NONE  = 0
MOVE_RIGHT = 1
MOVES      = (MOVE_LEFT, MOVE_NONE, MOVE_RIGHT)

STATE_NAMES  = {S_A: "A", S_B: "B", S_HALT: "Halt"}
SYMBOL_NAMES = {SYM_ZERO: "Zero", SYM_ONE: "One"}
MOVE_NAMES   = {MOVE_LEFT: "-1", MOVE_NONE: "0", MOVE_RIGHT: "+1"}

# ---------------------------------------------------------------------------
# ROM geometry
# address = state(2) | symbol(1)
# data    = valid(1) | next_state(2) | move+1(2) | write(1)
# ---------------------------------------------------------------------------

ROM_ADDR_BITS = 3
ROM_DATA_BITS = 6

WRITE_SHIFT = 0
MOVE_SHIFT  = 1
NEXT_SHIFT  = 3
VALID_BIT   = 1 << 5

# (state, symbol) -> (write, move, next_state)
BUSY_BEAVER_2: dict[tuple[int, int], tuple[int, int, int]] = {
    (S_A, SYM_ZERO): (SYM_ONE,  MOVE_RIGHT, S_B),
    (S_A, SYM_ONE):  (SYM_ZERO, MOVE_LEFT,  S_B),
    (S_B, SYM_ZERO): (SYM_ONE,  MOVE_LEFT,  S_A),
    (S_B, SYM_ONE):  (SYM_ONE,  MOVE_RIGHT, S_HALT),
}


def rom_address(state: int, symbol: int) -> int:
    return ((state & 0x3) << 1) | (symbol & 1)


def pack_transition(write: int, move: int, next_state: int) -> int:
    return (VALID_BIT |
            ((next_state & 0x3) << NEXT_SHIFT) |
            (((move + 1) & 0x3) << MOVE_SHIFT) |
            ((write & 1) << WRITE_SHIFT))


def unpack_transition(entry: int) -> tuple[int, int, int] | None:
    """Decode a ROM entry. Returns None for an unprogrammed address."""
    if not entry & VALID_BIT:
        return None
    write = (entry >> WRITE_SHIFT) & 1
    move = ((entry >> MOVE_SHIFT) & 0x3) - 1
    next_state = (entry >> NEXT_SHIFT) & 0x3
    return (write, move, next_state)


def _is_code(value, codes) -> bool:
    return type(value) is int and value in codes


def validate_table(table: dict) -> None:
    """Reject tables the machine cannot execute.

    The table must cover every (state, symbol) pair for the non-halting
    states, and nothing may transition out of Halt.
    Every code must be a plain int; 1.0 or True is not a move.
    """
    for key, value in table.items():
        if not (isinstance(key, tuple) and len(key) == 2):
            raise ValueError(f"Table key must be (state, symbol), got {key!r}")
        state, symbol = key
        if not (_is_code(state, STATES) and _is_code(symbol, SYMBOLS)):
            raise ValueError(f"Unknown (state, symbol) pair: {key!r}")
        if state == S_HALT:
            raise ValueError("Halt state cannot have outgoing transitions")
        if not (isinstance(value, tuple) and len(value) == 3):
            raise ValueError(f"Entry for {key!r} must be (write, move, next), got {value!r}")
        write, move, next_state = value
        if not _is_code(write, SYMBOLS):
            raise ValueError(f"Entry for {key!r} writes unknown symbol {write!r}")
        if not _is_code(move, MOVES):
            raise ValueError(f"Entry for {key!r} has illegal move {move!r}")
        if not _is_code(next_state, STATES):
            raise ValueError(f"Entry for {key!r} targets unknown state {next_state!r}")

    missing = [
        (s, sym) for s in STATES if s != S_HALT
        for sym in SYMBOLS if (s, sym) not in table
    ]
    if missing:
        raise ValueError(f"Transition table is missing entries: {missing}")


def build_transition_rom(table: dict | None = None) -> bytes:
    """Validate a table and pack it into a (1 << ROM_ADDR_BITS)-byte image."""
    if table is None:
        table = BUSY_BEAVER_2
    validate_table(table)
    rom = bytearray(1 << ROM_ADDR_BITS)
    for (state, symbol), (write, move, next_state) in table.items():
        rom[rom_address(state, symbol)] = pack_transition(write, move, next_state)
    return bytes(rom)
