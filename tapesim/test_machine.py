"""
Verification suite for the tape machine.

Checks the fixed 2-state table against its hand-traced golden run, the step
budget, halting behavior and the head bounds guard.
"""

from __future__ import annotations

import sys

import pytest

from tapesim.chips import OutOfBounds
from tapesim.machine import TapeMachine, TAPE_LENGTH
from tapesim.transitions import (
    S_A, S_B, S_HALT, SYM_ZERO, SYM_ONE, MOVE_LEFT, MOVE_NONE, MOVE_RIGHT,
    BUSY_BEAVER_2,
)

# Applied transitions from a fresh machine: (state, head, read, write, move, next)
GOLDEN_TRACE = [
    (S_A, 50, SYM_ZERO, SYM_ONE,  MOVE_RIGHT, S_B),
    (S_B, 51, SYM_ZERO, SYM_ONE,  MOVE_LEFT,  S_A),
    (S_A, 50, SYM_ONE,  SYM_ZERO, MOVE_LEFT,  S_B),
    (S_B, 49, SYM_ZERO, SYM_ONE,  MOVE_LEFT,  S_A),
    (S_A, 48, SYM_ZERO, SYM_ONE,  MOVE_RIGHT, S_B),
    (S_B, 49, SYM_ONE,  SYM_ONE,  MOVE_RIGHT, S_HALT),
]
GOLDEN_STEPS = 6
GOLDEN_SEGMENT = [1, 1, 0, 1]  # cells 48..51

# Always writes One and moves right; never halts.
RUNAWAY_RIGHT = {
    (S_A, SYM_ZERO): (SYM_ONE, MOVE_RIGHT, S_A),
    (S_A, SYM_ONE):  (SYM_ONE, MOVE_RIGHT, S_A),
    (S_B, SYM_ZERO): (SYM_ONE, MOVE_RIGHT, S_A),
    (S_B, SYM_ONE):  (SYM_ONE, MOVE_RIGHT, S_A),
}

RUNAWAY_LEFT = {k: (w, MOVE_LEFT, s) for k, (w, _m, s) in RUNAWAY_RIGHT.items()}

# Stays put in A forever.
IDLE = {
    (S_A, SYM_ZERO): (SYM_ZERO, MOVE_NONE, S_A),
    (S_A, SYM_ONE):  (SYM_ONE,  MOVE_NONE, S_A),
    (S_B, SYM_ZERO): (SYM_ZERO, MOVE_NONE, S_A),
    (S_B, SYM_ONE):  (SYM_ONE,  MOVE_NONE, S_A),
}


def test_fresh_machine():
    tm = TapeMachine()
    assert len(tm.tape) == TAPE_LENGTH
    assert tm.head_position() == TAPE_LENGTH // 2
    assert tm.current_state() == S_A
    assert tm.steps_taken() == 0
    assert not tm.is_halted()
    assert tm.tape_contents() == [SYM_ZERO] * TAPE_LENGTH


def test_rom_matches_table():
    tm = TapeMachine()
    for (state, symbol), expected in BUSY_BEAVER_2.items():
        assert tm.lookup(state, symbol) == expected
    assert tm.lookup(S_HALT, SYM_ZERO) is None
    assert tm.lookup(S_HALT, SYM_ONE) is None


def test_golden_trace():
    """Each single step applies exactly the traced transition."""
    tm = TapeMachine()
    for i, (state, head, read, write, move, next_state) in enumerate(GOLDEN_TRACE, start=1):
        assert tm.current_state() == state
        assert tm.head_position() == head
        assert tm.tape.read(head) == read
        tm.step()
        assert tm.tape.read(head) == write
        assert tm.head_position() == head + move
        assert tm.current_state() == next_state
        assert tm.steps_taken() == i


def test_run_halts_in_six_steps():
    tm = TapeMachine()
    assert tm.run(100) == GOLDEN_STEPS
    assert tm.is_halted()
    assert tm.head_position() == 50
    assert tm.tape_segment(48, 52) == GOLDEN_SEGMENT
    assert tm.ones_count() == 3


def test_run_is_idempotent_once_halted():
    tm = TapeMachine()
    first = tm.run(100)
    tape = tm.tape_contents()
    for _ in range(3):
        assert tm.run(100) == first
    assert tm.tape_contents() == tape
    assert tm.head_position() == 50


def test_step_after_halt_is_noop():
    tm = TapeMachine()
    tm.run(100)
    before = (tm.tape_contents(), tm.head_position(), tm.steps_taken(), tm.stats())
    tm.step()
    after = (tm.tape_contents(), tm.head_position(), tm.steps_taken(), tm.stats())
    assert before == after
    assert tm.current_state() == S_HALT


def test_zero_budget():
    tm = TapeMachine()
    assert tm.run(0) == 0
    assert tm.steps_taken() == 0
    assert tm.current_state() == S_A
    assert tm.run(-5) == 0


def test_budget_is_per_call_and_total_is_cumulative():
    tm = TapeMachine()
    assert tm.run(2) == 2
    assert not tm.is_halted()
    assert tm.run(2) == 4
    assert tm.run(100) == GOLDEN_STEPS


def test_budget_exhausted_without_halt():
    tm = TapeMachine(table=IDLE)
    assert tm.run(100) == 100
    assert not tm.is_halted()
    assert tm.head_position() == 50


def test_runaway_right_hits_bound():
    tm = TapeMachine(table=RUNAWAY_RIGHT)
    with pytest.raises(OutOfBounds) as excinfo:
        tm.run(TAPE_LENGTH * 2)
    # 50 -> 99 is 49 moves; the 50th would leave the tape
    assert tm.steps_taken() == TAPE_LENGTH - 1 - TAPE_LENGTH // 2
    assert tm.head_position() == TAPE_LENGTH - 1
    assert tm.current_state() == S_A
    assert excinfo.value.position == TAPE_LENGTH
    assert excinfo.value.length == TAPE_LENGTH


def test_runaway_left_hits_bound():
    tm = TapeMachine(table=RUNAWAY_LEFT)
    with pytest.raises(OutOfBounds) as excinfo:
        tm.run(TAPE_LENGTH * 2)
    assert tm.steps_taken() == TAPE_LENGTH // 2
    assert tm.head_position() == 0
    assert excinfo.value.position == -1


def test_failed_step_is_not_partially_applied():
    tm = TapeMachine(table=RUNAWAY_RIGHT, tape_length=3)
    tm.step()  # 1 -> 2
    snapshot = (tm.tape_contents(), tm.head_position(), tm.current_state(),
                tm.steps_taken(), tm.stats())
    with pytest.raises(OutOfBounds):
        tm.step()
    assert (tm.tape_contents(), tm.head_position(), tm.current_state(),
            tm.steps_taken(), tm.stats()) == snapshot
    # The cell under the head was not written either.
    assert tm.tape.read(2) == SYM_ZERO
    with pytest.raises(OutOfBounds):
        tm.step()
    assert tm.steps_taken() == 1


def test_out_of_bounds_is_an_index_error():
    tm = TapeMachine(table=RUNAWAY_RIGHT, tape_length=1)
    with pytest.raises(IndexError):
        tm.step()


def test_small_tape_busy_beaver():
    # The golden run needs cells head-2 .. head+1.
    tm = TapeMachine(tape_length=4)
    assert tm.head_position() == 2
    assert tm.run(100) == GOLDEN_STEPS
    assert tm.tape_contents() == GOLDEN_SEGMENT


def test_too_small_tape_reports_bound():
    tm = TapeMachine(tape_length=2)
    with pytest.raises(OutOfBounds):
        tm.run(100)
    assert not tm.is_halted()


def test_reset():
    tm = TapeMachine()
    tm.run(100)
    tm.reset()
    assert tm.steps_taken() == 0
    assert tm.current_state() == S_A
    assert tm.head_position() == 50
    assert tm.ones_count() == 0
    assert tm.stats()["rom_reads"] == 0
    assert tm.run(100) == GOLDEN_STEPS


def test_stats():
    tm = TapeMachine()
    tm.run(100)
    s = tm.stats()
    assert s["steps"] == GOLDEN_STEPS
    assert s["rom_reads"] == GOLDEN_STEPS
    assert s["tape_reads"] == GOLDEN_STEPS
    assert s["tape_writes"] == GOLDEN_STEPS
    assert s["ones"] == 3
    assert "Steps: 6" in tm.stats_summary()


def test_invalid_construction():
    with pytest.raises(ValueError):
        TapeMachine(tape_length=0)
    with pytest.raises(ValueError):
        TapeMachine(table={(S_A, SYM_ZERO): (SYM_ONE, MOVE_RIGHT, S_B)})


def test_tape_segment_clips():
    tm = TapeMachine(tape_length=10)
    assert tm.tape_segment(-5, 3) == [0, 0, 0]
    assert tm.tape_segment(8, 50) == [0, 0]


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    print("=" * 60)
    print("Tape Machine - Verification Suite")
    print("=" * 60)
    sys.exit(pytest.main([__file__, "-q"]))


if __name__ == "__main__":
    main()
