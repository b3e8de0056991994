"""
Bounded stack machine.

A fixed-capacity LIFO of integers backed by a preallocated slot array and a
top-of-stack register. Overflow and underflow saturate instead of failing:
a push onto a full stack is dropped, a pop from an empty stack returns 0.
"""

from __future__ import annotations

from .chips import Register

STACK_CAPACITY = 256
EMPTY_POP = 0


class BoundedStack:
    """Saturating LIFO with `capacity` slots."""

    def __init__(self, capacity: int = STACK_CAPACITY):
        if capacity < 1:
            raise ValueError(f"stack capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.slots: list[int] = [0] * capacity
        self._top = Register(capacity.bit_length())

        # --- Counters ---
        self.peak = 0
        self.dropped = 0

    @property
    def top(self) -> int:
        """Number of occupied slots; the next push lands in slots[top]."""
        return self._top.value

    def push(self, value: int):
        top = self.top
        if top >= self.capacity:
            self.dropped += 1
            return
        self.slots[top] = value
        self._top.load(top + 1)
        if self.top > self.peak:
            self.peak = self.top

    def pop(self) -> int:
        top = self.top
        if top == 0:
            return EMPTY_POP
        top -= 1
        self._top.load(top)
        return self.slots[top]

    def is_empty(self) -> bool:
        return self.top == 0

    def is_full(self) -> bool:
        return self.top == self.capacity

    def __len__(self) -> int:
        return self.top

    def __repr__(self) -> str:
        return f"BoundedStack(capacity={self.capacity}, top={self.top})"
