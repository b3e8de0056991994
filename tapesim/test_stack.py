"""
Verification suite for the bounded stack machine.
"""

from __future__ import annotations

import sys

import pytest

from tapesim.stack import BoundedStack, STACK_CAPACITY, EMPTY_POP


def test_lifo_order():
    stack = BoundedStack()
    values = [10, 20, 30, -4, 0, 7]
    for v in values:
        stack.push(v)
    assert [stack.pop() for _ in values] == list(reversed(values))
    assert stack.is_empty()


def test_original_demo_pops():
    stack = BoundedStack()
    stack.push(10)
    stack.push(20)
    stack.push(30)
    assert stack.pop() == 30
    assert stack.pop() == 20
    assert stack.pop() == 10


def test_empty_pop_returns_sentinel():
    stack = BoundedStack()
    assert stack.pop() == EMPTY_POP == 0
    assert stack.is_empty()
    assert len(stack) == 0


def test_pop_past_empty():
    stack = BoundedStack()
    stack.push(5)
    assert stack.pop() == 5
    assert stack.pop() == 0
    assert stack.pop() == 0
    stack.push(6)
    assert stack.pop() == 6


def test_saturation_drops_extra_push():
    stack = BoundedStack()
    for v in range(1, STACK_CAPACITY + 2):
        stack.push(v)
    assert stack.is_full()
    assert len(stack) == STACK_CAPACITY
    assert stack.dropped == 1
    popped = [stack.pop() for _ in range(STACK_CAPACITY)]
    assert popped == list(range(STACK_CAPACITY, 0, -1))
    assert stack.is_empty()
    assert stack.pop() == 0


def test_small_capacity():
    stack = BoundedStack(capacity=2)
    for v in (1, 2, 3, 4):
        stack.push(v)
    assert stack.dropped == 2
    assert stack.pop() == 2
    assert stack.pop() == 1
    assert stack.pop() == 0


def test_stale_slots_not_visible():
    stack = BoundedStack(capacity=4)
    stack.push(99)
    stack.pop()
    # Slot 0 still holds 99 but top is 0.
    assert stack.pop() == 0
    stack.push(1)
    assert stack.pop() == 1


def test_peak_tracking():
    stack = BoundedStack()
    for v in range(5):
        stack.push(v)
    for _ in range(3):
        stack.pop()
    stack.push(1)
    assert stack.peak == 5
    assert len(stack) == 3


def test_top_is_an_int():
    stack = BoundedStack(capacity=4)
    assert stack.top == 0
    stack.push(3)
    stack.push(8)
    assert type(stack.top) is int
    assert stack.top == len(stack) == 2
    assert stack.slots[stack.top - 1] == 8
    assert repr(stack) == "BoundedStack(capacity=4, top=2)"


def test_top_is_read_only():
    stack = BoundedStack()
    with pytest.raises(AttributeError):
        stack.top = 5


def test_invalid_capacity():
    with pytest.raises(ValueError):
        BoundedStack(capacity=0)


def main():
    print("=" * 60)
    print("Bounded Stack - Verification Suite")
    print("=" * 60)
    sys.exit(pytest.main([__file__, "-q"]))


if __name__ == "__main__":
    main()
