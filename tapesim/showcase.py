"""
Turing completeness showcase.

Arithmetic, conditionals, loops, recursion, explicit mutable state, arrays,
the bounded stack machine, Collatz counting and the 2-state tape machine,
printed as one report.

Usage:
    python -m tapesim.showcase
    python -m tapesim.showcase --max-steps 4
    python -m tapesim.showcase --tape-length 20
    python -m tapesim.showcase --fibonacci --bits 64
"""

from __future__ import annotations

import argparse
import sys

from .machine import TapeMachine, OutOfBounds, TAPE_LENGTH, DEFAULT_MAX_STEPS
from .stack import BoundedStack

COLLATZ_LIMIT = 10_000


# ---------------------------------------------------------------------------
# Arithmetic and conditionals
# ---------------------------------------------------------------------------

def add(a: int, b: int) -> int:
    return a + b


def subtract(a: int, b: int) -> int:
    return a - b


def multiply(a: int, b: int) -> int:
    return a * b


def divide(a: int, b: int) -> int:
    """Integer quotient truncated toward zero; 0 when b is 0."""
    if b == 0:
        return 0
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def absolute(x: int) -> int:
    if x < 0:
        return -x
    return x


def maximum(a: int, b: int) -> int:
    if a > b:
        return a
    return b


# ---------------------------------------------------------------------------
# Loops and recursion
# ---------------------------------------------------------------------------

def sum_to_n(n: int) -> int:
    total = 0
    i = 1
    while i <= n:
        total += i
        i += 1
    return total


def factorial_iterative(n: int) -> int:
    result = 1
    for i in range(1, n + 1):
        result *= i
    return result


def factorial_recursive(n: int) -> int:
    if n <= 1:
        return 1
    return n * factorial_recursive(n - 1)


def fibonacci(n: int) -> int:
    if n <= 1:
        return n
    return fibonacci(n - 1) + fibonacci(n - 2)


# ---------------------------------------------------------------------------
# State and arrays
# ---------------------------------------------------------------------------

class Counter:
    """Mutable counter handed to whoever needs to bump it."""

    def __init__(self, value: int = 0):
        self.value = value

    def increment(self):
        self.value += 1

    def get(self) -> int:
        return self.value


def array_sum(arr: list[int], length: int) -> int:
    total = 0
    for i in range(length):
        total += arr[i]
    return total


def array_fill(arr: list[int], length: int, value: int):
    for i in range(length):
        arr[i] = value


def collatz_steps(n: int) -> int:
    """Steps for n to reach 1, or -1 past COLLATZ_LIMIT steps."""
    steps = 0
    current = n
    while current != 1:
        if current % 2 == 0:
            current //= 2
        else:
            current = current * 3 + 1
        steps += 1
        if steps > COLLATZ_LIMIT:
            return -1
    return steps


def fibonacci_until_overflow(bits: int = 128) -> list[int]:
    """
    Fibonacci terms from 0, 1 until the next one no longer fits in an
    unsigned `bits`-wide word. 128 bits yields 187 terms.
    """
    if bits < 1:
        raise ValueError(f"word width must be positive, got {bits}")
    limit = 1 << bits
    terms = [0, 1]
    prev, cur = 0, 1
    while True:
        nxt = prev + cur
        if nxt >= limit:
            return terms
        terms.append(nxt)
        prev, cur = cur, nxt


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

def run_showcase(out=None, max_steps: int = DEFAULT_MAX_STEPS,
                 tape_length: int = TAPE_LENGTH, counter: Counter | None = None) -> int:
    """Print the full report to `out`. Returns 0."""
    out = out or sys.stdout
    counter = counter or Counter()

    def emit(line: str = ""):
        print(line, file=out)

    emit("=== TURING COMPLETENESS TESTS ===\n")

    emit("1. Arithmetic:")
    emit(f"   5 + 3 = {add(5, 3)}")
    emit(f"   10 - 4 = {subtract(10, 4)}")
    emit(f"   6 * 7 = {multiply(6, 7)}")
    emit(f"   20 / 4 = {divide(20, 4)}\n")

    emit("2. Conditionals:")
    emit(f"   abs(-42) = {absolute(-42)}")
    emit(f"   max(15, 23) = {maximum(15, 23)}\n")

    emit("3. Loops:")
    emit(f"   sum(1..10) = {sum_to_n(10)}")
    emit(f"   factorial(5) = {factorial_iterative(5)}\n")

    emit("4. Recursion:")
    emit(f"   factorial_recursive(6) = {factorial_recursive(6)}")
    emit(f"   fibonacci(10) = {fibonacci(10)}\n")

    emit("5. State Mutation:")
    emit(f"   global_counter = {counter.get()}")
    for _ in range(3):
        counter.increment()
    emit(f"   after 3 increments = {counter.get()}\n")

    emit("6. Arrays:")
    numbers = [1, 2, 3, 4, 5]
    emit(f"   array sum = {array_sum(numbers, 5)}")
    array_fill(numbers, 5, 42)
    emit(f"   after fill(42) = {array_sum(numbers, 5)}\n")

    emit("7. Stack Machine:")
    stack = BoundedStack()
    for value in (10, 20, 30):
        stack.push(value)
    emit(f"   pop = {stack.pop()}")
    emit(f"   pop = {stack.pop()}")
    emit(f"   pop = {stack.pop()}\n")

    emit("8. Collatz Conjecture:")
    emit(f"   collatz(27) takes {collatz_steps(27)} steps\n")

    emit("9. Turing Machine (2-state Busy Beaver):")
    tm = TapeMachine(tape_length=tape_length)
    steps = tm.run(max_steps)
    if tm.is_halted():
        emit(f"   Halted after {steps} steps\n")
    else:
        emit(f"   Still running after {steps} steps\n")

    emit("=== ALL TESTS COMPLETE ===")
    return 0


def run_fibonacci_demo(out=None, bits: int = 128) -> list[int]:
    """Print the overflow-bounded Fibonacci sequence to `out` and return it."""
    out = out or sys.stdout
    terms = fibonacci_until_overflow(bits)
    print(f"Stopping execution, hitting limit! Sequence generated: {len(terms)}", file=out)
    print(terms, file=out)
    return terms


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Turing completeness showcase",
        prog="python -m tapesim.showcase",
    )
    parser.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS,
                        help="Step budget for the tape machine")
    parser.add_argument("--tape-length", type=int, default=TAPE_LENGTH,
                        help="Number of tape cells")
    parser.add_argument("--fibonacci", action="store_true",
                        help="Print the Fibonacci sequence up to word overflow instead")
    parser.add_argument("--bits", type=int, default=128,
                        help="Word width for --fibonacci")
    args = parser.parse_args(argv)

    try:
        if args.fibonacci:
            run_fibonacci_demo(bits=args.bits)
            return 0
        return run_showcase(max_steps=args.max_steps, tape_length=args.tape_length)
    except (OutOfBounds, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    sys.exit(main())
