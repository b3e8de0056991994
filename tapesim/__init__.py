"""Bounded-tape state machine simulator and saturating stack machine."""

from .chips import OutOfBounds
from .machine import TapeMachine, TAPE_LENGTH, DEFAULT_MAX_STEPS
from .stack import BoundedStack, STACK_CAPACITY
from .host import MachineHost

__all__ = [
    "TapeMachine", "BoundedStack", "MachineHost", "OutOfBounds",
    "TAPE_LENGTH", "DEFAULT_MAX_STEPS", "STACK_CAPACITY",
]
