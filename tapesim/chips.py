"""
Chip primitives for the tape machine.

Models the discrete components the machine is wired from: an EEPROM holding
the transition table, clocked registers, and a fixed-length tape RAM.
"""

from __future__ import annotations


class OutOfBounds(IndexError):
    """Raised when a tape cell outside [0, length) would be touched."""

    def __init__(self, position: int, length: int):
        super().__init__(f"tape position {position} outside [0, {length})")
        self.position = position
        self.length = length
        self.records: list[dict] = []


class EEPROM:
    """Generic ROM. Used for the transition table."""

    def __init__(self, addr_bits: int, data_bits: int, contents: bytes):
        self.data = contents
        self.addr_bits = addr_bits
        self.data_bits = data_bits
        self._mask = (1 << data_bits) - 1

    def read(self, addr: int) -> int:
        addr &= (1 << self.addr_bits) - 1
        if addr < len(self.data):
            return self.data[addr] & self._mask
        return 0


class Register:
    """N-bit clocked register."""

    def __init__(self, width: int):
        self.width = width
        self.value = 0
        self._mask = (1 << width) - 1

    def load(self, val: int):
        self.value = val & self._mask


class TapeRAM:
    """
    Fixed-length binary tape.

    Unlike the address-masked ROM, every access is range checked: an
    out-of-range position raises OutOfBounds instead of wrapping.
    """

    def __init__(self, length: int):
        if length < 1:
            raise ValueError(f"tape length must be positive, got {length}")
        self.length = length
        self.cells = bytearray(length)

    def check(self, pos: int):
        if not 0 <= pos < self.length:
            raise OutOfBounds(pos, self.length)

    def read(self, pos: int) -> int:
        self.check(pos)
        return self.cells[pos]

    def write(self, pos: int, bit: int):
        self.check(pos)
        self.cells[pos] = bit & 1

    def clear(self):
        self.cells = bytearray(self.length)

    def __len__(self) -> int:
        return self.length
