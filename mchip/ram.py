#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes.  Every
access is checked against the size of the bank, so a stray address becomes a
RAMError rather than a silently truncated slice or a wrapped index.

Regions can also be protected once they have been seeded, which is how the
built-in font is kept intact for the lifetime of a run.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE
from .exceptions import BoundsError


class RAMError(BoundsError):
    def __init__(self, message, address):
        self.address = address
        super().__init__("{} at address 0x{:04x}".format(message, address))


class RAM:
    def __init__(self, mem_size=MEM_SIZE):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size
        self.protected = []

    def read(self, location):
        self.check_bounds(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_bounds(location)
        self.check_bounds(location + size - 1)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_bounds(location)
        self.check_protected(location, 1)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)

        if not block_size:
            return

        block_top = location + block_size
        self.check_bounds(location)
        self.check_bounds(block_top - 1)
        self.check_protected(location, block_size)
        self.mem[location:block_top] = block

    def check_bounds(self, location):
        if location < 0 or location > self.mem_top:
            raise RAMError("Memory overflow", location)

    def protect(self, location, size):
        # Anything written before this call stays; anything after is refused
        self.protected.append((location, location + size))

    def check_protected(self, location, size):
        block_top = location + size

        for start, end in self.protected:
            if location < end and block_top > start:
                raise RAMError("Write to read-only memory", max(location, start))

    def clear(self):
        # Protected regions are kept as they are
        for i in range(self.mem_size):
            if not any(start <= i < end for start, end in self.protected):
                self.mem[i] = 0x00
