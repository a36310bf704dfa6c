#!/usr/bin/env python3

"""
Register File

Holds everything the CPU keeps between instructions apart from memory and the
screen:
    * V0-VF - 16 general 8-bit registers.  VF doubles as the carry, borrow,
              shifted-out bit and collision flag
    * I     - 16-bit index register
    * PC    - Program counter
    * Stack - 16 levels of return addresses
    * DT/ST - Delay and sound timers, counted down once per frame

The timers are never allowed below zero.  A timer at zero stays there until the
program sets it again.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_REGISTERS, PROGRAM_START, STACK_DEPTH
from .stack import Stack


class Registers:
    def __init__(self, stack=None):
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Mutable in place, so register updates are fast
        self.i = 0
        self.pc = PROGRAM_START
        self.stack = Stack(STACK_DEPTH) if stack is None else stack
        self.dt = 0
        self.st = 0

    def advance_pc(self):
        self.pc += 2

    def rewind_pc(self):
        # Only used to re-run an instruction (waiting for a keypress)
        self.pc -= 2

    def skip(self):
        self.pc += 2

    def set_delay_timer(self, value):
        self.dt = max(0, value)

    def set_sound_timer(self, value):
        self.st = max(0, value)

    def tick_timers(self):
        # Called once per frame, never per instruction
        if self.dt > 0:
            self.dt -= 1

        if self.st > 0:
            self.st -= 1

    def sound_active(self):
        return self.st > 0
