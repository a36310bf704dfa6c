#!/usr/bin/env python3

"""
Stack Emulator

There is no specified location for the call stack in system RAM, and no stack
pointer register is exposed to the running program, so a plain list is enough.
The list length doubles as the stack pointer.

Both ends are guarded: a CALL with every level already in use, or a RET with
nothing to return to, is a StackError carrying the depth at the time.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .exceptions import BoundsError


class StackError(BoundsError):
    def __init__(self, message, depth):
        self.depth = depth
        super().__init__("{} (depth {})".format(message, depth))


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    def push(self, return_address):
        depth = len(self.items)

        if depth >= self.size:
            raise StackError("Stack overflow", depth)

        self.items.append(return_address)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackError("Stack underflow", 0) from None

    def depth(self):
        return len(self.items)

    def get_items(self):
        # For debugging
        return tuple(self.items)
