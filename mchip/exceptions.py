#!/usr/bin/env python3

"""
Machine Faults

Everything the emulated machine can fail with is raised as a MachineError, so
a host only needs to catch one class to decide whether to restart or abort.

    * LoadError   - The program image could not be placed into memory.  Raised
                    before execution starts, leaving RAM untouched.
    * DecodeError - An instruction word has no meaning within its category.
    * BoundsError - An address, the program counter, or the call stack depth
                    left its legal range.  RAM, Stack and CPU each raise their
                    own subclass of this.

None of these are ever retried or swallowed by the core.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class MachineError(Exception):
    pass


class LoadError(MachineError):
    pass


class DecodeError(MachineError):
    def __init__(self, opcode, address, detail=""):
        self.opcode = opcode
        self.address = address
        self.detail = detail
        super().__init__(str(self))

    def __str__(self):
        message = "Opcode 0x{:04x} at address 0x{:03x} is not a valid instruction.".format(self.opcode, self.address)
        return "{}\n\n{}".format(self.detail, message) if self.detail else message


class BoundsError(MachineError):
    pass
