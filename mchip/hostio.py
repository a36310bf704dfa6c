#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading program images for writing into RAM.  An image is a raw byte
stream with no header, placed verbatim at the start of the program area.

Everything is checked before RAM is touched, so a failed load leaves no partial
program behind.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import PROGRAM_CAPACITY, PROGRAM_START
from .exceptions import LoadError


class Loader:
    def load_binary(self, filename):
        try:
            with open(filename, "rb") as f:
                return f.read()
        except OSError as e:
            raise LoadError("Unable to read program '{}': {}".format(filename, e.strerror or e)) from None

    def check_image(self, image):
        image_size = len(image)

        if image_size > PROGRAM_CAPACITY:
            raise LoadError(
                "Program is {} bytes, but only {} bytes are available".format(image_size, PROGRAM_CAPACITY)
            )

        return image

    def load_image(self, ram, image):
        ram.write_block(PROGRAM_START, self.check_image(image))

    def load_program(self, ram, filename):
        self.load_image(ram, self.load_binary(filename))
