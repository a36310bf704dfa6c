#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from mchip.exceptions import BoundsError
from mchip.ram import RAM, RAMError


class TestRAM(unittest.TestCase):
    def setUp(self):
        self.ram = RAM(5)

    def test_ram_init_default_size(self):
        ram = RAM()
        self.assertEqual(0x1000, ram.mem_size)
        self.assertEqual(0xFFF, ram.mem_top)

    def test_ram_init_zeroed(self):
        self.assertEqual("0000000000", self.ram.mem.hex())

    def test_ram_write(self):
        self.ram.write(1, 255)
        self.assertEqual("00ff000000", self.ram.mem.hex())
        self.assertEqual(255, self.ram.read(1))

    def test_ram_write_block(self):
        self.ram.write_block(1, bytearray(b"\xFD\xFE"))
        self.ram.write_block(4, bytearray(b"\xFF"))
        self.assertEqual("00fdfe00ff", self.ram.mem.hex())

    def test_ram_write_empty_block(self):
        self.ram.write_block(5, b"")
        self.assertEqual("0000000000", self.ram.mem.hex())

    def test_ram_read_block(self):
        self.ram.write_block(2, b"\x12\x34")
        self.assertEqual(b"\x12\x34", bytes(self.ram.read_block(2, 2)))

    def test_ram_byte_overflow(self):
        self.assertRaises(RAMError, self.ram.write, 5, 255)
        self.assertRaises(RAMError, self.ram.read, 5)
        self.assertRaises(RAMError, self.ram.read, -1)

    def test_ram_block_overflow(self):
        self.assertRaises(RAMError, self.ram.write_block, 4, bytearray(b"\xFE\xFF"))
        # Nothing should be written if any part of the block is out of range
        self.assertEqual("0000000000", self.ram.mem.hex())

    def test_ram_read_block_overflow(self):
        # Slicing would silently truncate, so this must be refused
        self.assertRaises(RAMError, self.ram.read_block, 4, 2)

    def test_ram_error_reports_address(self):
        with self.assertRaises(RAMError) as context:
            self.ram.write(7, 1)

        self.assertEqual(7, context.exception.address)
        self.assertIsInstance(context.exception, BoundsError)

    def test_ram_protect(self):
        self.ram.write_block(1, b"\xAA\xBB")
        self.ram.protect(1, 2)
        self.assertRaises(RAMError, self.ram.write, 1, 0)
        self.assertRaises(RAMError, self.ram.write, 2, 0)
        self.assertRaises(RAMError, self.ram.write_block, 0, b"\x01\x02")
        self.assertRaises(RAMError, self.ram.write_block, 2, b"\x01\x02")
        self.assertEqual("00aabb0000", self.ram.mem.hex())

        # Either side of the protected region is still writable
        self.ram.write(0, 0x11)
        self.ram.write_block(3, b"\x22\x33")
        self.assertEqual("11aabb2233", self.ram.mem.hex())

    def test_ram_clear(self):
        self.ram.write_block(0, b"\x01\x02\x03\x04\x05")
        self.ram.protect(1, 1)
        self.ram.clear()
        self.assertEqual("0002000000", self.ram.mem.hex())
