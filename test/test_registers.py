#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from mchip.registers import Registers


class TestRegisters(unittest.TestCase):
    def setUp(self):
        self.regs = Registers()

    def test_registers_init(self):
        self.assertEqual(16, len(self.regs.v))
        self.assertEqual(bytes(16), bytes(self.regs.v))
        self.assertEqual(0, self.regs.i)
        self.assertEqual(0x200, self.regs.pc)
        self.assertEqual(16, self.regs.stack.size)
        self.assertEqual(0, self.regs.dt)
        self.assertEqual(0, self.regs.st)

    def test_registers_pc_movement(self):
        self.regs.advance_pc()
        self.assertEqual(0x202, self.regs.pc)
        self.regs.skip()
        self.assertEqual(0x204, self.regs.pc)
        self.regs.rewind_pc()
        self.assertEqual(0x202, self.regs.pc)

    def test_registers_timers_tick_down(self):
        self.regs.set_delay_timer(2)
        self.regs.set_sound_timer(1)
        self.regs.tick_timers()
        self.assertEqual((1, 0), (self.regs.dt, self.regs.st))
        self.assertFalse(self.regs.sound_active())
        self.regs.tick_timers()
        self.assertEqual((0, 0), (self.regs.dt, self.regs.st))

    def test_registers_timers_stay_at_zero(self):
        for _ in range(300):
            self.regs.tick_timers()

        self.assertEqual((0, 0), (self.regs.dt, self.regs.st))
        self.regs.set_delay_timer(3)
        self.regs.tick_timers()
        self.assertEqual(2, self.regs.dt)

    def test_registers_timers_never_negative(self):
        self.regs.set_delay_timer(-4)
        self.regs.set_sound_timer(-1)
        self.assertEqual((0, 0), (self.regs.dt, self.regs.st))
