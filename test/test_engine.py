#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from mchip import build_system
from mchip.constants import DEFAULT_KEYMAP
from mchip.cpu import CPUError
from mchip.exceptions import DecodeError, MachineError
from mchip.hostio import Loader
from mchip.renderers.r_null import Renderer
from mchip.inputs.i_null import Inputs
from mchip.audio.a_null import Audio


class QuitInputs(Inputs):
    def process_messages(self):
        return True  # Ask to quit straight away


class TestEngine(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.inputs = Inputs(DEFAULT_KEYMAP, self.renderer)
        self.audio = Audio()
        self.cpu = build_system(self.renderer, self.inputs, self.audio, frame_rate=0)
        self.regs = self.cpu.regs
        self.v = self.regs.v

    def _load(self, image):
        Loader().load_image(self.cpu.ram, bytes(image))

    def test_engine_load_and_add(self):
        self._load([0x60, 0x05, 0x70, 0x03])
        self.cpu.step()
        self.cpu.step()
        self.assertEqual(8, self.v[0x0])
        self.assertEqual(0x204, self.regs.pc)
        self.assertEqual(0, self.v[0xF])

    def test_engine_draw_font_glyph(self):
        self._load([0xA0, 0x50, 0xD0, 0x05])  # I = glyph for "0", draw 5 rows at (V0, V0)
        self.cpu.step()
        self.cpu.step()
        fb = self.cpu.framebuffer
        rows = []

        for y in range(5):
            row = 0

            for x in range(8):
                row = (row << 1) | fb.get_pixel(x, y)

            rows.append(row)

        self.assertEqual([0xF0, 0x90, 0x90, 0x90, 0xF0], rows)
        self.assertEqual(0, self.v[0xF])

    def test_engine_glyph_reaches_renderer(self):
        self._load([0x60, 0x0A, 0xF0, 0x29, 0xD1, 0x15])  # Draw the "A" glyph at (0, 0)
        self.cpu.steps_per_frame = 3
        self.cpu.run_frame()
        frame = self.renderer.frame
        self.assertEqual((1, 1, 1, 1, 0), tuple(frame[:5]))  # 0xF0
        self.assertEqual((1, 0, 0, 1, 0), tuple(frame[64:69]))  # 0x90

    def test_engine_call_return(self):
        self._load([0x22, 0x06, 0x00, 0x00, 0x00, 0x00, 0x00, 0xEE])
        self.cpu.step()
        self.assertEqual(0x206, self.regs.pc)
        self.assertEqual(1, self.regs.stack.depth())
        self.cpu.step()
        self.assertEqual(0x202, self.regs.pc)  # The instruction after the call
        self.assertEqual(0, self.regs.stack.depth())

    def test_engine_skip_moves_four_bytes(self):
        self._load([0x30, 0x00])
        self.cpu.step()
        self.assertEqual(0x204, self.regs.pc)

    def test_engine_sys_is_inert(self):
        self._load([0x01, 0x23])
        self.cpu.step()
        self.assertEqual(0x202, self.regs.pc)

    def test_engine_timers_tick_per_frame(self):
        self._load([0x12, 0x00])  # Jump to self
        self.regs.set_delay_timer(5)
        self.cpu.run_frame()
        self.assertEqual(4, self.regs.dt)  # Not once per instruction
        self.assertEqual(10, self.cpu.perf_counter_ops)

    def test_engine_timers_stop_at_zero(self):
        self._load([0x12, 0x00])
        self.regs.set_delay_timer(2)

        for _ in range(5):
            self.cpu.run_frame()

        self.assertEqual(0, self.regs.dt)

    def test_engine_delay_timer_program(self):
        # Set DT to 3, then spin reading it back into V1
        self._load([0x60, 0x03, 0xF0, 0x15, 0xF1, 0x07, 0x12, 0x04])
        self.cpu.run_frame()
        self.assertEqual(3, self.v[0x1])
        self.cpu.run_frame()
        self.assertEqual(2, self.v[0x1])

    def test_engine_sound_timer_buzzer(self):
        self._load([0x60, 0x02, 0xF0, 0x18, 0x12, 0x04])
        self.cpu.run_frame()
        self.assertEqual(2, self.regs.st)
        self.assertTrue(self.audio.buzzer_enabled)
        self.cpu.run_frame()
        self.assertTrue(self.audio.buzzer_enabled)
        self.cpu.run_frame()
        self.assertEqual(0, self.regs.st)
        self.assertFalse(self.audio.buzzer_enabled)

    def test_engine_key_wait_yields_frame(self):
        self._load([0xF1, 0x0A, 0x12, 0x02])  # Wait for key into V1, then loop
        self.regs.set_delay_timer(3)
        self.cpu.run_frame()
        self.assertEqual(0x200, self.regs.pc)
        self.assertTrue(self.cpu.awaiting_keypress)
        self.assertEqual(1, self.cpu.perf_counter_ops)  # Rest of the frame given up
        self.assertEqual(2, self.regs.dt)  # Timers carry on

        self.cpu.run_frame()
        self.assertEqual(0x200, self.regs.pc)
        self.assertEqual(1, self.regs.dt)

        self.inputs.key_down[0xC] = True
        self.cpu.run_frame()
        self.assertEqual(0xC, self.v[0x1])
        self.assertFalse(self.cpu.awaiting_keypress)
        self.assertEqual(0x202, self.regs.pc)

    def test_engine_run_max_frames(self):
        self._load([0x70, 0x01, 0x12, 0x00])  # Add 1 to V0 forever
        self.cpu.run(max_frames=2)
        self.assertEqual(10, self.v[0x0])

    def test_engine_run_quit_request(self):
        inputs = QuitInputs(DEFAULT_KEYMAP, self.renderer)
        cpu = build_system(self.renderer, inputs, self.audio, frame_rate=0)
        Loader().load_image(cpu.ram, b"\x70\x01\x12\x00")
        cpu.run()
        self.assertEqual(0, cpu.regs.v[0x0])

    def test_engine_run_reports_perf(self):
        self._load([0x12, 0x00])
        self.cpu.run(max_frames=1)
        self.assertIn("FPS", self.renderer.title)

    def test_engine_stop(self):
        self._load([0x70, 0x01] * 10)
        self.cpu.stop()
        self.cpu.run_frame()
        self.assertEqual(1, self.v[0x0])

    def test_engine_custom_steps_per_frame(self):
        cpu = build_system(self.renderer, self.inputs, self.audio, steps_per_frame=3, frame_rate=0)
        Loader().load_image(cpu.ram, b"\x70\x01\x12\x00")
        cpu.run_frame()
        self.assertEqual(2, cpu.regs.v[0x0])

    def test_engine_pc_past_end_of_memory(self):
        self.regs.pc = 0xFFE
        self.cpu.step()  # 0x0000 is an ignored SYS call
        self.assertEqual(0x1000, self.regs.pc)

        with self.assertRaises(CPUError) as context:
            self.cpu.step()

        self.assertEqual(0x1000, context.exception.address)

    def test_engine_pc_last_byte(self):
        self.regs.pc = 0xFFF

        with self.assertRaises(CPUError):
            self.cpu.step()

    def test_engine_decode_fault(self):
        self._load([0x60, 0x01, 0x80, 0x08])
        self.cpu.step()

        with self.assertRaises(DecodeError) as context:
            self.cpu.step()

        self.assertEqual(0x8008, context.exception.opcode)
        self.assertEqual(0x202, context.exception.address)

    def test_engine_faults_propagate_from_run(self):
        self._load([0x00, 0xEE])  # Return with an empty stack
        self.assertRaises(MachineError, self.cpu.run, max_frames=1)
