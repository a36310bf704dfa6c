#!/usr/bin/env python3

"""
CPU Emulator

Like a real computer, this is where most of the processing happens.  Each
instruction is fetched, decoded into one of the operations listed in the
decoder, and executed against the register file, RAM and framebuffer.

Instructions are not run against a wall clock.  Instead, a fixed number of them
(10 by default) are executed per frame, and frames are run at a fixed rate (60Hz
by default).  The delay and sound timers count down once per frame, so the
program sees the same timing no matter how fast the host is.

Waiting for a keypress (Fx0A) never spins.  If no key is held, the program
counter is wound back onto the same instruction and the rest of the frame is
given up, so the display and timers carry on while the program waits.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter, sleep
from random import randint
from .constants import (
    DEFAULT_FRAME_RATE, DEFAULT_STEPS_PER_FRAME, FLAG_REGISTER, FONT_LOCATION, FONT_STRIDE, PROGRAM_START
)
from . import decoder
from .decoder import Op
from .exceptions import BoundsError, DecodeError

CPU_ENDIAN = "big"  # CHIP-8 is big-endian
INDEX_BITMASK = 0xFFFF  # The index register is 16 bits wide


class CPUError(BoundsError):
    def __init__(self, message, address):
        self.address = address
        super().__init__("{} (PC: 0x{:04x})".format(message, address))


class CPU:
    def __init__(self, ram, regs, framebuffer, inputs, audio, debugger, steps_per_frame=None, frame_rate=None):
        self.ram = ram
        self.regs = regs
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.audio = audio
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()

        # Frame cadence.  A frame rate of 0 runs frames back-to-back without waiting.
        self.steps_per_frame = DEFAULT_STEPS_PER_FRAME if steps_per_frame is None else steps_per_frame
        frame_rate = DEFAULT_FRAME_RATE if frame_rate is None else frame_rate
        self.frame_interval = None if frame_rate <= 0 else 1.0 / frame_rate

        self.instructions = {
            Op.SYS: self._0nnn,
            Op.CLS: self._00E0,
            Op.RET: self._00EE,
            Op.JP: self._1nnn,
            Op.CALL: self._2nnn,
            Op.SE_BYTE: self._3xkk,
            Op.SNE_BYTE: self._4xkk,
            Op.SE_REG: self._5xy0,
            Op.LD_BYTE: self._6xkk,
            Op.ADD_BYTE: self._7xkk,
            Op.LD_REG: self._8xy0,
            Op.OR: self._8xy1,
            Op.AND: self._8xy2,
            Op.XOR: self._8xy3,
            Op.ADD_REG: self._8xy4,
            Op.SUB: self._8xy5,
            Op.SHR: self._8xy6,
            Op.SUBN: self._8xy7,
            Op.SHL: self._8xyE,
            Op.SNE_REG: self._9xy0,
            Op.LD_I: self._Annn,
            Op.JP_V0: self._Bnnn,
            Op.RND: self._Cxkk,
            Op.DRW: self._Dxyn,
            Op.SKP: self._Ex9E,
            Op.SKNP: self._ExA1,
            Op.LD_VX_DT: self._Fx07,
            Op.LD_VX_K: self._Fx0A,
            Op.LD_DT_VX: self._Fx15,
            Op.LD_ST_VX: self._Fx18,
            Op.ADD_I_VX: self._Fx1E,
            Op.LD_F_VX: self._Fx29,
            Op.LD_B_VX: self._Fx33,
            Op.LD_I_VX: self._Fx55,
            Op.LD_VX_I: self._Fx65
        }

        # Every decodable operation must have exactly one handler
        unhandled = [op.name for op in Op if op not in self.instructions]

        if unhandled:
            raise NotImplementedError("No handler for: {}".format(", ".join(unhandled)))

        # Current opcode, and the address it was fetched from
        self.opcode = 0
        self.debug_pc = 0

        # Input-related vars
        self.awaiting_keypress = False

        # Run control
        self.stop_requested = False

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

    def run(self, start_location=PROGRAM_START, max_frames=None):
        self.regs.pc = start_location
        self.stop_requested = False
        frames = 0
        next_frame_time = perf_counter()

        while not self.stop_requested:
            this_time = perf_counter()

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            if self.inputs.process_messages():
                break

            self.run_frame()
            self.perf_counter_fps += 1
            frames += 1

            if max_frames is not None and frames >= max_frames:
                break

            if self.frame_interval is not None:
                next_frame_time += self.frame_interval
                delay = next_frame_time - perf_counter()

                if delay > 0:
                    sleep(delay)
                else:
                    # Running behind.  Don't try to catch up with a burst of frames.
                    next_frame_time = perf_counter()

    def stop(self):
        # Takes effect between steps
        self.stop_requested = True

    def run_frame(self):
        self.tick_timers()

        for _ in range(self.steps_per_frame):
            self.step()

            if self.awaiting_keypress or self.stop_requested:
                # Give up the rest of this frame.  If waiting for a key, the same instruction runs again next frame.
                break

        self.refresh_framebuffer()

    def step(self):
        regs = self.regs

        # Keep track of the program counter before altering it in any way, for fault reports
        self.debug_pc = regs.pc
        self.check_pc()
        self.opcode = self.fetch()
        regs.advance_pc()  # Program counter updates after fetch, but before execute
        self.decode_exec()
        self.perf_counter_ops += 1

    def check_pc(self):
        pc = self.regs.pc

        # Both bytes of the instruction must be inside memory.  There is no wraparound.
        if pc < 0 or pc + 1 > self.ram.mem_top:
            raise CPUError("Program counter ran past the end of memory", pc)

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.regs.pc, 2), CPU_ENDIAN, signed=False)

    def decode_exec(self):
        op = decoder.decode(self.opcode)

        if op is None:
            self._opcode_unsupported()

        self.instructions[op]()

    def tick_timers(self):
        regs = self.regs
        sound_was_active = regs.sound_active()
        regs.tick_timers()

        if sound_was_active and not regs.sound_active():
            # Sound timer just reached zero.  Stop the audio.
            self.audio.enable_buzzer(False)

    def refresh_framebuffer(self):
        # Hand the finished frame to the renderer
        self.framebuffer.refresh_display()

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions.  Don't
    # reference these more than necessary as they are recalculated each time.
    @property
    def vx(self):
        return decoder.reg_x(self.opcode)

    @property
    def vy(self):
        return decoder.reg_y(self.opcode)

    @property
    def addr(self):
        return decoder.addr12(self.opcode)

    @property
    def byte(self):
        return decoder.imm8(self.opcode)

    @property
    def nibble(self):
        return decoder.nibble(self.opcode)

    def _opcode_unsupported(self):
        raise DecodeError(
            self.opcode, self.debug_pc, "Emulation halted.  Debug info:\n{}".format(
                self.debugger.debug(self, "???", verbose=True)
            )
        ) from None

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _post_skip(self):
        self.regs.skip()

    def _0nnn(self):  # SYS addr
        # Machine code routines can't be run, so these are ignored
        if self.live_debug:
            self.debug("SYS 0x{:03x}".format(self.addr))

    def _00E0(self):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()

    def _00EE(self):  # RET
        if self.live_debug:
            self.debug("RET")

        self.regs.pc = self.regs.stack.pop()

    def _1nnn(self):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(self.addr))

        self.regs.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(self.addr))

        regs = self.regs
        regs.stack.push(regs.pc)
        regs.pc = self.addr

    def _3xkk(self):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.regs.v[self.vx] == self.byte:
            self._post_skip()

    def _4xkk(self):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.regs.v[self.vx] != self.byte:
            self._post_skip()

    def _5xy0(self):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v

        if v[self.vx] == v[self.vy]:
            self._post_skip()

    def _6xkk(self):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.regs.v[self.vx] = self.byte

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # No carry flag for this one
        v = self.regs.v
        v[vx] = (v[vx] + byte) & 0xFF

    def _8xy0(self):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v
        v[self.vx] = v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v
        v[self.vx] |= v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v
        v[self.vx] &= v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v
        v[self.vx] ^= v[self.vy]

    # The flag-setting operations below take copies of both operands first, and write Vf last.  Vx or Vy may be Vf.

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(vx, vy))

        v = self.regs.v
        val = v[vx] + v[vy]
        v[vx] = val & 0xFF
        v[FLAG_REGISTER] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, minuend, subtrahend):  # Post-SUB/SUBN
        v = self.regs.v
        v[self.vx] = (minuend - subtrahend) & 0xFF
        v[FLAG_REGISTER] = int(minuend >= subtrahend)  # Vf is set when NOT borrowing

    def _8xy5(self):  # SUB Vx, Vy
        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v
        self._post_8xy5_8xy7(v[self.vx], v[self.vy])

    def _8xy6(self):  # SHR Vx {, Vy}
        # Only Vx is shifted.  Vy is ignored.
        vx = self.vx

        if self.live_debug:
            self.debug("SHR V{:01x}".format(vx))

        v = self.regs.v
        val = v[vx]
        v[vx] = val >> 1
        v[FLAG_REGISTER] = val & 1  # The whole byte gets set just for the flag

    def _8xy7(self):  # SUBN Vx, Vy
        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v
        self._post_8xy5_8xy7(v[self.vy], v[self.vx])

    def _8xyE(self):  # SHL Vx {, Vy}
        # Only Vx is shifted.  Vy is ignored.
        vx = self.vx

        if self.live_debug:
            self.debug("SHL V{:01x}".format(vx))

        v = self.regs.v
        val = v[vx]
        v[vx] = (val << 1) & 0xFF
        v[FLAG_REGISTER] = val >> 7

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        v = self.regs.v

        if v[self.vx] != v[self.vy]:
            self._post_skip()

    def _Annn(self):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(self.addr))

        self.regs.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        if self.live_debug:
            self.debug("JP V0, 0x{:03x}".format(self.addr))

        # Not masked.  A target past the end of memory is caught on the next fetch.
        self.regs.pc = self.regs.v[0x0] + self.addr

    def _Cxkk(self):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.regs.v[self.vx] = randint(0, 0xFF) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble

        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        regs = self.regs
        v = regs.v
        rows = self.ram.read_block(regs.i, height) if height else b""
        collided = self.framebuffer.draw_sprite(v[self.vx], v[self.vy], rows)
        v[FLAG_REGISTER] = int(collided)

    def _Ex9E(self):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(self.vx))

        if self.inputs.is_key_down(self.regs.v[self.vx]):
            self._post_skip()

    def _ExA1(self):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(self.vx))

        if not self.inputs.is_key_down(self.regs.v[self.vx]):
            self._post_skip()

    def _Fx07(self):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(self.vx))

        self.regs.v[self.vx] = self.regs.dt

    def _Fx0A(self):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(self.vx))

        key = self.inputs.get_key_held()

        if key is None:
            # We need to come back here on the next frame, because no key is held
            self.regs.rewind_pc()
            self.awaiting_keypress = True
        else:
            self.regs.v[self.vx] = key
            self.awaiting_keypress = False

    def _Fx15(self):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(self.vx))

        self.regs.set_delay_timer(self.regs.v[self.vx])

    def _Fx18(self):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(self.vx))

        regs = self.regs
        regs.set_sound_timer(regs.v[self.vx])
        # Allow the program to start the buzzer, or immediately stop it before the sound timer hits zero
        self.audio.enable_buzzer(regs.sound_active())

    def _Fx1E(self):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(self.vx))

        regs = self.regs
        regs.i = (regs.i + regs.v[self.vx]) & INDEX_BITMASK

    def _Fx29(self):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(self.vx))

        self.regs.i = FONT_LOCATION + FONT_STRIDE * self.regs.v[self.vx]

    def _Fx33(self):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(self.vx))

        val = self.regs.v[self.vx]
        # Hundreds, tens, then ones.  Written as one block so a fault leaves memory untouched.
        self.ram.write_block(self.regs.i, bytes((val // 100, (val // 10) % 10, val % 10)))

    def _Fx55(self):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(self.vx))

        # Ensure with +1 that the final register is copied.  I is left unchanged.
        regs = self.regs
        self.ram.write_block(regs.i, regs.v[:self.vx + 1])

    def _Fx65(self):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(self.vx))

        count = self.vx + 1
        regs = self.regs
        regs.v[:count] = self.ram.read_block(regs.i, count)
