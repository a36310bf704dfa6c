#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only handed to the actual display (the host
rendering system) once per frame.  Calling into PyGame/Curses for every pixel
of every sprite would cost far more than drawing into a local buffer.

Programs for this system cannot write directly into video RAM.  Sprites are
drawn to the screen by XORing them against what is already there, and any pixel
that was lit but is switched off by the XOR is a collision.  Collisions are
gathered across the whole sprite and reported as a single flag.

Sprites that run off the right or bottom edge wrap around to the opposite edge
rather than being clipped.

The renderer only ever receives a copy of the pixels, so it can never observe a
sprite that is half-drawn.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VID_WIDTH, VID_HEIGHT

SPRITE_WIDTH = 8


class Framebuffer:
    def __init__(self, renderer, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        self.renderer = renderer
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.pixels = bytearray(self.vid_size)  # One byte per pixel, 0 or 1, row-major
        self.content_changed = True  # Make sure the first refresh shows a blank screen
        self.renderer.set_resolution(vid_width, vid_height)
        self.report_perf()

    def clear(self):
        self.pixels[:] = bytes(self.vid_size)
        self.content_changed = True

    def get_pixel(self, x, y):
        return self.pixels[y * self.vid_width + x]

    def xor_pixel(self, x, y):
        # Returns whether a lit pixel was switched off
        vram_loc = (y % self.vid_height) * self.vid_width + (x % self.vid_width)
        pixel = self.pixels[vram_loc]
        self.pixels[vram_loc] = pixel ^ 1
        self.content_changed = True
        return pixel == 1

    def draw_sprite(self, x, y, rows):
        collided = False

        for row, spr_data in enumerate(rows):
            for col in range(SPRITE_WIDTH):
                if spr_data & (0x80 >> col):
                    # Don't stop drawing after a collision, and never unset the flag for this sprite
                    if self.xor_pixel(x + col, y + row):
                        collided = True

        return collided

    def snapshot(self):
        return bytes(self.pixels)

    def refresh_display(self):
        content_changed = self.content_changed

        if content_changed:
            self.renderer.draw_frame(self.snapshot())
            self.content_changed = False

        self.renderer.refresh_display(content_changed)

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
