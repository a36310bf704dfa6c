#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays a looping square wave through PyGame / SDL for as long as the buzzer is
enabled.  The waveform is a 1-bit pattern that is stretched lengthways and
moved to the middle of an 8-bit unsigned sample, so it keeps the shape of a
square wave.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
DEFAULT_VOLUME = 0.1
BEEP_FREQUENCY = 440.0
BEEP_PATTERN = b"\x00\xFF"  # Half a cycle low, half high


class Audio(AudioBase):
    def __init__(self):
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()
        super().__init__()
        self.sound = pygame.mixer.Sound(buffer=self._build_buffer(BEEP_FREQUENCY))
        self.sound.set_volume(DEFAULT_VOLUME)

    def _build_buffer(self, frequency):
        # Resample (stretch) the square waveform pattern to exactly one cycle at the host playback rate
        cycle_size = max(len(BEEP_PATTERN), int(PLAYBACK_FREQUENCY / frequency))
        return bytes(
            BEEP_PATTERN[pos * len(BEEP_PATTERN) // cycle_size] for pos in range(cycle_size)
        )

    def enable_buzzer(self, enabled):
        # If there is already a sound being played, it won't be restarted
        if enabled and not self.buzzer_enabled:
            self.sound.play(-1)
        elif not enabled and self.buzzer_enabled:
            self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()

    def is_null(self):
        return False
