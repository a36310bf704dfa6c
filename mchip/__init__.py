#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.

build_system() wires a complete machine (RAM with the font seeded, register
file, framebuffer and CPU) around whichever renderer, input and audio plugins
are supplied, without loading a program.  Tests use it with the null plugins.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, FONT_LOCATION, PROGRAM_START, SYSTEM_FONT
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader
from .ram import RAM
from .registers import Registers


class StartupError(Exception):
    pass


def build_system(renderer, inputs, audio, debugger=None, steps_per_frame=None, frame_rate=None):
    ram = RAM()

    # Write the system font into RAM, then lock it so programs can't overwrite it
    ram.write_block(FONT_LOCATION, SYSTEM_FONT)
    ram.protect(FONT_LOCATION, len(SYSTEM_FONT))

    framebuffer = Framebuffer(renderer)

    return CPU(
        ram, Registers(), framebuffer, inputs, audio, Debugger() if debugger is None else debugger,
        steps_per_frame=steps_per_frame, frame_rate=frame_rate
    )


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))

    # Read the program first, so a bad file is reported before any window or terminal is set up
    loader = Loader()
    image = loader.check_image(loader.load_binary(args["filename"]))

    opt_renderer = args["renderer"]
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then Curses.
    mute_audio = args["mute"]

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                opt_renderer = "curses"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            opt_renderer = "pygame"
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError(
                    "Neither PyGame nor Curses (or Windows-Curses) appear to be installed."
                )

            raise StartupError(
                "Curses (or Windows-Curses) does not appear to be installed."
            )
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer

            # Terminals can handle a bell, but nothing more
            if mute_audio or mute_audio is None:
                from .audio.a_null import Audio
            else:
                from .audio.a_curses import Audio

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    renderer = Renderer(scale=args["scale"])

    try:
        # Link the inputs to the chosen rendering module, in case it provides inputs too
        inputs = Inputs(args["keymap"], renderer)
        audio = Audio()

        try:
            cpu = build_system(
                renderer, inputs, audio, Debugger(live=args["debug"]),
                steps_per_frame=args["steps_per_frame"], frame_rate=args["frame_rate"]
            )
            loader.load_image(cpu.ram, image)
            cpu.run(PROGRAM_START, max_frames=args["frames"])
        finally:
            # The CPU has quit, so shut down the plugins.  __del__ cannot be relied upon when using PyPy
            audio.shutdown()
            inputs.shutdown()
    finally:
        renderer.shutdown()
