"""CHIP-8 emulator package."""

from chipster8.state import EmulatorState, Quirks, create_state
from chipster8.emulator import execute, fetch, step, tick_timers, run_frame, load_program, load_rom
from chipster8.decode import DecodedInstruction, Kind, decode
from chipster8.errors import (
    Chip8Error, UnknownInstruction, StackOverflow, StackUnderflow, AddressOutOfRange,
    RomLoadError, RomTooLarge,
)
from chipster8.machine import Chip8, Snapshot
from chipster8.constants import *
from chipster8.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "Quirks",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "run_frame",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Kind",
    "decode",
    "Chip8Error",
    "UnknownInstruction",
    "StackOverflow",
    "StackUnderflow",
    "AddressOutOfRange",
    "RomLoadError",
    "RomTooLarge",
    "Chip8",
    "Snapshot",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
