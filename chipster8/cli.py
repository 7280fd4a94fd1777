"""Command line entry point: run or disassemble a CHIP-8 ROM headless."""

import argparse
import sys
from typing import List, Optional

from omegaconf.errors import OmegaConfBaseException

from chipster8.config import load_config
from chipster8.disassembler import disassemble, format_listing, format_registers
from chipster8.emulator import read_rom
from chipster8.errors import RomLoadError
from chipster8.framebuffer import to_text
from chipster8.logging import ConsoleCallback, StatsCallback, logger
from chipster8.machine import Chip8
from chipster8.rendering import save_frame

USAGE = "Usage: chipster8 path_to_rom"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipster8", description="Headless CHIP-8 interpreter")
    parser.add_argument("rom", nargs="?", help="Path to the ROM file")
    parser.add_argument("--frames", type=int, default=60, help="Frames to run (default: 60)")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument(
        "--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
        help="Configuration override, e.g. quirks.add_modulo=256",
    )
    parser.add_argument("--disassemble", action="store_true", help="Print a listing instead of running")
    parser.add_argument(
        "--keys", nargs="*", default=[], metavar="HEX",
        help="Keys held down for the whole run, e.g. --keys 5 A",
    )
    parser.add_argument("--screenshot", metavar="PNG", help="Save the final framebuffer as an image")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    return parser


def parse_keys(keys: List[str]) -> List[int]:
    parsed = []
    for key in keys:
        value = int(key, 16)
        if not 0 <= value <= 0xF:
            raise ValueError(f"Key {key!r} is not a hex digit")
        parsed.append(value)
    return parsed


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.rom is None:
        print(USAGE)
        return 0

    try:
        config = load_config(args.config, args.overrides)
        keys = parse_keys(args.keys)
    except (ValueError, OSError, OmegaConfBaseException) as error:
        parser.error(str(error))
    logger.set_level(config.log_level)

    try:
        rom = read_rom(args.rom)
        if args.disassemble:
            print(format_listing(disassemble(rom)))
            return 0
        machine = Chip8(config)
        machine.load(rom)
    except RomLoadError as error:
        print(error, file=sys.stderr)
        return 1
    logger.info(f"Read file: {args.rom} Total bytes: {len(rom)}")

    for key in keys:
        machine.press(key)

    stats = StatsCallback()
    machine.run(args.frames, callbacks=[ConsoleCallback(logger=logger), stats], progress=args.progress)
    for key, value in stats.get_statistics().items():
        logger.info(f"{key}: {value}")

    print(to_text(machine.state.display, on="#", off="."))
    print(format_registers(machine.state))
    if args.screenshot:
        save_frame(machine.state.display, args.screenshot, config.render.scale, config.render.color_scheme)
        logger.info(f"Saved framebuffer to {args.screenshot}")

    return 2 if machine.halted else 0


if __name__ == "__main__":
    sys.exit(main())
