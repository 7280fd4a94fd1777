"""High-level CHIP-8 machine for front-ends and headless runs."""

from typing import List, Optional, Sequence

import jax
import numpy as np
from chex import dataclass

from chipster8.config import EmulatorConfig, config_to_dict
from chipster8.constants import NUM_KEYS
from chipster8.disassembler import Line, disassemble_memory
from chipster8.emulator import fetch, load_program, read_rom, run_frame, step, tick_timers
from chipster8.errors import Chip8Error
from chipster8.logging import LoggingCallback, frame_progress, logger
from chipster8.state import EmulatorState, create_state, set_keypad


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of the machine state for renderers and debug views."""
    display: np.ndarray
    V: np.ndarray
    I: int
    pc: int
    sp: int
    stack: np.ndarray
    delay_timer: int
    sound_timer: int
    keypad: np.ndarray


def _read_only(array) -> np.ndarray:
    array = np.array(array)
    array.flags.writeable = False
    return array


class Chip8:
    """A single CHIP-8 machine.

    Owns the emulator state and exposes the narrow interface front-ends need:
    load a program, set the keypad, run instructions or frames and read back
    a snapshot. Run/stop/step control mirrors a debugger's buttons and is
    driven by `update()` once per rendered frame.
    """

    def __init__(self, config: Optional[EmulatorConfig] = None, rng: Optional[jax.Array] = None):
        self.config = config or EmulatorConfig()
        self.rng = rng if rng is not None else jax.random.PRNGKey(self.config.seed)
        self.quirks = self.config.quirks.to_quirks()
        self.rom = b""
        self.reset()

    def reset(self):
        """Start over from a fresh state with the current program loaded."""
        self._restart(load_program(create_state(self.rng, self.quirks), self.rom))

    def _restart(self, state: EmulatorState):
        self.state = state
        self.error: Optional[Chip8Error] = None
        self.frames = 0
        self.instructions = 0
        self.running = False
        self._step_requested = False

    @property
    def halted(self) -> bool:
        return self.error is not None

    def load(self, rom: bytes):
        """Load program bytes at 0x200 on a fresh state."""
        rom = bytes(rom)
        state = load_program(create_state(self.rng, self.quirks), rom)
        self.rom = rom
        self._restart(state)

    def load_file(self, path: str):
        rom = read_rom(path)
        self.load(rom)
        logger.info(f"Read file: {path} Total bytes: {len(rom)}")

    def set_keys(self, keys: Sequence[bool]):
        """Replace the keypad with 16 pressed/released values."""
        self.state = set_keypad(self.state, keys)

    def press(self, key: int):
        self._set_key(key, True)

    def release(self, key: int):
        self._set_key(key, False)

    def _set_key(self, key: int, pressed: bool):
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in 0x0-0xF, got {key}")
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(pressed))

    def step(self) -> bool:
        """Execute one instruction. Returns False if the machine is halted."""
        if self.halted:
            return False
        state, error = step(self.state)
        if error is not None:
            self.error = error
            return False
        self.state = state
        self.instructions += 1
        return True

    def step_batch(self, n: int) -> int:
        """Run one frame of up to `n` instructions, returning how many completed.

        The timers tick once before the batch, as in `run_frame`.
        """
        if self.halted:
            return 0
        self.state = tick_timers(self.state)
        self.frames += 1
        for executed in range(n):
            if not self.step():
                return executed
        return n

    def run_frame(self) -> bool:
        """Run one frame at the configured cycles per frame."""
        if self.halted:
            return False
        state, executed, error = run_frame(self.state, self.config.cycles_per_frame)
        self.state = state
        self.instructions += executed
        self.frames += 1
        if error is not None:
            self.error = error
            self.running = False
            return False
        return True

    def start(self):
        self.running = True

    def stop(self):
        self.running = False

    def request_step(self):
        """Stop running and execute a single instruction on the next update."""
        self.running = False
        self._step_requested = True

    def update(self) -> bool:
        """Advance the control loop by one rendered frame."""
        if self.running:
            return self.run_frame()
        if self._step_requested:
            self._step_requested = False
            return self.step()
        return not self.halted

    def run(
        self,
        frames: int,
        callbacks: Optional[List[LoggingCallback]] = None,
        progress: bool = False,
    ) -> int:
        """Run headless for up to `frames` frames; returns frames completed."""
        callbacks = callbacks or []
        for callback in callbacks:
            callback.on_run_start(config_to_dict(self.config))

        completed = 0
        for frame in frame_progress(frames, enabled=progress):
            ok = self.run_frame()
            for callback in callbacks:
                callback.on_frame(frame, self)
            if not ok:
                for callback in callbacks:
                    callback.on_halt(self.error, self)
                break
            completed += 1

        stats = {
            "frames": self.frames,
            "instructions": self.instructions,
            "emulated_seconds": self.frames / self.config.fps,
            "halted": self.halted,
        }
        for callback in callbacks:
            callback.on_run_end(stats)
        return completed

    def current_instruction(self) -> int:
        return fetch(self.state)

    def listing(self, count: int = 16) -> List[Line]:
        """Disassembly starting at the current program counter."""
        return disassemble_memory(self.state, int(self.state.pc), count)

    def snapshot(self) -> Snapshot:
        state: EmulatorState = self.state
        return Snapshot(
            display=_read_only(state.display),
            V=_read_only(state.V),
            I=int(state.I),
            pc=int(state.pc),
            sp=int(state.stack.pointer),
            stack=_read_only(state.stack.data),
            delay_timer=int(state.delay_timer),
            sound_timer=int(state.sound_timer),
            keypad=_read_only(state.keypad),
        )
