"""Console logging utilities for chipster8 runs.

This module provides a small logging system with callbacks and formatters
for visibility into the cycle driver and emulator state. Headless runs can
show a tqdm progress bar.
"""

import time
import sys
from typing import Any, Dict, List, Optional

import jax.numpy as jnp
from tqdm import tqdm

from chipster8.constants import MEMORY_SIZE, NUM_REGISTERS
from chipster8.framebuffer import to_text


class ConsoleLogger:
    """Console logger with level filtering, colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chipster8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream
        output = stream or sys.stdout
        self.use_colors = (
            use_colors and hasattr(output, "isatty") and output.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def set_level(self, log_level: str):
        self.log_level = log_level.upper()

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream or sys.stdout, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for the cycle driver with run summaries and state dumps."""

    def __init__(self, name: str = "chipster8", **kwargs):
        super().__init__(name, **kwargs)
        self.frame_history = []

    def log_run_start(self, config: Dict[str, Any]):
        """Log run configuration and start message."""
        self.info("=" * 60)
        self.info("Starting emulator with configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_frame(self, frame: int, instructions: int, pc: int, log_interval: int = 60):
        """Log frame progress every `log_interval` frames."""
        if frame % log_interval == 0:
            self.debug(f"Frame {frame:6d} | instructions={instructions} | PC={pc:03X}")
            self.frame_history.append({"frame": frame, "instructions": instructions, "pc": pc})

    def log_run_end(self, stats: Dict[str, Any]):
        """Log run completion with final counters."""
        self.info("=" * 60)
        self.info("Run finished:")
        for key, value in stats.items():
            if isinstance(value, float):
                self.info(f"  {key}: {value:.4f}")
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_state_dump(self, state, level: str = "ERROR"):
        """Log the full register, stack and timer state."""
        for line in format_state(state).splitlines():
            self.log(level, line)


def _memory_window(memory, address: int, length: int = 16) -> str:
    """Hex bytes of `memory` from `address`, clipped to the address space."""
    start = min(max(address, 0), MEMORY_SIZE)
    data = memory[start:min(start + length, MEMORY_SIZE)].tolist()
    return f"{start:04X}: " + " ".join(f"{int(byte):02X}" for byte in data)


def format_state(state) -> str:
    """Multi-line dump of the machine state: registers, stack, memory around PC and I, display."""
    registers = " ".join(f"V{i:X}={int(state.V[i]):02X}" for i in range(NUM_REGISTERS))
    pointer = int(state.stack.pointer)
    stack = " ".join(f"{int(address):03X}" for address in state.stack.data[:pointer].tolist())
    keys = " ".join(f"{i:X}" for i, pressed in enumerate(state.keypad.tolist()) if pressed)
    return "\n".join([
        f"PC={int(state.pc):04X} I={int(state.I):04X} SP={pointer:02X} "
        f"DT={int(state.delay_timer):02X} ST={int(state.sound_timer):02X}",
        registers,
        f"stack: [{stack}]",
        f"keys: [{keys}]",
        f"mem@PC {_memory_window(state.memory, int(state.pc))}",
        f"mem@I  {_memory_window(state.memory, int(state.I))}",
        f"pixels lit: {int(jnp.sum(state.display))}",
        to_text(state.display, on="#", off="."),
    ])


class LoggingCallback:
    """Base class for run callbacks."""

    def on_run_start(self, config: Dict[str, Any]):
        """Called before the first frame."""
        pass

    def on_frame(self, frame: int, machine: Any = None):
        """Called after each frame."""
        pass

    def on_halt(self, error: Exception, machine: Any = None):
        """Called when the machine stops on an error."""
        pass

    def on_run_end(self, stats: Dict[str, Any]):
        """Called after the last frame."""
        pass


class ConsoleCallback(LoggingCallback):
    """Console logging callback."""

    def __init__(self, log_interval: int = 60, logger: Optional[EmulatorLogger] = None):
        self.log_interval = log_interval
        self.logger = logger or EmulatorLogger()

    def on_run_start(self, config: Dict[str, Any]):
        self.logger.log_run_start(config)

    def on_frame(self, frame: int, machine: Any = None):
        if machine is not None:
            self.logger.log_frame(frame, machine.instructions, int(machine.state.pc), self.log_interval)

    def on_halt(self, error: Exception, machine: Any = None):
        self.logger.error(f"Halted: {error}")

    def on_run_end(self, stats: Dict[str, Any]):
        self.logger.log_run_end(stats)


class StatsCallback(LoggingCallback):
    """Callback tracking per-frame counters."""

    def __init__(self):
        self.instructions_per_frame: List[int] = []
        self.lit_pixels: List[int] = []
        self.halts: List[Exception] = []
        self._last_instructions = 0

    def on_frame(self, frame: int, machine: Any = None):
        if machine is None:
            return
        self.instructions_per_frame.append(machine.instructions - self._last_instructions)
        self._last_instructions = machine.instructions
        self.lit_pixels.append(int(jnp.sum(machine.state.display)))

    def on_halt(self, error: Exception, machine: Any = None):
        self.halts.append(error)

    def get_statistics(self) -> Dict[str, float]:
        """Summary of the tracked counters."""
        if not self.instructions_per_frame:
            return {}
        frames = len(self.instructions_per_frame)
        return {
            "frames": frames,
            "mean_instructions_per_frame": sum(self.instructions_per_frame) / frames,
            "max_lit_pixels": max(self.lit_pixels),
            "halts": len(self.halts),
        }


def frame_progress(n: int, desc: str = None, enabled: bool = True, **kwargs):
    """Iterate over frame numbers, with a tqdm progress bar when enabled."""
    if not enabled:
        return range(n)
    if desc is None:
        desc = f"Emulating ({n:,} frames)"
    for kwarg in ("total", "iterable"):
        kwargs.pop(kwarg, None)
    return tqdm(range(n), desc=desc, unit="frame", **kwargs)


logger = EmulatorLogger()
