"""Disassembly and debug listings for CHIP-8 programs."""

from typing import Iterable, List, NamedTuple, Optional

from chipster8.constants import PROGRAM_START, MEMORY_SIZE, NUM_REGISTERS, STACK_SIZE
from chipster8.decode import decode
from chipster8.state import EmulatorState


class Line(NamedTuple):
    """One disassembled instruction."""
    address: int
    opcode: int
    mnemonic: str

    def __str__(self) -> str:
        return f"{self.address:04X}: {self.mnemonic} ({self.opcode:04X})"


def disassemble(data: bytes, origin: int = PROGRAM_START) -> List[Line]:
    """Disassemble raw program bytes as consecutive 16-bit instructions.

    A trailing odd byte is padded with zero.
    """
    data = bytes(data)
    if len(data) % 2:
        data += b"\x00"
    return [
        Line(origin + offset, opcode, decode(opcode).mnemonic)
        for offset, opcode in (
            (offset, (data[offset] << 8) | data[offset + 1])
            for offset in range(0, len(data), 2)
        )
    ]


def disassemble_memory(state: EmulatorState, start: int = PROGRAM_START, count: int = 16) -> List[Line]:
    """Disassemble `count` instructions of emulator memory from `start`."""
    end = min(start + 2 * count, MEMORY_SIZE)
    if start >= end:
        return []
    return disassemble(bytes(state.memory[start:end].tolist()), origin=start)


def format_listing(lines: Iterable[Line], pc: Optional[int] = None) -> str:
    """Render lines, marking the one at `pc` with an arrow."""
    return "\n".join(
        f"{'>' if line.address == pc else ' '} {line}" for line in lines
    )


def format_registers(state: EmulatorState) -> str:
    rows = [f"V{i:X}: {int(state.V[i]):02X}" for i in range(NUM_REGISTERS)]
    rows += [
        f"I: {int(state.I):04X}",
        f"PC: {int(state.pc):04X}",
        f"SP: {int(state.stack.pointer):02X}",
        f"DT: {int(state.delay_timer):02X}",
        f"ST: {int(state.sound_timer):02X}",
    ]
    return "\n".join(rows)


def format_stack(state: EmulatorState) -> str:
    data = state.stack.data.tolist()
    return "\n".join(f"{i:X}: {int(data[i]):04X}" for i in range(STACK_SIZE))
