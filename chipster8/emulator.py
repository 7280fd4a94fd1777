"""Main CHIP-8 emulator execution engine."""

from typing import Callable, Optional, Union

import jax.numpy as jnp

from chipster8.constants import PROGRAM_START, MAX_ROM_SIZE, CYCLES_PER_FRAME
from chipster8.decode import DecodedInstruction, Kind, decode
from chipster8.errors import Chip8Error, UnknownInstruction, RomLoadError, RomTooLarge
from chipster8.logging import logger
from chipster8.state import EmulatorState, as_u8, check_range
from chipster8.instructions.system import execute_clear_screen, execute_return, execute_system_call
from chipster8.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key,
)
from chipster8.instructions.alu import execute_alu_operation
from chipster8.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipster8.instructions.display import execute_display
from chipster8.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
)

Handler = Callable[[EmulatorState, DecodedInstruction], EmulatorState]

HANDLERS: dict[Kind, Handler] = {
    Kind.SYS: execute_system_call,
    Kind.CLS: execute_clear_screen,
    Kind.RET: execute_return,
    Kind.JP: execute_jump,
    Kind.CALL: execute_call,
    Kind.SE_VX_BYTE: execute_skip_if_equal_immediate,
    Kind.SNE_VX_BYTE: execute_skip_if_not_equal_immediate,
    Kind.SE_VX_VY: execute_skip_if_equal_register,
    Kind.LD_VX_BYTE: execute_set,
    Kind.ADD_VX_BYTE: execute_add,
    Kind.LD_VX_VY: execute_alu_operation,
    Kind.OR: execute_alu_operation,
    Kind.AND: execute_alu_operation,
    Kind.XOR: execute_alu_operation,
    Kind.ADD_VX_VY: execute_alu_operation,
    Kind.SUB: execute_alu_operation,
    Kind.SHR: execute_alu_operation,
    Kind.SUBN: execute_alu_operation,
    Kind.SHL: execute_alu_operation,
    Kind.SNE_VX_VY: execute_skip_if_not_equal_register,
    Kind.LD_I_ADDR: execute_set_index,
    Kind.JP_V0_ADDR: execute_jump_with_offset,
    Kind.RND: execute_random,
    Kind.DRW: execute_display,
    Kind.SKP: execute_skip_if_key,
    Kind.SKNP: execute_skip_if_not_key,
    Kind.LD_VX_DT: execute_get_delay_timer,
    Kind.LD_VX_K: execute_wait_for_key,
    Kind.LD_DT_VX: execute_set_delay_timer,
    Kind.LD_ST_VX: execute_set_sound_timer,
    Kind.ADD_I_VX: execute_add_to_index,
    Kind.LD_F_VX: execute_font_character,
    Kind.LD_B_VX: execute_bcd_conversion,
    Kind.LD_MEM_VX: execute_store_registers,
    Kind.LD_VX_MEM: execute_load_registers,
}


def execute(state: EmulatorState, instruction: Union[int, DecodedInstruction]) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Raises:
        UnknownInstruction: the opcode decodes to no known instruction
        StackOverflow, StackUnderflow: CALL on a full stack, RET on an empty one
        AddressOutOfRange: the instruction touches memory outside 0x000-0xFFF
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)

    handler = HANDLERS.get(instruction.kind)
    if handler is None:
        raise UnknownInstruction(instruction.opcode, int(state.pc))
    return handler(state, instruction)


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into a 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> int:
    """Fetch the big-endian instruction at PC without moving PC."""
    pc = int(state.pc)
    check_range(pc, 2)
    return _pack_u16(state.memory[pc], state.memory[pc + 1])


def step(state: EmulatorState) -> tuple[EmulatorState, Optional[Chip8Error]]:
    """Fetch, decode and execute one instruction.

    Returns:
        Tuple of (new state, error). On error the state is returned unchanged
        and the error describes why the instruction could not complete.
    """
    try:
        instruction = decode(fetch(state))
        return execute(state, instruction), None
    except UnknownInstruction as error:
        logger.error(f"Unknown instruction: {error.opcode:04X}")
        logger.log_state_dump(state)
        return state, error
    except Chip8Error as error:
        logger.error(f"Failed to execute instruction at {int(state.pc):03X}: {error}")
        return state, error


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers toward zero."""
    delay_timer = int(state.delay_timer)
    sound_timer = int(state.sound_timer)
    return state.replace(
        delay_timer=as_u8(max(delay_timer - 1, 0)),
        sound_timer=as_u8(max(sound_timer - 1, 0)),
    )


def run_frame(
    state: EmulatorState, cycles: int = CYCLES_PER_FRAME
) -> tuple[EmulatorState, int, Optional[Chip8Error]]:
    """Run one frame: tick the timers once, then up to `cycles` instructions.

    Returns:
        Tuple of (new state, instructions executed, error). Execution stops at
        the first failing instruction.
    """
    state = tick_timers(state)
    for executed in range(cycles):
        state, error = step(state)
        if error is not None:
            return state, executed, error
    return state, cycles, None


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy program bytes into CHIP-8 memory starting at 0x200."""
    data = bytes(data)
    if len(data) > MAX_ROM_SIZE:
        raise RomTooLarge(len(data), MAX_ROM_SIZE)
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str) -> bytes:
    """Read a ROM file, wrapping I/O failures into RomLoadError."""
    try:
        with open(filename, 'rb') as f:
            return f.read()
    except OSError as error:
        raise RomLoadError(f"Couldn't read {filename}: {error}") from error


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    rom_data = read_rom(filename)
    state = load_program(state, rom_data)
    logger.info(f"Read file: {filename} Total bytes: {len(rom_data)}")
    return state
