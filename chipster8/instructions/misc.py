"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp

from chipster8.constants import FONT_START, FONT_GLYPH_SIZE
from chipster8.state import EmulatorState, advance, as_u8, as_u16, check_range, set_register
from chipster8.decode import DecodedInstruction


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return advance(set_register(state, instruction.x, state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return advance(state.replace(delay_timer=as_u8(state.V[instruction.x])))


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return advance(state.replace(sound_timer=as_u8(state.V[instruction.x])))


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, VF untouched."""
    new_i = int(state.I) + int(state.V[instruction.x])
    if state.quirks.mask_index:
        new_i &= 0xFFF
    return advance(state.replace(I=as_u16(new_i)))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Polls the keypad once. With a key down, VX gets the lowest pressed key
    and execution moves on; otherwise PC stays on this instruction so the
    next cycle polls again.
    """
    if not bool(jnp.any(state.keypad)):
        return state
    pressed_key = int(jnp.argmax(state.keypad))
    return advance(set_register(state, instruction.x, pressed_key))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + int(state.V[instruction.x]) * FONT_GLYPH_SIZE
    return advance(state.replace(I=as_u16(font_address)))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    address = int(state.I)
    check_range(address, 3)

    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    new_memory = state.memory.at[address:address + 3].set(digits)
    return advance(state.replace(memory=new_memory))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    address = int(state.I)
    check_range(address, count)

    new_memory = state.memory.at[address:address + count].set(state.V[:count])
    state = state.replace(memory=new_memory)
    if state.quirks.load_store_increments_index:
        state = state.replace(I=as_u16(address + count))
    return advance(state)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    address = int(state.I)
    check_range(address, count)

    new_V = state.V.at[:count].set(state.memory[address:address + count])
    state = state.replace(V=new_V)
    if state.quirks.load_store_increments_index:
        state = state.replace(I=as_u16(address + count))
    return advance(state)
