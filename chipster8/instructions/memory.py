"""CHIP-8 memory and register operations."""

import jax

from chipster8.state import EmulatorState, advance, as_u16, set_register
from chipster8.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return advance(set_register(state, instruction.x, instruction.nn))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, no carry flag."""
    total = int(state.V[instruction.x]) + instruction.nn
    return advance(set_register(state, instruction.x, total & 0xFF))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return advance(state.replace(I=as_u16(instruction.nnn)))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = int(jax.random.randint(subkey, shape=(), minval=0, maxval=256))
    state = set_register(state, instruction.x, random_value & instruction.nn)
    return advance(state.replace(rng=key))
