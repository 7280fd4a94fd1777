"""CHIP-8 emulator state structures."""

import dataclasses

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chipster8.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
    MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from chipster8.errors import AddressOutOfRange


@dataclasses.dataclass(frozen=True)
class Quirks:
    """Interpreter behaviours that differ between CHIP-8 implementations.

    Attributes:
        add_modulo: Modulus applied to the 8XY4 sum (255 reproduces the
            reference interpreter, 256 is the canonical byte wrap)
        mask_index: Wrap I to 12 bits after FX1E
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX
        jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0
        load_store_increments_index: FX55/FX65 leave I pointing past the block
    """
    add_modulo: int = 255
    mask_index: bool = False
    shift_uses_vy: bool = False
    jump_uses_vx: bool = False
    load_store_increments_index: bool = False


class StackState(PyTreeNode):
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(rng: jax.Array = None, quirks: Quirks = None) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng=rng, quirks=quirks or Quirks())
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def as_u8(value) -> jnp.ndarray:
    return jnp.asarray(int(value) & 0xFF, dtype=jnp.uint8)


def as_u16(value) -> jnp.ndarray:
    return jnp.asarray(int(value) & 0xFFFF, dtype=jnp.uint16)


def advance(state: EmulatorState, amount: int = 2) -> EmulatorState:
    """Move the program counter forward by `amount` bytes."""
    return state.replace(pc=as_u16(int(state.pc) + amount))


def check_range(address: int, length: int = 1) -> None:
    """Raise AddressOutOfRange unless [address, address + length) lies in RAM."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise AddressOutOfRange(address, length)


def set_register(state: EmulatorState, index: int, value) -> EmulatorState:
    return state.replace(V=state.V.at[index].set(as_u8(value)))


def set_keypad(state: EmulatorState, keys) -> EmulatorState:
    """Replace the keypad snapshot with 16 pressed/released values."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return state.replace(keypad=keypad)
