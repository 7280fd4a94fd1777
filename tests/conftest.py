"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipster8 import create_state, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def canonical_state():
    """Provide a fresh state with canonical (non reference) quirks."""
    return create_state(quirks=Quirks(
        add_modulo=256,
        mask_index=True,
        shift_uses_vy=True,
        jump_uses_vx=True,
        load_store_increments_index=True,
    ))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=0x10)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def load_opcodes(state, opcodes, address=0x200):
    """Helper to place big-endian opcodes in memory."""
    data = []
    for opcode in opcodes:
        data += [(opcode >> 8) & 0xFF, opcode & 0xFF]
    return setup_sprite_in_memory(state, address, data)
