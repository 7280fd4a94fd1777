"""Tests for system instructions (0xxx)."""

import pytest
import jax.numpy as jnp
from chipster8 import execute, StackUnderflow
from chipster8.framebuffer import is_clear
from chipster8.stack import push


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))
    assert not is_clear(state.display)

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert is_clear(state.display)
    assert state.pc == 0x202


def test_execute_system_call_jumps(fresh_state):
    """Test 0NNN - treated as a jump."""
    state = execute(fresh_state, 0x0ABC)
    assert state.pc == 0xABC


def test_execute_return(fresh_state):
    """Test 00EE - pop into PC, then skip past the call site."""
    state = fresh_state.replace(pc=jnp.asarray(0xA, dtype=jnp.uint16))
    state = state.replace(stack=push(state.stack, 0xB))

    state = execute(state, 0x00EE)

    assert state.pc == 0xD
    assert state.stack.pointer == 0


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = int(state.pc)

    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc + 2
    assert state.stack.pointer == 0


def test_return_with_empty_stack(fresh_state):
    with pytest.raises(StackUnderflow):
        execute(fresh_state, 0x00EE)
