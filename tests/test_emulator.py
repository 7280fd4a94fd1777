"""Tests for fetch, step, timers, frames and program loading."""

import jax.numpy as jnp
import pytest
from chipster8 import (
    fetch, step, tick_timers, run_frame, load_program, load_rom,
    AddressOutOfRange, UnknownInstruction, StackUnderflow, RomLoadError, RomTooLarge,
    PROGRAM_START,
)
from chipster8.constants import MAX_ROM_SIZE, MEMORY_SIZE
from chipster8.emulator import read_rom
from conftest import load_opcodes


class TestFetch:
    """Test instruction fetch."""

    def test_fetch_big_endian(self, fresh_state):
        state = load_opcodes(fresh_state, [0x1234])
        assert fetch(state) == 0x1234
        assert state.pc == 0x200

    def test_fetch_past_end_of_memory(self, fresh_state):
        state = fresh_state.replace(pc=jnp.asarray(MEMORY_SIZE - 1, dtype=jnp.uint16))
        with pytest.raises(AddressOutOfRange):
            fetch(state)


class TestStep:
    """Test the fetch-decode-execute step."""

    def test_step_executes_instruction(self, fresh_state):
        state = load_opcodes(fresh_state, [0x6105])
        state, error = step(state)

        assert error is None
        assert state.V[1] == 5
        assert state.pc == 0x202

    def test_step_unknown_instruction(self, fresh_state):
        state = load_opcodes(fresh_state, [0xFFFF])
        new_state, error = step(state)

        assert isinstance(error, UnknownInstruction)
        assert error.opcode == 0xFFFF
        assert error.address == 0x200
        assert new_state is state

    def test_step_stack_underflow(self, fresh_state):
        state = load_opcodes(fresh_state, [0x00EE])
        new_state, error = step(state)

        assert isinstance(error, StackUnderflow)
        assert new_state.pc == 0x200


class TestTimers:
    """Test per-frame timer ticks."""

    def test_timers_decrement(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.asarray(3, dtype=jnp.uint8),
            sound_timer=jnp.asarray(1, dtype=jnp.uint8),
        )
        state = tick_timers(state)
        assert state.delay_timer == 2
        assert state.sound_timer == 0

    def test_timers_floor_at_zero(self, fresh_state):
        state = tick_timers(fresh_state)
        assert state.delay_timer == 0
        assert state.sound_timer == 0


class TestRunFrame:
    """Test the per-frame cycle driver."""

    def test_run_frame_executes_cycles(self, fresh_state):
        # 200: ADD V1, 1 ; 202: JMP 200
        state = load_opcodes(fresh_state, [0x7101, 0x1200])
        state = state.replace(delay_timer=jnp.asarray(10, dtype=jnp.uint8))

        state, executed, error = run_frame(state)

        assert error is None
        assert executed == 9
        assert state.V[1] == 5
        assert state.delay_timer == 9

    def test_run_frame_custom_cycles(self, fresh_state):
        state = load_opcodes(fresh_state, [0x7101, 0x1200])
        state, executed, _ = run_frame(state, cycles=4)
        assert executed == 4
        assert state.V[1] == 2

    def test_run_frame_stops_on_error(self, fresh_state):
        state = load_opcodes(fresh_state, [0x6101, 0xFFFF])
        state, executed, error = run_frame(state)

        assert executed == 1
        assert isinstance(error, UnknownInstruction)
        assert state.pc == 0x202


class TestLoading:
    """Test program loading."""

    def test_load_program(self, fresh_state):
        state = load_program(fresh_state, b"\x12\x34\x56")
        assert [int(b) for b in state.memory[PROGRAM_START:PROGRAM_START + 3]] == [0x12, 0x34, 0x56]
        assert state.pc == PROGRAM_START

    def test_load_empty_program(self, fresh_state):
        state = load_program(fresh_state, b"")
        assert (state.memory == fresh_state.memory).all()

    def test_load_largest_program(self, fresh_state):
        state = load_program(fresh_state, b"\xAB" * MAX_ROM_SIZE)
        assert state.memory[MEMORY_SIZE - 1] == 0xAB

    def test_load_program_too_large(self, fresh_state):
        with pytest.raises(RomTooLarge):
            load_program(fresh_state, b"\x00" * (MAX_ROM_SIZE + 1))

    def test_load_rom_from_file(self, fresh_state, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(b"\x00\xE0\x12\x00")

        state = load_rom(fresh_state, str(rom))

        assert fetch(state) == 0x00E0

    def test_read_missing_rom(self, tmp_path):
        with pytest.raises(RomLoadError):
            read_rom(str(tmp_path / "missing.ch8"))
