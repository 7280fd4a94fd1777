"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chipster8 import execute, AddressOutOfRange, FONT_DATA
from conftest import set_registers


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48
        assert state.pc == 0x20A


class TestWaitForKey:
    """Test FX0A polling behaviour."""

    def test_no_key_stalls(self, fresh_state):
        state = execute(fresh_state, 0xF30A)
        assert state.pc == 0x200
        state = execute(state, 0xF30A)
        assert state.pc == 0x200

    def test_key_pressed_stores_index(self, fresh_state):
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0xB].set(True))

        state = execute(state, 0xF30A)

        assert state.V[3] == 0xB
        assert state.pc == 0x202

    def test_lowest_pressed_key_wins(self, fresh_state):
        keypad = fresh_state.keypad.at[0x4].set(True).at[0xE].set(True)
        state = execute(fresh_state.replace(keypad=keypad), 0xF30A)
        assert state.V[3] == 0x4


class TestIndexArithmetic:
    """Test FX1E and FX29."""

    def test_add_to_index(self, fresh_state):
        state = set_registers(fresh_state, V1=0x10)
        state = execute(state, 0xA300)
        state = execute(state, 0xF11E)
        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_not_masked_by_default(self, fresh_state):
        state = set_registers(fresh_state, V1=0x20)
        state = execute(state, 0xAFF0)
        state = execute(state, 0xF11E)
        assert state.I == 0x1010

    def test_add_to_index_masked_quirk(self, canonical_state):
        state = set_registers(canonical_state, V1=0x20)
        state = execute(state, 0xAFF0)
        state = execute(state, 0xF11E)
        assert state.I == 0x010

    @pytest.mark.parametrize("digit", [0x0, 0x7, 0xF])
    def test_font_character(self, fresh_state, digit):
        state = set_registers(fresh_state, V4=digit)
        state = execute(state, 0xF429)
        assert state.I == digit * 5
        glyph = [int(b) for b in state.memory[int(state.I):int(state.I) + 5]]
        assert glyph == FONT_DATA[digit * 5:digit * 5 + 5]


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value,digits", [(156, [1, 5, 6]), (0, [0, 0, 0]), (255, [2, 5, 5])])
    def test_misc_bcd_conversion(self, fresh_state, value, digits):
        state = set_registers(fresh_state, V0=value)
        state = execute(state, 0xA300)
        state = execute(state, 0xF033)

        assert [int(b) for b in state.memory[0x300:0x303]] == digits

    def test_bcd_out_of_range(self, fresh_state):
        state = execute(fresh_state, 0xAFFE)
        with pytest.raises(AddressOutOfRange):
            execute(state, 0xF033)


class TestRegisterBlocks:
    """Test FX55/FX65."""

    def test_store_registers(self, fresh_state):
        state = set_registers(fresh_state, V0=0x11, V1=0x22, V2=0x33, V3=0x44)
        state = execute(state, 0xA400)
        state = execute(state, 0xF255)

        assert [int(b) for b in state.memory[0x400:0x404]] == [0x11, 0x22, 0x33, 0x00]
        assert state.I == 0x400

    def test_load_registers(self, fresh_state):
        state = fresh_state.replace(memory=fresh_state.memory.at[0x500:0x503].set(0x7F))
        state = execute(state, 0xA500)
        state = execute(state, 0xF165)

        assert state.V[0] == 0x7F
        assert state.V[1] == 0x7F
        assert state.V[2] == 0x00
        assert state.I == 0x500

    def test_store_load_round_trip_all_registers(self, fresh_state):
        registers = {f"V{i:X}": i * 16 + i for i in range(16)}
        state = set_registers(fresh_state, **registers)
        state = execute(state, 0xA600)
        state = execute(state, 0xFF55)
        state = state.replace(V=state.V * 0)
        state = execute(state, 0xFF65)

        assert [int(v) for v in state.V] == [i * 16 + i for i in range(16)]

    def test_increment_index_quirk(self, canonical_state):
        state = execute(canonical_state, 0xA400)
        state = execute(state, 0xF255)
        assert state.I == 0x403

    def test_store_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0xAFFC)
        with pytest.raises(AddressOutOfRange):
            execute(state, 0xF455)
