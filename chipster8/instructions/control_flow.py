"""CHIP-8 control flow instructions."""

from chipster8.state import EmulatorState, advance, as_u16
from chipster8.decode import DecodedInstruction
from chipster8.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=as_u16(instruction.nnn))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = bool(condition_fn(state, instruction))
        return advance(state, 4 if condition else 2)
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)

# Key index comes from the low nibble of VX
execute_skip_if_key = make_skip_instruction(
    lambda state, inst: state.keypad[int(state.V[inst.x]) & 0xF]
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~state.keypad[int(state.V[inst.x]) & 0xF]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0 (BXNN: XNN + VX with `jump_uses_vx`)."""
    register = instruction.x if state.quirks.jump_uses_vx else 0
    jump_address = instruction.nnn + int(state.V[register])
    return state.replace(pc=as_u16(jump_address))
