"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

from chipster8.constants import FLAG_REGISTER
from chipster8.state import EmulatorState, Quirks, advance, set_register
from chipster8.decode import DecodedInstruction, Kind


def alu_set(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, VF = carry.

    The stored sum is taken modulo `quirks.add_modulo`.
    """
    result = vx + vy
    carry = int(result > 255)
    return result % quirks.add_modulo, carry


def alu_sub_xy(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    no_borrow = int(vx > vy)
    return (vx - vy) & 0xFF, no_borrow


def alu_shift_right(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    source = vy if quirks.shift_uses_vy else vx
    return source >> 1, source & 1


def alu_sub_yx(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    no_borrow = int(vy > vx)
    return (vy - vx) & 0xFF, no_borrow


def alu_shift_left(vx: int, vy: int, quirks: Quirks) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    source = vy if quirks.shift_uses_vy else vx
    return (source << 1) & 0xFF, (source & 0x80) >> 7


ALU_OPERATIONS = {
    Kind.LD_VX_VY: alu_set,
    Kind.OR: alu_or,
    Kind.AND: alu_and,
    Kind.XOR: alu_xor,
    Kind.ADD_VX_VY: alu_add,
    Kind.SUB: alu_sub_xy,
    Kind.SHR: alu_shift_right,
    Kind.SUBN: alu_sub_yx,
    Kind.SHL: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations.

    VF is written before VX, so an operation targeting VF keeps its result.
    """
    operation = ALU_OPERATIONS[instruction.kind]
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])
    result, vf = operation(vx, vy, state.quirks)

    if vf is not None:
        state = set_register(state, FLAG_REGISTER, vf)
    state = set_register(state, instruction.x, result)
    return advance(state)
