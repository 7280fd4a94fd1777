"""CHIP-8 display operations."""

from chipster8.constants import FLAG_REGISTER
from chipster8.state import EmulatorState, advance, check_range, set_register
from chipster8.decode import DecodedInstruction
from chipster8 import framebuffer


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    address = int(state.I)
    check_range(address, instruction.n)
    sprite = state.memory[address:address + instruction.n]

    display, collision = framebuffer.display_sprite(
        state.display,
        int(state.V[instruction.x]),
        int(state.V[instruction.y]),
        sprite,
    )
    state = set_register(state.replace(display=display), FLAG_REGISTER, int(collision))
    return advance(state)
