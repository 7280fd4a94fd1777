"""CHIP-8 system instructions (0x0xxx)."""

from chipster8.state import EmulatorState, advance, as_u16
from chipster8.decode import DecodedInstruction
from chipster8.stack import pop
from chipster8 import framebuffer


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return advance(state.replace(display=framebuffer.reset(state.display)))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine.

    CALL pushes the address of the CALL itself, so the popped address is
    advanced past it.
    """
    stack, address = pop(state.stack)
    return advance(state.replace(stack=stack, pc=as_u16(address)))


def execute_system_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine, treated as a jump to NNN."""
    return state.replace(pc=as_u16(instruction.nnn))
