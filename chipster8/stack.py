"""CHIP-8 stack operations."""

import jax.numpy as jnp

from chipster8.constants import STACK_SIZE
from chipster8.errors import StackOverflow, StackUnderflow
from chipster8.state import StackState, as_u16


def push(stack: StackState, address) -> StackState:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflow(int(address), stack.pointer)
    new_data = stack.data.at[stack.pointer].set(as_u16(address))
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise StackUnderflow()
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
