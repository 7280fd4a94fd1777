"""Monochrome 64x32 framebuffer with XOR sprite blitting.

The framebuffer is a boolean array of shape (SCREEN_HEIGHT, SCREEN_WIDTH)
indexed as ``display[y, x]``.
"""

import jax.numpy as jnp

from chipster8.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

_BIT_SHIFTS = SPRITE_WIDTH - 1 - jnp.arange(SPRITE_WIDTH)


def create_framebuffer() -> jnp.ndarray:
    """Return a blank framebuffer."""
    return jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_)


def reset(display: jnp.ndarray) -> jnp.ndarray:
    """Turn every pixel off."""
    return jnp.zeros_like(display)


def is_clear(display: jnp.ndarray) -> bool:
    """True when no pixel is lit."""
    return not bool(jnp.any(display))


def sprite_mask(x: int, y: int, sprite) -> jnp.ndarray:
    """Place sprite bits on an empty framebuffer, wrapping both axes."""
    rows = jnp.asarray(sprite, dtype=jnp.int32).reshape(-1)
    bits = ((rows[:, None] >> _BIT_SHIFTS[None, :]) & 1).astype(jnp.bool_)

    row_index = (int(y) + jnp.arange(rows.shape[0])) % SCREEN_HEIGHT
    col_index = (int(x) + jnp.arange(SPRITE_WIDTH)) % SCREEN_WIDTH

    # Sprites are at most 15 rows and 8 columns, so wrapped indices never repeat
    return create_framebuffer().at[row_index[:, None], col_index[None, :]].set(bits)


def display_sprite(display: jnp.ndarray, x: int, y: int, sprite) -> tuple[jnp.ndarray, bool]:
    """XOR a sprite onto the framebuffer at (x, y).

    Args:
        display: Current framebuffer
        x: Column of the sprite's left edge, any non-negative value
        y: Row of the sprite's top edge, any non-negative value
        sprite: Sequence of bytes, one per sprite row, most significant bit leftmost

    Returns:
        Tuple of (new framebuffer, collision) where collision is True when at
        least one lit pixel was turned off
    """
    mask = sprite_mask(x, y, sprite)
    collision = bool(jnp.any(display & mask))
    return display ^ mask, collision


def to_text(display: jnp.ndarray, on: str = "1", off: str = "0") -> str:
    """Render the framebuffer as one line of characters per row."""
    return "\n".join(
        "".join(on if pixel else off for pixel in row)
        for row in display.tolist()
    )
