"""Tests for rendering helpers."""

import numpy as np
import pytest
from chipster8 import chip8_display_to_rgb, create_color_scheme
from chipster8.framebuffer import create_framebuffer
from chipster8.rendering import save_frame


def test_display_to_rgb_shape():
    rgb = chip8_display_to_rgb(create_framebuffer(), scale=4)
    assert rgb.shape == (32 * 4, 64 * 4, 3)
    assert rgb.dtype == np.uint8


def test_display_to_rgb_colors():
    display = create_framebuffer().at[1, 2].set(True)
    rgb = chip8_display_to_rgb(display, scale=1, on_color=(1, 2, 3), off_color=(9, 9, 9))
    assert tuple(rgb[1, 2]) == (1, 2, 3)
    assert tuple(rgb[2, 1]) == (9, 9, 9)


def test_unknown_color_scheme():
    with pytest.raises(ValueError):
        create_color_scheme("sepia")


def test_save_frame(tmp_path):
    path = tmp_path / "frame.png"
    save_frame(create_framebuffer(), str(path), scale=1, color_scheme="amber")
    assert path.stat().st_size > 0
