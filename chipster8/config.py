"""Emulator configuration.

Defaults live in structured dataclasses; a YAML file and ``key=value``
overrides are merged on top with OmegaConf::

    cycles_per_frame: 12
    quirks:
      add_modulo: 256
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from omegaconf import OmegaConf

from chipster8.constants import CYCLES_PER_FRAME, FRAME_RATE
from chipster8.state import Quirks


@dataclass
class QuirksConfig:
    add_modulo: int = 255
    mask_index: bool = False
    shift_uses_vy: bool = False
    jump_uses_vx: bool = False
    load_store_increments_index: bool = False

    def to_quirks(self) -> Quirks:
        return Quirks(
            add_modulo=self.add_modulo,
            mask_index=self.mask_index,
            shift_uses_vy=self.shift_uses_vy,
            jump_uses_vx=self.jump_uses_vx,
            load_store_increments_index=self.load_store_increments_index,
        )


@dataclass
class RenderConfig:
    scale: int = 8
    color_scheme: str = "classic"


@dataclass
class EmulatorConfig:
    cycles_per_frame: int = CYCLES_PER_FRAME
    fps: int = FRAME_RATE
    seed: int = 0
    log_level: str = "INFO"
    quirks: QuirksConfig = field(default_factory=QuirksConfig)
    render: RenderConfig = field(default_factory=RenderConfig)


def load_config(path: Optional[str] = None, overrides: Sequence[str] = ()) -> EmulatorConfig:
    """Build the emulator configuration.

    Args:
        path: Optional YAML file merged over the defaults
        overrides: Dot-list overrides such as ``quirks.add_modulo=256``

    Returns:
        Typed EmulatorConfig instance

    Raises:
        ValueError: when a value is out of range
    """
    cfg = OmegaConf.structured(EmulatorConfig)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(path))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))

    config = OmegaConf.to_object(cfg)
    validate_config(config)
    return config


def validate_config(config: EmulatorConfig) -> None:
    if config.cycles_per_frame < 1:
        raise ValueError(f"cycles_per_frame must be positive, got {config.cycles_per_frame}")
    if config.fps < 1:
        raise ValueError(f"fps must be positive, got {config.fps}")
    if config.quirks.add_modulo not in (255, 256):
        raise ValueError(f"quirks.add_modulo must be 255 or 256, got {config.quirks.add_modulo}")
    if config.render.scale < 1:
        raise ValueError(f"render.scale must be positive, got {config.render.scale}")


def config_to_dict(config: EmulatorConfig) -> dict:
    """Flat-ish dictionary view used for logging."""
    return OmegaConf.to_container(OmegaConf.structured(config))
