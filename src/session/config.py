"""
Config loader for Galaxy Hands.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    mirror: bool = True          # Flip frames so the user sees a mirror image


@dataclass
class MediaPipeConfig:
    model_complexity: int = 1
    max_num_hands: int = 2
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.6
    model_path: Optional[str] = None


@dataclass
class GestureConfig:
    mode: str = "signs"                       # Built-in grammar: "signs" or "letters"
    grammar_file: Optional[str] = None        # YAML grammar replacing the built-in one
    hold_frames: Optional[int] = None         # Override the grammar's debounce threshold
    letter_confirm_frames: Optional[int] = None
    history_size: int = 25


@dataclass
class ParticleConfig:
    particle_count: int = 1400
    mobile_particle_count: int = 800
    star_count: int = 200
    mobile_star_count: int = 120
    base_speed: float = 0.3

    # Fist repulsion
    repel_radius: float = 130.0
    mobile_repel_radius: float = 80.0
    repel_strength: float = 8.0

    # Text formation / scattering
    text_particle_count: int = 800
    text_form_speed: float = 0.06
    text_converge_damping: float = 0.82
    text_fade_in: float = 0.04
    text_scatter_speed: float = 0.04
    scatter_jitter: float = 0.5
    friction: float = 0.92

    # Ambient drift
    ambient_jitter: float = 0.02
    ambient_damping: float = 0.99

    wrap_margin: float = 10.0
    mobile_breakpoint: int = 600   # Viewports narrower than this use mobile counts


@dataclass
class TextConfig:
    max_width_ratio: float = 0.85
    line_height: float = 1.2
    grid_step: int = 6
    mobile_grid_step: int = 4      # Denser sampling on narrow viewports
    alpha_threshold: int = 128
    mobile_breakpoint: int = 600


@dataclass
class UIConfig:
    width: int = 1280
    height: int = 720
    fps: int = 60
    fullscreen: bool = False
    window_title: str = "Galaxy Hands"
    corner_label: str = ""


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    particles: ParticleConfig = field(default_factory=ParticleConfig)
    text: TextConfig = field(default_factory=TextConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        particles=_dict_to_dataclass(ParticleConfig, data.get('particles')),
        text=_dict_to_dataclass(TextConfig, data.get('text')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
