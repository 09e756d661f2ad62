"""
Configuration loading for sign recognition.

Settings live in a YAML file with one mapping per section. Every key has a
default, so a file only needs the values it changes.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple, Type, TypeVar
from dataclasses import dataclass, field, fields

MODES = ("static", "motion")
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"

T = TypeVar("T")


@dataclass
class CameraConfig:
    """Capture device settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands / Face Mesh settings."""
    max_num_hands: int = 1
    model_complexity: int = 0
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    face_max_num_faces: int = 1


@dataclass
class LettersConfig:
    """Letter stream stabilization."""
    min_confidence: float = 0.7
    cooldown_ms: int = 1200
    history_len: int = 4
    stable_repeats: int = 2


@dataclass
class PresenceConfig:
    """Hand-presence hysteresis, in frames."""
    enter_frames: int = 3
    exit_frames: int = 5


@dataclass
class MotionConfig:
    """Motion buffer and gesture cadence."""
    buffer_size: int = 20
    evaluation_interval_ms: int = 2000
    chin_landmark: int = 152


@dataclass
class DisplayConfig:
    """Preview window settings."""
    show_landmarks: bool = True
    window_name: str = "Sign Language Recognition"
    mode: str = "static"  # "static" or "motion"


@dataclass
class Cfg:
    """All settings, one attribute per YAML section."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    letters: LettersConfig = field(default_factory=LettersConfig)
    presence: PresenceConfig = field(default_factory=PresenceConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: on unknown sections or keys, or out-of-range values
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return config_from_dict(data)


def config_from_dict(data: Dict[str, Any]) -> Cfg:
    """Build and validate a Cfg from parsed YAML."""
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping of sections, got {type(data).__name__}")
    known = {f.name: f for f in fields(Cfg)}
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(f"Unknown config sections: {sorted(unknown)}")

    sections = {}
    for name, f in known.items():
        section_type = type(f.default_factory())
        values = data.get(name)
        # An empty section in YAML parses as None
        sections[name] = _section(section_type, {} if values is None else values, name)

    cfg = Cfg(**sections)
    _validate(cfg)
    return cfg


def _section(cls: Type[T], values: Dict[str, Any], name: str) -> T:
    if not isinstance(values, dict):
        raise ValueError(f"Section '{name}' must be a mapping, got {type(values).__name__}")
    allowed = {f.name for f in fields(cls)}
    unknown = set(values) - allowed
    if unknown:
        raise ValueError(f"Unknown keys in '{name}': {sorted(unknown)}")
    return cls(**values)


def _validate(cfg: Cfg) -> None:
    if cfg.display.mode not in MODES:
        raise ValueError(f"Unknown display mode: {cfg.display.mode!r}")
    if not 0.0 <= cfg.letters.min_confidence <= 1.0:
        raise ValueError("letters.min_confidence must be within [0, 1]")
    if cfg.letters.stable_repeats < 1 or cfg.letters.stable_repeats > cfg.letters.history_len:
        raise ValueError("letters.stable_repeats must be between 1 and letters.history_len")
    if cfg.presence.enter_frames < 1 or cfg.presence.exit_frames < 1:
        raise ValueError("presence frame counts must be positive")
    if cfg.motion.buffer_size < 1:
        raise ValueError("motion.buffer_size must be positive")
    if cfg.motion.evaluation_interval_ms <= 0:
        raise ValueError("motion.evaluation_interval_ms must be positive")


def parse_cli_args(argv: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Read ``--config PATH`` and ``--motion`` from command-line arguments.

    Returns:
        (config_path, mode), either of which may be None

    Raises:
        ValueError: if ``--config`` is not followed by a path
    """
    mode = "motion" if "--motion" in argv else None
    config_path = None
    if "--config" in argv:
        i = argv.index("--config")
        if i + 1 >= len(argv) or argv[i + 1].startswith("--"):
            raise ValueError("--config requires a file path")
        config_path = argv[i + 1]
    return config_path, mode
