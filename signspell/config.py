"""
Configuration management for the fingerspelling recognizer.
"""
import copy
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class RecognitionConfig:
    """Classification and smoothing settings."""
    min_score: float
    smoothing_window: int
    frame_interval_ms: int


@dataclass
class HoldConfig:
    """Hold-to-commit settings for one track."""
    hold_ms: int
    cooldown_ms: int
    miss_tolerance: int


@dataclass
class VoiceConfig:
    """ElevenLabs text-to-speech settings."""
    voice_id: str
    model_id: str
    output_format: str


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    window_name: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    recognition: RecognitionConfig
    letter_track: HoldConfig
    send_track: HoldConfig
    voice: VoiceConfig
    display: DisplayConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. Keys it leaves out fall back to the packaged
            config.default.yaml. If None, the defaults are used as-is.

    Returns:
        Configuration object with all settings
    """
    data = _read_yaml(DEFAULT_CONFIG_PATH)

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        data = _merge(data, _read_yaml(config_path))

    return _dict_to_config(data)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay `override` on a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _hold_config(data: Dict[str, Any], name: str) -> HoldConfig:
    hold = HoldConfig(
        hold_ms=int(data['hold_ms']),
        cooldown_ms=int(data['cooldown_ms']),
        miss_tolerance=int(data['miss_tolerance'])
    )
    if hold.hold_ms <= 0:
        raise ValueError(f"{name}.hold_ms must be positive, got {hold.hold_ms}")
    if hold.cooldown_ms < 0 or hold.miss_tolerance < 0:
        raise ValueError(f"{name}.cooldown_ms and {name}.miss_tolerance must not be negative")
    return hold


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    rec_data = data['recognition']
    recognition = RecognitionConfig(
        min_score=float(rec_data['min_score']),
        smoothing_window=int(rec_data['smoothing_window']),
        frame_interval_ms=int(rec_data['frame_interval_ms'])
    )
    if not 0.0 <= recognition.min_score <= 10.0:
        raise ValueError(f"recognition.min_score must be within 0..10, got {recognition.min_score}")
    if not 3 <= recognition.smoothing_window <= 5:
        raise ValueError(f"recognition.smoothing_window must be within 3..5, got {recognition.smoothing_window}")
    if recognition.frame_interval_ms < 0:
        raise ValueError("recognition.frame_interval_ms must not be negative")

    voice_data = data['voice']
    voice = VoiceConfig(
        voice_id=voice_data['voice_id'],
        model_id=voice_data['model_id'],
        output_format=voice_data['output_format']
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        window_name=display_data['window_name']
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        recognition=recognition,
        letter_track=_hold_config(data['letter_track'], 'letter_track'),
        send_track=_hold_config(data['send_track'], 'send_track'),
        voice=voice,
        display=display
    )
