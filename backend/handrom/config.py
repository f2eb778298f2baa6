"""
Engine Settings

Thresholds and calibration constants for the angle engine, validated
with pydantic. Every calculator takes an EngineSettings in its
constructor and falls back to the defaults below.

Load from a JSON file with:
    settings = EngineSettings.from_file("settings.json")
"""

import json
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigurationError


class TemporalSettings(BaseModel):
    """Noise rejection and smoothing for per-joint angle streams."""
    window_size: int = Field(5, ge=1, description="Accepted samples kept per joint")
    consistency_window: int = Field(3, ge=1, description="Samples compared by the window check")
    max_change_per_frame: float = Field(30.0, gt=0, description="Largest plausible step (degrees)")
    consistency_threshold: float = Field(30.0, gt=0, description="Largest deviation from the window (degrees)")
    min_valid_frames: int = Field(10, ge=1, description="Accepted samples needed for full quality")
    top_k_for_maximum: int = Field(3, ge=1, description="Samples averaged into the smoothed maximum")
    insufficient_data_quality: float = Field(0.3, ge=0.0, le=1.0)
    resync_after_rejections: int = Field(
        15, ge=0,
        description="Consecutive rejections before a joint re-baselines (0 = never)",
    )

    @model_validator(mode="after")
    def check_consistency_window(self) -> "TemporalSettings":
        if self.consistency_window > self.window_size:
            raise ValueError(
                f"consistency_window ({self.consistency_window}) cannot exceed "
                f"window_size ({self.window_size})"
            )
        return self


class LateralitySettings(BaseModel):
    """Left/right arm selection policy."""
    visibility_margin: float = Field(0.1, ge=0.0, le=1.0)
    elbow_visibility_floor: float = Field(0.15, ge=0.0, le=1.0)
    fallback_elbow_floor: float = Field(0.1, ge=0.0, le=1.0)
    lock_confirmation_frames: int = Field(1, ge=1)
    mirrored_input: bool = Field(False, description="Report the mirrored side (selfie camera)")


class WristSettings(BaseModel):
    """Elbow-referenced wrist flexion/extension geometry."""
    min_pose_visibility: float = Field(0.3, ge=0.0, le=1.0)
    neutral_baseline_angle: float = Field(
        0.0, ge=0.0, le=180.0,
        description="Forearm-to-hand angle of a straight wrist (degrees)",
    )
    neutral_deadband: float = Field(5.0, ge=0.0, description="Deviation treated as neutral")
    max_flexion: float = Field(80.0, gt=0.0, le=180.0)
    max_extension: float = Field(70.0, gt=0.0, le=180.0)
    max_radial_deviation: float = Field(40.0, gt=0.0, le=180.0)
    max_ulnar_deviation: float = Field(50.0, gt=0.0, le=180.0)
    direction_axis: Literal["x", "y", "z"] = Field(
        "y", description="Cross-product component that separates flexion from extension",
    )


class KapandjiSettings(BaseModel):
    """Thumb opposition targets."""
    enabled: bool = True
    target_threshold: float = Field(0.04, gt=0.0)
    full_opposition_factor: float = Field(1.5, gt=0.0)
    radial_offset_x: float = 0.08
    radial_offset_y: float = 0.02


class EngineSettings(BaseModel):
    """All engine settings."""
    temporal: TemporalSettings = Field(default_factory=TemporalSettings)
    laterality: LateralitySettings = Field(default_factory=LateralitySettings)
    wrist: WristSettings = Field(default_factory=WristSettings)
    kapandji: KapandjiSettings = Field(default_factory=KapandjiSettings)
    min_tracking_quality: float = Field(
        0.0, ge=0.0, le=1.0,
        description="Frames with lower tracker quality are skipped",
    )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "EngineSettings":
        """
        Load settings from a JSON file.

        Missing keys keep their defaults.

        Raises:
            ConfigurationError: If the file is unreadable or invalid
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
            return cls.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ConfigurationError(f"Invalid settings file {path}: {e}") from e
