"""
Services Layer

Angle calculation, temporal validation and session aggregation.
These services operate on the domain models and hold no per-recording
state of their own; that lives in the Session.
"""

from .angle_calculator import AngleCalculator
from .finger_calculator import FingerAngleCalculator
from .temporal_validator import ChannelSummary, SampleVerdict, TemporalValidator
from .laterality import LateralityDecision, LateralityResolver
from .wrist_calculator import ElbowWristCalculator
from .kapandji_calculator import KapandjiCalculator
from .session_aggregator import (
    DEVIATION_CHANNEL,
    WRIST_CHANNEL,
    SessionAggregator,
    joint_channel,
    tam_channel,
)

__all__ = [
    "AngleCalculator",
    "FingerAngleCalculator",
    "ChannelSummary",
    "SampleVerdict",
    "TemporalValidator",
    "LateralityDecision",
    "LateralityResolver",
    "ElbowWristCalculator",
    "KapandjiCalculator",
    "DEVIATION_CHANNEL",
    "WRIST_CHANNEL",
    "SessionAggregator",
    "joint_channel",
    "tam_channel",
]
