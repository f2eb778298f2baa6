"""
HandROM

Hand and wrist range-of-motion engine: turns tracked hand/pose landmarks
into finger joint flexion, elbow-referenced wrist flexion/extension and
a session-level maximum ROM report.
"""

from .config import EngineSettings
from .errors import ConfigurationError, FrameOrderError, HandROMError
from .services import SessionAggregator

__version__ = "1.0.0"

__all__ = [
    "EngineSettings",
    "ConfigurationError",
    "FrameOrderError",
    "HandROMError",
    "SessionAggregator",
]
