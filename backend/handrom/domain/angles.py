"""
Joint Angle Domain Models

Per-frame results produced by the finger and wrist calculators.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .landmarks import HandPoint, HandType


class Finger(str, Enum):
    """Fingers scored for MCP/PIP/DIP flexion (the thumb is scored by Kapandji)."""
    INDEX = "index"
    MIDDLE = "middle"
    RING = "ring"
    PINKY = "pinky"


class FingerJoint(str, Enum):
    """The three flexion joints of a finger."""
    MCP = "mcp"
    PIP = "pip"
    DIP = "dip"


class WristDirection(str, Enum):
    """Which side of neutral a wrist sample falls on."""
    NEUTRAL = "neutral"
    FLEXION = "flexion"
    EXTENSION = "extension"


# Landmark triplets (proximal, vertex, distal) measured for each joint.
FINGER_JOINTS: dict[Finger, dict[FingerJoint, tuple[HandPoint, HandPoint, HandPoint]]] = {
    Finger.INDEX: {
        FingerJoint.MCP: (HandPoint.WRIST, HandPoint.INDEX_MCP, HandPoint.INDEX_PIP),
        FingerJoint.PIP: (HandPoint.INDEX_MCP, HandPoint.INDEX_PIP, HandPoint.INDEX_DIP),
        FingerJoint.DIP: (HandPoint.INDEX_PIP, HandPoint.INDEX_DIP, HandPoint.INDEX_TIP),
    },
    Finger.MIDDLE: {
        FingerJoint.MCP: (HandPoint.WRIST, HandPoint.MIDDLE_MCP, HandPoint.MIDDLE_PIP),
        FingerJoint.PIP: (HandPoint.MIDDLE_MCP, HandPoint.MIDDLE_PIP, HandPoint.MIDDLE_DIP),
        FingerJoint.DIP: (HandPoint.MIDDLE_PIP, HandPoint.MIDDLE_DIP, HandPoint.MIDDLE_TIP),
    },
    Finger.RING: {
        FingerJoint.MCP: (HandPoint.WRIST, HandPoint.RING_MCP, HandPoint.RING_PIP),
        FingerJoint.PIP: (HandPoint.RING_MCP, HandPoint.RING_PIP, HandPoint.RING_DIP),
        FingerJoint.DIP: (HandPoint.RING_PIP, HandPoint.RING_DIP, HandPoint.RING_TIP),
    },
    Finger.PINKY: {
        FingerJoint.MCP: (HandPoint.WRIST, HandPoint.PINKY_MCP, HandPoint.PINKY_PIP),
        FingerJoint.PIP: (HandPoint.PINKY_MCP, HandPoint.PINKY_PIP, HandPoint.PINKY_DIP),
        FingerJoint.DIP: (HandPoint.PINKY_PIP, HandPoint.PINKY_DIP, HandPoint.PINKY_TIP),
    },
}


@dataclass(frozen=True)
class JointAngles:
    """
    Flexion of one finger.

    All angles are in degrees, 0 = straight joint. For a single frame
    total_active_rom is mcp_angle + pip_angle + dip_angle; in a session
    report each field is a separate maximum.
    """
    mcp_angle: float = 0.0
    pip_angle: float = 0.0
    dip_angle: float = 0.0
    total_active_rom: float = 0.0

    @classmethod
    def from_joints(cls, mcp: float, pip: float, dip: float) -> "JointAngles":
        """Build a sample from rounded joint values, deriving TAM."""
        return cls(
            mcp_angle=mcp,
            pip_angle=pip,
            dip_angle=dip,
            total_active_rom=round(mcp + pip + dip, 2),
        )

    def get(self, joint: FingerJoint) -> float:
        """Angle for a single joint."""
        if joint is FingerJoint.MCP:
            return self.mcp_angle
        if joint is FingerJoint.PIP:
            return self.pip_angle
        return self.dip_angle


@dataclass(frozen=True)
class WristAngles:
    """
    Elbow-referenced wrist measurement for a single frame.

    Callers must check elbow_detected/confidence before trusting the
    angles: an undetected frame carries zeros.
    """
    forearm_to_hand_angle: float = 0.0
    wrist_flexion_angle: float = 0.0
    wrist_extension_angle: float = 0.0
    elbow_detected: bool = False
    hand_type: HandType = HandType.UNKNOWN
    confidence: float = 0.0
    # In-plane (image) deviation from the forearm axis
    radial_deviation_angle: float = 0.0
    ulnar_deviation_angle: float = 0.0

    @property
    def direction(self) -> WristDirection:
        if self.wrist_flexion_angle > 0:
            return WristDirection.FLEXION
        if self.wrist_extension_angle > 0:
            return WristDirection.EXTENSION
        return WristDirection.NEUTRAL

    @property
    def signed_angle(self) -> float:
        """Flexion as positive degrees, extension as negative."""
        return self.wrist_flexion_angle - self.wrist_extension_angle

    @property
    def signed_deviation(self) -> float:
        """Radial deviation as positive degrees, ulnar as negative."""
        return self.radial_deviation_angle - self.ulnar_deviation_angle


@dataclass(frozen=True)
class KapandjiScore:
    """
    Thumb opposition score for a single frame (0-10).

    Attributes:
        score: Highest target reached by the thumb tip
        reached_targets: Names of every target within reach
    """
    score: int = 0
    reached_targets: tuple[str, ...] = ()


@dataclass(frozen=True)
class FrameResult:
    """Everything the engine derived from one tracking frame."""
    frame_number: int
    timestamp_ms: int
    fingers: dict[Finger, JointAngles]
    wrist: WristAngles
    kapandji: Optional[KapandjiScore] = None
    # channel name -> whether the temporal validator accepted it
    accepted: dict[str, bool] = field(default_factory=dict)
