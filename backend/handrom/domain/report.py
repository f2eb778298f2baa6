"""
Session Report Domain Models

The aggregated outcome of one recording, handed to persistence/UI.
"""

from dataclasses import dataclass, field

from .angles import Finger, JointAngles
from .landmarks import HandType


@dataclass(frozen=True)
class WristROM:
    """
    Maximum wrist motion observed in a session.

    Attributes:
        max_flexion: Smoothed maximum flexion (degrees)
        max_extension: Smoothed maximum extension (degrees)
        hand_type: Side the session was locked to
        confidence: Highest per-frame confidence among accepted samples
        max_radial_deviation: Smoothed maximum radial deviation (degrees)
        max_ulnar_deviation: Smoothed maximum ulnar deviation (degrees)
    """
    max_flexion: float = 0.0
    max_extension: float = 0.0
    hand_type: HandType = HandType.UNKNOWN
    confidence: float = 0.0
    max_radial_deviation: float = 0.0
    max_ulnar_deviation: float = 0.0

    @property
    def total_arc(self) -> float:
        """Flexion-extension arc (degrees)."""
        return round(self.max_flexion + self.max_extension, 2)

    @property
    def deviation_arc(self) -> float:
        """Radial-ulnar arc (degrees)."""
        return round(self.max_radial_deviation + self.max_ulnar_deviation, 2)


@dataclass(frozen=True)
class SessionROMReport:
    """
    Final (or partial) range-of-motion report for a recording.

    Attributes:
        session_id: Id of the session the report was built from
        fingers: Per-finger maximum joint flexion; total_active_rom is
            the largest per-frame TAM, not the sum of the joint maxima
        wrist: Wrist flexion/extension and radial/ulnar maxima
        quality: Temporal quality per angle channel (0.0 to 1.0); finger
            totals are keyed "<finger>.tam", wrist directions
            "wrist.flexion", "wrist.extension", "wrist.radial", "wrist.ulnar"
        frames_processed: Frames fed to the aggregator
        frames_with_hand: Frames carrying a full hand
        frames_with_elbow: Frames with a usable elbow reference
        frames_skipped: Frames below the tracking quality floor
        rejected_samples: Samples dropped by the temporal validator
        kapandji_score: Best thumb opposition score (0-10)
        kapandji_targets: Targets reached in the best-scoring frame
    """
    session_id: str
    fingers: dict[Finger, JointAngles] = field(default_factory=dict)
    wrist: WristROM = field(default_factory=WristROM)
    quality: dict[str, float] = field(default_factory=dict)
    frames_processed: int = 0
    frames_with_hand: int = 0
    frames_with_elbow: int = 0
    frames_skipped: int = 0
    rejected_samples: int = 0
    kapandji_score: int = 0
    kapandji_targets: tuple[str, ...] = ()

    def finger(self, finger: Finger) -> JointAngles:
        return self.fingers.get(finger, JointAngles())
