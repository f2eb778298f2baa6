"""
Kapandji Calculator Service

Thumb opposition score (Kapandji scale, 0-10) from hand landmarks.

The thumb tip must come within a distance threshold of successive
targets along the fingers and palm; the score is the highest target
reached. Score 10 is full opposition to the radial side under the
little-finger metacarpal.
"""

from typing import Optional

from ..config import KapandjiSettings
from ..domain.angles import KapandjiScore
from ..domain.landmarks import HandFrame, HandPoint, Landmark
from .angle_calculator import AngleCalculator


class KapandjiCalculator:
    """
    Scores thumb opposition for one frame.

    Usage:
        calculator = KapandjiCalculator()
        result = calculator.calculate(hand)
        print(result.score, result.reached_targets)
    """

    def __init__(self, settings: Optional[KapandjiSettings] = None):
        self.settings = settings or KapandjiSettings()

    def _targets(self, hand: HandFrame) -> list[tuple[int, str, Landmark]]:
        """Scored targets in ascending order (score, name, position)."""
        lm = hand.landmarks
        centroid = AngleCalculator.calculate_centroid
        return [
            (1, "Lateral Index", lm[HandPoint.INDEX_PIP]),
            (2, "Index Tip", lm[HandPoint.INDEX_TIP]),
            (3, "Middle Tip", lm[HandPoint.MIDDLE_TIP]),
            (4, "Ring Tip", lm[HandPoint.RING_TIP]),
            (5, "Little Tip", lm[HandPoint.PINKY_TIP]),
            (6, "Little Base", centroid([lm[HandPoint.WRIST], lm[HandPoint.THUMB_CMC], lm[HandPoint.PINKY_MCP]])),
            (7, "Mid-Palm", centroid([lm[HandPoint.WRIST], lm[HandPoint.PINKY_MCP], lm[HandPoint.PINKY_PIP]])),
            (8, "Distal Crease", centroid([lm[HandPoint.RING_MCP], lm[HandPoint.PINKY_MCP], lm[HandPoint.PINKY_PIP]])),
            (9, "Proximal Crease", centroid([lm[HandPoint.WRIST], lm[HandPoint.MIDDLE_MCP], lm[HandPoint.RING_MCP]])),
        ]

    def _radial_target(self, hand: HandFrame) -> Landmark:
        """Point across the palm under the little-finger metacarpal."""
        wrist = hand.landmarks[HandPoint.WRIST]
        pinky_mcp = hand.landmarks[HandPoint.PINKY_MCP]
        # Thumb CMC to the right of the wrist in image space means a right hand
        is_right_hand = hand.landmarks[HandPoint.THUMB_CMC].x > wrist.x
        offset_x = self.settings.radial_offset_x if is_right_hand else -self.settings.radial_offset_x
        return Landmark(
            x=pinky_mcp.x + offset_x,
            y=pinky_mcp.y + self.settings.radial_offset_y,
            z=pinky_mcp.z,
        )

    def calculate(self, hand: HandFrame) -> KapandjiScore:
        """
        Score one frame.

        Returns:
            KapandjiScore; 0 with no targets if the hand is incomplete
        """
        if not hand.is_complete:
            return KapandjiScore()

        thumb_tip = hand.landmarks[HandPoint.THUMB_TIP]
        threshold = self.settings.target_threshold

        score = 0
        reached: list[str] = []
        for target_score, name, target in self._targets(hand):
            if thumb_tip.distance_to(target) < threshold:
                score = max(score, target_score)
                reached.append(name)

        radial_distance = thumb_tip.distance_to(self._radial_target(hand))
        if radial_distance < threshold * self.settings.full_opposition_factor:
            score = 10
            reached.append("Full Opposition")

        return KapandjiScore(score=score, reached_targets=tuple(reached))
