"""
Laterality Service

Decides which pose arm (left or right) belongs to the tracked hand and
feeds that decision into the session's laterality lock.

Decision policy, applied in order:
1. Distance: the pose wrist nearest the hand wrist is the candidate.
2. Visibility: if the sides' mean (elbow, wrist) visibility differs by
   more than the margin, the better-tracked side overrides distance.
3. Elbow floor: the chosen side is kept only if its elbow visibility
   exceeds the floor; otherwise the side with the more visible elbow
   wins (if above the fallback floor), and finally pure distance.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import LateralitySettings
from ..domain.landmarks import HandFrame, HandPoint, HandType, PoseFrame
from ..domain.session import ArmSelection, LateralityState, Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LateralityDecision:
    """
    One frame's laterality vote.

    Attributes:
        side: Pose side chosen for this frame
        rule: Which policy step decided ("visibility", "distance",
            "elbow_fallback" or "nearest")
    """
    side: HandType
    rule: str
    distance_left: float
    distance_right: float
    score_left: float
    score_right: float


class LateralityResolver:
    """
    Applies the laterality decision policy.

    Usage:
        resolver = LateralityResolver()
        arm = resolver.resolve(session, frame.hand, frame.pose)
        if arm is not None:
            elbow = frame.pose.get_landmark(arm.elbow_index)
    """

    def __init__(self, settings: Optional[LateralitySettings] = None):
        self.settings = settings or LateralitySettings()

    def decide(self, hand: HandFrame, pose: PoseFrame) -> Optional[LateralityDecision]:
        """
        Vote for a side using one frame.

        Returns:
            LateralityDecision, or None if the frame lacks the hand wrist
            or either pose arm
        """
        hand_wrist = hand.get_landmark(HandPoint.WRIST)
        if hand_wrist is None or not pose.has_arms:
            return None

        _, left_elbow, left_wrist = pose.left_arm
        _, right_elbow, right_wrist = pose.right_arm

        distance_left = hand_wrist.distance_to(left_wrist)
        distance_right = hand_wrist.distance_to(right_wrist)
        nearest = HandType.LEFT if distance_left < distance_right else HandType.RIGHT

        score_left = (left_elbow.visibility + left_wrist.visibility) / 2
        score_right = (right_elbow.visibility + right_wrist.visibility) / 2

        def decision(side: HandType, rule: str) -> LateralityDecision:
            return LateralityDecision(
                side=side,
                rule=rule,
                distance_left=distance_left,
                distance_right=distance_right,
                score_left=score_left,
                score_right=score_right,
            )

        if abs(score_left - score_right) > self.settings.visibility_margin:
            primary = HandType.LEFT if score_left > score_right else HandType.RIGHT
            rule = "visibility"
        else:
            primary = nearest
            rule = "distance"

        elbow_visibility = {
            HandType.LEFT: left_elbow.visibility,
            HandType.RIGHT: right_elbow.visibility,
        }
        if elbow_visibility[primary] > self.settings.elbow_visibility_floor:
            return decision(primary, rule)

        better_elbow = HandType.LEFT if left_elbow.visibility > right_elbow.visibility else HandType.RIGHT
        if elbow_visibility[better_elbow] > self.settings.fallback_elbow_floor:
            return decision(better_elbow, "elbow_fallback")

        return decision(nearest, "nearest")

    def resolve(self, session: Session, hand: HandFrame, pose: PoseFrame) -> Optional[ArmSelection]:
        """
        Return the arm to use for this frame, updating the session lock.

        A locked session never re-evaluates; an unlocked session without
        adequate pose data returns its current candidate (or None).
        """
        lock = session.laterality
        if lock.is_locked:
            return lock.selection

        vote = self.decide(hand, pose)
        if vote is None:
            return lock.selection

        selection = lock.observe(vote.side)
        if lock.state is LateralityState.LOCKED:
            logger.info(
                f"Laterality locked to {selection.side.value} arm by {vote.rule} "
                f"(dist L={vote.distance_left:.3f} R={vote.distance_right:.3f}, "
                f"vis L={vote.score_left:.2f} R={vote.score_right:.2f})"
            )
        return selection

    def hand_type(self, selection: Optional[ArmSelection]) -> HandType:
        """Reported laterality for an arm (mirrored for selfie cameras)."""
        if selection is None:
            return HandType.UNKNOWN
        if self.settings.mirrored_input:
            return selection.side.mirrored
        return selection.side
