"""
Wrist Calculator Service

Elbow-referenced wrist flexion/extension and radial/ulnar deviation.

Hand landmarks alone cannot tell a wrist bend from whole-arm motion, so
the forearm direction comes from the pose elbow of the session's locked
arm:

    forearm = elbow -> hand wrist (hand landmark 0)
    hand    = hand wrist -> middle finger MCP (hand landmark 9)

The angle between them, minus the neutral baseline, is the wrist
deviation. The sign of one cross-product component decides whether the
deviation is flexion or extension.

Radial/ulnar deviation uses the same pair of vectors projected onto the
image plane.
"""

from typing import Optional

from ..config import EngineSettings
from ..domain.angles import WristAngles
from ..domain.landmarks import HandFrame, HandPoint, HandType, PoseFrame
from ..domain.session import ArmSelection, Session
from .angle_calculator import AngleCalculator
from .laterality import LateralityResolver

AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


class ElbowWristCalculator:
    """
    Calculates wrist angles against the forearm.

    Usage:
        calculator = ElbowWristCalculator()
        session = Session()
        for frame in frames:
            angles = calculator.calculate(session, frame.hand, frame.pose)
            if angles.elbow_detected:
                print(angles.wrist_flexion_angle)
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        settings = settings or EngineSettings()
        self.settings = settings.wrist
        self.resolver = LateralityResolver(settings.laterality)

    # -------------------------------------------------------------------------
    # Main Calculation Methods
    # -------------------------------------------------------------------------

    def calculate(self, session: Session, hand: HandFrame, pose: PoseFrame) -> WristAngles:
        """
        Calculate wrist angles for one frame of a recording.

        Resolves (and on first adequate frame, locks) the session's arm,
        then measures against that arm.

        Returns:
            WristAngles; elbow_detected is False with zero angles when
            landmarks are missing or not visible enough
        """
        if not hand.is_complete:
            return WristAngles(hand_type=self.resolver.hand_type(session.laterality.selection))

        arm = self.resolver.resolve(session, hand, pose)
        if arm is None:
            return WristAngles()
        return self.calculate_for_arm(arm, hand, pose)

    def calculate_for_side(self, hand: HandFrame, pose: PoseFrame, hand_type: HandType) -> WristAngles:
        """
        Calculate wrist angles for a known hand without any session state.

        Used when re-scoring a single frame of a recording whose hand is
        already known.
        """
        if hand_type is HandType.UNKNOWN:
            return WristAngles()
        side = hand_type.mirrored if self.resolver.settings.mirrored_input else hand_type
        if not hand.is_complete:
            return WristAngles(hand_type=hand_type)
        return self.calculate_for_arm(ArmSelection.for_side(side), hand, pose)

    def calculate_for_arm(self, arm: ArmSelection, hand: HandFrame, pose: PoseFrame) -> WristAngles:
        """Measure the wrist against a specific pose arm."""
        hand_type = self.resolver.hand_type(arm)
        not_detected = WristAngles(hand_type=hand_type)

        elbow = pose.get_landmark(arm.elbow_index)
        pose_wrist = pose.get_landmark(arm.wrist_index)
        shoulder = pose.get_landmark(arm.shoulder_index)
        hand_wrist = hand.get_landmark(HandPoint.WRIST)
        middle_mcp = hand.get_landmark(HandPoint.MIDDLE_MCP)

        if elbow is None or pose_wrist is None or shoulder is None:
            return not_detected
        if hand_wrist is None or middle_mcp is None:
            return not_detected

        floor = self.settings.min_pose_visibility
        if not (elbow.is_visible(floor) and pose_wrist.is_visible(floor)):
            return not_detected

        forearm = AngleCalculator.vector(elbow, hand_wrist)
        hand_vector = AngleCalculator.vector(hand_wrist, middle_mcp)
        raw_angle = AngleCalculator.angle_between_vectors(forearm, hand_vector)
        if raw_angle is None:
            return not_detected

        confidence = min(elbow.visibility, pose_wrist.visibility, shoulder.visibility)
        flexion, extension = self._split_deviation(forearm, hand_vector, raw_angle, arm.side)
        radial, ulnar = self._split_radial_ulnar(forearm, hand_vector, arm.side)

        return WristAngles(
            forearm_to_hand_angle=round(raw_angle, 2),
            wrist_flexion_angle=round(flexion, 2),
            wrist_extension_angle=round(extension, 2),
            elbow_detected=True,
            hand_type=hand_type,
            confidence=round(confidence, 3),
            radial_deviation_angle=round(radial, 2),
            ulnar_deviation_angle=round(ulnar, 2),
        )

    # -------------------------------------------------------------------------
    # Direction
    # -------------------------------------------------------------------------

    def _split_deviation(self, forearm, hand_vector, raw_angle: float, side: HandType) -> tuple[float, float]:
        """
        Assign the deviation from neutral to flexion or extension.

        A LEFT pose arm extends on a positive cross-product component,
        a RIGHT arm on a negative one.
        """
        deviation = abs(raw_angle - self.settings.neutral_baseline_angle)
        if deviation <= self.settings.neutral_deadband:
            return 0.0, 0.0

        component = AngleCalculator.cross_component(
            forearm, hand_vector, AXIS_INDEX[self.settings.direction_axis]
        )
        if side is HandType.LEFT:
            is_extension = component > 0
        else:
            is_extension = component < 0

        if is_extension:
            return 0.0, min(deviation, self.settings.max_extension)
        return min(deviation, self.settings.max_flexion), 0.0

    def _split_radial_ulnar(self, forearm, hand_vector, side: HandType) -> tuple[float, float]:
        """
        Radial/ulnar deviation in the image plane.

        The forearm and hand vectors are projected onto x/y. With the
        palm toward the camera and fingers up, a RIGHT pose arm deviates
        radially on a negative z cross-product component, a LEFT arm on a
        positive one.
        """
        in_plane = AngleCalculator.angle_between_vectors(forearm[:2], hand_vector[:2])
        if in_plane is None or in_plane <= self.settings.neutral_deadband:
            return 0.0, 0.0

        component = AngleCalculator.cross_component(forearm, hand_vector, AXIS_INDEX["z"])
        if side is HandType.LEFT:
            is_radial = component > 0
        else:
            is_radial = component < 0

        if is_radial:
            return min(in_plane, self.settings.max_radial_deviation), 0.0
        return 0.0, min(in_plane, self.settings.max_ulnar_deviation)
