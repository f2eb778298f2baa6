"""
Finger Angle Calculator Service

Per-frame MCP/PIP/DIP flexion for the four long fingers.
"""

from ..domain.angles import FINGER_JOINTS, Finger, FingerJoint, JointAngles
from ..domain.landmarks import HandFrame
from .angle_calculator import AngleCalculator


class FingerAngleCalculator:
    """
    Calculates finger joint flexion from the 21 hand landmarks.

    Convention: 0 degrees = straight joint, larger = more flexion. Total
    active motion (TAM) is the sum of the three rounded joint angles.

    Usage:
        calculator = FingerAngleCalculator()
        index = calculator.calculate_finger(hand, Finger.INDEX)
        print(index.total_active_rom)
    """

    @staticmethod
    def calculate_finger(hand: HandFrame, finger: Finger) -> JointAngles:
        """
        Calculate joint flexion for one finger.

        Args:
            hand: Hand landmarks for one frame
            finger: Which finger to measure

        Returns:
            JointAngles rounded to 2 decimals; all zeros if the hand is
            missing or incomplete
        """
        if not hand.is_complete:
            return JointAngles()

        joints = FINGER_JOINTS[finger]
        angles = {}
        for joint, (p1, p2, p3) in joints.items():
            flexion = AngleCalculator.flexion_angle(
                hand.landmarks[p1],
                hand.landmarks[p2],
                hand.landmarks[p3],
            )
            angles[joint] = round(flexion, 2)

        return JointAngles.from_joints(
            mcp=angles[FingerJoint.MCP],
            pip=angles[FingerJoint.PIP],
            dip=angles[FingerJoint.DIP],
        )

    @classmethod
    def calculate_all_fingers(cls, hand: HandFrame) -> dict[Finger, JointAngles]:
        """Calculate joint flexion for index, middle, ring and pinky."""
        return {finger: cls.calculate_finger(hand, finger) for finger in Finger}
