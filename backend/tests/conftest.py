"""
Pytest Configuration and Fixtures for HandROM Tests

Synthetic landmark builders. Hands are laid out in image coordinates
with the fingers pointing up (-y) and the thumb on the +x side.
"""
import sys
import os
import math
import pytest

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from handrom.domain import (  # noqa: E402
    BodyPart,
    HandFrame,
    HandPoint,
    HandType,
    Landmark,
    PoseFrame,
    TrackingFrame,
)

# Finger direction (x per unit -y) from the wrist
FINGER_SPREAD = {
    HandPoint.INDEX_MCP: 0.3,
    HandPoint.MIDDLE_MCP: 0.0,
    HandPoint.RING_MCP: -0.3,
    HandPoint.PINKY_MCP: -0.6,
}

THUMB = [(0.4, -0.2), (0.9, -0.3), (1.4, -0.4), (1.9, -0.5)]


def _rotate(dx, dy, degrees):
    a = math.radians(degrees)
    return (dx * math.cos(a) - dy * math.sin(a), dx * math.sin(a) + dy * math.cos(a))


def make_hand(pip_bend=0.0, dip_bend=0.0, scale=0.1, origin=(0.5, 0.7, 0.0)):
    """
    Build a complete 21-point hand.

    MCP joints are straight; every finger's PIP is bent by pip_bend and
    its DIP by dip_bend degrees (in the image plane).
    """
    ox, oy, oz = origin
    points = [None] * 21
    points[HandPoint.WRIST] = Landmark(ox, oy, oz)

    for i, (tx, ty) in enumerate(THUMB):
        points[HandPoint.THUMB_CMC + i] = Landmark(ox + tx * scale, oy + ty * scale, oz)

    for mcp, spread in FINGER_SPREAD.items():
        dx, dy = spread * scale, -scale
        x, y = ox + dx, oy + dy
        points[mcp] = Landmark(x, y, oz)
        x, y = x + dx, y + dy
        points[mcp + 1] = Landmark(x, y, oz)
        dx, dy = _rotate(dx, dy, pip_bend)
        x, y = x + dx, y + dy
        points[mcp + 2] = Landmark(x, y, oz)
        dx, dy = _rotate(dx, dy, dip_bend)
        x, y = x + dx, y + dy
        points[mcp + 3] = Landmark(x, y, oz)

    return HandFrame(tuple(points))


def replace_landmark(hand, point, landmark):
    points = list(hand.landmarks)
    points[point] = landmark
    return HandFrame(tuple(points))


def bend_wrist(hand, degrees, length=0.1):
    """
    Move the middle MCP so the hand points along +x, rotated by degrees
    into depth (+z).
    """
    wrist = hand.landmarks[HandPoint.WRIST]
    a = math.radians(degrees)
    return replace_landmark(
        hand,
        HandPoint.MIDDLE_MCP,
        Landmark(wrist.x + length * math.cos(a), wrist.y, wrist.z + length * math.sin(a)),
    )


def make_pose(
    left_elbow=(0.8, 0.5, 0.0),
    left_wrist=(0.95, 0.9, 0.0),
    right_elbow=(0.2, 0.5, 0.0),
    right_wrist=(0.5, 0.5, 0.0),
    elbow_visibility=(0.9, 0.9),
    wrist_visibility=(0.9, 0.9),
    shoulder_visibility=(0.8, 0.8),
):
    """
    Build a 33-point pose. Visibility pairs are (left, right).

    By default the right arm lies along +x ending at (0.5, 0.5) and the
    left pose wrist is far from it.
    """
    points = [Landmark(0.5, 0.5, 0.0, visibility=0.9) for _ in range(33)]
    points[BodyPart.LEFT_SHOULDER] = Landmark(0.8, 0.2, 0.0, visibility=shoulder_visibility[0])
    points[BodyPart.RIGHT_SHOULDER] = Landmark(0.2, 0.2, 0.0, visibility=shoulder_visibility[1])
    points[BodyPart.LEFT_ELBOW] = Landmark(*left_elbow, visibility=elbow_visibility[0])
    points[BodyPart.RIGHT_ELBOW] = Landmark(*right_elbow, visibility=elbow_visibility[1])
    points[BodyPart.LEFT_WRIST] = Landmark(*left_wrist, visibility=wrist_visibility[0])
    points[BodyPart.RIGHT_WRIST] = Landmark(*right_wrist, visibility=wrist_visibility[1])
    return PoseFrame(tuple(points))


def make_frame(hand=None, pose=None, index=0, handedness=HandType.UNKNOWN, tracking_quality=1.0):
    return TrackingFrame(
        hand=hand if hand is not None else HandFrame(),
        pose=pose if pose is not None else PoseFrame(),
        handedness=handedness,
        tracking_quality=tracking_quality,
        timestamp_ms=index * 33,
        frame_number=index,
    )


def landmarks_to_json(landmarks):
    return [
        {"x": lm.x, "y": lm.y, "z": lm.z, "visibility": lm.visibility}
        for lm in landmarks
    ]


@pytest.fixture
def straight_hand():
    """Fully extended hand with the wrist at (0.5, 0.7)."""
    return make_hand()


@pytest.fixture
def right_arm_pose():
    """Pose whose right arm reaches the hand wrist at (0.5, 0.5)."""
    return make_pose()


@pytest.fixture
def arm_hand():
    """Straight hand whose wrist sits on the right pose wrist."""
    return make_hand(origin=(0.5, 0.5, 0.0))


@pytest.fixture
def pip_ramp_frames():
    """
    PIP flexion ramping 0 -> 60 -> 0 in 5 degree steps; the peak is a
    single frame with 55 degree neighbours.
    """
    bends = list(range(0, 61, 5)) + list(range(55, -1, -5))
    return [make_frame(hand=make_hand(pip_bend=b), index=i) for i, b in enumerate(bends)]


@pytest.fixture
def wrist_ramp_frames():
    """
    Right-arm wrist sweeping into 60 degrees of flexion, back through
    neutral and into 55 degrees of extension, in 5 degree steps.
    """
    pose = make_pose()
    base = make_hand(origin=(0.5, 0.5, 0.0))
    # Negative depth rotation flexes a right wrist
    sweep = list(range(0, -61, -5)) + list(range(-55, 56, 5))
    return [
        make_frame(hand=bend_wrist(base, a), pose=pose, index=i, handedness=HandType.RIGHT)
        for i, a in enumerate(sweep)
    ]


def deviate_wrist(hand, degrees, length=0.1):
    """
    Move the middle MCP so the hand points along +x, rotated by degrees
    within the image plane (+y).
    """
    wrist = hand.landmarks[HandPoint.WRIST]
    a = math.radians(degrees)
    return replace_landmark(
        hand,
        HandPoint.MIDDLE_MCP,
        Landmark(wrist.x + length * math.cos(a), wrist.y + length * math.sin(a), wrist.z),
    )
