"""
Angle Calculator Service

Vector primitives shared by the finger, wrist and Kapandji calculators.
All angles are calculated in degrees (0-180).

This is pure mathematics - no external dependencies except numpy.
Every function is scale- and translation-invariant in its inputs and
never returns NaN: degenerate (zero-length) vectors yield None.
"""

import math
from typing import Iterable, Optional

import numpy as np

from ..domain.landmarks import Landmark


# Below this length a vector is treated as degenerate (coincident landmarks).
EPSILON = 1e-9


class AngleCalculator:
    """
    Geometry on 3D landmarks.

    All methods are static - no state needed.
    """

    # -------------------------------------------------------------------------
    # Vector Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def vector(start: Landmark, end: Landmark) -> np.ndarray:
        """Vector pointing from start to end."""
        return np.array([end.x - start.x, end.y - start.y, end.z - start.z], dtype=float)

    @staticmethod
    def normalize(v: np.ndarray) -> Optional[np.ndarray]:
        """Unit vector, or None for a zero-length vector."""
        norm = float(np.linalg.norm(v))
        if norm < EPSILON or not math.isfinite(norm):
            return None
        return v / norm

    @staticmethod
    def angle_between_vectors(v1: np.ndarray, v2: np.ndarray) -> Optional[float]:
        """
        Angle between two vectors.

        Returns:
            Angle in degrees (0-180), or None if either vector is degenerate
        """
        n1 = AngleCalculator.normalize(v1)
        n2 = AngleCalculator.normalize(v2)
        if n1 is None or n2 is None:
            return None

        # Clamp to valid range (handles floating point errors)
        cos_angle = float(np.clip(np.dot(n1, n2), -1.0, 1.0))
        return float(np.degrees(np.arccos(cos_angle)))

    # -------------------------------------------------------------------------
    # Core Angle Calculations
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_angle_3d(
        p1: Landmark,
        p2: Landmark,  # Vertex point
        p3: Landmark
    ) -> Optional[float]:
        """
        Calculate 3D angle at p2 formed by p1-p2-p3.

        Args:
            p1: First point
            p2: Vertex point (where angle is measured)
            p3: Third point

        Returns:
            Angle in degrees (0-180; 180 = colinear), or None if two
            points coincide
        """
        return AngleCalculator.angle_between_vectors(
            AngleCalculator.vector(p2, p1),
            AngleCalculator.vector(p2, p3),
        )

    @staticmethod
    def flexion_angle(p1: Landmark, p2: Landmark, p3: Landmark) -> float:
        """
        Joint flexion at p2.

        Flexion is the complement of the vertex angle, so a straight
        (colinear) joint reads 0 and a right-angle bend reads 90.
        Degenerate geometry reads 0.

        Example:
            For index PIP flexion: index MCP -> index PIP -> index DIP
            flexion = flexion_angle(mcp, pip, dip)
        """
        vertex_angle = AngleCalculator.calculate_angle_3d(p1, p2, p3)
        if vertex_angle is None:
            return 0.0
        return 180.0 - vertex_angle

    @staticmethod
    def cross_component(v1: np.ndarray, v2: np.ndarray, axis: int) -> float:
        """One component of the cross product v1 x v2."""
        return float(np.cross(v1, v2)[axis])

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_distance(p1: Optional[Landmark], p2: Optional[Landmark]) -> Optional[float]:
        """Calculate 3D distance between two landmarks."""
        if p1 is None or p2 is None:
            return None
        return p1.distance_to(p2)

    @staticmethod
    def calculate_centroid(points: Iterable[Landmark]) -> Landmark:
        """Mean position of a group of landmarks."""
        coords = np.array([p.as_tuple() for p in points], dtype=float)
        x, y, z = coords.mean(axis=0)
        return Landmark(float(x), float(y), float(z))
