"""
Report Output Schemas

Pydantic models for the session report and per-frame results handed to
persistence and the UI. Serialized with camelCase keys.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ..domain.angles import FrameResult, JointAngles, WristAngles
from ..domain.report import SessionROMReport
from .frames import HandTypeEnum


class JointAnglesSchema(BaseModel):
    """
    Finger flexion (degrees, 0 = straight).

    In a frame result totalActiveRom is the sum of the three joint angles;
    in a session report it is the largest per-frame TAM.
    """
    mcp_angle: float = Field(0.0, description="Metacarpophalangeal flexion")
    pip_angle: float = Field(0.0, description="Proximal interphalangeal flexion")
    dip_angle: float = Field(0.0, description="Distal interphalangeal flexion")
    total_active_rom: float = Field(0.0, description="Total active motion (degrees)")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "mcpAngle": 85.2,
                "pipAngle": 98.61,
                "dipAngle": 62.0,
                "totalActiveRom": 245.81
            }
        }


class WristAnglesSchema(BaseModel):
    """Per-frame wrist measurement."""
    forearm_to_hand_angle: float = 0.0
    wrist_flexion_angle: float = 0.0
    wrist_extension_angle: float = 0.0
    elbow_detected: bool = False
    hand_type: HandTypeEnum = HandTypeEnum.UNKNOWN
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    radial_deviation_angle: float = 0.0
    ulnar_deviation_angle: float = 0.0

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class WristROMSchema(BaseModel):
    """Session maximum wrist flexion, extension and deviation."""
    max_flexion: float = Field(0.0, description="Smoothed maximum flexion (degrees)")
    max_extension: float = Field(0.0, description="Smoothed maximum extension (degrees)")
    total_arc: float = Field(0.0, description="Flexion + extension (degrees)")
    hand_type: HandTypeEnum = Field(HandTypeEnum.UNKNOWN, description="Locked side")
    confidence: float = Field(0.0, ge=0.0, le=1.0, description="Best accepted-frame confidence")
    max_radial_deviation: float = Field(0.0, description="Smoothed maximum radial deviation (degrees)")
    max_ulnar_deviation: float = Field(0.0, description="Smoothed maximum ulnar deviation (degrees)")
    deviation_arc: float = Field(0.0, description="Radial + ulnar (degrees)")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "maxFlexion": 72.4,
                "maxExtension": 61.0,
                "totalArc": 133.4,
                "handType": "RIGHT",
                "confidence": 0.91,
                "maxRadialDeviation": 18.5,
                "maxUlnarDeviation": 31.2,
                "deviationArc": 49.7
            }
        }


class SessionROMReportSchema(BaseModel):
    """
    Complete session report.

    Finger keys are "index", "middle", "ring" and "pinky"; quality keys
    are angle channels such as "index.pip", "index.tam",
    "wrist.flexion" or "wrist.radial".
    """
    session_id: str = Field(..., description="Session id")
    fingers: Dict[str, JointAnglesSchema] = Field(default_factory=dict)
    wrist: WristROMSchema = Field(default_factory=WristROMSchema)
    quality: Dict[str, float] = Field(default_factory=dict, description="Temporal quality per channel")
    frames_processed: int = Field(0, ge=0)
    frames_with_hand: int = Field(0, ge=0)
    frames_with_elbow: int = Field(0, ge=0)
    frames_skipped: int = Field(0, ge=0)
    rejected_samples: int = Field(0, ge=0)
    kapandji_score: int = Field(0, ge=0, le=10, description="Best thumb opposition score")
    kapandji_targets: List[str] = Field(default_factory=list, description="Targets reached in the best frame")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class FrameResultSchema(BaseModel):
    """Unsmoothed measurement of a single frame."""
    frame_number: int
    timestamp_ms: int
    fingers: Dict[str, JointAnglesSchema] = Field(default_factory=dict)
    wrist: WristAnglesSchema = Field(default_factory=WristAnglesSchema)
    kapandji_score: Optional[int] = None
    kapandji_targets: List[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# =============================================================================
# Conversion helpers
# =============================================================================

def _convert_joint_angles(angles: JointAngles) -> JointAnglesSchema:
    return JointAnglesSchema(
        mcp_angle=angles.mcp_angle,
        pip_angle=angles.pip_angle,
        dip_angle=angles.dip_angle,
        total_active_rom=angles.total_active_rom,
    )


def _convert_wrist_angles(wrist: WristAngles) -> WristAnglesSchema:
    return WristAnglesSchema(
        forearm_to_hand_angle=wrist.forearm_to_hand_angle,
        wrist_flexion_angle=wrist.wrist_flexion_angle,
        wrist_extension_angle=wrist.wrist_extension_angle,
        elbow_detected=wrist.elbow_detected,
        hand_type=HandTypeEnum(wrist.hand_type.value),
        confidence=wrist.confidence,
        radial_deviation_angle=wrist.radial_deviation_angle,
        ulnar_deviation_angle=wrist.ulnar_deviation_angle,
    )


def convert_report(report: SessionROMReport) -> SessionROMReportSchema:
    """Convert a domain SessionROMReport to its wire schema."""
    return SessionROMReportSchema(
        session_id=report.session_id,
        fingers={
            finger.value: _convert_joint_angles(angles)
            for finger, angles in report.fingers.items()
        },
        wrist=WristROMSchema(
            max_flexion=report.wrist.max_flexion,
            max_extension=report.wrist.max_extension,
            total_arc=report.wrist.total_arc,
            hand_type=HandTypeEnum(report.wrist.hand_type.value),
            confidence=report.wrist.confidence,
            max_radial_deviation=report.wrist.max_radial_deviation,
            max_ulnar_deviation=report.wrist.max_ulnar_deviation,
            deviation_arc=report.wrist.deviation_arc,
        ),
        quality=dict(report.quality),
        frames_processed=report.frames_processed,
        frames_with_hand=report.frames_with_hand,
        frames_with_elbow=report.frames_with_elbow,
        frames_skipped=report.frames_skipped,
        rejected_samples=report.rejected_samples,
        kapandji_score=report.kapandji_score,
        kapandji_targets=list(report.kapandji_targets),
    )


def convert_frame_result(result: FrameResult) -> FrameResultSchema:
    """Convert a domain FrameResult to its wire schema."""
    kapandji = result.kapandji
    return FrameResultSchema(
        frame_number=result.frame_number,
        timestamp_ms=result.timestamp_ms,
        fingers={
            finger.value: _convert_joint_angles(angles)
            for finger, angles in result.fingers.items()
        },
        wrist=_convert_wrist_angles(result.wrist),
        kapandji_score=kapandji.score if kapandji is not None else None,
        kapandji_targets=list(kapandji.reached_targets) if kapandji is not None else [],
    )
