"""
Session Aggregator Service

High-level service that feeds tracking frames through the calculators
and the temporal validator, and folds the accepted samples into the
session's range-of-motion report.

This is the main entry point for scoring a recording.
"""

import logging
from typing import Iterable, Optional

from ..config import EngineSettings
from ..domain.angles import Finger, FingerJoint, FrameResult, JointAngles, WristAngles
from ..domain.landmarks import HandType, TrackingFrame
from ..domain.report import SessionROMReport, WristROM
from ..domain.session import Session
from .finger_calculator import FingerAngleCalculator
from .kapandji_calculator import KapandjiCalculator
from .temporal_validator import TemporalValidator
from .wrist_calculator import ElbowWristCalculator

logger = logging.getLogger(__name__)


WRIST_CHANNEL = "wrist"
DEVIATION_CHANNEL = "wrist.deviation"


def joint_channel(finger: Finger, joint: FingerJoint) -> str:
    """Temporal channel name for a finger joint, e.g. "index.pip"."""
    return f"{finger.value}.{joint.value}"


def tam_channel(finger: Finger) -> str:
    """Temporal channel name for a finger's per-frame TAM, e.g. "index.tam"."""
    return f"{finger.value}.tam"


def _positive_part(value: float) -> Optional[float]:
    return value if value > 0 else None


def _negative_part(value: float) -> Optional[float]:
    return -value if value < 0 else None


class SessionAggregator:
    """
    Scores one recording frame by frame.

    The aggregator owns a Session; frames must be fed in timestamp
    order. A report can be requested at any time and reflects only the
    frames processed so far.

    Usage:
        aggregator = SessionAggregator()

        # Live recording
        aggregator.reset()
        for frame in tracker_frames:
            aggregator.process_frame(frame)
        report = aggregator.report()

        # Or re-score a stored frame log
        report = aggregator.rescore(stored_frames)
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        session: Optional[Session] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            settings: Engine settings (defaults if omitted)
            session: Session to drive; a new one is created if omitted
        """
        self.settings = settings or EngineSettings()
        self.session = session or Session(
            window_size=self.settings.temporal.window_size,
            lock_confirmation_frames=self.settings.laterality.lock_confirmation_frames,
        )
        self.finger_calculator = FingerAngleCalculator()
        self.wrist_calculator = ElbowWristCalculator(self.settings)
        self.kapandji_calculator = KapandjiCalculator(self.settings.kapandji)
        self.validator = TemporalValidator(self.settings.temporal)
        self._reset_counters()

    def _reset_counters(self) -> None:
        self._frames_processed = 0
        self._frames_with_hand = 0
        self._frames_with_elbow = 0
        self._frames_skipped = 0
        self._rejected_samples = 0
        self._kapandji_best = 0
        self._kapandji_targets: tuple[str, ...] = ()
        self._wrist_confidence = 0.0
        self._tracker_handedness = HandType.UNKNOWN

    # -------------------------------------------------------------------------
    # Session Lifecycle
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Start a new recording; discards all temporal and laterality state."""
        self.session.reset()
        self._reset_counters()
        logger.info(f"Session reset (id={self.session.id})")

    def force_laterality(self, hand_type: HandType) -> None:
        """Lock the session onto a hand already known for this recording."""
        if hand_type is HandType.UNKNOWN:
            raise ValueError("Cannot lock laterality to UNKNOWN")
        mirrored = self.settings.laterality.mirrored_input
        self.session.force_laterality(hand_type.mirrored if mirrored else hand_type)
        logger.info(f"Laterality forced to {hand_type.value}")

    # -------------------------------------------------------------------------
    # Frame Processing
    # -------------------------------------------------------------------------

    def process_frame(self, frame: TrackingFrame) -> FrameResult:
        """
        Score one frame and update the session.

        Missing landmarks and rejected samples are skipped silently.

        Raises:
            FrameOrderError: If the frame is older than the previous one
        """
        self.session.advance(frame.timestamp_ms)
        self._frames_processed += 1
        if frame.handedness is not HandType.UNKNOWN:
            self._tracker_handedness = frame.handedness

        if frame.tracking_quality < self.settings.min_tracking_quality:
            self._frames_skipped += 1
            return FrameResult(
                frame_number=frame.frame_number,
                timestamp_ms=frame.timestamp_ms,
                fingers={},
                wrist=WristAngles(),
            )

        accepted: dict[str, bool] = {}
        fingers: dict[Finger, JointAngles] = {}
        kapandji = None

        if frame.hand.is_complete:
            self._frames_with_hand += 1
            fingers = self.finger_calculator.calculate_all_fingers(frame.hand)
            for finger, sample in fingers.items():
                verdicts = []
                for joint in FingerJoint:
                    channel = joint_channel(finger, joint)
                    verdict = self.validator.validate(self.session, channel, sample.get(joint))
                    accepted[channel] = verdict.accepted
                    verdicts.append(verdict)
                    if not verdict.accepted:
                        self._rejected_samples += 1

                # TAM is only meaningful when the whole finger was accepted
                if all(v.accepted for v in verdicts):
                    quality = min(v.quality for v in verdicts)
                    self.validator.record(self.session, tam_channel(finger), sample.total_active_rom, quality)

            if self.settings.kapandji.enabled:
                kapandji = self.kapandji_calculator.calculate(frame.hand)
                if kapandji.score > self._kapandji_best:
                    self._kapandji_best = kapandji.score
                    self._kapandji_targets = kapandji.reached_targets

        wrist = self.wrist_calculator.calculate(self.session, frame.hand, frame.pose)
        if wrist.elbow_detected:
            self._frames_with_elbow += 1
            verdict = self.validator.validate(self.session, WRIST_CHANNEL, wrist.signed_angle)
            accepted[WRIST_CHANNEL] = verdict.accepted
            if verdict.accepted:
                self._wrist_confidence = max(self._wrist_confidence, wrist.confidence)
            else:
                self._rejected_samples += 1

            verdict = self.validator.validate(self.session, DEVIATION_CHANNEL, wrist.signed_deviation)
            accepted[DEVIATION_CHANNEL] = verdict.accepted
            if not verdict.accepted:
                self._rejected_samples += 1

        return FrameResult(
            frame_number=frame.frame_number,
            timestamp_ms=frame.timestamp_ms,
            fingers=fingers,
            wrist=wrist,
            kapandji=kapandji,
            accepted=accepted,
        )

    def calculate_frame_stateless(
        self,
        frame: TrackingFrame,
        hand_type: HandType = HandType.UNKNOWN,
    ) -> FrameResult:
        """
        Measure a single frame without reading or changing session state.

        Used for replay scrubbing, where frames are visited out of order:
        no smoothing, no laterality decision; the wrist is measured
        against the given hand (or not at all when it is UNKNOWN).
        """
        fingers = {}
        kapandji = None
        if frame.hand.is_complete:
            fingers = self.finger_calculator.calculate_all_fingers(frame.hand)
            if self.settings.kapandji.enabled:
                kapandji = self.kapandji_calculator.calculate(frame.hand)

        return FrameResult(
            frame_number=frame.frame_number,
            timestamp_ms=frame.timestamp_ms,
            fingers=fingers,
            wrist=self.wrist_calculator.calculate_for_side(frame.hand, frame.pose, hand_type),
            kapandji=kapandji,
        )

    def rescore(
        self,
        frames: Iterable[TrackingFrame],
        hand_type: HandType = HandType.UNKNOWN,
    ) -> SessionROMReport:
        """
        Re-score a stored frame log deterministically.

        Resets the session, optionally locks the known hand, then replays
        the frames in their stored order.

        Args:
            frames: Frames in recording order
            hand_type: Hand recorded for this log, if known

        Returns:
            The final SessionROMReport
        """
        self.reset()
        if hand_type is not HandType.UNKNOWN:
            self.force_laterality(hand_type)

        for frame in frames:
            self.process_frame(frame)

        report = self.report()
        logger.info(
            f"Re-scored {report.frames_processed} frames: "
            f"hand={report.frames_with_hand}, elbow={report.frames_with_elbow}, "
            f"rejected={report.rejected_samples}"
        )
        return report

    # -------------------------------------------------------------------------
    # Report
    # -------------------------------------------------------------------------

    def report(self) -> SessionROMReport:
        """
        Build the (possibly partial) session report.

        Joints that never received a valid sample report 0 with quality 0.
        A finger's TAM is the smoothed maximum of its per-frame TAM, so it
        never exceeds what a single frame showed.
        """
        quality: dict[str, float] = {}
        fingers: dict[Finger, JointAngles] = {}

        for finger in Finger:
            maxima = {}
            for joint in FingerJoint:
                channel = joint_channel(finger, joint)
                summary = self.validator.summarize(self.session, channel)
                maxima[joint] = summary.maximum
                quality[channel] = summary.quality
            tam = self.validator.summarize(self.session, tam_channel(finger))
            quality[tam_channel(finger)] = tam.quality
            fingers[finger] = JointAngles(
                mcp_angle=maxima[FingerJoint.MCP],
                pip_angle=maxima[FingerJoint.PIP],
                dip_angle=maxima[FingerJoint.DIP],
                total_active_rom=tam.maximum,
            )

        wrist_summary = self.validator.summarize(self.session, WRIST_CHANNEL)
        flexion = self.validator.summarize(self.session, WRIST_CHANNEL, _positive_part)
        extension = self.validator.summarize(self.session, WRIST_CHANNEL, _negative_part)
        radial = self.validator.summarize(self.session, DEVIATION_CHANNEL, _positive_part)
        ulnar = self.validator.summarize(self.session, DEVIATION_CHANNEL, _negative_part)
        quality[WRIST_CHANNEL] = wrist_summary.quality
        quality["wrist.flexion"] = flexion.quality
        quality["wrist.extension"] = extension.quality
        quality["wrist.radial"] = radial.quality
        quality["wrist.ulnar"] = ulnar.quality

        selection = self.session.laterality.selection
        if selection is not None:
            hand_type = self.wrist_calculator.resolver.hand_type(selection)
        else:
            hand_type = self._tracker_handedness

        return SessionROMReport(
            session_id=self.session.id,
            fingers=fingers,
            wrist=WristROM(
                max_flexion=flexion.maximum,
                max_extension=extension.maximum,
                hand_type=hand_type,
                confidence=round(self._wrist_confidence, 3),
                max_radial_deviation=radial.maximum,
                max_ulnar_deviation=ulnar.maximum,
            ),
            quality=quality,
            frames_processed=self._frames_processed,
            frames_with_hand=self._frames_with_hand,
            frames_with_elbow=self._frames_with_elbow,
            frames_skipped=self._frames_skipped,
            rejected_samples=self._rejected_samples,
            kapandji_score=self._kapandji_best,
            kapandji_targets=self._kapandji_targets,
        )
