"""
Temporal Validator Service

Keeps tracking jitter out of the reported maximum range of motion.

Each angle channel (e.g. "index.pip", "wrist") has a history in the
Session. A new sample is accepted only if it is plausible against the
recently accepted ones; rejected samples are dropped silently and never
reach the maxima.
"""

import heapq
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from ..config import TemporalSettings
from ..domain.session import JointHistory, Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleVerdict:
    """
    Outcome of validating one sample.

    Attributes:
        accepted: Whether the sample entered the history
        quality: Window consistency (1.0 = identical to recent samples)
        reason: Why the sample was rejected ("step" or "window")
    """
    accepted: bool
    quality: float
    reason: Optional[str] = None
    max_deviation: float = 0.0
    mean_deviation: float = 0.0


@dataclass(frozen=True)
class ChannelSummary:
    """
    Session-level view of one channel.

    Attributes:
        maximum: Smoothed maximum (mean of the top samples), or the raw
            maximum when data is insufficient
        raw_maximum: Largest single accepted sample
        quality: Temporal quality (0.0 to 1.0)
        valid_samples: Accepted samples in the channel
        rejected_samples: Rejected samples in the channel
        sufficient: Whether enough samples were accepted for full quality
    """
    maximum: float = 0.0
    raw_maximum: float = 0.0
    quality: float = 0.0
    valid_samples: int = 0
    rejected_samples: int = 0
    sufficient: bool = False


class TemporalValidator:
    """
    Accepts, rejects and smooths angle samples over a recording.

    The validator itself is stateless; all history lives in the Session
    passed to each call, so one validator can serve many sessions.

    Usage:
        validator = TemporalValidator()
        verdict = validator.validate(session, "index.pip", 42.0)
        summary = validator.summarize(session, "index.pip")
    """

    def __init__(self, settings: Optional[TemporalSettings] = None):
        self.settings = settings or TemporalSettings()

    # -------------------------------------------------------------------------
    # Per-sample validation
    # -------------------------------------------------------------------------

    def validate(self, session: Session, channel: str, value: float) -> SampleVerdict:
        """
        Validate a new sample and record it if accepted.

        Args:
            session: Session owning the channel history
            channel: Angle channel name
            value: New angle sample (degrees)

        Returns:
            SampleVerdict describing the decision
        """
        history = session.history(channel)
        resync_after = self.settings.resync_after_rejections
        if resync_after and history.consecutive_rejections >= resync_after:
            logger.info(
                f"Channel {channel} rejected {history.consecutive_rejections} samples in a row; "
                f"re-baselining at {value:.1f}°"
            )
            history.resync()

        last = history.last_accepted
        if last is not None and abs(value - last) > self.settings.max_change_per_frame:
            history.reject()
            logger.debug(f"Rejected {channel}={value:.1f}° (step from {last:.1f}°)")
            return SampleVerdict(accepted=False, quality=0.0, reason="step",
                                 max_deviation=abs(value - last),
                                 mean_deviation=abs(value - last))

        verdict = self.check_window(history, value)
        if not verdict.accepted:
            history.reject()
            logger.debug(
                f"Rejected {channel}={value:.1f}° (window deviation {verdict.max_deviation:.1f}°)"
            )
            return verdict

        history.push(value, verdict.quality)
        return verdict

    def record(self, session: Session, channel: str, value: float, quality: float) -> None:
        """
        Store a sample derived from already validated samples.

        No plausibility checks are applied; used for per-frame finger TAM,
        which is only recorded when all three joint samples were accepted.
        """
        session.history(channel).push(value, quality)

    def check_window(self, history: JointHistory, value: float) -> SampleVerdict:
        """
        Compare a sample against the last few accepted samples.

        Valid only if the largest deviation stays within the threshold;
        quality falls linearly with the mean deviation.
        """
        recent = list(history.window)[-self.settings.consistency_window:]
        if not recent:
            return SampleVerdict(accepted=True, quality=1.0)

        deviations = np.abs(np.asarray(recent, dtype=float) - value)
        max_deviation = float(deviations.max())
        mean_deviation = float(deviations.mean())
        threshold = self.settings.consistency_threshold
        quality = max(0.0, 1.0 - mean_deviation / threshold)

        if max_deviation > threshold:
            return SampleVerdict(accepted=False, quality=quality, reason="window",
                                 max_deviation=max_deviation, mean_deviation=mean_deviation)
        return SampleVerdict(accepted=True, quality=quality,
                             max_deviation=max_deviation, mean_deviation=mean_deviation)

    # -------------------------------------------------------------------------
    # Session-level summaries
    # -------------------------------------------------------------------------

    def smoothed_maximum(self, values: list[float]) -> float:
        """Mean of the top-k values, damping single-frame spikes."""
        if not values:
            return 0.0
        top = heapq.nlargest(self.settings.top_k_for_maximum, values)
        return float(np.mean(top))

    def summarize(
        self,
        session: Session,
        channel: str,
        select: Optional[Callable[[float], Optional[float]]] = None,
    ) -> ChannelSummary:
        """
        Summarize a channel for the session report.

        Args:
            session: Session owning the channel history
            channel: Angle channel name
            select: Optional mapping applied to each accepted sample;
                returning None drops the sample from the maximum, the
                sample count and the quality (used to split a signed wrist
                channel into its two directions)

        Returns:
            ChannelSummary; a channel without accepted samples reports 0
            with quality 0, never an exception
        """
        if not session.has_history(channel):
            return ChannelSummary()

        history = session.history(channel)
        samples = list(zip(history.accepted, history.qualities))
        if select is not None:
            samples = [(v, q) for v, q in ((select(s), q) for s, q in samples) if v is not None]

        count = len(samples)
        if count == 0:
            return ChannelSummary(rejected_samples=history.rejected_count)

        values = [v for v, _ in samples]
        raw_maximum = max(values)

        if count < self.settings.min_valid_frames:
            return ChannelSummary(
                maximum=round(raw_maximum, 2),
                raw_maximum=round(raw_maximum, 2),
                quality=self.settings.insufficient_data_quality,
                valid_samples=count,
                rejected_samples=history.rejected_count,
                sufficient=False,
            )

        return ChannelSummary(
            maximum=round(self.smoothed_maximum(values), 2),
            raw_maximum=round(raw_maximum, 2),
            quality=round(float(np.mean([q for _, q in samples])), 3),
            valid_samples=count,
            rejected_samples=history.rejected_count,
            sufficient=True,
        )
