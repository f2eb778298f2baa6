"""
Session Domain Models

Mutable state owned by a single recording: the laterality lock and the
per-joint temporal histories. A Session is created when recording
starts and must be reset before the next recording; nothing in it is
ever persisted.
"""

import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Optional

from .landmarks import BodyPart, HandType
from ..errors import FrameOrderError


class LateralityState(str, Enum):
    """Laterality lock lifecycle: UNLOCKED -> CANDIDATE -> LOCKED."""
    UNLOCKED = "unlocked"
    CANDIDATE = "candidate"
    LOCKED = "locked"


@dataclass(frozen=True)
class ArmSelection:
    """
    The pose arm used as the forearm reference.

    Attributes:
        side: Pose side whose landmarks are used
        elbow_index: Pose index of that side's elbow
        wrist_index: Pose index of that side's wrist
        shoulder_index: Pose index of that side's shoulder
    """
    side: HandType
    elbow_index: BodyPart
    wrist_index: BodyPart
    shoulder_index: BodyPart

    @classmethod
    def for_side(cls, side: HandType) -> "ArmSelection":
        if side is HandType.LEFT:
            return cls(side, BodyPart.LEFT_ELBOW, BodyPart.LEFT_WRIST, BodyPart.LEFT_SHOULDER)
        if side is HandType.RIGHT:
            return cls(side, BodyPart.RIGHT_ELBOW, BodyPart.RIGHT_WRIST, BodyPart.RIGHT_SHOULDER)
        raise ValueError(f"No pose arm for side {side}")


class LateralityLock:
    """
    State machine holding the session's arm choice.

    Transition rules:
    - UNLOCKED + decision(side)        -> CANDIDATE(side, votes=1)
    - CANDIDATE(side) + decision(side) -> votes+1
    - CANDIDATE(side) + decision(other)-> CANDIDATE(other, votes=1)
    - CANDIDATE with votes >= confirmation_frames -> LOCKED
    - LOCKED + anything                -> LOCKED
    - force(side)                      -> LOCKED(side)
    - reset()                          -> UNLOCKED
    """

    def __init__(self, confirmation_frames: int = 1):
        if confirmation_frames < 1:
            raise ValueError("confirmation_frames must be >= 1")
        self.confirmation_frames = confirmation_frames
        self._state = LateralityState.UNLOCKED
        self._selection: Optional[ArmSelection] = None
        self._votes = 0

    @property
    def state(self) -> LateralityState:
        return self._state

    @property
    def selection(self) -> Optional[ArmSelection]:
        """Current arm (candidate or locked), None while unlocked."""
        return self._selection

    @property
    def is_locked(self) -> bool:
        return self._state is LateralityState.LOCKED

    def observe(self, side: HandType) -> ArmSelection:
        """
        Feed one per-frame laterality decision.

        Once locked, the decision is ignored and the locked arm returned.
        """
        if self._state is LateralityState.LOCKED and self._selection is not None:
            return self._selection

        if self._selection is not None and self._selection.side is side:
            self._votes += 1
        else:
            self._selection = ArmSelection.for_side(side)
            self._votes = 1
            self._state = LateralityState.CANDIDATE

        if self._votes >= self.confirmation_frames:
            self._state = LateralityState.LOCKED
        return self._selection

    def force(self, side: HandType) -> ArmSelection:
        """Lock onto a known side without running the decision policy."""
        self._selection = ArmSelection.for_side(side)
        self._votes = self.confirmation_frames
        self._state = LateralityState.LOCKED
        return self._selection

    def reset(self) -> None:
        self._state = LateralityState.UNLOCKED
        self._selection = None
        self._votes = 0


@dataclass
class JointHistory:
    """
    Temporal state for one angle channel.

    Attributes:
        window: Most recent accepted samples (bounded)
        accepted: Every accepted sample of the session
        qualities: Window-consistency quality of each accepted sample
        consecutive_rejections: Rejections since the last accepted sample
        rejected_count: Total rejected samples
    """
    window: Deque[float]
    accepted: list[float] = field(default_factory=list)
    qualities: list[float] = field(default_factory=list)
    consecutive_rejections: int = 0
    rejected_count: int = 0

    @classmethod
    def with_window(cls, size: int) -> "JointHistory":
        return cls(window=deque(maxlen=size))

    @property
    def last_accepted(self) -> Optional[float]:
        return self.window[-1] if self.window else None

    def push(self, value: float, quality: float) -> None:
        self.window.append(value)
        self.accepted.append(value)
        self.qualities.append(quality)
        self.consecutive_rejections = 0

    def reject(self) -> None:
        self.consecutive_rejections += 1
        self.rejected_count += 1

    def resync(self) -> None:
        """Drop the window so the next sample becomes a new baseline."""
        self.window.clear()
        self.consecutive_rejections = 0


class Session:
    """
    One recording's engine state.

    Pass the same Session to every calculator call of a recording and
    call reset() before reusing it for the next one; histories and the
    laterality lock otherwise leak between recordings.

    Usage:
        session = Session(window_size=5)
        ...
        session.reset()  # new recording
    """

    def __init__(self, window_size: int = 5, lock_confirmation_frames: int = 1):
        self.window_size = window_size
        self.laterality = LateralityLock(lock_confirmation_frames)
        self.id = str(uuid.uuid4())
        self._histories: dict[str, JointHistory] = {}
        self._last_timestamp_ms: Optional[int] = None

    def reset(self) -> None:
        """Start a new recording: new id, unlocked laterality, empty histories."""
        self.id = str(uuid.uuid4())
        self.laterality.reset()
        self._histories.clear()
        self._last_timestamp_ms = None

    # -------------------------------------------------------------------------
    # Temporal histories
    # -------------------------------------------------------------------------

    def history(self, channel: str) -> JointHistory:
        """Get (creating if needed) the history for an angle channel."""
        history = self._histories.get(channel)
        if history is None:
            history = JointHistory.with_window(self.window_size)
            self._histories[channel] = history
        return history

    def has_history(self, channel: str) -> bool:
        return channel in self._histories

    @property
    def channels(self) -> list[str]:
        return list(self._histories)

    # -------------------------------------------------------------------------
    # Frame ordering
    # -------------------------------------------------------------------------

    @property
    def last_timestamp_ms(self) -> Optional[int]:
        return self._last_timestamp_ms

    def advance(self, timestamp_ms: int) -> None:
        """
        Record the timestamp of the next frame.

        Raises:
            FrameOrderError: If the frame is older than the previous one
        """
        if self._last_timestamp_ms is not None and timestamp_ms < self._last_timestamp_ms:
            raise FrameOrderError(timestamp_ms, self._last_timestamp_ms)
        self._last_timestamp_ms = timestamp_ms

    # -------------------------------------------------------------------------
    # Laterality
    # -------------------------------------------------------------------------

    def force_laterality(self, side: HandType) -> ArmSelection:
        """Lock the session onto a side already known (e.g. from a recording)."""
        return self.laterality.force(side)

    def elbow_selection(self) -> dict:
        """Arm indices and lock flag, for storing alongside frame data."""
        selection = self.laterality.selection
        return {
            "elbow_index": int(selection.elbow_index) if selection else None,
            "wrist_index": int(selection.wrist_index) if selection else None,
            "shoulder_index": int(selection.shoulder_index) if selection else None,
            "is_locked": self.laterality.is_locked,
        }
