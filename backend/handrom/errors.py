"""
Engine Errors

Missing or partial landmark data is never an error: calculators return
documented zero results instead. These exceptions are reserved for
contract violations by the caller.
"""


class HandROMError(Exception):
    """Base class for all engine errors."""


class FrameOrderError(HandROMError, ValueError):
    """A frame arrived with a timestamp earlier than the previous frame."""

    def __init__(self, timestamp_ms: int, last_timestamp_ms: int):
        self.timestamp_ms = timestamp_ms
        self.last_timestamp_ms = last_timestamp_ms
        super().__init__(
            f"Frame at {timestamp_ms} ms delivered after frame at "
            f"{last_timestamp_ms} ms; reset the session before replaying"
        )


class ConfigurationError(HandROMError):
    """Engine settings could not be loaded or validated."""
