"""
Unit Tests for TemporalValidator
"""
import pytest

from handrom.config import TemporalSettings
from handrom.domain import Session
from handrom.services import TemporalValidator


def _feed(validator, session, channel, values):
    return [validator.validate(session, channel, v) for v in values]


class TestSampleValidation:
    """Tests for per-sample accept/reject decisions"""

    def test_first_sample_accepted_with_full_quality(self):
        verdict = TemporalValidator().validate(Session(), "index.pip", 42.0)
        assert verdict.accepted
        assert verdict.quality == 1.0

    def test_jump_beyond_max_change_rejected(self):
        validator, session = TemporalValidator(), Session()
        verdicts = _feed(validator, session, "index.pip", [10.0, 50.0])
        assert verdicts[1].accepted is False
        assert verdicts[1].reason == "step"
        assert session.history("index.pip").accepted == [10.0]

    def test_window_deviation_rejected(self):
        """Each step is plausible but the sample drifts too far from the window"""
        validator, session = TemporalValidator(), Session()
        verdicts = _feed(validator, session, "wrist", [0.0, 25.0, 50.0])
        assert verdicts[1].accepted
        assert verdicts[2].accepted is False
        assert verdicts[2].reason == "window"

    def test_quality_falls_with_mean_deviation(self):
        validator, session = TemporalValidator(), Session()
        verdicts = _feed(validator, session, "index.mcp", [10.0, 20.0])
        assert verdicts[1].quality == pytest.approx(1.0 - 10.0 / 30.0)

    def test_window_only_compares_recent_samples(self):
        settings = TemporalSettings(consistency_window=1)
        validator, session = TemporalValidator(settings), Session()
        verdicts = _feed(validator, session, "ring.pip", [0.0, 25.0, 50.0])
        assert all(v.accepted for v in verdicts)

    def test_resync_after_consecutive_rejections(self):
        """A channel stuck rejecting re-baselines on the new level"""
        validator, session = TemporalValidator(), Session()
        validator.validate(session, "pinky.pip", 10.0)
        rejected = _feed(validator, session, "pinky.pip", [90.0] * 15)
        assert not any(v.accepted for v in rejected)

        verdict = validator.validate(session, "pinky.pip", 90.0)
        assert verdict.accepted
        assert session.history("pinky.pip").last_accepted == 90.0

    def test_resync_disabled(self):
        validator = TemporalValidator(TemporalSettings(resync_after_rejections=0))
        session = Session()
        validator.validate(session, "pinky.pip", 10.0)
        verdicts = _feed(validator, session, "pinky.pip", [90.0] * 40)
        assert not any(v.accepted for v in verdicts)

    def test_channels_are_independent(self):
        validator, session = TemporalValidator(), Session()
        validator.validate(session, "index.pip", 10.0)
        assert validator.validate(session, "middle.pip", 80.0).accepted


class TestChannelSummary:
    """Tests for session-level smoothing"""

    def test_smoothed_maximum_is_mean_of_top_three(self):
        validator, session = TemporalValidator(), Session()
        _feed(validator, session, "index.pip", [float(v) for v in range(0, 56, 5)])

        summary = validator.summarize(session, "index.pip")
        assert summary.sufficient
        assert summary.maximum == pytest.approx(50.0)
        assert summary.raw_maximum == pytest.approx(55.0)
        assert 0.0 < summary.quality <= 1.0

    def test_rejected_spike_excluded_from_maximum(self):
        validator, session = TemporalValidator(), Session()
        values = [30.0] * 6 + [90.0] + [30.0] * 6
        _feed(validator, session, "index.pip", values)

        summary = validator.summarize(session, "index.pip")
        assert summary.maximum == pytest.approx(30.0)
        assert summary.rejected_samples == 1

    def test_insufficient_data_reports_raw_maximum_with_low_quality(self):
        validator, session = TemporalValidator(), Session()
        _feed(validator, session, "index.dip", [10.0, 20.0, 30.0])

        summary = validator.summarize(session, "index.dip")
        assert summary.maximum == 30.0
        assert summary.quality == 0.3
        assert summary.sufficient is False

    def test_empty_channel_reports_zero(self):
        summary = TemporalValidator().summarize(Session(), "middle.mcp")
        assert summary.maximum == 0.0
        assert summary.quality == 0.0
        assert summary.valid_samples == 0

    def test_select_splits_signed_channel(self):
        validator, session = TemporalValidator(), Session()
        _feed(validator, session, "wrist", [0.0, 10.0, 20.0, 10.0, 0.0, -10.0, -20.0])

        flexion = validator.summarize(session, "wrist", lambda v: v if v > 0 else None)
        extension = validator.summarize(session, "wrist", lambda v: -v if v < 0 else None)
        assert flexion.maximum == 20.0
        assert extension.maximum == 20.0

    def test_smoothed_maximum_with_fewer_values_than_top_k(self):
        validator = TemporalValidator()
        assert validator.smoothed_maximum([4.0, 8.0]) == pytest.approx(6.0)
        assert validator.smoothed_maximum([]) == 0.0

    def test_select_counts_only_selected_samples(self):
        """A direction seen in a single frame is insufficient even on a busy channel"""
        validator, session = TemporalValidator(), Session()
        _feed(validator, session, "wrist", [20.0] * 10 + [10.0, 0.0, -10.0])

        flexion = validator.summarize(session, "wrist", lambda v: v if v > 0 else None)
        extension = validator.summarize(session, "wrist", lambda v: -v if v < 0 else None)

        assert flexion.valid_samples == 11
        assert flexion.sufficient
        assert flexion.maximum == pytest.approx(20.0)

        assert extension.valid_samples == 1
        assert extension.sufficient is False
        assert extension.quality == 0.3
        assert extension.maximum == pytest.approx(10.0)

    def test_selected_quality_averages_selected_samples(self):
        validator, session = TemporalValidator(), Session()
        verdicts = _feed(validator, session, "wrist", [5.0] * 10 + [-5.0] * 10)

        extension = validator.summarize(session, "wrist", lambda v: -v if v < 0 else None)
        expected = sum(v.quality for v in verdicts[10:]) / 10
        assert extension.sufficient
        assert extension.quality == pytest.approx(expected, abs=0.001)
        assert extension.quality < validator.summarize(session, "wrist").quality


class TestDerivedSamples:
    """Tests for samples recorded without plausibility checks"""

    def test_record_skips_checks(self):
        validator, session = TemporalValidator(), Session()
        validator.record(session, "index.tam", 10.0, 0.8)
        validator.record(session, "index.tam", 90.0, 0.6)

        history = session.history("index.tam")
        assert history.accepted == [10.0, 90.0]
        assert history.qualities == [0.8, 0.6]
