"""
Tests for settings loading, wire schemas and the command line
"""
import json
import pytest
from pydantic import ValidationError

from handrom.config import EngineSettings, TemporalSettings
from handrom.domain import HandType
from handrom.errors import ConfigurationError
from handrom.main import main
from handrom.schemas import FrameLogSchema, TrackingFrameSchema, convert_report
from handrom.services import SessionAggregator

from conftest import landmarks_to_json, make_hand


def _frame_log(frames, hand_type=None):
    log = {
        "frames": [
            {
                "handLandmarks": landmarks_to_json(f.hand.landmarks),
                "poseLandmarks": landmarks_to_json(f.pose.landmarks),
                "handedness": f.handedness.value,
                "timestampMs": f.timestamp_ms,
                "frameNumber": f.frame_number,
            }
            for f in frames
        ]
    }
    if hand_type:
        log["handType"] = hand_type
    return log


class TestEngineSettings:
    """Tests for JSON settings files"""

    def test_defaults(self):
        settings = EngineSettings()
        assert settings.temporal.max_change_per_frame == 30.0
        assert settings.temporal.min_valid_frames == 10
        assert settings.wrist.max_flexion == 80.0
        assert settings.wrist.max_extension == 70.0
        assert settings.laterality.lock_confirmation_frames == 1

    def test_from_file_overrides_and_keeps_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"temporal": {"max_change_per_frame": 20}}))

        settings = EngineSettings.from_file(path)
        assert settings.temporal.max_change_per_frame == 20.0
        assert settings.temporal.window_size == 5

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            EngineSettings.from_file(path)

    def test_out_of_range_value(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"laterality": {"visibility_margin": 3.0}}))
        with pytest.raises(ConfigurationError):
            EngineSettings.from_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            EngineSettings.from_file(tmp_path / "absent.json")

    def test_consistency_window_cannot_exceed_window(self):
        with pytest.raises(ValidationError):
            TemporalSettings(consistency_window=6)
        assert TemporalSettings(consistency_window=5).consistency_window == 5

    def test_shrunk_window_in_file_rejected(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"temporal": {"window_size": 2}}))
        with pytest.raises(ConfigurationError):
            EngineSettings.from_file(path)


class TestSchemas:
    """Tests for input/output schemas"""

    def test_frame_accepts_camel_and_snake_case(self):
        camel = TrackingFrameSchema.model_validate({"timestampMs": 10, "trackingQuality": 0.5})
        snake = TrackingFrameSchema.model_validate({"timestamp_ms": 10, "tracking_quality": 0.5})
        assert camel == snake

    def test_frame_to_domain(self):
        hand = make_hand()
        schema = TrackingFrameSchema.model_validate({
            "handLandmarks": landmarks_to_json(hand.landmarks),
            "handedness": "LEFT",
            "timestampMs": 66,
            "frameNumber": 2,
        })
        frame = schema.to_domain()
        assert frame.hand.is_complete
        assert frame.pose.landmarks == ()
        assert frame.handedness is HandType.LEFT
        assert frame.timestamp_ms == 66

    def test_invalid_visibility_rejected(self):
        with pytest.raises(ValidationError):
            TrackingFrameSchema.model_validate({
                "timestampMs": 0,
                "poseLandmarks": [{"x": 0.1, "y": 0.1, "visibility": 1.5}],
            })

    def test_report_serializes_with_camel_case(self, pip_ramp_frames):
        report = SessionAggregator().rescore(pip_ramp_frames)
        data = json.loads(convert_report(report).model_dump_json(by_alias=True))

        assert data["sessionId"] == report.session_id
        assert "pipAngle" in data["fingers"]["index"]
        assert "totalActiveRom" in data["fingers"]["index"]
        assert "maxFlexion" in data["wrist"]
        assert data["framesProcessed"] == len(pip_ramp_frames)
        assert "index.pip" in data["quality"]
        assert "index.tam" in data["quality"]
        assert "wrist.extension" in data["quality"]
        assert data["kapandjiTargets"] == list(report.kapandji_targets)
        assert data["wrist"]["maxRadialDeviation"] == 0.0
        assert "deviationArc" in data["wrist"]

    def test_frame_log_hand_type(self):
        log = FrameLogSchema.model_validate({"frames": [], "handType": "RIGHT"})
        assert log.hand_type.to_domain() is HandType.RIGHT


class TestCommandLine:
    """Tests for the re-scoring command"""

    def test_rescore(self, tmp_path, capsys, wrist_ramp_frames):
        path = tmp_path / "log.json"
        path.write_text(json.dumps(_frame_log(wrist_ramp_frames)))

        assert main(["rescore", str(path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["wrist"]["handType"] == "RIGHT"
        assert data["framesWithElbow"] == len(wrist_ramp_frames)

    def test_rescore_with_hand_type(self, tmp_path, capsys, wrist_ramp_frames):
        path = tmp_path / "log.json"
        path.write_text(json.dumps(_frame_log(wrist_ramp_frames, hand_type="RIGHT")))

        assert main(["rescore", str(path), "--hand-type", "LEFT"]) == 0
        assert json.loads(capsys.readouterr().out)["wrist"]["handType"] == "LEFT"

    def test_single_frame(self, tmp_path, capsys, wrist_ramp_frames):
        path = tmp_path / "log.json"
        path.write_text(json.dumps(_frame_log(wrist_ramp_frames)))

        assert main(["frame", str(path), "12", "--hand-type", "RIGHT"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["frameNumber"] == 12
        assert data["wrist"]["wristFlexionAngle"] == pytest.approx(60.0, abs=0.01)
        assert data["wrist"]["radialDeviationAngle"] == 0.0

    def test_unknown_frame_fails(self, tmp_path, wrist_ramp_frames):
        path = tmp_path / "log.json"
        path.write_text(json.dumps(_frame_log(wrist_ramp_frames)))
        assert main(["frame", str(path), "999"]) == 1

    def test_bad_settings_fails(self, tmp_path):
        log = tmp_path / "log.json"
        log.write_text(json.dumps({"frames": []}))
        settings = tmp_path / "settings.json"
        settings.write_text("[]")
        assert main(["--settings", str(settings), "rescore", str(log)]) == 1

    def test_unordered_log_fails(self, tmp_path):
        frames = [
            {"timestampMs": 100, "frameNumber": 0},
            {"timestampMs": 50, "frameNumber": 1},
        ]
        path = tmp_path / "log.json"
        path.write_text(json.dumps({"frames": frames}))
        assert main(["rescore", str(path)]) == 1
