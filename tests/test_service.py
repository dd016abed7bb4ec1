"""
Service Layer Tests

BodyAnalysisService 파이프라인 테스트
"""
from unittest.mock import Mock

import pytest

from kinetic_sequencing.schemas.calibration_dto import CalibrationCoefficients
from kinetic_sequencing.schemas.pose_dto import ExtractionResult
from kinetic_sequencing.schemas.rotation_dto import SwingWindow
from kinetic_sequencing.services.body_analysis_service import BodyAnalysisService
from kinetic_sequencing.services.service_factory import create_body_analysis_service
from tests.test_helpers import create_pose_frame, create_static_sequence, create_swing_sequence


class TestBodyAnalysisService:
    """합성 스윙 end-to-end"""

    def test_clean_swing_detected(self, body_analysis_service, swing_frames, fps):
        result = body_analysis_service.analyze(swing_frames, fps)

        window = result.swing_window
        assert window is not None
        assert 20 <= window.start_frame <= 22
        assert 38 <= window.contact_frame <= 42
        assert window.start_frame < window.stride_frame < window.contact_frame <= window.end_frame
        assert result.four_b_inputs.sequencing_quality == "good"

    def test_clean_swing_metrics(self, body_analysis_service, swing_frames, fps):
        result = body_analysis_service.analyze(swing_frames, fps)

        assert result.swing_window == SwingWindow(
            start_frame=21, stride_frame=26, contact_frame=38, end_frame=48
        )
        # 골반 9°/frame × 30fps = 270 deg/s
        assert result.peak_pelvis_velocity == pytest.approx(270.0)
        # 골반 속도 평탄 구간 (frame 22~33) 어딘가
        assert 22 <= result.pelvis_peak_frame <= 33
        assert result.torso_peak_frame == 38
        assert result.sequencing_gap == result.torso_peak_frame - result.pelvis_peak_frame
        assert result.sequencing_gap > 2
        assert result.four_b_inputs.pelvis_velocity == 270.0
        assert result.four_b_inputs.tp_ratio == pytest.approx(2.0)

    def test_frame_bookkeeping(self, body_analysis_service, swing_frames, fps):
        result = body_analysis_service.analyze(swing_frames, fps)

        assert result.total_frames == 90
        assert len(result.rotation_frames) == 90
        assert len(result.velocity_frames) == 88
        assert result.valid_frame_percent == 100.0
        assert result.frame_rate == fps

    def test_low_visibility_frames_reduce_valid_percent(self, body_analysis_service, fps):
        frames = create_swing_sequence(num_frames=40)
        frames[:10] = [create_pose_frame(i, visibility=0.1) for i in range(10)]

        result = body_analysis_service.analyze(frames, fps)

        assert result.valid_frame_percent == pytest.approx(75.0)

    def test_static_sequence_degrades_gracefully(self, body_analysis_service, fps):
        result = body_analysis_service.analyze(create_static_sequence(30), fps)

        assert result.swing_window is None
        assert result.peak_pelvis_velocity == 0.0
        assert result.four_b_inputs.tp_ratio == 1.0

    def test_empty_sequence(self, body_analysis_service, fps):
        result = body_analysis_service.analyze([], fps)
        assert result.total_frames == 0
        assert result.valid_frame_percent == 0.0
        assert result.swing_window is None

    def test_unordered_frames_rejected(self, body_analysis_service, fps):
        frames = create_swing_sequence(num_frames=10)
        frames[3], frames[4] = frames[4], frames[3]

        with pytest.raises(ValueError):
            body_analysis_service.analyze(frames, fps)

    def test_duplicate_frame_numbers_rejected(self, body_analysis_service, fps):
        frames = [create_pose_frame(0), create_pose_frame(0), create_pose_frame(1)]
        with pytest.raises(ValueError):
            body_analysis_service.analyze(frames, fps)

    @pytest.mark.parametrize("frame_rate", [0.0, -30.0])
    def test_non_positive_frame_rate_rejected(self, body_analysis_service, swing_frames, frame_rate):
        with pytest.raises(ValueError):
            body_analysis_service.analyze(swing_frames, frame_rate)

    def test_calibration_applied(self, body_analysis_service, swing_frames, fps):
        coefficients = CalibrationCoefficients(pelvis_velocity_scale=2.0, pelvis_velocity_offset=5.0)

        result = body_analysis_service.analyze(swing_frames, fps, calibration=coefficients)

        assert result.peak_pelvis_velocity == pytest.approx(545.0)
        assert result.four_b_inputs.pelvis_velocity == 545.0

    def test_service_default_calibration(self, body_analysis_service, swing_frames, fps):
        body_analysis_service.calibration = CalibrationCoefficients(torso_velocity_offset=100.0)
        baseline = body_analysis_service.analyze(swing_frames, fps, calibration=CalibrationCoefficients())

        result = body_analysis_service.analyze(swing_frames, fps)

        assert result.peak_torso_velocity == pytest.approx(baseline.peak_torso_velocity + 100.0)


class TestAnalyzeExtraction:
    """추출 결과 → 품질 평가"""

    def _extraction(self, frames, valid, total=None, fps=30.0):
        return ExtractionResult(
            frames=frames,
            frame_rate=fps,
            extracted_frame_count=total if total is not None else len(frames),
            valid_frame_count=valid,
            processing_time_ms=12.0,
        )

    def test_usable_clean_swing(self, body_analysis_service, swing_frames):
        result = body_analysis_service.analyze_extraction(self._extraction(swing_frames, valid=90))

        assert result.quality.is_usable is True
        assert result.quality.issues == []
        assert result.quality.swing_detected is True
        assert result.quality.valid_frame_percent == 100.0
        assert result.video.duration_s == pytest.approx(3.0)
        assert result.processing.extraction_time_ms == 12.0
        assert result.processing.total_time_ms >= result.processing.analysis_time_ms

    def test_low_detection_rate(self, body_analysis_service, swing_frames):
        result = body_analysis_service.analyze_extraction(self._extraction(swing_frames, valid=30))

        assert result.quality.is_usable is False
        assert "Low pose detection rate - check video quality and framing" in result.quality.issues

    def test_no_swing(self, body_analysis_service):
        frames = create_static_sequence(30)
        result = body_analysis_service.analyze_extraction(self._extraction(frames, valid=30))

        assert result.quality.is_usable is False
        assert result.quality.swing_detected is False
        assert result.quality.issues == [
            "Could not detect swing - ensure full swing is visible",
            "Low pelvis velocity detected - may not be a full swing",
        ]


class TestServiceOrchestration:
    """협력 객체 호출 순서 (Mock)"""

    def test_pipeline_wiring(self, swing_frames):
        rotation = Mock()
        velocity = Mock()
        detector = Mock()
        analyzer = Mock()
        rotation.process_all.return_value = []
        velocity.calculate.return_value = []
        detector.detect.return_value = None

        real = create_body_analysis_service(min_visibility=0.5, smoothing_window=3)
        analyzer.analyze.return_value = real.sequencing_analyzer.analyze([], [], None)
        analyzer.summarize.side_effect = real.sequencing_analyzer.summarize

        service = BodyAnalysisService(rotation, velocity, detector, analyzer)
        service.analyze(swing_frames, 60.0)

        rotation.process_all.assert_called_once_with(swing_frames)
        velocity.calculate.assert_called_once_with([], 60.0)
        detector.detect.assert_called_once_with([])
        analyzer.analyze.assert_called_once_with([], [], None)


class TestServiceFactory:
    def test_factory_wires_components(self):
        service = create_body_analysis_service(min_visibility=0.7, smoothing_window=5)

        assert isinstance(service, BodyAnalysisService)
        assert service.rotation_processor.min_visibility == 0.7
        assert service.velocity_engine.smoothing_window == 5

    def test_factory_accepts_explicit_calibration(self):
        coefficients = CalibrationCoefficients(x_factor_scale=1.1)
        service = create_body_analysis_service(calibration=coefficients)
        assert service.calibration == coefficients
