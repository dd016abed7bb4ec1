"""
바디 분석 Service Layer
Domain 컴포넌트들을 조합하여 포즈 시퀀스 → 4B 바디 입력 파이프라인 실행
"""
import logging
import time
from typing import Optional, Sequence

from kinetic_sequencing.constants import LOW_PELVIS_VELOCITY, MIN_USABLE_VALID_RATIO
from kinetic_sequencing.domain.calibration.applier import apply_calibration
from kinetic_sequencing.domain.rotation.processor import RotationProcessor
from kinetic_sequencing.domain.sequencing.analyzer import SequencingAnalyzer
from kinetic_sequencing.domain.swing.detector import SwingWindowDetector
from kinetic_sequencing.domain.velocity.engine import VelocityEngine
from kinetic_sequencing.schemas.analysis_dto import (
    AnalysisQuality,
    BodyAnalysisResult,
    ProcessingStats,
    SwingVideoAnalysisResult,
    VideoSummary,
)
from kinetic_sequencing.schemas.calibration_dto import CalibrationCoefficients
from kinetic_sequencing.schemas.pose_dto import ExtractionResult, PoseFrame

# ---------- 로거 ----------
logger = logging.getLogger(__name__)
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


class BodyAnalysisService:
    """
    바디 분석 메인 서비스

    책임:
    - 회전 → 속도 → 스윙 구간 → 시퀀싱 → (캘리브레이션) 오케스트레이션
    - 입력 시퀀스 순서 검증
    - 추출 결과 품질 평가
    """

    def __init__(
        self,
        rotation_processor: RotationProcessor,
        velocity_engine: VelocityEngine,
        swing_detector: SwingWindowDetector,
        sequencing_analyzer: SequencingAnalyzer,
        calibration: Optional[CalibrationCoefficients] = None,
    ):
        """
        Args:
            rotation_processor: 회전 각도 계산기
            velocity_engine: 각속도 계산기
            swing_detector: 스윙 구간 감지기
            sequencing_analyzer: 피크/시퀀싱 분석기
            calibration: 기본 보정 계수 (호출 시 인자가 우선)
        """
        self.rotation_processor = rotation_processor
        self.velocity_engine = velocity_engine
        self.swing_detector = swing_detector
        self.sequencing_analyzer = sequencing_analyzer
        self.calibration = calibration

    def analyze(
        self,
        frames: Sequence[PoseFrame],
        frame_rate: float,
        calibration: Optional[CalibrationCoefficients] = None,
    ) -> BodyAnalysisResult:
        """
        바디 분석 파이프라인 실행

        Process:
        1. 입력 검증 (frame_rate, 프레임 순서)
        2. 회전 각도
        3. 각속도 + 스무딩
        4. 스윙 구간 감지 (없으면 전체 시퀀스로 진행)
        5. 피크/시퀀싱
        6. 캘리브레이션 (선택적)

        Raises:
            ValueError: frame_rate <= 0 또는 frame_number 가 순증가가 아님
        """
        # ========== Step 1: 입력 검증 ==========
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        self._validate_ordering(frames)

        # ========== Step 2: 회전 각도 ==========
        rotation_frames = self.rotation_processor.process_all(frames)

        # ========== Step 3: 각속도 ==========
        velocity_frames = self.velocity_engine.calculate(rotation_frames, frame_rate)

        # ========== Step 4: 스윙 구간 ==========
        swing_window = self.swing_detector.detect(velocity_frames)
        if swing_window is None:
            logger.warning("[Analysis] swing not detected, analyzing full sequence")

        # ========== Step 5: 피크/시퀀싱 ==========
        sequencing = self.sequencing_analyzer.analyze(rotation_frames, velocity_frames, swing_window)
        four_b_inputs = self.sequencing_analyzer.summarize(sequencing)

        total = len(rotation_frames)
        valid = sum(1 for f in rotation_frames if f.is_valid)

        result = BodyAnalysisResult(
            rotation_frames=rotation_frames,
            velocity_frames=velocity_frames,
            swing_window=swing_window,
            peak_pelvis_velocity=sequencing.peak_pelvis_velocity,
            peak_torso_velocity=sequencing.peak_torso_velocity,
            peak_x_factor=sequencing.peak_x_factor,
            peak_stretch_rate=sequencing.peak_stretch_rate,
            pelvis_peak_frame=sequencing.pelvis_peak_frame,
            torso_peak_frame=sequencing.torso_peak_frame,
            sequencing_gap=sequencing.sequencing_gap,
            frame_rate=frame_rate,
            total_frames=total,
            valid_frame_percent=(valid / total * 100.0) if total else 0.0,
            four_b_inputs=four_b_inputs,
        )

        logger.info(
            f"[Analysis] frames={total} valid={valid} "
            f"pelvis={four_b_inputs.pelvis_velocity} torso={four_b_inputs.torso_velocity} "
            f"quality={four_b_inputs.sequencing_quality}"
        )

        # ========== Step 6: 캘리브레이션 (선택적) ==========
        coefficients = calibration or self.calibration
        if coefficients is not None:
            result = apply_calibration(result, coefficients)

        return result

    def analyze_extraction(
        self,
        extraction: ExtractionResult,
        calibration: Optional[CalibrationCoefficients] = None,
    ) -> SwingVideoAnalysisResult:
        """추출 결과 분석 + 사용 가능 여부 판단"""
        start = time.perf_counter()
        body_analysis = self.analyze(extraction.frames, extraction.frame_rate, calibration)
        analysis_ms = (time.perf_counter() - start) * 1000.0

        quality = self._assess_quality(extraction, body_analysis)
        if quality.issues:
            logger.warning(f"[Analysis] quality issues: {quality.issues}")

        return SwingVideoAnalysisResult(
            body_analysis=body_analysis,
            video=VideoSummary(
                frame_rate=extraction.frame_rate,
                total_frames=extraction.extracted_frame_count,
                valid_frames=extraction.valid_frame_count,
                duration_s=len(extraction.frames) / extraction.frame_rate,
            ),
            processing=ProcessingStats(
                extraction_time_ms=extraction.processing_time_ms,
                analysis_time_ms=analysis_ms,
                total_time_ms=extraction.processing_time_ms + analysis_ms,
            ),
            quality=quality,
        )

    def _assess_quality(
        self, extraction: ExtractionResult, body_analysis: BodyAnalysisResult
    ) -> AnalysisQuality:
        issues = []
        ratio = (
            extraction.valid_frame_count / extraction.extracted_frame_count
            if extraction.extracted_frame_count
            else 0.0
        )
        swing_detected = body_analysis.swing_window is not None

        if ratio < MIN_USABLE_VALID_RATIO:
            issues.append("Low pose detection rate - check video quality and framing")
        if not swing_detected:
            issues.append("Could not detect swing - ensure full swing is visible")
        if body_analysis.four_b_inputs.pelvis_velocity < LOW_PELVIS_VELOCITY:
            issues.append("Low pelvis velocity detected - may not be a full swing")

        return AnalysisQuality(
            is_usable=ratio >= MIN_USABLE_VALID_RATIO and swing_detected,
            issues=issues,
            valid_frame_percent=ratio * 100.0,
            swing_detected=swing_detected,
        )

    @staticmethod
    def _validate_ordering(frames: Sequence[PoseFrame]) -> None:
        for prev, cur in zip(frames, frames[1:]):
            if cur.frame_number <= prev.frame_number:
                raise ValueError(
                    f"frames must be ordered by strictly increasing frame_number "
                    f"({prev.frame_number} -> {cur.frame_number})"
                )
