from typing import Optional

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.domain.calibration.serialization import load_coefficients
from kinetic_sequencing.domain.rotation.processor import RotationProcessor
from kinetic_sequencing.domain.sequencing.analyzer import SequencingAnalyzer
from kinetic_sequencing.domain.swing.detector import SwingWindowDetector
from kinetic_sequencing.domain.velocity.engine import VelocityEngine
from kinetic_sequencing.schemas.calibration_dto import CalibrationCoefficients
from kinetic_sequencing.services.body_analysis_service import BodyAnalysisService


def create_body_analysis_service(
        min_visibility: Optional[float] = None,
        smoothing_window: Optional[int] = None,
        calibration: Optional[CalibrationCoefficients] = None,
) -> BodyAnalysisService:
    """
    BodyAnalysisService 인스턴스 생성

    Args:
        min_visibility: 관절 가시성 임계값 (기본: settings)
        smoothing_window: 속도 스무딩 창 크기 (기본: settings)
        calibration: 보정 계수. 없으면 settings.CALIBRATION_FILE 이 있을 때 로드

    Returns:
        BodyAnalysisService 인스턴스
    """
    # Domain 컴포넌트 초기화
    rotation_processor = RotationProcessor(min_visibility=min_visibility)
    velocity_engine = VelocityEngine(smoothing_window=smoothing_window)
    swing_detector = SwingWindowDetector()
    sequencing_analyzer = SequencingAnalyzer()

    # 보정 계수 (optional)
    if calibration is None and settings.CALIBRATION_FILE:
        calibration = load_coefficients(settings.CALIBRATION_FILE)

    return BodyAnalysisService(
        rotation_processor=rotation_processor,
        velocity_engine=velocity_engine,
        swing_detector=swing_detector,
        sequencing_analyzer=sequencing_analyzer,
        calibration=calibration,
    )
