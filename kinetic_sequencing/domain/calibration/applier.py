"""
캘리브레이션 적용 Domain Logic
학습된 계수로 새 분석 결과를 ground truth 스케일로 변환 (순수 변환)
"""
from typing import Optional

from kinetic_sequencing.constants import CALIBRATION_METRICS
from kinetic_sequencing.domain.sequencing.analyzer import round_metric
from kinetic_sequencing.schemas.analysis_dto import BodyAnalysisResult
from kinetic_sequencing.schemas.calibration_dto import CalibrationCoefficients

# BodyAnalysisResult 피크 필드 ↔ 메트릭
_PEAK_FIELDS = {
    "pelvis_velocity": "peak_pelvis_velocity",
    "torso_velocity": "peak_torso_velocity",
    "x_factor": "peak_x_factor",
    "stretch_rate": "peak_stretch_rate",
}


def apply_calibration(
    result: BodyAnalysisResult,
    calibration: Optional[CalibrationCoefficients] = None,
) -> BodyAnalysisResult:
    """
    value · scale + offset 적용

    - 피크 원시값은 그대로 변환, FourBBodyInputs 는 요약 반올림 규칙으로 다시 반올림
    - 기본 계수는 항등 → 보정 없음과 동일 (손실 없음)
    """
    calibration = calibration or CalibrationCoefficients()

    peak_updates = {}
    summary_updates = {}
    for metric in CALIBRATION_METRICS:
        scale = calibration.scale_for(metric)
        offset = calibration.offset_for(metric)

        peak_field = _PEAK_FIELDS[metric]
        peak_updates[peak_field] = getattr(result, peak_field) * scale + offset
        summary_updates[metric] = round_metric(
            getattr(result.four_b_inputs, metric) * scale + offset, metric
        )

    return result.model_copy(
        update={
            **peak_updates,
            "four_b_inputs": result.four_b_inputs.model_copy(update=summary_updates),
        }
    )
