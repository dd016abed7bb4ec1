"""
피크 & 키네틱 시퀀싱 Domain Logic
스윙 구간 내 골반/몸통 피크, T:P 비율, 시퀀싱 품질 분류
"""
import logging
import math
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.constants import SUMMARY_PRECISION
from kinetic_sequencing.domain.swing.detector import VELOCITY_INDEX_OFFSET
from kinetic_sequencing.schemas.analysis_dto import (
    FourBBodyInputs,
    SequencingQuality,
    SequencingResult,
)
from kinetic_sequencing.schemas.rotation_dto import RotationFrame, SwingWindow, VelocityFrame
from kinetic_sequencing.schemas.rule_dto import RuleCondition, SequencingRule
from kinetic_sequencing.utils.rules import all_conditions_hold, load_rule_table

logger = logging.getLogger(__name__)


def default_sequencing_rules() -> list[SequencingRule]:
    """
    기본 시퀀싱 룰 (위에서부터 우선순위)
    - good: 골반이 확실히 먼저(gap > 2) + 몸통이 증폭(ratio > 1.0)
    - average: 순서는 맞고(gap >= 0) 크기가 비슷(ratio >= 0.9)
    - 나머지 poor
    """
    return [
        SequencingRule(
            quality="good",
            conditions=[
                RuleCondition(field="sequencing_gap", op="gt", value=2),
                RuleCondition(field="tp_ratio", op="gt", value=1.0),
            ],
        ),
        SequencingRule(
            quality="average",
            conditions=[
                RuleCondition(field="sequencing_gap", op="ge", value=0),
                RuleCondition(field="tp_ratio", op="ge", value=0.9),
            ],
        ),
    ]


def round_metric(value: float, field: str) -> float:
    """
    FourBBodyInputs 필드별 반올림 규칙
    .5 는 항상 위로 (612.5 → 613, 0.95 → 1.0)
    """
    factor = 10 ** SUMMARY_PRECISION[field]
    return math.floor(value * factor + 0.5) / factor


def coefficient_of_variation(values: Sequence[float]) -> float:
    """모표준편차 / 평균 × 100. 표본 2개 미만이거나 평균 0 이면 0"""
    if len(values) < 2:
        return 0.0
    arr = np.asarray(values, dtype=float)
    mean = float(np.mean(arr))
    if mean == 0:
        return 0.0
    return float(np.std(arr) / mean * 100.0)


class SequencingAnalyzer:
    """피크/타이밍 추출 + 시퀀싱 품질 분류기"""

    def __init__(
        self,
        rules: Optional[list[SequencingRule]] = None,
        rules_file: Optional[Path] = None,
        cv_noise_floor: Optional[float] = None,
    ):
        """
        Args:
            rules: 룰 테이블 직접 주입 (우선)
            rules_file: 룰 JSON 파일 (기본: settings.SEQUENCING_RULES_FILE)
            cv_noise_floor: CV 계산 시 제외할 골반 속도 하한 (deg/s)
        """
        self.rules = rules if rules is not None else load_rule_table(
            rules_file or settings.SEQUENCING_RULES_FILE,
            SequencingRule,
            default_sequencing_rules,
        )
        self.cv_noise_floor = settings.CV_NOISE_FLOOR if cv_noise_floor is None else cv_noise_floor

    def analyze(
        self,
        rotation_frames: Sequence[RotationFrame],
        velocity_frames: Sequence[VelocityFrame],
        swing_window: Optional[SwingWindow],
    ) -> SequencingResult:
        """
        구간 내 피크 추출 + 품질 분류

        swing_window 가 None 이면 전체 시퀀스를 스캔 (degraded mode)
        반환되는 프레임 인덱스는 모두 원본 시퀀스 기준
        """
        if swing_window is not None:
            v_lo = swing_window.start_frame - VELOCITY_INDEX_OFFSET
            v_hi = swing_window.end_frame - VELOCITY_INDEX_OFFSET
            velocity_window = list(velocity_frames[v_lo:v_hi + 1])
            rotation_window = list(rotation_frames[swing_window.start_frame:swing_window.end_frame + 1])
            base = swing_window.start_frame
        else:
            velocity_window = list(velocity_frames)
            rotation_window = list(rotation_frames)
            base = VELOCITY_INDEX_OFFSET if velocity_frames else 0

        peak_pelvis, pelvis_peak_frame = 0.0, base
        peak_torso, torso_peak_frame = 0.0, base
        peak_stretch = 0.0
        for k, frame in enumerate(velocity_window):
            if frame.pelvis_velocity > peak_pelvis:
                peak_pelvis = frame.pelvis_velocity
                pelvis_peak_frame = base + k
            if frame.torso_velocity > peak_torso:
                peak_torso = frame.torso_velocity
                torso_peak_frame = base + k
            if frame.x_factor_velocity > peak_stretch:
                peak_stretch = frame.x_factor_velocity

        peak_x_factor = max((abs(f.x_factor) for f in rotation_window), default=0.0)

        active = [f.pelvis_velocity for f in velocity_window if f.pelvis_velocity > self.cv_noise_floor]
        consistency_cv = coefficient_of_variation(active)

        tp_ratio = peak_torso / peak_pelvis if peak_pelvis > 0 else 1.0
        gap = torso_peak_frame - pelvis_peak_frame

        return SequencingResult(
            peak_pelvis_velocity=peak_pelvis,
            peak_torso_velocity=peak_torso,
            peak_x_factor=peak_x_factor,
            peak_stretch_rate=peak_stretch,
            pelvis_peak_frame=pelvis_peak_frame,
            torso_peak_frame=torso_peak_frame,
            sequencing_gap=gap,
            tp_ratio=tp_ratio,
            consistency_cv=consistency_cv,
            sequencing_quality=self.classify(gap, tp_ratio),
        )

    def classify(self, sequencing_gap: int, tp_ratio: float) -> SequencingQuality:
        """룰 테이블 순서대로 평가, 첫 매칭. 아무것도 안 맞으면 poor"""
        values = {"sequencing_gap": sequencing_gap, "tp_ratio": tp_ratio}
        for rule in self.rules:
            if all_conditions_hold(rule.conditions, values):
                return rule.quality
        return "poor"

    def summarize(self, result: SequencingResult) -> FourBBodyInputs:
        """4B 스코어링용 반올림 요약"""
        return FourBBodyInputs(
            pelvis_velocity=round_metric(result.peak_pelvis_velocity, "pelvis_velocity"),
            torso_velocity=round_metric(result.peak_torso_velocity, "torso_velocity"),
            x_factor=round_metric(abs(result.peak_x_factor), "x_factor"),
            stretch_rate=round_metric(result.peak_stretch_rate, "stretch_rate"),
            consistency_cv=round_metric(result.consistency_cv, "consistency_cv"),
            tp_ratio=round_metric(result.tp_ratio, "tp_ratio"),
            sequencing_quality=result.sequencing_quality,
        )
