"""
바디(영상) + 배트(센서) 데이터 병합
4B 스코어링이 항상 사용할 수 있는 값으로 채운 UnifiedFourBInputs 생성
"""
import logging
from typing import Optional

import numpy as np

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.schemas.analysis_dto import FourBBodyInputs
from kinetic_sequencing.schemas.fusion_dto import (
    BatSensorMetrics,
    CombinedSwingData,
    UnifiedFourBInputs,
)
from kinetic_sequencing.utils.source_lookup import resolve_first

logger = logging.getLogger(__name__)

SOURCE_VIDEO = "video"
SOURCE_SENSOR = "sensor"
SOURCE_DERIVED = "derived"

# 영상 쪽 미측정 시 중립값
_BODY_DEFAULTS = {
    "pelvis_velocity": 0.0,
    "torso_velocity": 0.0,
    "x_factor": 0.0,
    "stretch_rate": 0.0,
    "tp_ratio": 1.0,
    "sequencing_quality": "average",
}

_SENSOR_FIELDS = (
    "bat_speed_mph",
    "hand_speed_mph",
    "trigger_to_impact_ms",
    "attack_angle_deg",
    "attack_direction_deg",
)


class FusionBuilder:
    """영상/센서 메트릭 → UnifiedFourBInputs"""

    def __init__(
        self,
        reference_pelvis_velocity: Optional[float] = None,
        reference_bat_speed: Optional[float] = None,
        default_timing_cv: Optional[float] = None,
    ):
        self.reference_pelvis_velocity = (
            reference_pelvis_velocity or settings.REFERENCE_PELVIS_VELOCITY
        )
        self.reference_bat_speed = reference_bat_speed or settings.REFERENCE_BAT_SPEED
        self.default_timing_cv = (
            settings.DEFAULT_TIMING_CV if default_timing_cv is None else default_timing_cv
        )

    def body_to_bat_efficiency(
        self, pelvis_velocity: Optional[float], bat_speed_mph: Optional[float]
    ) -> Optional[float]:
        """
        (bat / 기준 배트속도) / (pelvis / 기준 골반속도), 소수 2자리
        둘 다 있고 0 이 아닐 때만 계산
        """
        if not pelvis_velocity or not bat_speed_mph:
            return None
        normalized_pelvis = pelvis_velocity / self.reference_pelvis_velocity
        normalized_bat = bat_speed_mph / self.reference_bat_speed
        return float(np.round(normalized_bat / normalized_pelvis, 2))

    def combine(self, data: CombinedSwingData) -> UnifiedFourBInputs:
        """평평한 입력 1개를 통합 입력으로 변환"""
        has_video = data.pelvis_velocity is not None
        has_sensor = data.bat_speed_mph is not None
        sources: dict[str, str] = {}

        # Brain: 타이밍 CV 는 영상 일관성 CV 로 대체, 없으면 평균값
        timing_cv = resolve_first(
            [(SOURCE_VIDEO, data.body_consistency_cv)],
            default=self.default_timing_cv,
        )
        sources["timing_cv"] = timing_cv.source

        body = {}
        for field, default in _BODY_DEFAULTS.items():
            picked = resolve_first([(SOURCE_VIDEO, getattr(data, field))], default=default)
            body[field] = picked.value
            sources[field] = picked.source

        sensor = {field: getattr(data, field) for field in _SENSOR_FIELDS}
        for field, value in sensor.items():
            if value is not None:
                sources[field] = SOURCE_SENSOR

        # 손-배트 비: 센서 값 우선, 없으면 두 속도로 유도
        derived_ratio = None
        if data.bat_speed_mph and data.hand_speed_mph:
            derived_ratio = float(np.round(data.bat_speed_mph / data.hand_speed_mph, 2))
        hand_to_bat = resolve_first(
            [(SOURCE_SENSOR, data.hand_to_bat_ratio), (SOURCE_DERIVED, derived_ratio)]
        )
        if hand_to_bat.value is not None:
            sources["hand_to_bat_ratio"] = hand_to_bat.source

        efficiency = None
        if has_video and has_sensor:
            efficiency = self.body_to_bat_efficiency(data.pelvis_velocity, data.bat_speed_mph)
        if efficiency is not None:
            sources["body_to_bat_efficiency"] = SOURCE_DERIVED

        logger.debug(
            f"[Fusion] video={has_video} sensor={has_sensor} efficiency={efficiency}"
        )

        return UnifiedFourBInputs(
            timing_cv=timing_cv.value,
            **body,
            **sensor,
            hand_to_bat_ratio=hand_to_bat.value,
            body_to_bat_efficiency=efficiency,
            has_video_data=has_video,
            has_sensor_data=has_sensor,
            sources=sources,
        )

    def build(
        self,
        body: Optional[FourBBodyInputs] = None,
        sensor: Optional[BatSensorMetrics] = None,
    ) -> UnifiedFourBInputs:
        """영상 요약/센서 묶음(둘 다 선택) → 통합 입력"""
        data = {}
        if body is not None:
            data.update(
                pelvis_velocity=body.pelvis_velocity,
                torso_velocity=body.torso_velocity,
                x_factor=body.x_factor,
                stretch_rate=body.stretch_rate,
                body_consistency_cv=body.consistency_cv,
                tp_ratio=body.tp_ratio,
                sequencing_quality=body.sequencing_quality,
            )
        if sensor is not None:
            data.update(sensor.model_dump(exclude_none=True))
        return self.combine(CombinedSwingData(**data))


def combine_data_sources(data: CombinedSwingData) -> UnifiedFourBInputs:
    return FusionBuilder().combine(data)


def build_unified_inputs(
    body: Optional[FourBBodyInputs] = None,
    sensor: Optional[BatSensorMetrics] = None,
) -> UnifiedFourBInputs:
    return FusionBuilder().build(body, sensor)
