"""
바디(영상) + 배트(센서) 데이터 병합 DTO
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kinetic_sequencing.schemas.analysis_dto import SequencingQuality


class BatSensorMetrics(BaseModel):
    """외부 배트 센서 측정 묶음 (bat_speed_mph 가 정의 필드)"""
    model_config = ConfigDict(frozen=True)

    bat_speed_mph: Optional[float] = None
    hand_speed_mph: Optional[float] = None
    trigger_to_impact_ms: Optional[float] = None
    attack_angle_deg: Optional[float] = None
    attack_direction_deg: Optional[float] = None
    hand_to_bat_ratio: Optional[float] = None


class CombinedSwingData(BaseModel):
    """영상/센서 필드를 평평하게 합친 입력. 없는 필드는 None"""
    model_config = ConfigDict(frozen=True)

    # 영상 (body)
    pelvis_velocity: Optional[float] = None
    torso_velocity: Optional[float] = None
    x_factor: Optional[float] = None
    stretch_rate: Optional[float] = None
    body_consistency_cv: Optional[float] = None
    tp_ratio: Optional[float] = None
    sequencing_quality: Optional[SequencingQuality] = None

    # 센서 (bat)
    bat_speed_mph: Optional[float] = None
    hand_speed_mph: Optional[float] = None
    trigger_to_impact_ms: Optional[float] = None
    attack_angle_deg: Optional[float] = None
    attack_direction_deg: Optional[float] = None
    hand_to_bat_ratio: Optional[float] = None


class UnifiedFourBInputs(BaseModel):
    """4B 스코어링 통합 입력 (항상 사용 가능한 값으로 채움)"""
    model_config = ConfigDict(frozen=True)

    # Brain
    timing_cv: float
    trigger_to_impact_ms: Optional[float] = None

    # Body
    pelvis_velocity: float
    torso_velocity: float
    x_factor: float
    stretch_rate: float
    tp_ratio: float
    sequencing_quality: SequencingQuality

    # Bat
    bat_speed_mph: Optional[float] = None
    hand_speed_mph: Optional[float] = None
    attack_angle_deg: Optional[float] = None
    attack_direction_deg: Optional[float] = None

    # Ball (전달 효율)
    hand_to_bat_ratio: Optional[float] = None
    body_to_bat_efficiency: Optional[float] = None

    # 데이터 출처
    has_video_data: bool
    has_sensor_data: bool
    sources: dict[str, str] = Field(default_factory=dict, description="필드별 채택 출처")
