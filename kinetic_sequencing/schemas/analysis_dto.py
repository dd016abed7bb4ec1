"""
바디 분석 결과 DTO
BodyAnalysisService 출력 / 4B 스코어링 입력
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from kinetic_sequencing.schemas.rotation_dto import RotationFrame, VelocityFrame, SwingWindow

SequencingQuality = Literal["good", "average", "poor"]


class FourBBodyInputs(BaseModel):
    """4B 스코어링용 반올림 요약값"""
    model_config = ConfigDict(frozen=True)

    pelvis_velocity: float = Field(..., description="골반 최대 각속도 (deg/s, 정수 반올림)")
    torso_velocity: float = Field(..., description="몸통 최대 각속도 (deg/s, 정수 반올림)")
    x_factor: float = Field(..., description="최대 |X-Factor| (도, 소수 1자리)")
    stretch_rate: float = Field(..., description="최대 stretch rate (deg/s, 정수 반올림)")
    consistency_cv: float = Field(..., description="골반 속도 변동계수 (%)")
    tp_ratio: float = Field(..., description="몸통/골반 최대 속도 비")
    sequencing_quality: SequencingQuality


class SequencingResult(BaseModel):
    """구간 내 피크/시퀀싱 분석 결과 (반올림 전 원시값)"""
    model_config = ConfigDict(frozen=True)

    peak_pelvis_velocity: float
    peak_torso_velocity: float
    peak_x_factor: float = Field(..., description="|X-Factor| 최대값")
    peak_stretch_rate: float
    pelvis_peak_frame: int
    torso_peak_frame: int
    sequencing_gap: int = Field(..., description="torso_peak_frame - pelvis_peak_frame")
    tp_ratio: float
    consistency_cv: float
    sequencing_quality: SequencingQuality


class BodyAnalysisResult(BaseModel):
    """1회 분석 실행의 불변 스냅샷"""
    model_config = ConfigDict(frozen=True)

    # 프레임별 데이터
    rotation_frames: list[RotationFrame]
    velocity_frames: list[VelocityFrame]

    # 스윙 구간 (None = 스윙 미감지, 전체 시퀀스로 degraded 분석)
    swing_window: Optional[SwingWindow] = None

    # 피크 (구간 내)
    peak_pelvis_velocity: float
    peak_torso_velocity: float
    peak_x_factor: float
    peak_stretch_rate: float

    # 타이밍
    pelvis_peak_frame: int
    torso_peak_frame: int
    sequencing_gap: int

    # 품질
    frame_rate: float
    total_frames: int
    valid_frame_percent: float = Field(..., ge=0.0, le=100.0)

    four_b_inputs: FourBBodyInputs


class AnalysisQuality(BaseModel):
    """분석 결과 사용 가능 여부 판단"""
    is_usable: bool
    issues: list[str] = Field(default_factory=list)
    valid_frame_percent: float
    swing_detected: bool


class VideoSummary(BaseModel):
    frame_rate: float
    total_frames: int
    valid_frames: int
    duration_s: float


class ProcessingStats(BaseModel):
    extraction_time_ms: float
    analysis_time_ms: float
    total_time_ms: float


class SwingVideoAnalysisResult(BaseModel):
    """추출 결과 → 분석 + 품질 평가 묶음"""
    body_analysis: BodyAnalysisResult
    video: VideoSummary
    processing: ProcessingStats
    quality: AnalysisQuality
