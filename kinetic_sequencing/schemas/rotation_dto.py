"""
회전/속도/스윙 구간 DTO
RotationProcessor → VelocityEngine → SwingWindowDetector
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator


class RotationFrame(BaseModel):
    """1개 프레임의 골반/몸통 회전 각도 (입력 프레임과 1:1)"""
    model_config = ConfigDict(frozen=True)

    timestamp: float
    frame_number: int

    # 카메라 기준 원시 각도 (도)
    pelvis_angle: float = Field(..., description="엉덩이 라인 각도 (도)")
    torso_angle: float = Field(..., description="어깨 라인 각도 (도)")

    # X-Factor = torso - pelvis
    x_factor: float = Field(..., description="골반-몸통 분리각 (도)")

    confidence: float = Field(..., ge=0.0, le=1.0, description="핵심 관절 평균 가시성")
    is_valid: bool


class VelocityFrame(BaseModel):
    """1개 내부 프레임의 각속도 (deg/s)"""
    model_config = ConfigDict(frozen=True)

    timestamp: float
    frame_number: int

    pelvis_velocity: float = Field(..., ge=0.0, description="골반 각속도 크기")
    torso_velocity: float = Field(..., ge=0.0, description="몸통 각속도 크기")
    x_factor_velocity: float = Field(..., description="stretch rate (늘어남 +, 수축 -)")


class SwingWindow(BaseModel):
    """감지된 스윙 구간 (원본 프레임 시퀀스 인덱스)"""
    model_config = ConfigDict(frozen=True)

    start_frame: int
    stride_frame: int
    contact_frame: int
    end_frame: int

    @model_validator(mode="after")
    def _check_order(self):
        if not (self.start_frame < self.stride_frame < self.contact_frame <= self.end_frame):
            raise ValueError(
                f"invalid swing window order: start={self.start_frame}, "
                f"stride={self.stride_frame}, contact={self.contact_frame}, end={self.end_frame}"
            )
        return self
