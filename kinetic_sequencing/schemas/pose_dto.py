"""
포즈 입력 관련 DTO
외부 포즈 추정기 → PoseExtractor → 분석 코어
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PoseLandmark(BaseModel):
    """MediaPipe 포즈 landmark (33개 중 하나)"""
    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="정규화된 X 좌표 (프레임 기준 0~1)")
    y: float = Field(..., description="정규화된 Y 좌표 (프레임 기준 0~1)")
    z: float = Field(0.0, description="깊이 (엉덩이 중심 기준 상대값)")
    visibility: float = Field(0.0, description="가시성 점수 (0~1로 클램프)")

    @field_validator("visibility")
    @classmethod
    def _clamp_visibility(cls, v: float) -> float:
        return min(1.0, max(0.0, v))


class PoseFrame(BaseModel):
    """1개 프레임의 포즈 데이터"""
    model_config = ConfigDict(frozen=True)

    timestamp: float = Field(..., description="영상 시작 기준 시간(ms)")
    frame_number: int = Field(..., ge=0, description="0부터 시작하는 프레임 번호")
    landmarks: list[PoseLandmark] = Field(..., description="관절 인덱스 순서의 landmark 리스트")


class ExtractionResult(BaseModel):
    """PoseExtractor 결과 (분석 코어에 넘기는 완성된 시퀀스)"""
    model_config = ConfigDict(frozen=True)

    frames: list[PoseFrame]
    frame_rate: float = Field(..., gt=0)
    extracted_frame_count: int = Field(..., description="추정기에 넘긴 전체 이미지 수")
    valid_frame_count: int = Field(..., description="핵심 관절 가시성을 통과한 프레임 수")
    processing_time_ms: float = 0.0
