"""
캘리브레이션 관련 DTO
2D 추정값(MediaPipe) ↔ 3D ground truth(Reboot) 선형 보정
"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kinetic_sequencing.schemas.analysis_dto import FourBBodyInputs


class CalibrationCoefficients(BaseModel):
    """운영용 보정 계수 (y = scale * x + offset). 기본값은 항등 변환"""
    model_config = ConfigDict(frozen=True)

    pelvis_velocity_scale: float = 1.0
    pelvis_velocity_offset: float = 0.0
    torso_velocity_scale: float = 1.0
    torso_velocity_offset: float = 0.0
    x_factor_scale: float = 1.0
    x_factor_offset: float = 0.0
    stretch_rate_scale: float = 1.0
    stretch_rate_offset: float = 0.0

    def scale_for(self, metric: str) -> float:
        return getattr(self, f"{metric}_scale")

    def offset_for(self, metric: str) -> float:
        return getattr(self, f"{metric}_offset")


class GroundTruthMetrics(BaseModel):
    """3D 캡처(ground truth) 측정 묶음"""
    model_config = ConfigDict(frozen=True)

    pelvis_velocity: float
    torso_velocity: float
    x_factor: float
    stretch_rate: float
    tp_ratio: float = 0.0
    at_ratio: float = 0.0
    legs_ke: float = 0.0
    bat_ke: float = 0.0
    transfer_efficiency: float = 0.0


class TrainingPair(BaseModel):
    """같은 스윙을 2D/3D로 동시에 잡은 1쌍"""
    model_config = ConfigDict(frozen=True)

    session_id: str
    player_id: str
    timestamp: datetime

    estimate: FourBBodyInputs = Field(..., description="2D 영상 추정값")
    ground_truth: GroundTruthMetrics = Field(..., description="3D 캡처 실측값")


class DatasetMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    created_at: datetime
    pair_count: int
    player_ids: list[str]


class TrainingDataset(BaseModel):
    """학습 입력 (append-only)"""
    model_config = ConfigDict(frozen=True)

    pairs: list[TrainingPair]
    metadata: DatasetMetadata

    @classmethod
    def from_pairs(
        cls, pairs: list[TrainingPair], created_at: Optional[datetime] = None
    ) -> "TrainingDataset":
        """pair 리스트로 metadata까지 채운 데이터셋 생성"""
        player_ids = sorted({p.player_id for p in pairs})
        return cls(
            pairs=list(pairs),
            metadata=DatasetMetadata(
                created_at=created_at or datetime.now(timezone.utc),
                pair_count=len(pairs),
                player_ids=player_ids,
            ),
        )


class RegressionResult(BaseModel):
    """단일 메트릭 선형 회귀 결과"""
    model_config = ConfigDict(frozen=True)

    scale: float = Field(..., description="기울기 a")
    offset: float = Field(..., description="절편 b")
    r2: float = Field(..., description="결정계수")
    mae: float = Field(..., description="평균 절대 오차 (표본 부족 시 inf)")
    mape: float = Field(..., description="평균 절대 백분율 오차 (%)")
    n: int = Field(..., description="사용된 유효 pair 수")


class CalibrationModel(BaseModel):
    """학습된 캘리브레이션 모델 스냅샷"""
    model_config = ConfigDict(frozen=True)

    version: str
    trained_at: datetime
    sample_count: int

    pelvis_velocity: RegressionResult
    torso_velocity: RegressionResult
    x_factor: RegressionResult
    stretch_rate: RegressionResult

    overall_r2: float
    overall_mae: float

    # 표본 수 < 10 이면 True (학습은 진행, 호출자가 판단)
    low_sample_warning: bool = False

    coefficients: CalibrationCoefficients


class DatasetValidation(BaseModel):
    """데이터셋 검증 결과 (권고용, 예외 없음)"""
    is_valid: bool
    issues: list[str] = Field(default_factory=list)


class ModelEvaluation(BaseModel):
    """홀드아웃 데이터 평가"""
    pelvis_r2: float
    torso_r2: float
    x_factor_r2: float
    stretch_rate_r2: float
    overall_r2: float
    sample_count: int
