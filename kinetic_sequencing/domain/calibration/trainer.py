"""
캘리브레이션 학습 Domain Logic
2D 추정값 → 3D ground truth 선형 회귀 (메트릭별 y = a·x + b)

오프라인 배치 작업. 학습 결과는 불변 CalibrationModel 스냅샷
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

import numpy as np

from kinetic_sequencing.constants import (
    CALIBRATION_METRICS,
    CALIBRATION_MODEL_VERSION,
    LOW_SAMPLE_COUNT,
    MIN_PLAYER_DIVERSITY,
    MIN_REGRESSION_PAIRS,
    OUTLIER_STD_MULTIPLIER,
    RECOMMENDED_SAMPLE_COUNT,
)
from kinetic_sequencing.schemas.analysis_dto import FourBBodyInputs
from kinetic_sequencing.schemas.calibration_dto import (
    CalibrationCoefficients,
    CalibrationModel,
    DatasetValidation,
    GroundTruthMetrics,
    ModelEvaluation,
    RegressionResult,
    TrainingDataset,
    TrainingPair,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────
# 회귀 유틸
# ─────────────────────────────────────────


def linear_regression(x: Sequence[float], y: Sequence[float]) -> tuple[float, float, float]:
    """
    최소제곱 선형 회귀 (정규방정식 closed-form)

    Returns:
        (scale, offset, r2)

    Raises:
        ValueError: 길이가 다르거나 pair 가 3개 미만 (호출자 전제조건 위반)
    """
    if len(x) != len(y) or len(x) < MIN_REGRESSION_PAIRS:
        raise ValueError(
            f"Need at least {MIN_REGRESSION_PAIRS} paired samples of equal length "
            f"(got x={len(x)}, y={len(y)})"
        )

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    n = len(xs)

    sum_x, sum_y = xs.sum(), ys.sum()
    sum_xy = float(np.dot(xs, ys))
    sum_x2 = float(np.dot(xs, xs))

    denominator = sum_x2 - (sum_x * sum_x) / n
    scale = (sum_xy - (sum_x * sum_y) / n) / denominator if denominator != 0 else 1.0
    offset = ys.mean() - scale * xs.mean()

    return float(scale), float(offset), r_squared(scale * xs + offset, ys)


def r_squared(predicted: Sequence[float], actual: Sequence[float]) -> float:
    """1 - SSres/SStot. SStot == 0 (또는 빈 입력) 이면 0"""
    actual = np.asarray(actual, dtype=float)
    if actual.size == 0:
        return 0.0
    predicted = np.asarray(predicted, dtype=float)
    ss_res = float(np.sum((actual - predicted) ** 2))
    ss_tot = float(np.sum((actual - actual.mean()) ** 2))
    return 1.0 - ss_res / ss_tot if ss_tot != 0 else 0.0


def mean_absolute_error(predicted: Sequence[float], actual: Sequence[float]) -> float:
    return float(np.mean(np.abs(np.asarray(predicted) - np.asarray(actual))))


def mean_absolute_percentage_error(predicted: Sequence[float], actual: Sequence[float]) -> float:
    """실측값이 정확히 0 인 표본은 제외"""
    predicted = np.asarray(predicted, dtype=float)
    actual = np.asarray(actual, dtype=float)
    mask = actual != 0
    if not mask.any():
        return 0.0
    return float(np.mean(np.abs((actual[mask] - predicted[mask]) / actual[mask])) * 100.0)


def train_metric(estimates: Sequence[float], ground_truth: Sequence[float]) -> RegressionResult:
    """
    단일 메트릭 회귀

    - 양쪽 값이 모두 > 0 인 pair 만 사용 (미측정 0 placeholder 제외)
    - 유효 pair 3개 미만이면 항등 기본값 (r2=0, mae=inf) → 예외 없음
    """
    if len(estimates) != len(ground_truth):
        raise ValueError(
            f"estimates/ground_truth length mismatch: {len(estimates)} != {len(ground_truth)}"
        )

    valid = [(e, g) for e, g in zip(estimates, ground_truth) if e > 0 and g > 0]
    if len(valid) < MIN_REGRESSION_PAIRS:
        return RegressionResult(
            scale=1.0, offset=0.0, r2=0.0, mae=float("inf"), mape=100.0, n=len(valid)
        )

    xs = [e for e, _ in valid]
    ys = [g for _, g in valid]
    scale, offset, r2 = linear_regression(xs, ys)
    predicted = [scale * x + offset for x in xs]

    return RegressionResult(
        scale=scale,
        offset=offset,
        r2=r2,
        mae=mean_absolute_error(predicted, ys),
        mape=mean_absolute_percentage_error(predicted, ys),
        n=len(valid),
    )


# ─────────────────────────────────────────
# 메인 학습
# ─────────────────────────────────────────


def train_calibration_model(
    dataset: TrainingDataset, trained_at: Optional[datetime] = None
) -> CalibrationModel:
    """
    paired 데이터셋으로 캘리브레이션 모델 학습

    전체 R²/MAE 는 메트릭별 n 가중 평균 (표본 적은 메트릭이 지배하지 않도록).
    유효 pair 가 하나도 없는 메트릭은 가중 평균에서 빠진다.
    """
    pairs = dataset.pairs
    low_sample = len(pairs) < LOW_SAMPLE_COUNT
    if low_sample:
        logger.warning(f"[Calibration] Low sample count ({len(pairs)}), results may be unreliable")

    results: dict[str, RegressionResult] = {}
    for metric in CALIBRATION_METRICS:
        results[metric] = train_metric(
            [getattr(p.estimate, metric) for p in pairs],
            [getattr(p.ground_truth, metric) for p in pairs],
        )
        logger.info(
            f"[Calibration] {metric}: n={results[metric].n} "
            f"scale={results[metric].scale:.4f} offset={results[metric].offset:.2f} "
            f"r2={results[metric].r2:.3f}"
        )

    used = [r for r in results.values() if r.n > 0]
    total_n = sum(r.n for r in used)
    if total_n > 0:
        overall_r2 = sum(r.r2 * r.n for r in used) / total_n
        overall_mae = sum(r.mae * r.n for r in used) / total_n
    else:
        overall_r2, overall_mae = 0.0, float("inf")

    coefficients = CalibrationCoefficients(
        **{f"{m}_scale": results[m].scale for m in CALIBRATION_METRICS},
        **{f"{m}_offset": results[m].offset for m in CALIBRATION_METRICS},
    )

    return CalibrationModel(
        version=CALIBRATION_MODEL_VERSION,
        trained_at=trained_at or datetime.now(timezone.utc),
        sample_count=len(pairs),
        overall_r2=overall_r2,
        overall_mae=overall_mae,
        low_sample_warning=low_sample,
        coefficients=coefficients,
        **results,
    )


# ─────────────────────────────────────────
# 데이터 수집 / 검증
# ─────────────────────────────────────────


def create_training_pair(
    session_id: str,
    player_id: str,
    estimate: FourBBodyInputs,
    ground_truth: GroundTruthMetrics,
) -> TrainingPair:
    """같은 스윙의 2D 추정값 + 3D 실측값을 묶는다 (timestamp = 현재 UTC)"""
    return TrainingPair(
        session_id=session_id,
        player_id=player_id,
        timestamp=datetime.now(timezone.utc),
        estimate=estimate,
        ground_truth=ground_truth,
    )


def validate_dataset(dataset: TrainingDataset) -> DatasetValidation:
    """
    권고용 데이터셋 검증 (예외 없음)

    - 표본 수 < 10 (30 이상 권장)
    - 골반 속도 3σ 이상 이상치
    - 선수 다양성 < 3 (특정 선수 동작 패턴 과적합 방지)

    is_valid: 이슈가 없거나, 이슈가 있어도 표본이 30 이상이면 True
    """
    pairs = dataset.pairs
    issues: list[str] = []

    if len(pairs) < LOW_SAMPLE_COUNT:
        issues.append(
            f"Low sample count ({len(pairs)}), recommend at least {RECOMMENDED_SAMPLE_COUNT} pairs"
        )

    if pairs:
        pelvis = np.array([p.estimate.pelvis_velocity for p in pairs], dtype=float)
        mean, std = pelvis.mean(), pelvis.std()
        outliers = int(np.sum(np.abs(pelvis - mean) > OUTLIER_STD_MULTIPLIER * std))
        if outliers > 0:
            issues.append(
                f"Found {outliers} potential outliers (>{OUTLIER_STD_MULTIPLIER:g} std from mean)"
            )

    unique_players = {p.player_id for p in pairs}
    if len(unique_players) < MIN_PLAYER_DIVERSITY:
        issues.append(
            f"Low player diversity ({len(unique_players)}), may overfit to specific movement patterns"
        )

    return DatasetValidation(
        is_valid=not issues or len(pairs) >= RECOMMENDED_SAMPLE_COUNT,
        issues=issues,
    )


# ─────────────────────────────────────────
# Export / 평가
# ─────────────────────────────────────────


def export_coefficients(model: CalibrationModel) -> CalibrationCoefficients:
    """운영용 경량 계수만 추출"""
    return model.coefficients


def evaluate_model(model: CalibrationModel, test_pairs: Sequence[TrainingPair]) -> ModelEvaluation:
    """홀드아웃 pair 에 계수를 적용해 메트릭별 R² 계산"""
    coef = model.coefficients
    r2_by_metric = {}
    for metric in CALIBRATION_METRICS:
        predicted = [
            getattr(p.estimate, metric) * coef.scale_for(metric) + coef.offset_for(metric)
            for p in test_pairs
        ]
        actual = [getattr(p.ground_truth, metric) for p in test_pairs]
        r2_by_metric[metric] = r_squared(predicted, actual)

    return ModelEvaluation(
        pelvis_r2=r2_by_metric["pelvis_velocity"],
        torso_r2=r2_by_metric["torso_velocity"],
        x_factor_r2=r2_by_metric["x_factor"],
        stretch_rate_r2=r2_by_metric["stretch_rate"],
        overall_r2=float(np.mean(list(r2_by_metric.values()))),
        sample_count=len(test_pairs),
    )
