# scripts/calibration/train_calibration.py
from __future__ import annotations
import argparse
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pandas as pd

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.constants import CALIBRATION_METRICS
from kinetic_sequencing.domain.calibration.serialization import save_model
from kinetic_sequencing.domain.calibration.trainer import (
    evaluate_model,
    train_calibration_model,
    validate_dataset,
)
from kinetic_sequencing.schemas.analysis_dto import FourBBodyInputs
from kinetic_sequencing.schemas.calibration_dto import (
    GroundTruthMetrics,
    TrainingDataset,
    TrainingPair,
)

# 필수 컬럼: 메트릭별 est_* (2D 추정) / gt_* (3D 실측)
REQUIRED_COLUMNS = ["session_id", "player_id"] + [
    f"{prefix}_{m}" for prefix in ("est", "gt") for m in CALIBRATION_METRICS
]

# 선택 컬럼 → 없거나 비어 있으면 기본값
_EST_OPTIONAL = {"consistency_cv": 0.0, "tp_ratio": 1.0, "sequencing_quality": "average"}
_GT_OPTIONAL = ("tp_ratio", "at_ratio", "legs_ke", "bat_ke", "transfer_efficiency")


# ----------------- CLI 파서 -----------------
def _parse_args(argv=None):
    ap = argparse.ArgumentParser(description="2D→3D 캘리브레이션 계수 학습")
    ap.add_argument("--csv", required=True, help="학습용 paired CSV 경로")
    ap.add_argument(
        "--out",
        required=False,
        help="출력 모델 JSON 경로 (생략 시 settings.CALIBRATION_FILE)",
    )
    ap.add_argument("--test-csv", required=False, help="홀드아웃 평가용 CSV (선택)")
    return ap.parse_args(argv)


# ----------------- 경로 해석 -----------------
def _resolve_path(arg: str) -> Path:
    p = Path(arg)
    return p if p.is_absolute() else (settings.ROOT / arg)


# ----------------- 내부 유틸 -----------------
def _opt(row: pd.Series, column: str, default):
    """없는 컬럼/NaN → default"""
    if column not in row.index or pd.isna(row[column]):
        return default
    return row[column]


def _row_timestamp(row: pd.Series) -> datetime:
    raw = _opt(row, "timestamp", None)
    if raw is None:
        return datetime.now(timezone.utc)
    return pd.to_datetime(raw, utc=True).to_pydatetime()


def load_pairs(csv_path: Path) -> list[TrainingPair]:
    """
    paired CSV → TrainingPair 리스트.
    - 필수 컬럼 누락 시 ValueError
    - 필수 값이 비어 있는 행은 제외
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"입력 CSV 파일이 존재하지 않습니다: {csv_path}")

    df = pd.read_csv(csv_path)
    if df.empty:
        raise ValueError(f"입력 CSV가 비어 있습니다: {csv_path}")

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"필수 컬럼 누락: {missing}")

    metric_columns = [c for c in REQUIRED_COLUMNS if c.startswith(("est_", "gt_"))]
    df[metric_columns] = df[metric_columns].apply(pd.to_numeric, errors="coerce")
    df = df.dropna(subset=REQUIRED_COLUMNS)

    pairs = []
    for _, row in df.iterrows():
        estimate = FourBBodyInputs(
            **{m: float(row[f"est_{m}"]) for m in CALIBRATION_METRICS},
            consistency_cv=float(_opt(row, "est_consistency_cv", _EST_OPTIONAL["consistency_cv"])),
            tp_ratio=float(_opt(row, "est_tp_ratio", _EST_OPTIONAL["tp_ratio"])),
            sequencing_quality=str(
                _opt(row, "est_sequencing_quality", _EST_OPTIONAL["sequencing_quality"])
            ),
        )
        ground_truth = GroundTruthMetrics(
            **{m: float(row[f"gt_{m}"]) for m in CALIBRATION_METRICS},
            **{k: float(_opt(row, f"gt_{k}", 0.0)) for k in _GT_OPTIONAL},
        )
        pairs.append(
            TrainingPair(
                session_id=str(row["session_id"]),
                player_id=str(row["player_id"]),
                timestamp=_row_timestamp(row),
                estimate=estimate,
                ground_truth=ground_truth,
            )
        )
    return pairs


# ----------------- 메인 -----------------
def main(argv=None) -> Path:
    args = _parse_args(argv)

    dataset = TrainingDataset.from_pairs(load_pairs(_resolve_path(args.csv)))

    validation = validate_dataset(dataset)
    for issue in validation.issues:
        print(f"[WARN] {issue}")
    if not validation.is_valid:
        print("[WARN] dataset did not pass validation, training anyway")

    model = train_calibration_model(dataset)
    for m in CALIBRATION_METRICS:
        r = getattr(model, m)
        print(f"[OK] {m}: scale={r.scale:.4f} offset={r.offset:.2f} r2={r.r2:.3f} n={r.n}")
    print(f"[OK] overall r2={model.overall_r2:.3f} mae={model.overall_mae:.2f}")

    if args.test_csv:
        evaluation = evaluate_model(model, load_pairs(_resolve_path(args.test_csv)))
        print(
            f"[OK] held-out r2={evaluation.overall_r2:.3f} "
            f"(n={evaluation.sample_count})"
        )

    out_arg: Optional[str] = args.out
    if out_arg:
        out_path = _resolve_path(out_arg)
    elif settings.CALIBRATION_FILE:
        out_path = settings.CALIBRATION_FILE
    else:
        raise ValueError("--out 또는 CALIBRATION_FILE 환경변수가 필요합니다")

    save_model(model, out_path)
    print(f"[OK] calibration model -> {out_path}")
    return out_path


if __name__ == "__main__":
    main()
