"""
캘리브레이션 모델 직렬화
JSON (trained_at 은 ISO-8601 문자열), 다시 읽으면 datetime 으로 복원
"""
import json
import math
from pathlib import Path
from typing import Any, Union

from kinetic_sequencing.schemas.calibration_dto import CalibrationCoefficients, CalibrationModel

# 표준 JSON 에 없는 inf/nan 은 문자열로 기록
_NON_FINITE = {"Infinity": math.inf, "-Infinity": -math.inf, "NaN": math.nan}


def _encode_non_finite(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _encode_non_finite(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_encode_non_finite(v) for v in value]
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    return value


def _decode_non_finite(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _decode_non_finite(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode_non_finite(v) for v in value]
    if isinstance(value, str) and value in _NON_FINITE:
        return _NON_FINITE[value]
    return value


def serialize_model(model: CalibrationModel) -> str:
    """
    모델 → JSON 문자열 (RFC 8259 준수)
    mae=inf 는 "Infinity" 문자열로 기록
    """
    data = model.model_dump()
    data["trained_at"] = model.trained_at.isoformat()
    return json.dumps(_encode_non_finite(data), ensure_ascii=False, indent=2, allow_nan=False)


def deserialize_model(raw: str) -> CalibrationModel:
    """JSON 문자열 → 모델 (trained_at 은 datetime 으로, "Infinity" 는 inf 로 재수화)"""
    return CalibrationModel.model_validate(_decode_non_finite(json.loads(raw)))


def save_model(model: CalibrationModel, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_model(model), encoding="utf-8")
    return path


def load_coefficients(path: Union[str, Path]) -> CalibrationCoefficients:
    """
    저장된 파일에서 계수만 로드.
    전체 모델 JSON / 계수만 있는 JSON 둘 다 허용
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"calibration file not found: {path}")

    data = _decode_non_finite(json.loads(path.read_text(encoding="utf-8")))
    if "coefficients" in data:
        data = data["coefficients"]
    return CalibrationCoefficients.model_validate(data)
