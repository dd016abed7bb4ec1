from __future__ import annotations
import json
import logging
import operator
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter

from kinetic_sequencing.schemas.rule_dto import RuleCondition

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "gt": operator.gt,
    "ge": operator.ge,
    "lt": operator.lt,
    "le": operator.le,
    "eq": operator.eq,
}


# ─────────────────────────────────────────
# 조건 평가
# ─────────────────────────────────────────


def condition_holds(condition: RuleCondition, values: Mapping[str, Any]) -> bool:
    """
    단일 조건 평가.
    - None 은 어떤 조건도 만족하지 않는다
    - 문자열 비교는 eq 만 허용
    """
    actual = values.get(condition.field)
    if actual is None:
        return False
    if isinstance(actual, str) or isinstance(condition.value, str):
        return condition.op == "eq" and actual == condition.value
    return bool(_OPS[condition.op](float(actual), float(condition.value)))


def all_conditions_hold(conditions: Sequence[RuleCondition], values: Mapping[str, Any]) -> bool:
    return all(condition_holds(c, values) for c in conditions)


# ─────────────────────────────────────────
# 룰 테이블 로드 (파일 없으면 기본값)
# ─────────────────────────────────────────


def load_rule_table(
    path: Optional[Path],
    model: type[T],
    default: Callable[[], list[T]],
) -> list[T]:
    """
    JSON 배열 파일에서 룰 테이블 로드.

    Expected structure:
    [
        {"profile": "Spinner", "points": 30, "evidence": "...",
         "conditions": [{"field": "pelvis_velocity", "op": "gt", "value": 650}]},
        ...
    ]

    - path 가 None 이거나 파일이 없으면 default() 반환
    - 형식 오류는 pydantic ValidationError 로 그대로 전파
    """
    if path is None:
        return default()

    path = Path(path)
    if not path.exists():
        logger.warning(f"[Rules] rule file not found, using defaults: {path}")
        return default()

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    rules = TypeAdapter(list[model]).validate_python(raw)
    logger.info(f"[Rules] loaded {len(rules)} rules from {path}")
    return rules
