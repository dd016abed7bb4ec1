"""
룰 테이블 DTO
조건(condition) → 점수/라벨. JSON 파일로 교체 가능
"""
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Operator = Literal["gt", "ge", "lt", "le", "eq"]


class RuleCondition(BaseModel):
    """field <op> value"""
    model_config = ConfigDict(frozen=True)

    field: str
    op: Operator
    value: Union[float, str]


class SequencingRule(BaseModel):
    """모든 조건 만족 시 quality 부여 (리스트 순서가 우선순위)"""
    model_config = ConfigDict(frozen=True)

    quality: Literal["good", "average", "poor"]
    conditions: list[RuleCondition] = Field(default_factory=list)


class MotorProfileRule(BaseModel):
    """모든 조건 만족 시 profile 에 points 가산 + evidence 기록"""
    model_config = ConfigDict(frozen=True)

    profile: Literal["Spinner", "Slingshotter", "Whipper", "Titan"]
    conditions: list[RuleCondition]
    points: float
    evidence: Optional[str] = None
