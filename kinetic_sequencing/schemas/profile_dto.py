"""
모터 프로파일 분류 DTO
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MotorProfile = Literal["Spinner", "Slingshotter", "Whipper", "Titan", "Unknown"]

PROFILE_TAGS: tuple[str, ...] = ("Spinner", "Slingshotter", "Whipper", "Titan")


class MotorProfileResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: MotorProfile
    confidence: int = Field(..., ge=0, le=100)
    scores: dict[str, float]
    evidence: list[str] = Field(default_factory=list)
