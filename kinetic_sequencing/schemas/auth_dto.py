"""
외부 API 인증 토큰 DTO
"""
from pydantic import BaseModel, ConfigDict, Field


class AccessToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    expires_in_s: float = Field(..., gt=0, description="발급 시점 기준 유효 시간(초)")
