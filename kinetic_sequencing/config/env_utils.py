import os
from pathlib import Path
from typing import Optional

"""환경 변수에서 float 값을 읽는다. 비어 있으면 기본값."""


def env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or not str(v).strip():
        return float(default)
    return float(v)


"""환경 변수에서 int 값을 읽는다. 비어 있으면 기본값."""


def env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not str(v).strip():
        return int(default)
    return int(v)


"""환경 변수에서 파일 경로를 Path 객체로 변환."""


def env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    v = os.getenv(name)
    return Path(v) if v else default
