from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# helpers
from kinetic_sequencing.config.env_utils import env_float, env_int, env_path
from kinetic_sequencing.constants import (
    DEFAULT_FRAME_RATE,
    DEFAULT_MIN_VISIBILITY,
    DEFAULT_SMOOTHING_WINDOW,
    DEFAULT_SWING_PELVIS_THRESHOLD,
    DEFAULT_SWING_MIN_DURATION_FRAMES,
    DEFAULT_SWING_MAX_DURATION_FRAMES,
    DEFAULT_CV_NOISE_FLOOR,
    DEFAULT_REFERENCE_PELVIS_VELOCITY,
    DEFAULT_REFERENCE_BAT_SPEED,
    DEFAULT_TIMING_CV,
)


# ─────────────────────────────────────────────────────────
# Project root 탐색
#   - .git / pyproject.toml 중 하나가 보이는 최상단을 루트로 간주
#   - 실패 시 BASE_DIR 환경변수, 그것도 없으면 현재 작업 디렉토리
#     (site-packages 설치 시 루트 마커가 없으므로)
# ─────────────────────────────────────────────────────────
def find_project_root() -> Path:
    env_root = os.getenv("BASE_DIR")
    if env_root:
        return Path(env_root).resolve()
    cur = Path(__file__).resolve()
    for parent in cur.parents:
        if any((parent / m).exists() for m in (".git", "pyproject.toml")):
            return parent
    return Path.cwd()


ROOT: Path = find_project_root()

# ─────────────────────────────────────────────────────────
# .env 로딩
#   - ENV_FILE 지정 시 우선
#   - 없으면 ROOT/.env.<ENV> → 없으면 ROOT/.env
# ─────────────────────────────────────────────────────────
_DEFAULT_ENV = os.getenv("ENV", "test")
_env_file_candidate = ROOT / f".env.{_DEFAULT_ENV}"
_ENV_FILE = (
    Path(os.getenv("ENV_FILE")).resolve()
    if os.getenv("ENV_FILE")
    else (_env_file_candidate if _env_file_candidate.exists() else (ROOT / ".env"))
)
load_dotenv(dotenv_path=_ENV_FILE, override=False)


class Settings:
    # ── App / Runtime ─────────────────────────────────────
    ENV: str = os.getenv("ENV", _DEFAULT_ENV)
    ROOT: Path = ROOT

    # ── Pose / Rotation ───────────────────────────────────
    DEFAULT_FRAME_RATE: float = env_float("DEFAULT_FRAME_RATE", DEFAULT_FRAME_RATE)
    MIN_VISIBILITY: float = env_float("MIN_VISIBILITY", DEFAULT_MIN_VISIBILITY)

    # ── Velocity ──────────────────────────────────────────
    VELOCITY_SMOOTHING_WINDOW: int = env_int(
        "VELOCITY_SMOOTHING_WINDOW", DEFAULT_SMOOTHING_WINDOW
    )

    # ── Swing window detection ────────────────────────────
    SWING_PELVIS_VELOCITY_THRESHOLD: float = env_float(
        "SWING_PELVIS_VELOCITY_THRESHOLD", DEFAULT_SWING_PELVIS_THRESHOLD
    )
    SWING_MIN_DURATION_FRAMES: int = env_int(
        "SWING_MIN_DURATION_FRAMES", DEFAULT_SWING_MIN_DURATION_FRAMES
    )
    SWING_MAX_DURATION_FRAMES: int = env_int(
        "SWING_MAX_DURATION_FRAMES", DEFAULT_SWING_MAX_DURATION_FRAMES
    )

    # ── Sequencing ────────────────────────────────────────
    CV_NOISE_FLOOR: float = env_float("CV_NOISE_FLOOR", DEFAULT_CV_NOISE_FLOOR)

    # ── Fusion (효율 정규화 기준값, 근거 미확정 → ENV로 덮어쓰기 가능) ──
    REFERENCE_PELVIS_VELOCITY: float = env_float(
        "REFERENCE_PELVIS_VELOCITY", DEFAULT_REFERENCE_PELVIS_VELOCITY
    )
    REFERENCE_BAT_SPEED: float = env_float("REFERENCE_BAT_SPEED", DEFAULT_REFERENCE_BAT_SPEED)
    DEFAULT_TIMING_CV: float = env_float("DEFAULT_TIMING_CV", DEFAULT_TIMING_CV)

    # ── 룰 테이블 파일(선택) ──────────────────────────────
    SEQUENCING_RULES_FILE: Optional[Path] = env_path("SEQUENCING_RULES_FILE", None)
    MOTOR_PROFILE_RULES_FILE: Optional[Path] = env_path("MOTOR_PROFILE_RULES_FILE", None)

    # ── Calibration ───────────────────────────────────────
    CALIBRATION_FILE: Optional[Path] = env_path("CALIBRATION_FILE", None)


# 전역 싱글톤처럼 사용
settings = Settings()
