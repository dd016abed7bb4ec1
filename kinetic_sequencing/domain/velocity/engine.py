"""
각속도 Domain Logic
회전 각도 시계열 → 중앙차분 각속도 → 이동평균 스무딩
"""
from typing import Optional, Sequence

import numpy as np

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.schemas.rotation_dto import RotationFrame, VelocityFrame


class VelocityEngine:
    """골반/몸통/X-Factor 각속도 계산기"""

    def __init__(self, smoothing_window: Optional[int] = None):
        """
        Args:
            smoothing_window: 이동평균 창 크기 (기본: settings.VELOCITY_SMOOTHING_WINDOW)
        """
        self.smoothing_window = (
            settings.VELOCITY_SMOOTHING_WINDOW if smoothing_window is None else smoothing_window
        )
        if self.smoothing_window < 1:
            raise ValueError(f"smoothing_window must be >= 1, got {self.smoothing_window}")

    def calculate(
        self, rotation_frames: Sequence[RotationFrame], frame_rate: float
    ) -> list[VelocityFrame]:
        """
        미분 + 스무딩

        Returns:
            길이 = len(rotation_frames) - 2 (양 끝 프레임 제외), 인덱스 k ↔ 원본 프레임 k+1
        """
        return self.smooth(self.differentiate(rotation_frames, frame_rate))

    def differentiate(
        self, rotation_frames: Sequence[RotationFrame], frame_rate: float
    ) -> list[VelocityFrame]:
        """
        중앙차분: v[i] = (angle[i+1] - angle[i-1]) / (2 * dt), dt = 1 / frame_rate

        - 골반/몸통은 크기(절대값), X-Factor 속도는 부호 유지
        - 가운데 프레임이 invalid 면 0 속도 레코드 (인덱스 정렬 유지)
        """
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        if len(rotation_frames) < 3:
            return []

        dt = 1.0 / frame_rate
        pelvis = np.array([f.pelvis_angle for f in rotation_frames], dtype=float)
        torso = np.array([f.torso_angle for f in rotation_frames], dtype=float)
        x_factor = np.array([f.x_factor for f in rotation_frames], dtype=float)

        pelvis_v = (pelvis[2:] - pelvis[:-2]) / (2 * dt)
        torso_v = (torso[2:] - torso[:-2]) / (2 * dt)
        x_factor_v = (x_factor[2:] - x_factor[:-2]) / (2 * dt)

        frames = []
        for k, curr in enumerate(rotation_frames[1:-1]):
            if not curr.is_valid:
                frames.append(_zero_frame(curr))
                continue
            frames.append(
                VelocityFrame(
                    timestamp=curr.timestamp,
                    frame_number=curr.frame_number,
                    pelvis_velocity=abs(float(pelvis_v[k])),
                    torso_velocity=abs(float(torso_v[k])),
                    x_factor_velocity=float(x_factor_v[k]),
                )
            )
        return frames

    def smooth(
        self, velocity_frames: Sequence[VelocityFrame], window_size: Optional[int] = None
    ) -> list[VelocityFrame]:
        """대칭 이동평균. 시퀀스 양 끝에서는 창을 잘라서(clip) 평균"""
        half = (window_size or self.smoothing_window) // 2
        n = len(velocity_frames)

        pelvis = [f.pelvis_velocity for f in velocity_frames]
        torso = [f.torso_velocity for f in velocity_frames]
        x_factor = [f.x_factor_velocity for f in velocity_frames]

        smoothed = []
        for i, frame in enumerate(velocity_frames):
            lo = max(0, i - half)
            hi = min(n - 1, i + half)
            smoothed.append(
                frame.model_copy(
                    update={
                        "pelvis_velocity": float(np.mean(pelvis[lo:hi + 1])),
                        "torso_velocity": float(np.mean(torso[lo:hi + 1])),
                        "x_factor_velocity": float(np.mean(x_factor[lo:hi + 1])),
                    }
                )
            )
        return smoothed


def _zero_frame(frame: RotationFrame) -> VelocityFrame:
    return VelocityFrame(
        timestamp=frame.timestamp,
        frame_number=frame.frame_number,
        pelvis_velocity=0.0,
        torso_velocity=0.0,
        x_factor_velocity=0.0,
    )
