"""
회전 각도 Domain Logic
포즈 landmark → 골반/몸통 회전 각도 + 프레임 유효성
"""
from typing import Optional, Sequence

import numpy as np

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.constants import PELVIS_LINE, TORSO_LINE, ROTATION_KEYPOINTS
from kinetic_sequencing.schemas.pose_dto import PoseFrame, PoseLandmark
from kinetic_sequencing.schemas.rotation_dto import RotationFrame


class RotationProcessor:
    """골반/몸통 회전 각도 계산기 (순수 함수, 상태 없음)"""

    def __init__(self, min_visibility: Optional[float] = None):
        """
        Args:
            min_visibility: 관절 가시성 최소값 (기본: settings.MIN_VISIBILITY)
        """
        self.min_visibility = (
            settings.MIN_VISIBILITY if min_visibility is None else min_visibility
        )

    def process_all(self, frames: Sequence[PoseFrame]) -> list[RotationFrame]:
        """모든 프레임 처리 (입력과 1:1)"""
        return [self.process(frame) for frame in frames]

    def process(self, frame: PoseFrame) -> RotationFrame:
        """
        단일 프레임 → RotationFrame

        - 관절이 없거나 가시성이 낮아도 예외 없이 is_valid=False 로 표시
        - 각도를 못 구하면 0 으로 채움
        """
        pelvis_angle = self._line_angle(frame.landmarks, PELVIS_LINE)
        torso_angle = self._line_angle(frame.landmarks, TORSO_LINE)
        confidence = self._confidence(frame.landmarks)

        is_valid = (
            pelvis_angle is not None
            and torso_angle is not None
            and confidence >= self.min_visibility
        )

        return RotationFrame(
            timestamp=frame.timestamp,
            frame_number=frame.frame_number,
            pelvis_angle=pelvis_angle if pelvis_angle is not None else 0.0,
            torso_angle=torso_angle if torso_angle is not None else 0.0,
            x_factor=(torso_angle - pelvis_angle) if is_valid else 0.0,
            confidence=confidence,
            is_valid=is_valid,
        )

    def _line_angle(
        self, landmarks: Sequence[PoseLandmark], line: tuple[int, int]
    ) -> Optional[float]:
        """right → left 라인의 수평 기준 각도 (도). 가시성 부족 시 None"""
        right = _landmark_at(landmarks, line[0])
        left = _landmark_at(landmarks, line[1])
        if right is None or left is None:
            return None
        if right.visibility < self.min_visibility or left.visibility < self.min_visibility:
            return None

        dx = left.x - right.x
        dy = left.y - right.y
        return float(np.degrees(np.arctan2(dy, dx)))

    def _confidence(self, landmarks: Sequence[PoseLandmark]) -> float:
        """엉덩이/어깨 4개 관절의 평균 가시성 (없는 관절은 0)"""
        vis = []
        for idx in ROTATION_KEYPOINTS:
            lm = _landmark_at(landmarks, idx)
            vis.append(lm.visibility if lm is not None else 0.0)
        return float(np.clip(np.mean(vis), 0.0, 1.0))


def _landmark_at(landmarks: Sequence[PoseLandmark], idx: int) -> Optional[PoseLandmark]:
    return landmarks[idx] if 0 <= idx < len(landmarks) else None


def compensate_for_camera_angle(
    rotation_frames: Sequence[RotationFrame], camera_angle: float
) -> list[RotationFrame]:
    """
    비수직 카메라 보정: 실제 회전 = 겉보기 회전 / cos(camera_angle)

    Args:
        rotation_frames: 회전 프레임 시퀀스
        camera_angle: 타자 수직 방향 기준 카메라 각도 (도, 0 = 정측면)
    """
    if abs(camera_angle) >= 90.0:
        raise ValueError(f"camera_angle must be within (-90, 90) degrees, got {camera_angle}")

    factor = 1.0 / float(np.cos(np.radians(camera_angle)))
    return [
        frame.model_copy(
            update={
                "pelvis_angle": frame.pelvis_angle * factor,
                "torso_angle": frame.torso_angle * factor,
                "x_factor": frame.x_factor * factor,
            }
        )
        for frame in rotation_frames
    ]
