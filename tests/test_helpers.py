"""
Test Helper Utilities

재사용 가능한 테스트 헬퍼 함수들을 모아놓은 모듈입니다.
"""
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import numpy as np

from kinetic_sequencing.constants import L_HIP, R_HIP, L_SHOULDER, R_SHOULDER, NUM_LANDMARKS
from kinetic_sequencing.schemas.analysis_dto import BodyAnalysisResult, FourBBodyInputs
from kinetic_sequencing.schemas.calibration_dto import GroundTruthMetrics, TrainingPair
from kinetic_sequencing.schemas.fusion_dto import UnifiedFourBInputs
from kinetic_sequencing.schemas.pose_dto import PoseFrame, PoseLandmark
from kinetic_sequencing.schemas.rotation_dto import RotationFrame, VelocityFrame

LINE_CENTER = (0.5, 0.5)
LINE_HALF_LENGTH = 0.1


# ========================================
# Pose Data Generators
# ========================================

def create_landmarks(
    pelvis_angle: float = 0.0,
    torso_angle: float = 0.0,
    visibility: float = 0.9,
) -> List[PoseLandmark]:
    """
    골반/몸통 라인이 지정 각도가 되도록 33개 landmark 생성

    right = center - r(cosθ, sinθ), left = center + r(cosθ, sinθ)
    → atan2(left - right) = θ
    """
    landmarks = [
        PoseLandmark(x=0.5, y=0.5, z=0.0, visibility=visibility)
        for _ in range(NUM_LANDMARKS)
    ]

    for (right_idx, left_idx), angle in (
        ((R_HIP, L_HIP), pelvis_angle),
        ((R_SHOULDER, L_SHOULDER), torso_angle),
    ):
        rad = np.radians(angle)
        dx = LINE_HALF_LENGTH * np.cos(rad)
        dy = LINE_HALF_LENGTH * np.sin(rad)
        landmarks[right_idx] = PoseLandmark(
            x=LINE_CENTER[0] - dx, y=LINE_CENTER[1] - dy, visibility=visibility
        )
        landmarks[left_idx] = PoseLandmark(
            x=LINE_CENTER[0] + dx, y=LINE_CENTER[1] + dy, visibility=visibility
        )

    return landmarks


def create_pose_frame(
    frame_number: int,
    pelvis_angle: float = 0.0,
    torso_angle: float = 0.0,
    fps: float = 30.0,
    visibility: float = 0.9,
) -> PoseFrame:
    return PoseFrame(
        timestamp=frame_number / fps * 1000.0,
        frame_number=frame_number,
        landmarks=create_landmarks(pelvis_angle, torso_angle, visibility),
    )


def swing_angles(frame: int) -> tuple[float, float]:
    """
    합성 스윙 (30fps 기준)
    - 골반: 20~35 프레임 동안 9°/frame 선형 회전 → 135°
    - 몸통: 26~40 프레임 동안 가속(2차 곡선) 회전 → 150°
    """
    if frame <= 20:
        pelvis = 0.0
    elif frame <= 35:
        pelvis = 9.0 * (frame - 20)
    else:
        pelvis = 135.0

    if frame <= 26:
        torso = 0.0
    elif frame <= 40:
        torso = 150.0 * ((frame - 26) / 14.0) ** 2
    else:
        torso = 150.0

    return pelvis, torso


def create_swing_sequence(num_frames: int = 90, fps: float = 30.0) -> List[PoseFrame]:
    """골반이 먼저, 몸통이 뒤따르는 깨끗한 스윙 시퀀스"""
    return [
        create_pose_frame(i, *swing_angles(i), fps=fps)
        for i in range(num_frames)
    ]


def create_static_sequence(num_frames: int = 30, fps: float = 30.0) -> List[PoseFrame]:
    """움직임 없는 시퀀스 (스윙 미감지)"""
    return [create_pose_frame(i, 5.0, 10.0, fps=fps) for i in range(num_frames)]


# ========================================
# Rotation / Velocity Builders
# ========================================

def create_rotation_frames(
    pelvis_angles: Sequence[float],
    torso_angles: Sequence[float],
    fps: float = 30.0,
    invalid_indices: Sequence[int] = (),
) -> List[RotationFrame]:
    frames = []
    for i, (p, t) in enumerate(zip(pelvis_angles, torso_angles)):
        valid = i not in invalid_indices
        frames.append(
            RotationFrame(
                timestamp=i / fps * 1000.0,
                frame_number=i,
                pelvis_angle=p if valid else 0.0,
                torso_angle=t if valid else 0.0,
                x_factor=(t - p) if valid else 0.0,
                confidence=0.9 if valid else 0.2,
                is_valid=valid,
            )
        )
    return frames


def create_velocity_frames(
    pelvis: Sequence[float],
    torso: Sequence[float],
    stretch: Optional[Sequence[float]] = None,
    fps: float = 30.0,
) -> List[VelocityFrame]:
    """속도 인덱스 k → 원본 프레임 k+1"""
    stretch = stretch if stretch is not None else [0.0] * len(pelvis)
    return [
        VelocityFrame(
            timestamp=(k + 1) / fps * 1000.0,
            frame_number=k + 1,
            pelvis_velocity=p,
            torso_velocity=t,
            x_factor_velocity=s,
        )
        for k, (p, t, s) in enumerate(zip(pelvis, torso, stretch))
    ]


def spike(length: int, index: int, value: float, base: float = 0.0) -> List[float]:
    """index 위치만 value, 나머지는 base"""
    values = [base] * length
    values[index] = value
    return values


# ========================================
# Result / Input Builders
# ========================================

def create_body_inputs(**overrides) -> FourBBodyInputs:
    data = dict(
        pelvis_velocity=500.0,
        torso_velocity=600.0,
        x_factor=30.0,
        stretch_rate=700.0,
        consistency_cv=12.0,
        tp_ratio=1.2,
        sequencing_quality="good",
    )
    data.update(overrides)
    return FourBBodyInputs(**data)


def create_body_result(**overrides) -> BodyAnalysisResult:
    """프레임 없이 피크/요약만 채운 분석 결과"""
    data = dict(
        rotation_frames=[],
        velocity_frames=[],
        swing_window=None,
        peak_pelvis_velocity=500.0,
        peak_torso_velocity=600.0,
        peak_x_factor=30.0,
        peak_stretch_rate=700.0,
        pelvis_peak_frame=10,
        torso_peak_frame=14,
        sequencing_gap=4,
        frame_rate=30.0,
        total_frames=0,
        valid_frame_percent=0.0,
        four_b_inputs=create_body_inputs(),
    )
    data.update(overrides)
    return BodyAnalysisResult(**data)


def create_unified_inputs(**overrides) -> UnifiedFourBInputs:
    """모든 프로파일 룰을 건드리지 않는 중립 입력"""
    data = dict(
        timing_cv=15.0,
        pelvis_velocity=400.0,
        torso_velocity=450.0,
        x_factor=20.0,
        stretch_rate=300.0,
        tp_ratio=1.0,
        sequencing_quality="average",
        has_video_data=True,
        has_sensor_data=False,
    )
    data.update(overrides)
    return UnifiedFourBInputs(**data)


def build_training_pair(
    index: int,
    player_id: str = "player-1",
    pelvis: Optional[float] = None,
    relation=lambda x: 2.0 * x + 5.0,
) -> TrainingPair:
    """
    모든 메트릭이 relation(추정값) = 실측값 인 pair 생성

    Example:
        >>> pair = build_training_pair(0)  # est pelvis 400 → gt 805
    """
    est_pelvis = pelvis if pelvis is not None else 400.0 + 20.0 * index
    estimate = create_body_inputs(
        pelvis_velocity=est_pelvis,
        torso_velocity=500.0 + 25.0 * index,
        x_factor=20.0 + 1.5 * index,
        stretch_rate=600.0 + 30.0 * index,
    )
    ground_truth = GroundTruthMetrics(
        pelvis_velocity=relation(estimate.pelvis_velocity),
        torso_velocity=relation(estimate.torso_velocity),
        x_factor=relation(estimate.x_factor),
        stretch_rate=relation(estimate.stretch_rate),
    )
    return TrainingPair(
        session_id=f"session-{index}",
        player_id=player_id,
        timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
        estimate=estimate,
        ground_truth=ground_truth,
    )


def build_training_pairs(count: int, num_players: int = 3) -> List[TrainingPair]:
    return [
        build_training_pair(i, player_id=f"player-{i % num_players}")
        for i in range(count)
    ]
