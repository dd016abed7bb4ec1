"""
스윙 구간 감지 Domain Logic
스무딩된 속도 시퀀스 → 시작 / 스트라이드 / 컨택 / 종료 프레임
"""
import logging
from typing import Optional, Sequence

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.constants import DEFAULT_FOLLOW_THROUGH_FRAMES, DEFAULT_STRIDE_FRACTION
from kinetic_sequencing.schemas.rotation_dto import SwingWindow, VelocityFrame

logger = logging.getLogger(__name__)

# 속도 프레임 k 는 원본 프레임 k+1 (중앙차분으로 첫 프레임이 빠짐)
VELOCITY_INDEX_OFFSET = 1


class SwingWindowDetector:
    """
    3단계 스캔 (1회성, 상태 없음)

    1. Start: 골반 속도가 임계값을 처음 넘는 프레임 (급격한 시작)
    2. Contact: Start 부터 최대 창 안에서 몸통 속도 최대 프레임 (완만한 피크)
    3. End / Stride: Contact + follow-through, Start~Contact 의 35% 지점
    """

    def __init__(
        self,
        pelvis_threshold: Optional[float] = None,
        min_duration_frames: Optional[int] = None,
        max_duration_frames: Optional[int] = None,
        follow_through_frames: int = DEFAULT_FOLLOW_THROUGH_FRAMES,
        stride_fraction: float = DEFAULT_STRIDE_FRACTION,
    ):
        self.pelvis_threshold = (
            settings.SWING_PELVIS_VELOCITY_THRESHOLD if pelvis_threshold is None else pelvis_threshold
        )
        self.min_duration_frames = (
            settings.SWING_MIN_DURATION_FRAMES if min_duration_frames is None else min_duration_frames
        )
        self.max_duration_frames = (
            settings.SWING_MAX_DURATION_FRAMES if max_duration_frames is None else max_duration_frames
        )
        if not 0.0 < stride_fraction < 1.0:
            raise ValueError(f"stride_fraction must be in (0, 1): {stride_fraction}")

        self.follow_through_frames = follow_through_frames
        self.stride_fraction = stride_fraction

    def detect(self, velocity_frames: Sequence[VelocityFrame]) -> Optional[SwingWindow]:
        """
        Returns:
            SwingWindow (원본 프레임 인덱스) 또는 None (스윙 미감지, 정상 결과)
        """
        start = self._find_start(velocity_frames)
        if start is None:
            logger.debug("[Swing] no pelvis threshold crossing")
            return None

        contact = self._find_contact(velocity_frames, start)
        end = min(contact + self.follow_through_frames, len(velocity_frames) - 1)

        swing_length = contact - start
        if swing_length < self.min_duration_frames:
            logger.debug(f"[Swing] candidate too short: {swing_length} frames")
            return None

        stride = start + int(swing_length * self.stride_fraction)
        if stride <= start:
            # start < stride < contact 를 만들 수 없을 만큼 짧은 후보
            logger.debug(f"[Swing] candidate too short for stride: {swing_length} frames")
            return None

        return SwingWindow(
            start_frame=start + VELOCITY_INDEX_OFFSET,
            stride_frame=stride + VELOCITY_INDEX_OFFSET,
            contact_frame=contact + VELOCITY_INDEX_OFFSET,
            end_frame=end + VELOCITY_INDEX_OFFSET,
        )

    def _find_start(self, velocity_frames: Sequence[VelocityFrame]) -> Optional[int]:
        for k, frame in enumerate(velocity_frames):
            if frame.pelvis_velocity > self.pelvis_threshold:
                return k
        return None

    def _find_contact(self, velocity_frames: Sequence[VelocityFrame], start: int) -> int:
        stop = min(start + self.max_duration_frames, len(velocity_frames))
        contact = start
        max_torso = 0.0
        for k in range(start, stop):
            if velocity_frames[k].torso_velocity > max_torso:
                max_torso = velocity_frames[k].torso_velocity
                contact = k
        return contact
