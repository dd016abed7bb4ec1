"""
포즈 추출 Domain Logic
외부 포즈 추정기(MediaPipe 등)를 주입받아 분석 코어용 PoseFrame 시퀀스 생성
"""
import logging
import time
from typing import Any, Callable, Optional, Protocol, Sequence

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.constants import NUM_LANDMARKS
from kinetic_sequencing.schemas.pose_dto import ExtractionResult, PoseFrame, PoseLandmark

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


class PoseEstimator(Protocol):
    """이미지 1장 → landmark 리스트 (미검출 시 None)"""

    def estimate(self, image: Any) -> Optional[list[PoseLandmark]]:
        ...


def empty_landmarks() -> list[PoseLandmark]:
    """미검출 프레임 자리채움 (가시성 0 → 회전 처리에서 invalid)"""
    return [PoseLandmark(x=0.0, y=0.0, z=0.0, visibility=0.0) for _ in range(NUM_LANDMARKS)]


class PoseExtractor:
    """주입된 추정기 기반 포즈 추출기"""

    def __init__(self, estimator: PoseEstimator, target_fps: Optional[float] = None):
        """
        Args:
            estimator: PoseEstimator 구현체
            target_fps: 이미지 시퀀스의 프레임 레이트 (기본: settings.DEFAULT_FRAME_RATE)
        """
        self.estimator = estimator
        self.target_fps = target_fps or settings.DEFAULT_FRAME_RATE
        if self.target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {self.target_fps}")

    def extract(
        self,
        images: Sequence[Any],
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExtractionResult:
        """
        전체 이미지에서 포즈 추출

        - 타이밍 유지를 위해 미검출 프레임도 빈 landmark 로 포함
        - timestamp = index / fps × 1000 (ms)

        Args:
            images: 시간 순서의 이미지 리스트
            on_progress: (진행률 %, 상태 문자열) 콜백

        Returns:
            ExtractionResult
        """
        start = time.perf_counter()
        total = len(images)
        frames: list[PoseFrame] = []
        valid_count = 0

        for frame_idx, image in enumerate(images):
            landmarks = self.estimator.estimate(image)
            if landmarks:
                valid_count += 1
            else:
                landmarks = empty_landmarks()

            frames.append(
                PoseFrame(
                    timestamp=frame_idx / self.target_fps * 1000.0,
                    frame_number=frame_idx,
                    landmarks=landmarks,
                )
            )

            if on_progress:
                on_progress((frame_idx + 1) / total * 100.0, f"Processing frame {frame_idx + 1}/{total}")

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.info(f"[Pose] extracted {valid_count}/{total} frames in {elapsed_ms:.1f}ms")

        return ExtractionResult(
            frames=frames,
            frame_rate=self.target_fps,
            extracted_frame_count=total,
            valid_frame_count=valid_count,
            processing_time_ms=elapsed_ms,
        )
