"""
Pytest Configuration & Shared Fixtures

이 파일은 모든 테스트에서 재사용 가능한 fixture를 정의합니다.
"""
import json
from pathlib import Path
from typing import List

import pytest

from kinetic_sequencing.domain.rotation.processor import RotationProcessor
from kinetic_sequencing.domain.sequencing.analyzer import SequencingAnalyzer, default_sequencing_rules
from kinetic_sequencing.domain.swing.detector import SwingWindowDetector
from kinetic_sequencing.domain.velocity.engine import VelocityEngine
from kinetic_sequencing.schemas.calibration_dto import TrainingDataset
from kinetic_sequencing.schemas.pose_dto import PoseFrame
from kinetic_sequencing.services.body_analysis_service import BodyAnalysisService
from tests.test_helpers import build_training_pairs, create_swing_sequence


# ========================================
# Domain Object Fixtures
# ========================================

@pytest.fixture
def fps() -> float:
    return 30.0


@pytest.fixture
def swing_frames(fps) -> List[PoseFrame]:
    """90프레임 / 30fps 합성 스윙"""
    return create_swing_sequence(num_frames=90, fps=fps)


@pytest.fixture
def training_dataset() -> TrainingDataset:
    """y = 2x + 5 관계의 30개 pair, 선수 3명"""
    return TrainingDataset.from_pairs(build_training_pairs(30, num_players=3))


# ========================================
# Service Fixtures
# ========================================

@pytest.fixture
def body_analysis_service() -> BodyAnalysisService:
    """기본 파라미터로 명시 구성한 서비스 (환경변수 영향 없음)"""
    return BodyAnalysisService(
        rotation_processor=RotationProcessor(min_visibility=0.5),
        velocity_engine=VelocityEngine(smoothing_window=3),
        swing_detector=SwingWindowDetector(
            pelvis_threshold=200.0, min_duration_frames=10, max_duration_frames=60
        ),
        sequencing_analyzer=SequencingAnalyzer(rules=default_sequencing_rules(), cv_noise_floor=50.0),
    )


# ========================================
# File Fixtures
# ========================================

@pytest.fixture
def write_json(tmp_path):
    """tmp_path 아래 JSON 파일 작성 헬퍼"""
    def _write(name: str, payload) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
