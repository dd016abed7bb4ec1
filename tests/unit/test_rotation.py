# tests/unit/test_rotation.py
import pytest

from kinetic_sequencing.constants import L_SHOULDER, R_SHOULDER
from kinetic_sequencing.domain.rotation.processor import (
    RotationProcessor,
    compensate_for_camera_angle,
)
from kinetic_sequencing.schemas.pose_dto import PoseFrame, PoseLandmark
from tests.test_helpers import create_landmarks, create_pose_frame, create_rotation_frames


@pytest.fixture
def processor():
    return RotationProcessor(min_visibility=0.5)


def test_x_factor_is_torso_minus_pelvis(processor):
    frame = processor.process(create_pose_frame(0, pelvis_angle=10.0, torso_angle=35.0))

    assert frame.is_valid
    assert frame.pelvis_angle == pytest.approx(10.0)
    assert frame.torso_angle == pytest.approx(35.0)
    assert frame.x_factor == pytest.approx(frame.torso_angle - frame.pelvis_angle)


def test_angle_measured_right_to_left(processor):
    """오른쪽 → 왼쪽 방향, 2사분면 각도도 그대로"""
    frame = processor.process(create_pose_frame(0, pelvis_angle=135.0, torso_angle=-30.0))
    assert frame.pelvis_angle == pytest.approx(135.0)
    assert frame.torso_angle == pytest.approx(-30.0)


def test_low_shoulder_visibility_invalidates_frame(processor):
    landmarks = create_landmarks(10.0, 35.0, visibility=0.9)
    landmarks[L_SHOULDER] = landmarks[L_SHOULDER].model_copy(update={"visibility": 0.1})
    frame = processor.process(PoseFrame(timestamp=0.0, frame_number=0, landmarks=landmarks))

    assert frame.is_valid is False
    assert frame.torso_angle == 0.0
    assert frame.x_factor == 0.0
    # 골반은 여전히 계산됨
    assert frame.pelvis_angle == pytest.approx(10.0)


def test_confidence_is_mean_of_hip_and_shoulder_visibility(processor):
    landmarks = create_landmarks(0.0, 0.0, visibility=1.0)
    landmarks[L_SHOULDER] = landmarks[L_SHOULDER].model_copy(update={"visibility": 0.6})
    landmarks[R_SHOULDER] = landmarks[R_SHOULDER].model_copy(update={"visibility": 0.6})
    frame = processor.process(PoseFrame(timestamp=0.0, frame_number=0, landmarks=landmarks))

    assert frame.confidence == pytest.approx(0.8)
    assert frame.is_valid


def test_missing_landmarks_do_not_raise(processor):
    """landmark 가 부족해도 예외 없이 invalid"""
    short = [PoseLandmark(x=0.5, y=0.5, visibility=1.0) for _ in range(5)]
    frame = processor.process(PoseFrame(timestamp=0.0, frame_number=0, landmarks=short))

    assert frame.is_valid is False
    assert frame.confidence == 0.0
    assert frame.pelvis_angle == 0.0


def test_visibility_is_clamped():
    assert PoseLandmark(x=0.1, y=0.2, visibility=1.7).visibility == 1.0
    assert PoseLandmark(x=0.1, y=0.2, visibility=-0.3).visibility == 0.0


def test_process_all_is_one_to_one(processor):
    frames = [create_pose_frame(i, 5.0 * i, 6.0 * i) for i in range(7)]
    rotation = processor.process_all(frames)

    assert [r.frame_number for r in rotation] == list(range(7))
    assert [r.timestamp for r in rotation] == [f.timestamp for f in frames]


def test_camera_compensation_scales_angles():
    frames = create_rotation_frames([10.0, 20.0], [30.0, 50.0])
    compensated = compensate_for_camera_angle(frames, 60.0)

    assert compensated[0].pelvis_angle == pytest.approx(20.0)
    assert compensated[1].torso_angle == pytest.approx(100.0)
    assert compensated[1].x_factor == pytest.approx(60.0)
    # 원본은 불변
    assert frames[0].pelvis_angle == 10.0


def test_camera_compensation_zero_angle_is_identity():
    frames = create_rotation_frames([10.0], [30.0])
    assert compensate_for_camera_angle(frames, 0.0)[0].x_factor == pytest.approx(20.0)


@pytest.mark.parametrize("angle", [90.0, -90.0, 120.0])
def test_camera_compensation_rejects_perpendicular_angles(angle):
    with pytest.raises(ValueError):
        compensate_for_camera_angle(create_rotation_frames([0.0], [0.0]), angle)
