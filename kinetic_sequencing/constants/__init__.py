# re-exports: 다른 모듈에서 짧게 import 하도록

from .mediapipe_indices import (
    L_SHOULDER, R_SHOULDER, L_HIP, R_HIP,
    NUM_LANDMARKS, PELVIS_LINE, TORSO_LINE, ROTATION_KEYPOINTS,
)

from .model_params import (
    DEFAULT_FRAME_RATE,
    DEFAULT_MIN_VISIBILITY,
    DEFAULT_SMOOTHING_WINDOW,
    DEFAULT_SWING_PELVIS_THRESHOLD,
    DEFAULT_SWING_MIN_DURATION_FRAMES,
    DEFAULT_SWING_MAX_DURATION_FRAMES,
    DEFAULT_FOLLOW_THROUGH_FRAMES,
    DEFAULT_STRIDE_FRACTION,
    DEFAULT_CV_NOISE_FLOOR,
    SUMMARY_PRECISION,
    CALIBRATION_MODEL_VERSION,
    CALIBRATION_METRICS,
    MIN_REGRESSION_PAIRS,
    LOW_SAMPLE_COUNT,
    RECOMMENDED_SAMPLE_COUNT,
    OUTLIER_STD_MULTIPLIER,
    MIN_PLAYER_DIVERSITY,
    DEFAULT_REFERENCE_PELVIS_VELOCITY,
    DEFAULT_REFERENCE_BAT_SPEED,
    DEFAULT_TIMING_CV,
    MIN_PROFILE_SCORE,
    MIN_USABLE_VALID_RATIO,
    LOW_PELVIS_VELOCITY,
)
