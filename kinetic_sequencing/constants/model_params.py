# Fallback defaults (settings에서 ENV 미지정 시 사용)
DEFAULT_FRAME_RATE = 30

# ── Rotation ──────────────────────────────────────────
DEFAULT_MIN_VISIBILITY = 0.5

# ── Velocity ──────────────────────────────────────────
DEFAULT_SMOOTHING_WINDOW = 3

# ── Swing window ──────────────────────────────────────
DEFAULT_SWING_PELVIS_THRESHOLD = 200.0  # deg/s, 스윙 시작 판정
DEFAULT_SWING_MIN_DURATION_FRAMES = 10
DEFAULT_SWING_MAX_DURATION_FRAMES = 60
DEFAULT_FOLLOW_THROUGH_FRAMES = 10
DEFAULT_STRIDE_FRACTION = 0.35

# ── Sequencing ────────────────────────────────────────
DEFAULT_CV_NOISE_FLOOR = 50.0  # deg/s 이하 프레임은 CV 계산에서 제외

# FourBBodyInputs 반올림 자릿수
SUMMARY_PRECISION = {
    "pelvis_velocity": 0,
    "torso_velocity": 0,
    "stretch_rate": 0,
    "x_factor": 1,
    "tp_ratio": 1,
    "consistency_cv": 1,
}

# ── Calibration ───────────────────────────────────────
CALIBRATION_MODEL_VERSION = "1.0.0"
CALIBRATION_METRICS = ("pelvis_velocity", "torso_velocity", "x_factor", "stretch_rate")
MIN_REGRESSION_PAIRS = 3
LOW_SAMPLE_COUNT = 10
RECOMMENDED_SAMPLE_COUNT = 30
OUTLIER_STD_MULTIPLIER = 3.0
MIN_PLAYER_DIVERSITY = 3

# ── Fusion ────────────────────────────────────────────
DEFAULT_REFERENCE_PELVIS_VELOCITY = 750.0  # deg/s
DEFAULT_REFERENCE_BAT_SPEED = 70.0  # mph
DEFAULT_TIMING_CV = 15.0  # "average"

# ── Motor profile ─────────────────────────────────────
MIN_PROFILE_SCORE = 30

# ── Quality assessment ────────────────────────────────
MIN_USABLE_VALID_RATIO = 0.5
LOW_PELVIS_VELOCITY = 200
