# MediaPipe Pose landmark indices
L_SHOULDER, R_SHOULDER = 11, 12
L_HIP,     R_HIP       = 23, 24

NUM_LANDMARKS = 33

# 회전 라인 (right → left 방향으로 각도 측정)
PELVIS_LINE = (R_HIP, L_HIP)
TORSO_LINE  = (R_SHOULDER, L_SHOULDER)

# confidence 계산에 쓰는 핵심 관절
ROTATION_KEYPOINTS = (L_HIP, R_HIP, L_SHOULDER, R_SHOULDER)
