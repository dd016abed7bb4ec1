"""
모터 프로파일 분류 (휴리스틱)
룰별 가산 점수 → 최고 점수 프로파일. 학습 모델 아님
"""
import logging
from pathlib import Path
from typing import Optional

from kinetic_sequencing.config.settings import settings
from kinetic_sequencing.constants import MIN_PROFILE_SCORE
from kinetic_sequencing.schemas.fusion_dto import UnifiedFourBInputs
from kinetic_sequencing.schemas.profile_dto import PROFILE_TAGS, MotorProfileResult
from kinetic_sequencing.schemas.rule_dto import MotorProfileRule, RuleCondition
from kinetic_sequencing.utils.rules import all_conditions_hold, load_rule_table

logger = logging.getLogger(__name__)


def _cond(field: str, op: str, value) -> RuleCondition:
    return RuleCondition(field=field, op=op, value=value)


def default_motor_profile_rules() -> list[MotorProfileRule]:
    """기본 룰 테이블 (임계값은 고정 상수)"""
    return [
        # Spinner: 회전 파워
        MotorProfileRule(
            profile="Spinner",
            conditions=[_cond("pelvis_velocity", "gt", 650)],
            points=30,
            evidence="High pelvis velocity suggests rotational power",
        ),
        MotorProfileRule(
            profile="Spinner",
            conditions=[_cond("sequencing_quality", "eq", "good"), _cond("tp_ratio", "gt", 1.1)],
            points=25,
            evidence="Good kinetic sequence with torso catching up",
        ),
        # Slingshotter: 탄성 에너지
        MotorProfileRule(
            profile="Slingshotter",
            conditions=[_cond("stretch_rate", "gt", 800)],
            points=35,
            evidence="High stretch rate indicates elastic loading",
        ),
        MotorProfileRule(
            profile="Slingshotter",
            conditions=[_cond("x_factor", "gt", 40)],
            points=20,
            evidence="Large X-factor supports slingshot pattern",
        ),
        # Whipper: 손/배트 속도 주도
        MotorProfileRule(
            profile="Whipper",
            conditions=[_cond("bat_speed_mph", "gt", 70)],
            points=25,
            evidence="High bat speed",
        ),
        MotorProfileRule(
            profile="Whipper",
            conditions=[_cond("hand_to_bat_ratio", "gt", 1.6)],
            points=30,
            evidence="High hand-to-bat ratio suggests whip action",
        ),
        # Titan: 근력 기반
        MotorProfileRule(
            profile="Titan",
            conditions=[_cond("timing_cv", "lt", 8)],
            points=20,
            evidence="Very consistent timing suggests strength-based approach",
        ),
        MotorProfileRule(
            profile="Titan",
            conditions=[_cond("body_to_bat_efficiency", "gt", 1.1)],
            points=25,
            evidence="Efficient energy transfer through strength",
        ),
    ]


class MotorProfileClassifier:
    def __init__(
        self,
        rules: Optional[list[MotorProfileRule]] = None,
        rules_file: Optional[Path] = None,
        min_score: float = MIN_PROFILE_SCORE,
    ):
        self.rules = rules if rules is not None else load_rule_table(
            rules_file or settings.MOTOR_PROFILE_RULES_FILE,
            MotorProfileRule,
            default_motor_profile_rules,
        )
        self.min_score = min_score

    def classify(self, inputs: UnifiedFourBInputs) -> MotorProfileResult:
        """
        - 룰이 매칭되면 해당 프로파일에 points 가산 + evidence 기록
        - 동점이면 PROFILE_TAGS 순서상 앞선 프로파일
        - 최고 점수 < 30 → Unknown
        - confidence = 최고 점수를 0~100 으로 clamp
        """
        values = inputs.model_dump()
        scores: dict[str, float] = {tag: 0.0 for tag in PROFILE_TAGS}
        evidence: list[str] = []

        for rule in self.rules:
            if all_conditions_hold(rule.conditions, values):
                scores[rule.profile] += rule.points
                if rule.evidence:
                    evidence.append(rule.evidence)

        primary, max_score = "Unknown", 0.0
        for tag in PROFILE_TAGS:
            if scores[tag] > max_score:
                primary, max_score = tag, scores[tag]

        if max_score < self.min_score:
            primary = "Unknown"

        confidence = int(min(max(round(max_score), 0), 100))
        logger.info(f"[Profile] primary={primary} confidence={confidence} scores={scores}")

        return MotorProfileResult(
            primary=primary,
            confidence=confidence,
            scores=scores,
            evidence=evidence,
        )


def infer_motor_profile(inputs: UnifiedFourBInputs) -> MotorProfileResult:
    return MotorProfileClassifier().classify(inputs)
