"""품질 프로파일 조회(키 또는 언어+이름)와 룰 활성화 이력 기록을 담당하는 도메인 서비스입니다."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from app.exceptions import InvalidArgumentError, NotFoundError
from app.models.quality_profile import QProfileChange, QualityProfile
from app.models.rule import Rule
from app.services import change_storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileRef:
    key: Optional[str] = None
    language: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_key(cls, key: str) -> "ProfileRef":
        return cls(key=key)

    @classmethod
    def from_name(cls, language: str, name: str) -> "ProfileRef":
        return cls(language=language, name=name)

    @classmethod
    def from_params(
        cls,
        profile_key: Optional[str],
        language: Optional[str],
        profile_name: Optional[str],
    ) -> "ProfileRef":
        if profile_key:
            if language or profile_name:
                raise InvalidArgumentError("profileKey와 language/profileName은 함께 사용할 수 없습니다.")
            return cls.from_key(profile_key)
        if language and profile_name:
            return cls.from_name(language, profile_name)
        raise InvalidArgumentError("profileKey 또는 language + profileName이 필요합니다.")

    def __str__(self) -> str:
        if self.key:
            return self.key
        return f"{self.language}/{self.name}"


class ProfileResolver:
    def __init__(self, db: Session):
        self.db = db

    def resolve(self, ref: ProfileRef) -> QualityProfile:
        q = self.db.query(QualityProfile)
        if ref.key:
            profile = q.filter(QualityProfile.kee == ref.key).first()
        else:
            profile = q.filter(
                QualityProfile.language == ref.language,
                QualityProfile.name == ref.name,
            ).first()
        if not profile:
            logger.info("[changelog] quality profile not found: %s", ref)
            raise NotFoundError(f"품질 프로파일을 찾을 수 없습니다: {ref}")
        return profile


def record_rule_change(
    db: Session,
    *,
    profile: QualityProfile,
    change_type: str,
    rule_key: str,
    user_login: Optional[str] = None,
    severity: Optional[str] = None,
    inheritance: Optional[str] = None,
    params: Optional[Mapping[str, Any]] = None,
    created_at: Optional[int] = None,
) -> QProfileChange:
    rule = db.query(Rule.rule_id).filter(Rule.rule_key == rule_key).first()
    if not rule:
        raise NotFoundError(f"룰을 찾을 수 없습니다: {rule_key}")
    return change_storage.create_profile_change(
        db,
        profile_kee=profile.kee,
        change_type=change_type,
        user_login=user_login,
        severity=severity,
        inheritance=inheritance,
        rule_key=rule_key,
        params=params,
        created_at=created_at,
    )
