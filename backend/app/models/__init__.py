"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.access_scope import ProjectPermission
from app.models.rule import Rule, DebtCharacteristic
from app.models.quality_profile import QualityProfile, QProfileChange
from app.models.issue import Component, ActionPlan, Issue, IssueComment, IssueChange

__all__ = [
    "User",
    "ProjectPermission",
    "Rule", "DebtCharacteristic",
    "QualityProfile", "QProfileChange",
    "Component", "ActionPlan", "Issue", "IssueComment", "IssueChange",
]
