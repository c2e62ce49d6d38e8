"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from typing import Optional

from sqlalchemy.orm import Session

from app.models.access_scope import ProjectPermission
from app.models.user import User


ADMIN = "admin"
USER = "user"

ALL_ROLES = (ADMIN, USER)

ISSUE_ADMIN = "issueadmin"


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == ADMIN


def has_project_permission(db: Session, user: Optional[User], permission: str, project_kee: Optional[str]) -> bool:
    if user is None or not project_kee:
        return False
    if is_admin(user):
        return True
    row = (
        db.query(ProjectPermission.permission_id)
        .filter(
            ProjectPermission.user_id == user.user_id,
            ProjectPermission.project_kee == project_kee,
            ProjectPermission.permission == permission,
        )
        .first()
    )
    return row is not None
