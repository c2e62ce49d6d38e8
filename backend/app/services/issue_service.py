"""Issue Service 도메인 서비스 레이어입니다. 이슈 조회, 필드 변경 기록, 상태 전이, 코멘트를 캡슐화합니다."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from app.exceptions import InvalidArgumentError, NotFoundError
from app.models.issue import Issue, IssueChange, IssueComment
from app.models.user import User
from app.services import auth_service, change_storage, issue_workflow
from app.services.change_record import ABSENT, Diff

logger = logging.getLogger(__name__)

# changelog 필드명 -> Issue 컬럼
FIELD_ATTRIBUTES = {
    "severity": "severity",
    "resolution": "resolution",
    "status": "status",
    "assignee": "assignee",
    "actionPlan": "action_plan_key",
    "technicalDebt": "technical_debt",
    "message": "message",
    "line": "line",
}

SEVERITIES = ("INFO", "MINOR", "MAJOR", "CRITICAL", "BLOCKER")


class IssueResolver:
    """요청 단위 resolver. Loader에 넘긴 뒤 같은 인스턴스로 다시 resolve 하면 조회 없이 같은 이슈를 돌려준다."""

    def __init__(self, db: Session):
        self.db = db
        self._resolved: Dict[str, Issue] = {}

    def resolve(self, issue_key: str) -> Issue:
        if issue_key in self._resolved:
            return self._resolved[issue_key]
        issues = self.db.query(Issue).filter(Issue.kee == issue_key).all()
        if len(issues) != 1:
            logger.info("[issue] issue not found: %s", issue_key)
            raise NotFoundError(f"이슈를 찾을 수 없습니다: {issue_key}")
        self._resolved[issue_key] = issues[0]
        return issues[0]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def update_issue(
    db: Session,
    *,
    issue: Issue,
    changes: Mapping[str, Any],
    user_login: Optional[str] = None,
    created_at: Optional[int] = None,
) -> Optional[IssueChange]:
    """필드 값을 바꾸고 실제로 달라진 필드만 하나의 변경 이력으로 기록한다."""
    diffs: Dict[str, Diff] = {}
    for field, new_value in changes.items():
        attr = FIELD_ATTRIBUTES.get(field)
        if attr is None:
            raise InvalidArgumentError(f"변경할 수 없는 필드입니다: {field}")
        old_value = getattr(issue, attr)
        if old_value == new_value:
            continue
        diffs[field] = Diff(
            old=old_value if old_value is not None else ABSENT,
            new=new_value if new_value is not None else ABSENT,
        )
        setattr(issue, attr, new_value)

    if not diffs:
        return None
    issue.updated_at = _utcnow()
    if issue.status == issue_workflow.CLOSED and issue.closed_at is None:
        issue.closed_at = issue.updated_at
    # 이슈 필드 변경과 이력 행은 같은 커밋으로 저장된다.
    return change_storage.create_issue_change(
        db,
        issue_kee=issue.kee,
        diffs=diffs,
        user_login=user_login,
        created_at=created_at,
    )


def do_transition(
    db: Session,
    *,
    issue: Issue,
    transition_key: str,
    user: User,
    is_issue_admin: bool = False,
) -> Optional[IssueChange]:
    transition = issue_workflow.find_transition(transition_key)
    if transition is None or transition_key not in issue_workflow.list_transitions(issue, user, is_issue_admin):
        raise InvalidArgumentError(f"'{transition_key}' 전이를 수행할 수 없습니다 (현재 상태 {issue.status}).")
    return update_issue(
        db,
        issue=issue,
        changes={"resolution": transition["resolution"], "status": transition["to"]},
        user_login=user.login,
    )


def assign(db: Session, *, issue: Issue, assignee: Optional[str], user: User) -> Optional[IssueChange]:
    if assignee and not auth_service.find_active_user(db, assignee):
        raise NotFoundError(f"사용자를 찾을 수 없습니다: {assignee}")
    return update_issue(db, issue=issue, changes={"assignee": assignee or None}, user_login=user.login)


def set_severity(db: Session, *, issue: Issue, severity: str, user: User) -> Optional[IssueChange]:
    if severity not in SEVERITIES:
        raise InvalidArgumentError(f"알 수 없는 심각도입니다: {severity}")
    return update_issue(db, issue=issue, changes={"severity": severity}, user_login=user.login)


def add_comment(db: Session, *, issue: Issue, text: str, user: User) -> IssueComment:
    if not text or not text.strip():
        raise InvalidArgumentError("코멘트 내용을 입력해 주세요.")
    comment = IssueComment(
        kee=uuid.uuid4().hex,
        issue_kee=issue.kee,
        user_login=user.login,
        markdown_text=text,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment
