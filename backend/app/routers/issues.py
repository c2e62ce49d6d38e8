"""Issues 기능 API 라우터입니다. 이슈 조회/변경 이력과 상태 변경 요청을 서비스 레이어로 위임합니다."""

from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import InvalidArgumentError
from app.middleware.auth_middleware import get_current_user, get_optional_user
from app.middleware.locale_middleware import get_locale
from app.models.issue import Issue
from app.models.user import User
from app.schemas.issue import (
    AddCommentRequest,
    AssignRequest,
    IssueChangeResult,
    IssueChangelogOut,
    IssueCommentOut,
    IssueShowOut,
    SetSeverityRequest,
    TransitionRequest,
)
from app.services import issue_service
from app.services.change_record import ChangelogQuery, ChangelogResult
from app.services.change_storage import IssueChangeStorage
from app.services.changelog_loader import ChangelogLoader
from app.services.changelog_presenter import IssuePresenter
from app.services.changelog_query import build_changelog_query
from app.services.diff_formatter import DiffFormatter
from app.services.i18n_service import I18n
from app.services.lookup_service import RuleLookup, UserLookup
from app.utils.permissions import ISSUE_ADMIN, has_project_permission

router = APIRouter(prefix="/api/issues", tags=["issues"])


def _require(value: Optional[str], param: str) -> str:
    if not value:
        raise InvalidArgumentError(f"'{param}' 파라미터가 필요합니다.")
    return value


def _load(db: Session, query: ChangelogQuery, user_lookup: UserLookup) -> Tuple[Issue, ChangelogResult]:
    resolver = issue_service.IssueResolver(db)
    changelog = ChangelogLoader(resolver, IssueChangeStorage(db), user_lookup).load(query)
    # loader가 확인한 이슈를 그대로 재사용한다.
    return resolver.resolve(query.entity_ref), changelog


def _presenter(db: Session, locale: str, current_user: Optional[User], user_lookup: UserLookup) -> IssuePresenter:
    i18n = I18n()
    formatter = DiffFormatter(i18n, rule_lookup=RuleLookup(db), user_lookup=user_lookup)
    return IssuePresenter(
        db,
        i18n=i18n,
        formatter=formatter,
        locale=locale,
        current_user=current_user,
        user_lookup=user_lookup,
    )


@router.get("/show", response_model=IssueShowOut, response_model_exclude_none=True)
def show_issue(
    key: Optional[str] = Query(None),
    locale: str = Depends(get_locale),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    query = build_changelog_query(_require(key, "key"))
    user_lookup = UserLookup(db)
    issue, changelog = _load(db, query, user_lookup)
    return _presenter(db, locale, current_user, user_lookup).present_show(issue, changelog)


@router.get("/changelog", response_model=IssueChangelogOut, response_model_exclude_none=True)
def issue_changelog(
    issue: Optional[str] = Query(None),
    since: Optional[str] = Query(None),
    to: Optional[str] = Query(None),
    locale: str = Depends(get_locale),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    query = build_changelog_query(_require(issue, "issue"), since, to)
    user_lookup = UserLookup(db)
    entity, changelog = _load(db, query, user_lookup)
    return _presenter(db, locale, current_user, user_lookup).present_changelog(entity, changelog)


def _is_issue_admin(db: Session, user: User, issue: Issue) -> bool:
    return has_project_permission(db, user, ISSUE_ADMIN, issue.project_kee)


@router.post("/do_transition", response_model=IssueChangeResult)
def do_transition(
    request: TransitionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    issue = issue_service.IssueResolver(db).resolve(request.issue)
    change = issue_service.do_transition(
        db,
        issue=issue,
        transition_key=request.transition,
        user=current_user,
        is_issue_admin=_is_issue_admin(db, current_user, issue),
    )
    return IssueChangeResult(issue=issue.kee, changed=change is not None)


@router.post("/assign", response_model=IssueChangeResult)
def assign_issue(
    request: AssignRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    issue = issue_service.IssueResolver(db).resolve(request.issue)
    change = issue_service.assign(db, issue=issue, assignee=request.assignee, user=current_user)
    return IssueChangeResult(issue=issue.kee, changed=change is not None)


@router.post("/set_severity", response_model=IssueChangeResult)
def set_severity(
    request: SetSeverityRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    issue = issue_service.IssueResolver(db).resolve(request.issue)
    if not _is_issue_admin(db, current_user, issue):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="심각도를 변경할 권한이 없습니다.")
    change = issue_service.set_severity(db, issue=issue, severity=request.severity, user=current_user)
    return IssueChangeResult(issue=issue.kee, changed=change is not None)


@router.post("/add_comment", response_model=IssueCommentOut, response_model_exclude_none=True)
def add_comment(
    request: AddCommentRequest,
    locale: str = Depends(get_locale),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    issue = issue_service.IssueResolver(db).resolve(request.issue)
    comment = issue_service.add_comment(db, issue=issue, text=request.text, user=current_user)
    presenter = _presenter(db, locale, current_user, UserLookup(db))
    return presenter.present_comment(comment)
