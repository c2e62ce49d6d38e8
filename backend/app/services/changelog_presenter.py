"""Loader 결과에 엔티티 문맥(사용자, 룰, 컴포넌트, 부채 특성, 코멘트, 전이/액션)을 합쳐 응답 구조를 만듭니다.

Presenter는 필터링/정렬을 하지 않는다. Loader가 준 순서와 Formatter가 준 diff 순서를
그대로 사용한다. 값이 없는 필드는 None으로 두고, 응답 직렬화 단계에서 생략된다.
"""

import html
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.exceptions import LookupFailure
from app.models.issue import ActionPlan, Component, Issue, IssueComment
from app.models.rule import Rule
from app.models.user import User
from app.services import issue_workflow
from app.services.change_record import Change, ChangelogResult, is_blank
from app.services.debt_service import format_debt, rule_characteristics
from app.services.diff_formatter import DiffFormatter
from app.services.i18n_service import I18n
from app.utils.helpers import format_datetime, from_epoch_millis
from app.utils.permissions import ISSUE_ADMIN, has_project_permission

logger = logging.getLogger(__name__)


def present_profile_change(change: Change, formatter: DiffFormatter, locale: Optional[str]) -> Dict[str, Any]:
    params = {
        name: str(diff.new)
        for name, diff in change.params.items()
        if not is_blank(diff.new)
    }
    return {
        "date": format_datetime(change.timestamp),
        "action": change.type,
        "authorLogin": change.actor,
        # 작성자가 없는 시스템 변경이면 이름 필드도 내보내지 않는다.
        "authorName": change.actor_display_name if change.actor else None,
        "severity": change.severity,
        "inheritance": change.inheritance,
        "ruleKey": change.rule_key,
        "ruleName": change.rule_name,
        "params": params or None,
        "diffs": formatter.format(change, locale),
    }


def present_profile_changelog(
    result: ChangelogResult,
    formatter: DiffFormatter,
    locale: Optional[str],
    page_index: int,
    page_size: int,
) -> Dict[str, Any]:
    return {
        "paging": {"pageIndex": page_index, "pageSize": page_size, "total": result.total},
        "changelog": [present_profile_change(change, formatter, locale) for change in result.changes],
    }


class IssuePresenter:
    def __init__(
        self,
        db: Session,
        *,
        i18n: I18n,
        formatter: DiffFormatter,
        locale: Optional[str],
        current_user: Optional[User] = None,
        user_lookup=None,
    ):
        self.db = db
        self.i18n = i18n
        self.formatter = formatter
        self.locale = locale
        self.current_user = current_user
        self.user_lookup = user_lookup

    def present_show(self, issue: Issue, changelog: ChangelogResult) -> Dict[str, Any]:
        is_issue_admin = has_project_permission(self.db, self.current_user, ISSUE_ADMIN, issue.project_kee)
        body = self._issue_fields(issue)
        body["transitions"] = issue_workflow.list_transitions(issue, self.current_user, is_issue_admin)
        body["actions"] = issue_workflow.list_actions(issue, self.current_user, is_issue_admin)
        body["comments"] = self._comments(issue)
        body["changelog"] = self.changelog_entries(issue, changelog)
        return {"issue": body}

    def present_changelog(self, issue: Issue, changelog: ChangelogResult) -> Dict[str, Any]:
        return {"total": changelog.total, "changelog": self.changelog_entries(issue, changelog)}

    def changelog_entries(self, issue: Issue, changelog: ChangelogResult) -> List[Dict[str, Any]]:
        entries = [{
            "creationDate": format_datetime(issue.created_at),
            "fCreationDate": self.i18n.format_datetime(self.locale, issue.created_at),
            "diffs": [self.i18n.message(self.locale, "created")],
        }]
        for change in changelog.changes:
            entries.append({
                "userLogin": change.actor,
                "userName": change.actor_display_name if change.actor else None,
                "creationDate": format_datetime(change.timestamp),
                "fCreationDate": self.i18n.format_datetime(self.locale, from_epoch_millis(change.timestamp)),
                "diffs": self.formatter.format(change, self.locale),
            })
        return entries

    def _issue_fields(self, issue: Issue) -> Dict[str, Any]:
        component = self.db.query(Component).filter(Component.kee == issue.component_kee).first()
        project = self.db.query(Component).filter(Component.kee == issue.project_kee).first()
        rule = self.db.query(Rule).filter(Rule.rule_key == issue.rule_key).first()
        action_plan = None
        if issue.action_plan_key:
            action_plan = self.db.query(ActionPlan).filter(ActionPlan.kee == issue.action_plan_key).first()
        rule_name = rule.name if rule else None

        fields = {
            "key": issue.kee,
            "component": issue.component_kee,
            "componentLongName": component.long_name if component else None,
            "componentQualifier": component.qualifier if component else None,
            "project": issue.project_kee,
            "projectLongName": project.long_name if project else None,
            "rule": issue.rule_key,
            "ruleName": rule_name,
            "line": issue.line,
            "message": issue.message if issue.message is not None else rule_name,
            "resolution": issue.resolution,
            "status": issue.status,
            "severity": issue.severity,
            "author": issue.author_login,
            "actionPlan": issue.action_plan_key,
            "actionPlanName": action_plan.name if action_plan else None,
            "debt": format_debt(self.i18n, self.locale, issue.technical_debt),
            "creationDate": format_datetime(issue.created_at),
            "fCreationDate": self.i18n.format_datetime(self.locale, issue.created_at),
            "updateDate": format_datetime(issue.updated_at),
            "fUpdateDate": self.i18n.format_datetime(self.locale, issue.updated_at),
            "fUpdateAge": self.i18n.age_from_now(self.locale, issue.updated_at),
            "closeDate": format_datetime(issue.closed_at),
            "fCloseDate": self.i18n.format_datetime(self.locale, issue.closed_at),
        }
        self._add_user_with_label(fields, "assignee", issue.assignee)
        self._add_user_with_label(fields, "reporter", issue.reporter)

        # 요구사항이 비활성화된 룰은 특성 정보를 내보내지 않는다.
        characteristics = rule_characteristics(rule)
        if characteristics is not None:
            fields["characteristic"], fields["subCharacteristic"] = characteristics
        return fields

    def _add_user_with_label(self, fields: Dict[str, Any], field: str, login: Optional[str]):
        if login is None:
            return
        fields[field] = login
        fields[f"{field}Name"] = self._user_name(login)

    def _user_name(self, login: Optional[str]) -> Optional[str]:
        if not login or self.user_lookup is None:
            return None
        try:
            return self.user_lookup.by_login(login)
        except LookupFailure as exc:
            logger.warning("[issue] user lookup failed for %s: %s", login, exc)
            return None

    def present_comment(self, comment: IssueComment) -> Dict[str, Any]:
        current_login = self.current_user.login if self.current_user else None
        raw = comment.markdown_text or ""
        return {
            "key": comment.kee,
            "userLogin": comment.user_login,
            "userName": self._user_name(comment.user_login),
            "raw": raw,
            "html": html.escape(raw).replace("\n", "<br/>"),
            "createdAt": format_datetime(comment.created_at),
            "fCreatedAge": self.i18n.age_from_now(self.locale, comment.created_at),
            "updatable": current_login is not None and current_login == comment.user_login,
        }

    def _comments(self, issue: Issue) -> List[Dict[str, Any]]:
        return [self.present_comment(comment) for comment in issue.comments]
