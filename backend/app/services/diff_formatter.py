"""Change 한 건의 필드/파라미터 변경을 사람이 읽을 수 있는 문자열 목록으로 변환합니다.

출력 순서는 항상 선언 순서다. 프로파일 변경은 severity, inheritance, rule, 파라미터(저장
순서) 순이고, 이슈 변경은 저장된 field diff 순서를 따른다. Change를 수정하지 않는 순수
함수이므로 같은 Change를 몇 번, 어떤 스레드에서 포맷해도 결과가 같다.
"""

import logging
from typing import Any, List, Optional, Tuple

from app.exceptions import LookupFailure
from app.services.change_record import Change, Diff, is_blank
from app.services.debt_service import format_debt
from app.services.i18n_service import I18n

logger = logging.getLogger(__name__)

CHANGED_FROM_TO = "changelog.changed_from_to"
SET_TO = "changelog.set_to"
REMOVED_WAS = "changelog.removed_was"

DEFAULT_TEMPLATES = {
    CHANGED_FROM_TO: "{0} changed from {1} to {2}",
    SET_TO: "{0} set to {1}",
    REMOVED_WAS: "{0} removed (was {1})",
}

DEFAULT_FIELD_LABELS = {
    "ruleKey": "rule",
    "technicalDebt": "technical debt",
    "actionPlan": "action plan",
}

# 값 자체를 노출하지 않고 번들 라벨로 바꾸는 필드
LABELED_FIELDS = {
    "severity": "severity",
    "inheritance": "inheritance",
    "status": "status",
    "resolution": "resolution",
}

PROFILE_FIELDS = ("severity", "inheritance", "ruleKey")


class DiffFormatter:
    def __init__(self, i18n: Optional[I18n] = None, rule_lookup=None, user_lookup=None):
        self.i18n = i18n
        self.rule_lookup = rule_lookup
        self.user_lookup = user_lookup

    def format(self, change: Change, locale: Optional[str] = None) -> List[str]:
        result = []
        for field, diff, is_param in self._entries(change):
            rendered = self._render(field, diff, change, locale, is_param)
            if rendered is not None:
                result.append(rendered)
        return result

    def _entries(self, change: Change) -> List[Tuple[str, Diff, bool]]:
        entries = []
        profile_values = {
            "severity": change.severity,
            "inheritance": change.inheritance,
            "ruleKey": change.rule_key,
        }
        for field in PROFILE_FIELDS:
            if profile_values[field] is not None:
                entries.append((field, Diff(new=profile_values[field]), False))
        for name, diff in change.params.items():
            entries.append((name, diff, True))
        for name, diff in change.field_diffs.items():
            entries.append((name, diff, False))
        return entries

    def _render(self, field: str, diff: Diff, change: Change, locale: Optional[str], is_param: bool) -> Optional[str]:
        if is_param:
            label = field
            old = None if is_blank(diff.old) else str(diff.old)
            new = None if is_blank(diff.new) else str(diff.new)
        else:
            label = self._field_label(field, locale)
            old = self._value(field, diff.old, change, locale)
            new = self._value(field, diff.new, change, locale)

        if old is not None and new is not None:
            return self._message(locale, CHANGED_FROM_TO, label, old, new)
        if new is not None:
            return self._message(locale, SET_TO, label, new)
        if old is not None:
            return self._message(locale, REMOVED_WAS, label, old)
        return None

    def _message(self, locale: Optional[str], key: str, *args: str) -> str:
        if self.i18n is None:
            return DEFAULT_TEMPLATES[key].format(*args)
        return self.i18n.message(locale, key, *args, default=DEFAULT_TEMPLATES[key])

    def _field_label(self, field: str, locale: Optional[str]) -> str:
        default = DEFAULT_FIELD_LABELS.get(field, field)
        if self.i18n is None:
            return default
        return self.i18n.message(locale, f"changelog.field.{field}", default=default)

    def _value(self, field: str, value: Any, change: Change, locale: Optional[str]) -> Optional[str]:
        if is_blank(value):
            return None
        value = str(value)
        if field in LABELED_FIELDS:
            return self._label(LABELED_FIELDS[field], value, locale)
        if field == "ruleKey":
            return self._rule_name(value, change)
        if field == "assignee":
            return self._user_name(value)
        if field == "technicalDebt":
            return self._debt(value, locale)
        return value

    def _label(self, prefix: str, value: str, locale: Optional[str]) -> str:
        humanized = value.replace("_", " ").capitalize()
        if self.i18n is None:
            return humanized
        return self.i18n.message(locale, f"{prefix}.{value}", default=humanized)

    def _rule_name(self, rule_key: str, change: Change) -> str:
        if change.rule_key == rule_key and change.rule_name:
            return change.rule_name
        if self.rule_lookup is None:
            return rule_key
        try:
            return self.rule_lookup.by_key(rule_key) or rule_key
        except LookupFailure as exc:
            logger.warning("[changelog] rule lookup failed for %s: %s", rule_key, exc)
            return rule_key

    def _user_name(self, login: str) -> str:
        if self.user_lookup is None:
            return login
        try:
            return self.user_lookup.by_login(login) or login
        except LookupFailure as exc:
            logger.warning("[changelog] user lookup failed for %s: %s", login, exc)
            return login

    def _debt(self, value: str, locale: Optional[str]) -> str:
        try:
            minutes = int(value)
        except ValueError:
            return value
        return format_debt(self.i18n or I18n(), locale, minutes)
