"""메시지 번들 기반 다국어(i18n) 서비스입니다.

요청 로케일 번들 → 기본 로케일 번들 → 호출자가 준 default → 키 자체 순서로 메시지를
찾는다. 로케일은 항상 인자로 전달받으며 전역 세션 상태를 읽지 않는다.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.config import settings
from app.utils.helpers import to_reference_datetime

BUNDLES: Dict[str, Dict[str, str]] = {
    "en": {
        "created": "Created",
        "changelog.changed_from_to": "{0} changed from {1} to {2}",
        "changelog.set_to": "{0} set to {1}",
        "changelog.removed_was": "{0} removed (was {1})",
        "changelog.field.severity": "severity",
        "changelog.field.inheritance": "inheritance",
        "changelog.field.ruleKey": "rule",
        "changelog.field.status": "status",
        "changelog.field.resolution": "resolution",
        "changelog.field.assignee": "assignee",
        "changelog.field.actionPlan": "action plan",
        "changelog.field.technicalDebt": "technical debt",
        "changelog.field.message": "message",
        "changelog.field.line": "line",
        "severity.INFO": "Info",
        "severity.MINOR": "Minor",
        "severity.MAJOR": "Major",
        "severity.CRITICAL": "Critical",
        "severity.BLOCKER": "Blocker",
        "inheritance.NONE": "Not inherited",
        "inheritance.INHERITED": "Inherited",
        "inheritance.OVERRIDES": "Overrides",
        "status.OPEN": "Open",
        "status.CONFIRMED": "Confirmed",
        "status.REOPENED": "Reopened",
        "status.RESOLVED": "Resolved",
        "status.CLOSED": "Closed",
        "resolution.FIXED": "Fixed",
        "resolution.FALSE-POSITIVE": "False Positive",
        "resolution.REMOVED": "Removed",
        "duration.days": "{0}d",
        "duration.hours": "{0}h",
        "duration.minutes": "{0}min",
        "age.now": "less than a minute",
        "age.minute": "a minute",
        "age.minutes": "{0} minutes",
        "age.hour": "an hour",
        "age.hours": "{0} hours",
        "age.day": "a day",
        "age.days": "{0} days",
        "age.month": "a month",
        "age.months": "{0} months",
        "age.year": "a year",
        "age.years": "{0} years",
        "datetime.format": "%Y-%m-%d %H:%M",
    },
    "ko": {
        "created": "생성됨",
        "changelog.changed_from_to": "{0}: {1}에서 {2}(으)로 변경",
        "changelog.set_to": "{0}: {1}(으)로 설정",
        "changelog.removed_was": "{0} 삭제 (이전 값 {1})",
        "changelog.field.severity": "심각도",
        "changelog.field.inheritance": "상속",
        "changelog.field.ruleKey": "룰",
        "changelog.field.status": "상태",
        "changelog.field.resolution": "해결",
        "changelog.field.assignee": "담당자",
        "changelog.field.actionPlan": "액션 플랜",
        "changelog.field.technicalDebt": "기술 부채",
        "changelog.field.message": "메시지",
        "changelog.field.line": "라인",
        "severity.INFO": "정보",
        "severity.MINOR": "경미",
        "severity.MAJOR": "주요",
        "severity.CRITICAL": "심각",
        "severity.BLOCKER": "차단",
        "inheritance.NONE": "상속 안 함",
        "inheritance.INHERITED": "상속됨",
        "inheritance.OVERRIDES": "재정의",
        "status.OPEN": "열림",
        "status.CONFIRMED": "확인됨",
        "status.REOPENED": "다시 열림",
        "status.RESOLVED": "해결됨",
        "status.CLOSED": "닫힘",
        "resolution.FIXED": "수정됨",
        "resolution.FALSE-POSITIVE": "오탐",
        "resolution.REMOVED": "제거됨",
        "duration.days": "{0}일",
        "duration.hours": "{0}시간",
        "duration.minutes": "{0}분",
        "age.now": "1분 미만",
        "age.minute": "1분",
        "age.minutes": "{0}분",
        "age.hour": "1시간",
        "age.hours": "{0}시간",
        "age.day": "1일",
        "age.days": "{0}일",
        "age.month": "1개월",
        "age.months": "{0}개월",
        "age.year": "1년",
        "age.years": "{0}년",
        "datetime.format": "%Y년 %m월 %d일 %H:%M",
    },
}


class I18n:
    def __init__(self, bundles: Optional[Dict[str, Dict[str, str]]] = None, default_locale: Optional[str] = None):
        self.bundles = bundles if bundles is not None else BUNDLES
        self.default_locale = default_locale or settings.DEFAULT_LOCALE

    def _lookup(self, locale: Optional[str], key: str) -> Optional[str]:
        for loc in (locale, self.default_locale):
            if loc and key in self.bundles.get(loc, {}):
                return self.bundles[loc][key]
        return None

    def has_message(self, locale: Optional[str], key: str) -> bool:
        return self._lookup(locale, key) is not None

    def message(self, locale: Optional[str], key: str, *args: Any, default: Optional[str] = None) -> str:
        template = self._lookup(locale, key)
        if template is None:
            template = default if default is not None else key
        if not args:
            return template
        return template.format(*args)

    def format_datetime(self, locale: Optional[str], value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        fmt = self.message(locale, "datetime.format")
        return to_reference_datetime(value).strftime(fmt)

    def age_from_now(self, locale: Optional[str], value: Optional[datetime], now: Optional[datetime] = None) -> Optional[str]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        now = now or datetime.now(timezone.utc)
        seconds = max(0, int((now - value).total_seconds()))
        minutes = seconds // 60
        hours = minutes // 60
        days = hours // 24
        if minutes < 1:
            return self.message(locale, "age.now")
        if hours < 1:
            return self._plural(locale, "age.minute", "age.minutes", minutes)
        if days < 1:
            return self._plural(locale, "age.hour", "age.hours", hours)
        if days < 30:
            return self._plural(locale, "age.day", "age.days", days)
        if days < 365:
            return self._plural(locale, "age.month", "age.months", days // 30)
        return self._plural(locale, "age.year", "age.years", days // 365)

    def _plural(self, locale: Optional[str], one_key: str, many_key: str, count: int) -> str:
        if count == 1:
            return self.message(locale, one_key)
        return self.message(locale, many_key, count)
